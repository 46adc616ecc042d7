"""Service per gli appuntamenti dell'agenda"""
import logging
from typing import List, Optional, Tuple

from financeme.models.appointment import Appointment
from financeme.services import BaseService
from financeme.services.encryption import display_decoder, undecodable_fields
from financeme.services.gateway import PersistenceGateway, scope_filter
from financeme.services.groups.group_service import GroupService
from financeme.services.obligations import appointment_to_obligation
from financeme.services.projection import (
    InvalidAmountError,
    InvalidRecurrenceError,
    Obligation,
    ObligationError,
    Recurrence,
    parse_money,
    parse_date,
)
from financeme.utils import ValidationUtils
from financeme.utils.formatting import format_decimal

logger = logging.getLogger(__name__)

CAMPI_CIFRATI = ('description', 'amount')


class AppointmentService(BaseService):
    """Service per gestire gli appuntamenti"""

    def __init__(self, codec, gateway=None, groups=None):
        super().__init__(codec)
        self.gateway = gateway or PersistenceGateway()
        self.groups = groups or GroupService()

    def list(self, user_id: str, scope_id=None) -> List[Appointment]:
        self.groups.check_scope(user_id, scope_id)
        return self.gateway.list('appointments', scope_filter(user_id, scope_id), order_by=['date', 'time'])

    def list_decrypted(self, user_id: str, scope_id=None):
        return [a.to_decrypted_dict(display_decoder(self.codec)) for a in self.list(user_id, scope_id)]

    def obligations(self, user_id: str, scope_id=None) -> List[Obligation]:
        return [appointment_to_obligation(a, self.codec) for a in self.list(user_id, scope_id)]

    def _values(self, data: dict) -> dict:
        title = ValidationUtils.validate_required_field(data.get('title'), 'Titolo')
        try:
            recurrence = Recurrence(data.get('recurrence') or 'once')
        except ValueError:
            raise InvalidRecurrenceError(f"Cadenza non valida: {data.get('recurrence')!r}")
        limit = ValidationUtils.validate_optional_int(data.get('repetition_limit'), 'repetition_limit', minimo=1)
        if recurrence == Recurrence.ONCE:
            limit = None

        amount = data.get('amount')
        if amount in (None, ''):
            encoded_amount = None
        else:
            value = parse_money(amount)
            if value < 0:
                raise InvalidAmountError("L'importo non può essere negativo")
            encoded_amount = self.encode(format_decimal(value))

        description = (data.get('description') or '').strip()
        return {
            'title': title,
            'description': self.encode(description) if description else None,
            'amount': encoded_amount,
            'date': parse_date(data.get('date')),
            'time': ValidationUtils.validate_time(data.get('time')),
            'recurrence': recurrence.value,
            'repetition_limit': limit,
        }

    def create(self, user_id: str, data: dict, scope_id=None) -> Tuple[bool, str, Optional[Appointment]]:
        self.groups.check_scope(user_id, scope_id)
        try:
            values = self._values(data)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        values.update(user_id=user_id, group_id=scope_id)
        success, message, created = self.gateway.insert('appointments', values)
        if not success:
            return False, message, None
        return True, "Appuntamento creato con successo", created[0]

    def update(self, user_id: str, appointment_id, data: dict) -> Tuple[bool, str, Optional[Appointment]]:
        appointment = self.gateway.get('appointments', appointment_id)
        if not self.groups.can_access(appointment, user_id):
            return False, "Appuntamento non trovato", None
        merged = appointment.to_decrypted_dict(self.codec.decode)
        illeggibili = undecodable_fields(merged, CAMPI_CIFRATI, replaced=data)
        if illeggibili:
            return False, f"Campi non decifrabili ({', '.join(illeggibili)}): reinserirli per sovrascriverli", None
        merged.update(data)
        try:
            values = self._values(merged)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        return self.gateway.update('appointments', appointment.id, values)

    def delete(self, user_id: str, appointment_id) -> Tuple[bool, str]:
        appointment = self.gateway.get('appointments', appointment_id)
        if not self.groups.can_access(appointment, user_id):
            return False, "Appuntamento non trovato"
        return self.gateway.delete('appointments', appointment.id)
