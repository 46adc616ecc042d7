"""
Service per le carte di credito.

Il debito residuo di una carta è la somma delle rate non pagate associate.
"""
import logging
import re
from decimal import Decimal
from typing import List, Optional, Tuple

from financeme.models.credit_card import CreditCard
from financeme.services import BaseService
from financeme.services.gateway import PersistenceGateway
from financeme.services.obligations import transaction_to_obligation
from financeme.services.projection import ObligationError, parse_money
from financeme.utils import ValidationUtils

logger = logging.getLogger(__name__)

ULTIME_CIFRE_RE = re.compile(r'^\d{4}$')


class CardService(BaseService):
    """Service per gestire le carte di credito dell'utente"""

    def __init__(self, codec, gateway=None):
        super().__init__(codec)
        self.gateway = gateway or PersistenceGateway()

    def list(self, user_id: str) -> List[CreditCard]:
        return self.gateway.list('credit_cards', [('user_id', 'eq', user_id)], order_by='card_name')

    def get_owned(self, user_id: str, card_id) -> Optional[CreditCard]:
        card = self.gateway.get('credit_cards', card_id)
        return card if card and card.user_id == user_id else None

    def _values(self, data: dict) -> dict:
        name = ValidationUtils.validate_required_field(data.get('card_name'), 'Nome carta')
        digits = (data.get('last_four_digits') or '').strip() or None
        if digits is not None and not ULTIME_CIFRE_RE.match(digits):
            raise ValueError("Le ultime cifre devono essere esattamente 4 numeri")
        limit = parse_money(data.get('spending_limit') if data.get('spending_limit') not in (None, '') else 0)
        if limit < 0:
            raise ValueError("Il limite di spesa non può essere negativo")
        return {
            'card_name': name,
            'last_four_digits': digits,
            'spending_limit': limit,
            'closing_day': ValidationUtils.validate_day_of_month(data.get('closing_day'), 'Giorno di chiusura'),
            'due_day': ValidationUtils.validate_day_of_month(data.get('due_day'), 'Giorno di scadenza'),
        }

    def create(self, user_id: str, data: dict) -> Tuple[bool, str, Optional[CreditCard]]:
        try:
            values = self._values(data)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        values['user_id'] = user_id
        success, message, created = self.gateway.insert('credit_cards', values)
        if not success:
            return False, message, None
        return True, "Carta creata con successo", created[0]

    def update(self, user_id: str, card_id, data: dict) -> Tuple[bool, str, Optional[CreditCard]]:
        card = self.get_owned(user_id, card_id)
        if not card:
            return False, "Carta non trovata", None
        merged = card.to_dict()
        merged.update(data)
        try:
            values = self._values(merged)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        return self.gateway.update('credit_cards', card.id, values)

    def delete(self, user_id: str, card_id) -> Tuple[bool, str]:
        card = self.get_owned(user_id, card_id)
        if not card:
            return False, "Carta non trovata"
        in_use = self.gateway.list('transactions', [('card_id', 'eq', card.id)])
        if in_use:
            return False, "La carta ha transazioni associate e non può essere eliminata"
        return self.gateway.delete('credit_cards', card.id)

    def outstanding(self, card: CreditCard) -> Decimal:
        """Somma delle rate non pagate della carta"""
        rows = self.gateway.list('transactions', [
            ('card_id', 'eq', card.id),
            ('installment_total', 'gt', 1),
            ('is_paid', 'eq', False),
        ])
        return sum((transaction_to_obligation(tx, self.codec).amount for tx in rows), Decimal('0'))

    def card_overview(self, user_id: str):
        """Carte dell'utente con debito residuo e disponibilità"""
        result = []
        for card in self.list(user_id):
            outstanding = self.outstanding(card)
            item = card.to_dict()
            item['outstanding'] = float(outstanding)
            item['available'] = float(Decimal(card.spending_limit or 0) - outstanding)
            result.append(item)
        return result
