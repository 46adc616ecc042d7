"""
Controllo del limite di spesa mensile.

Quando le spese del mese corrente superano il limite configurato viene
inviata una sola notifica per utente e mese. Il canale di notifica è
iniettabile; di default scrive un warning nel log.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Tuple

from financeme.models.user_config import UserConfig
from financeme.services import BaseService, get_month_boundaries, month_key
from financeme.services.gateway import PersistenceGateway
from financeme.services.obligations import transaction_to_obligation
from financeme.services.projection import Kind, ObligationError, parse_money
from financeme.utils.formatting import format_currency

logger = logging.getLogger(__name__)

NO_LIMIT = 'no_limit'
NOT_EXCEEDED = 'not_exceeded'
NOTIFIED = 'notified'
ALREADY_NOTIFIED = 'already_notified'


def log_notifier(user_config: UserConfig, total: Decimal, limit: Decimal) -> None:
    logger.warning(
        "Limite di spesa superato per %s: speso %s su un limite di %s",
        user_config.user_id, format_currency(total), format_currency(limit),
    )


class SpendingLimitService(BaseService):

    def __init__(self, codec, gateway=None, notifier: Optional[Callable] = None):
        super().__init__(codec)
        self.gateway = gateway or PersistenceGateway()
        self.notifier = notifier or log_notifier

    def get_config(self, user_id: str) -> Optional[UserConfig]:
        rows = self.gateway.list('user_config', [('user_id', 'eq', user_id)])
        return rows[0] if rows else None

    def set_limit(self, user_id: str, spending_limit, email=None) -> Tuple[bool, str, Optional[UserConfig]]:
        """Imposta (o rimuove, con None) il limite mensile dell'utente"""
        try:
            limit = None if spending_limit in (None, '') else parse_money(spending_limit)
        except ObligationError as e:
            return False, str(e), None
        if limit is not None and limit <= 0:
            return False, "Il limite di spesa deve essere maggiore di zero", None

        values = {'spending_limit': limit}
        if email is not None:
            values['email'] = email.strip() or None
        existing = self.get_config(user_id)
        if existing:
            return self.gateway.update('user_config', existing.id, values)
        values['user_id'] = user_id
        success, message, created = self.gateway.insert('user_config', values)
        if not success:
            return False, message, None
        return True, "Limite di spesa salvato", created[0]

    def month_expenses(self, user_id: str, today: date) -> Decimal:
        """Spese personali del mese di `today`, comprese quelle già registrate per i giorni successivi"""
        rows = self.gateway.list('transactions', [
            ('user_id', 'eq', user_id),
            ('kind', 'eq', Kind.EXPENSE.value),
            ('date', 'between', get_month_boundaries(today)),
        ])
        return sum((transaction_to_obligation(tx, self.codec).amount for tx in rows), Decimal('0'))

    def check_spending_limit(self, user_id: str, today: Optional[date] = None) -> str:
        today = today or date.today()
        user_config = self.get_config(user_id)
        if not user_config or user_config.spending_limit is None:
            return NO_LIMIT

        limit = Decimal(user_config.spending_limit)
        total = self.month_expenses(user_id, today)
        if total <= limit:
            return NOT_EXCEEDED

        month = month_key(today)
        if self.gateway.list('spending_notifications', [('user_id', 'eq', user_id), ('month', 'eq', month)]):
            return ALREADY_NOTIFIED

        self.notifier(user_config, total, limit)
        success, message, _ = self.gateway.insert('spending_notifications', {'user_id': user_id, 'month': month})
        if not success:
            logger.error("Notifica inviata ma non registrata per %s (%s): %s", user_id, month, message)
        return NOTIFIED

    def check_all(self, today: Optional[date] = None):
        """Esegue il controllo per tutti gli utenti con un limite configurato"""
        results = {}
        for user_config in self.gateway.list('user_config', [('spending_limit', 'is_null', False)]):
            try:
                results[user_config.user_id] = self.check_spending_limit(user_config.user_id, today)
            except ObligationError as e:
                logger.error("Controllo limite non eseguibile per %s: %s", user_config.user_id, e)
                results[user_config.user_id] = 'error'
        return results
