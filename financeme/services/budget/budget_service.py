"""Servizio per la gestione dei budget mensili per categoria"""
import logging
from collections import defaultdict
from decimal import Decimal
from typing import List, Optional, Tuple

from financeme.models.budget import Budget
from financeme.services import BaseService, get_month_boundaries, month_key, parse_month
from financeme.services.gateway import PersistenceGateway, scope_filter
from financeme.services.groups.group_service import GroupService
from financeme.services.projection import Kind, ObligationError, parse_money
from financeme.services.transactions.transaction_service import TransactionService
from financeme.utils import ValidationUtils

logger = logging.getLogger(__name__)


class BudgetService(BaseService):
    """Servizio per la gestione del budget"""

    def __init__(self, codec, gateway=None, groups=None):
        super().__init__(codec)
        self.gateway = gateway or PersistenceGateway()
        self.groups = groups or GroupService()

    def get_budgets(self, user_id: str, month: str, scope_id=None) -> List[Budget]:
        """Budget dell'ambito per il mese YYYY-MM"""
        self.groups.check_scope(user_id, scope_id)
        filters = scope_filter(user_id, scope_id) + [('month', 'eq', month)]
        return self.gateway.list('budgets', filters, order_by='category')

    def _values(self, data: dict) -> dict:
        category = ValidationUtils.validate_required_field(data.get('category'), 'Categoria')
        month = month_key(parse_month(data.get('month')))
        amount = parse_money(data.get('amount'))
        if amount < 0:
            raise ValueError("L'importo del budget non può essere negativo")
        return {'category': category, 'month': month, 'amount': amount}

    def create_or_update_budget(self, user_id: str, data: dict, scope_id=None) -> Tuple[bool, str, Optional[Budget]]:
        """Crea o aggiorna il budget di una categoria nel mese"""
        self.groups.check_scope(user_id, scope_id)
        try:
            values = self._values(data)
        except (ObligationError, ValueError) as e:
            return False, str(e), None

        filters = scope_filter(user_id, scope_id) + [
            ('category', 'eq', values['category']),
            ('month', 'eq', values['month']),
        ]
        existing = self.gateway.list('budgets', filters)
        if existing:
            return self.gateway.update('budgets', existing[0].id, {'amount': values['amount']})

        values.update(user_id=user_id, group_id=scope_id)
        success, message, created = self.gateway.insert('budgets', values)
        if not success:
            return False, message, None
        return True, "Budget salvato con successo", created[0]

    def update_budget(self, user_id: str, budget_id, data: dict) -> Tuple[bool, str, Optional[Budget]]:
        budget = self.gateway.get('budgets', budget_id)
        if not self.groups.can_access(budget, user_id):
            return False, "Budget non trovato", None
        merged = budget.to_dict()
        merged.update(data)
        try:
            values = self._values(merged)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        return self.gateway.update('budgets', budget.id, values)

    def delete_budget(self, user_id: str, budget_id) -> Tuple[bool, str]:
        budget = self.gateway.get('budgets', budget_id)
        if not self.groups.can_access(budget, user_id):
            return False, "Budget non trovato"
        return self.gateway.delete('budgets', budget.id)

    def spending_for_month(self, user_id: str, month: str, scope_id=None):
        """
        Budget del mese con la spesa effettiva per categoria

        Returns:
            lista di dict con 'spent', 'remaining' e 'progress' (percentuale)
        """
        first_day = parse_month(month)
        month = month_key(first_day)
        start, end = get_month_boundaries(first_day)

        spent = defaultdict(Decimal)
        transactions = TransactionService(self.codec, self.gateway, self.groups)
        for ob in transactions.obligations(user_id, scope_id, start, end):
            if ob.kind == Kind.EXPENSE and ob.amount is not None:
                spent[ob.category] += ob.amount

        result = []
        for budget in self.get_budgets(user_id, month, scope_id):
            amount = Decimal(budget.amount or 0)
            category_spent = spent.get(budget.category, Decimal('0'))
            item = budget.to_dict()
            item['spent'] = float(category_spent)
            item['remaining'] = float(amount - category_spent)
            item['progress'] = float(category_spent / amount * 100) if amount > 0 else 0.0
            result.append(item)
        return result

    def calculate_total_budget(self, user_id: str, month: str, scope_id=None) -> float:
        return sum(float(b.amount or 0) for b in self.get_budgets(user_id, month, scope_id))
