"""Service per gli obiettivi di risparmio"""
from typing import List, Optional, Tuple

from financeme.models.goal import Goal
from financeme.services import BaseService
from financeme.services.gateway import PersistenceGateway, scope_filter
from financeme.services.groups.group_service import GroupService
from financeme.services.projection import ObligationError, parse_date, parse_money
from financeme.utils import ValidationUtils


class GoalService(BaseService):

    def __init__(self, codec=None, gateway=None, groups=None):
        super().__init__(codec)
        self.gateway = gateway or PersistenceGateway()
        self.groups = groups or GroupService()

    def list(self, user_id: str, scope_id=None) -> List[Goal]:
        self.groups.check_scope(user_id, scope_id)
        return self.gateway.list('goals', scope_filter(user_id, scope_id), order_by='name')

    def _values(self, data: dict) -> dict:
        name = ValidationUtils.validate_required_field(data.get('name'), 'Nome')
        target = parse_money(data.get('target_amount'))
        current = parse_money(data.get('current_amount') if data.get('current_amount') not in (None, '') else 0)
        if target < 0 or current < 0:
            raise ValueError("Gli importi dell'obiettivo non possono essere negativi")
        target_date = data.get('target_date')
        return {
            'name': name,
            'target_amount': target,
            'current_amount': current,
            'target_date': parse_date(target_date) if target_date else None,
        }

    def create(self, user_id: str, data: dict, scope_id=None) -> Tuple[bool, str, Optional[Goal]]:
        self.groups.check_scope(user_id, scope_id)
        try:
            values = self._values(data)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        values.update(user_id=user_id, group_id=scope_id)
        success, message, created = self.gateway.insert('goals', values)
        if not success:
            return False, message, None
        return True, "Obiettivo creato con successo", created[0]

    def update(self, user_id: str, goal_id, data: dict) -> Tuple[bool, str, Optional[Goal]]:
        goal = self.gateway.get('goals', goal_id)
        if not self.groups.can_access(goal, user_id):
            return False, "Obiettivo non trovato", None
        merged = goal.to_dict()
        merged.update(data)
        try:
            values = self._values(merged)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        return self.gateway.update('goals', goal.id, values)

    def delete(self, user_id: str, goal_id) -> Tuple[bool, str]:
        goal = self.gateway.get('goals', goal_id)
        if not self.groups.can_access(goal, user_id):
            return False, "Obiettivo non trovato"
        return self.gateway.delete('goals', goal.id)
