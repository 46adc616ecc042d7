"""Blueprint per gli obiettivi di risparmio"""
from flask import Blueprint

from financeme.services.goals.goal_service import GoalService
from financeme.services.groups.group_service import ScopeError
from financeme.views import current_user_id, errore, get_gateway, get_scope, json_body, risposta

goals_bp = Blueprint('goals', __name__)


def _service():
    return GoalService(gateway=get_gateway())


@goals_bp.route('/', methods=['GET'])
def lista():
    try:
        goals = _service().list(current_user_id(), get_scope())
    except ScopeError as e:
        return errore(str(e), 403)
    except ValueError as e:
        return errore(str(e), 400)
    return risposta(True, 'OK', goals=[g.to_dict() for g in goals])


@goals_bp.route('/', methods=['POST'])
def crea():
    data = json_body()
    try:
        scope_id = get_scope(data)
    except ValueError as e:
        return errore(str(e), 400)
    success, message, goal = _service().create(current_user_id(), data, scope_id=scope_id)
    return risposta(success, message, status_ok=201, **({'goal': goal.to_dict()} if success else {}))


@goals_bp.route('/<int:goal_id>', methods=['PUT'])
def modifica(goal_id):
    success, message, goal = _service().update(current_user_id(), goal_id, json_body())
    return risposta(success, message, **({'goal': goal.to_dict()} if success else {}))


@goals_bp.route('/<int:goal_id>', methods=['DELETE'])
def elimina(goal_id):
    success, message = _service().delete(current_user_id(), goal_id)
    return risposta(success, message)
