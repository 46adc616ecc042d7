"""Blueprint per i budget mensili per categoria"""
from datetime import date

from flask import Blueprint, current_app, request

from financeme.services import month_key
from financeme.services.budget.budget_service import BudgetService
from financeme.services.groups.group_service import ScopeError
from financeme.services.projection import ObligationError
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, json_body, risposta

budgets_bp = Blueprint('budgets', __name__)


def _service():
    return BudgetService(get_codec(), get_gateway())


@budgets_bp.route('/', methods=['GET'])
def lista():
    """Budget del mese (?month=YYYY-MM, default mese corrente) con la spesa effettiva"""
    month = request.args.get('month') or month_key(date.today())
    try:
        scope_id = get_scope()
        budgets = _service().spending_for_month(current_user_id(), month, scope_id)
    except ScopeError as e:
        return errore(str(e), 403)
    except ObligationError as e:
        return errore(str(e), 422)
    except ValueError as e:
        return errore(str(e), 400)
    except Exception as e:
        current_app.logger.exception(f"Errore nel caricamento dei budget: {e}")
        return errore(f'Errore nel caricamento dei budget: {str(e)}', 500)
    return risposta(True, 'OK', month=month, budgets=budgets)


@budgets_bp.route('/', methods=['POST'])
def salva():
    data = json_body()
    try:
        scope_id = get_scope(data)
    except ValueError as e:
        return errore(str(e), 400)
    success, message, budget = _service().create_or_update_budget(current_user_id(), data, scope_id=scope_id)
    return risposta(success, message, status_ok=201, **({'budget': budget.to_dict()} if success else {}))


@budgets_bp.route('/<int:budget_id>', methods=['PUT'])
def modifica(budget_id):
    success, message, budget = _service().update_budget(current_user_id(), budget_id, json_body())
    return risposta(success, message, **({'budget': budget.to_dict()} if success else {}))


@budgets_bp.route('/<int:budget_id>', methods=['DELETE'])
def elimina(budget_id):
    success, message = _service().delete_budget(current_user_id(), budget_id)
    return risposta(success, message)
