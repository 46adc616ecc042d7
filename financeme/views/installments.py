"""Blueprint delle rate: acquisti rateali raggruppati con avanzamento"""
from flask import Blueprint, current_app

from financeme.services.groups.group_service import ScopeError
from financeme.services.projection import ObligationError, group_installments
from financeme.services.transactions.transaction_service import TransactionService
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, obligation_snapshot, risposta

installments_bp = Blueprint('installments', __name__)


@installments_bp.route('/')
def lista():
    try:
        scope_id = get_scope()
    except ValueError as e:
        return errore(str(e), 400)
    try:
        service = TransactionService(get_codec(), get_gateway())
        rows = obligation_snapshot('installments', scope_id, lambda: service.obligations(
            current_user_id(), scope_id, installments_only=True))
    except ScopeError as e:
        return errore(str(e), 403)
    except ObligationError as e:
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel caricamento delle rate: {e}")
        return errore(f'Errore nel caricamento delle rate: {str(e)}', 500)

    groups = group_installments(rows)
    return risposta(True, 'OK',
                    groups=[g.to_dict() for g in groups],
                    open_groups=sum(1 for g in groups if not g.is_fully_paid))
