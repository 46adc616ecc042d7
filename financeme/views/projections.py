"""Blueprint delle proiezioni di cassa"""
from datetime import date

from flask import Blueprint, current_app, request

from financeme.services.groups.group_service import ScopeError
from financeme.services.projection import ObligationError, historical_balance, parse_amount, project
from financeme.services.transactions.transaction_service import TransactionService
from financeme.utils import ValidationUtils
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, obligation_snapshot, risposta

projections_bp = Blueprint('projections', __name__)


@projections_bp.route('/')
def proiezione():
    """
    Proiezione mese per mese

    Query string:
        months: orizzonte (default PROJECTION_DEFAULT_MONTHS, max PROJECTION_MAX_MONTHS)
        initial_balance: saldo di partenza (default 0)
        from_history=1: saldo di partenza calcolato dallo storico
    """
    try:
        scope_id = get_scope()
        months = ValidationUtils.validate_optional_int(
            request.args.get('months'), 'months',
            minimo=1, massimo=current_app.config['PROJECTION_MAX_MONTHS'],
        ) or current_app.config['PROJECTION_DEFAULT_MONTHS']
        from_history = ValidationUtils.validate_bool(request.args.get('from_history', ''))
        initial_balance = parse_amount(request.args.get('initial_balance') or 0)
    except (ObligationError, ValueError) as e:
        return errore(str(e), 400)

    try:
        service = TransactionService(get_codec(), get_gateway())
        obligations = obligation_snapshot('transactions', scope_id, lambda: service.obligations(current_user_id(), scope_id))
        if from_history:
            initial_balance = historical_balance(obligations)
        points = project(obligations, initial_balance, months, today=date.today())
    except ScopeError as e:
        return errore(str(e), 403)
    except ObligationError as e:
        current_app.logger.warning(f"Proiezione non calcolabile: {e}")
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel calcolo della proiezione: {e}")
        return errore(f'Errore nel calcolo della proiezione: {str(e)}', 500)

    return risposta(True, 'OK',
                    initial_balance=float(initial_balance),
                    months=months,
                    points=[p.to_dict() for p in points])
