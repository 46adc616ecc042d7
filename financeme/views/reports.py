"""Blueprint dei report per periodo e degli insights sullo storico"""
from datetime import date

from flask import Blueprint, current_app, request

from financeme.services import get_month_boundaries
from financeme.services.groups.group_service import ScopeError
from financeme.services.projection import Kind, ObligationError, parse_date
from financeme.services.reports.report_service import insights, summarize
from financeme.services.transactions.transaction_service import TransactionService
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, obligation_snapshot, risposta

reports_bp = Blueprint('reports', __name__)


def _kind_filter(value):
    if value in (None, '', 'all'):
        return None
    if value not in (Kind.INCOME.value, Kind.EXPENSE.value):
        raise ValueError(f"Tipo non valido: {value!r} (income o expense)")
    return Kind(value)


@reports_bp.route('/summary')
def riepilogo():
    """Entrate, uscite e saldo tra ?start= e ?end= (default: mese corrente), filtrabili per ?kind= e ?category="""
    try:
        scope_id = get_scope()
        default_start, default_end = get_month_boundaries(date.today())
        start = parse_date(request.args['start']) if request.args.get('start') else default_start
        end = parse_date(request.args['end']) if request.args.get('end') else default_end
        if start > end:
            raise ValueError("La data di inizio deve precedere quella di fine")
        kind = _kind_filter(request.args.get('kind'))
        category = (request.args.get('category') or '').strip() or None
    except (ObligationError, ValueError) as e:
        return errore(str(e), 400)

    try:
        obligations = TransactionService(get_codec(), get_gateway()).obligations(
            current_user_id(), scope_id, start, end)
    except ScopeError as e:
        return errore(str(e), 403)
    except ObligationError as e:
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel calcolo del riepilogo: {e}")
        return errore(f'Errore nel calcolo del riepilogo: {str(e)}', 500)
    return risposta(True, 'OK', summary=summarize(obligations, start, end, kind=kind, category=category))


@reports_bp.route('/insights')
def analisi():
    """Analisi dell'intero storico dell'ambito"""
    try:
        scope_id = get_scope()
    except ValueError as e:
        return errore(str(e), 400)

    try:
        service = TransactionService(get_codec(), get_gateway())
        obligations = obligation_snapshot('transactions', scope_id, lambda: service.obligations(current_user_id(), scope_id))
    except ScopeError as e:
        return errore(str(e), 403)
    except ObligationError as e:
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel calcolo degli insights: {e}")
        return errore(f'Errore nel calcolo degli insights: {str(e)}', 500)

    result = insights(obligations)
    if result is None:
        return risposta(True, 'Dati insufficienti per generare gli insights', insights=None)
    return risposta(True, 'OK', insights=result)
