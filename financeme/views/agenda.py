"""Blueprint dell'agenda: cosa scade in un giorno"""
from flask import Blueprint, current_app

from financeme.services.appointments.appointment_service import AppointmentService
from financeme.services.groups.group_service import ScopeError
from financeme.services.projection import ObligationError, items_due_on, parse_date
from financeme.services.transactions.transaction_service import TransactionService
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, obligation_snapshot, risposta

agenda_bp = Blueprint('agenda', __name__)


def obligation_to_dict(ob):
    return {
        'id': ob.id,
        'kind': ob.kind.value,
        'amount': float(ob.amount) if ob.amount is not None else None,
        'category': ob.category,
        'description': ob.description,
        'anchor_date': ob.anchor_date.isoformat(),
        'recurrence': ob.recurrence.value,
        'repetition_limit': ob.repetition_limit,
        'payment_method': ob.payment_method.value if ob.payment_method else None,
        'card_id': ob.card_id,
        'installment_total': ob.installment_total,
        'installment_index': ob.installment_index,
        'is_paid': ob.is_paid,
    }


@agenda_bp.route('/<day>')
def giorno(day):
    """Elementi in scadenza nel giorno YYYY-MM-DD, raggruppati per sezione"""
    try:
        target = parse_date(day)
        scope_id = get_scope()
    except (ObligationError, ValueError) as e:
        return errore(str(e), 400)

    codec, gateway = get_codec(), get_gateway()
    user_id = current_user_id()
    try:
        obligations = obligation_snapshot('agenda', scope_id, lambda: (
            TransactionService(codec, gateway).obligations(user_id, scope_id)
            + AppointmentService(codec, gateway).obligations(user_id, scope_id)))
    except ScopeError as e:
        return errore(str(e), 403)
    except ObligationError as e:
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel caricamento dell'agenda: {e}")
        return errore(f"Errore nel caricamento dell'agenda: {str(e)}", 500)

    agenda = items_due_on(obligations, target)
    return risposta(True, 'OK',
                    day=target.isoformat(),
                    is_empty=agenda.is_empty,
                    card_installments=[obligation_to_dict(o) for o in agenda.card_installments],
                    other_expenses=[obligation_to_dict(o) for o in agenda.other_expenses],
                    incomes=[obligation_to_dict(o) for o in agenda.incomes],
                    appointments=[obligation_to_dict(o) for o in agenda.appointments])
