"""Blueprint per la gestione delle transazioni"""
from flask import Blueprint, current_app, request

from financeme.services.encryption import display_decoder
from financeme.services.groups.group_service import ScopeError
from financeme.services.projection import ObligationError, parse_date
from financeme.services.transactions.transaction_service import TransactionService
from financeme.utils import ValidationUtils
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, json_body, risposta

transactions_bp = Blueprint('transactions', __name__)


def _service():
    return TransactionService(get_codec(), get_gateway())


@transactions_bp.route('/', methods=['GET'])
def lista():
    """Transazioni dell'ambito, opzionalmente filtrate per intervallo ?start=&end="""
    try:
        scope_id = get_scope()
        start = parse_date(request.args['start']) if request.args.get('start') else None
        end = parse_date(request.args['end']) if request.args.get('end') else None
    except (ObligationError, ValueError) as e:
        return errore(str(e), 400)
    try:
        transactions = _service().list_decrypted(current_user_id(), scope_id, start, end)
        return risposta(True, 'OK', transactions=transactions)
    except ScopeError as e:
        return errore(str(e), 403)
    except Exception as e:
        current_app.logger.exception(f"Errore nel caricamento delle transazioni: {e}")
        return errore(f'Errore nel caricamento delle transazioni: {str(e)}', 500)


@transactions_bp.route('/', methods=['POST'])
def crea():
    """Crea una transazione (o un lotto: ripetizioni giornaliere e rate)"""
    data = json_body()
    try:
        scope_id = get_scope(data)
    except ValueError as e:
        return errore(str(e), 400)
    service = _service()
    success, message, rows = service.create(current_user_id(), data, scope_id=scope_id)
    decode = display_decoder(service.codec)
    return risposta(success, message, status_ok=201,
                    transactions=[tx.to_decrypted_dict(decode) for tx in rows])


@transactions_bp.route('/<int:tx_id>', methods=['PUT'])
def modifica(tx_id):
    service = _service()
    success, message, tx = service.update(current_user_id(), tx_id, json_body())
    payload = {'transaction': tx.to_decrypted_dict(display_decoder(service.codec))} if success and tx else {}
    return risposta(success, message, **payload)


@transactions_bp.route('/<int:tx_id>', methods=['DELETE'])
def elimina(tx_id):
    success, message = _service().delete(current_user_id(), tx_id)
    return risposta(success, message)


@transactions_bp.route('/<int:tx_id>/end-recurrence', methods=['POST'])
def termina_ricorrenza(tx_id):
    success, message = _service().end_recurrence(current_user_id(), tx_id)
    return risposta(success, message)


@transactions_bp.route('/<int:tx_id>/paid', methods=['POST'])
def segna_pagata(tx_id):
    """Imposta lo stato di pagamento di una rata ({'is_paid': true|false})"""
    data = json_body()
    if 'is_paid' not in data:
        return errore("Il campo is_paid è obbligatorio", 400)
    success, message = _service().set_paid(current_user_id(), tx_id, ValidationUtils.validate_bool(data['is_paid']))
    return risposta(success, message)
