"""Blueprint per le impostazioni dell'utente (limite di spesa)"""
from flask import Blueprint, current_app, request

from financeme.services.projection import ObligationError, parse_date
from financeme.services.settings.spending_limit_service import SpendingLimitService
from financeme.views import current_user_id, errore, get_codec, get_gateway, json_body, risposta

settings_bp = Blueprint('settings', __name__)


def _service():
    return SpendingLimitService(get_codec(), get_gateway())


@settings_bp.route('/spending-limit', methods=['GET'])
def leggi_limite():
    config = _service().get_config(current_user_id())
    limit = float(config.spending_limit) if config and config.spending_limit is not None else None
    return risposta(True, 'OK', spending_limit=limit, email=config.email if config else None)


@settings_bp.route('/spending-limit', methods=['PUT'])
def salva_limite():
    data = json_body()
    success, message, config = _service().set_limit(current_user_id(), data.get('spending_limit'), data.get('email'))
    payload = {}
    if success:
        payload['spending_limit'] = float(config.spending_limit) if config.spending_limit is not None else None
    return risposta(success, message, **payload)


@settings_bp.route('/spending-limit/check', methods=['POST'])
def controlla_limite():
    """Esegue il controllo del limite per il mese corrente (o ?today=YYYY-MM-DD)"""
    try:
        today = parse_date(request.args['today']) if request.args.get('today') else None
        status = _service().check_spending_limit(current_user_id(), today)
    except ObligationError as e:
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel controllo del limite di spesa: {e}")
        return errore(f'Errore nel controllo del limite di spesa: {str(e)}', 500)
    return risposta(True, 'OK', status=status)
