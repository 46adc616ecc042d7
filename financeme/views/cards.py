"""Blueprint per le carte di credito"""
from flask import Blueprint, current_app

from financeme.services.cards.card_service import CardService
from financeme.services.projection import ObligationError
from financeme.views import current_user_id, errore, get_codec, get_gateway, json_body, risposta

cards_bp = Blueprint('cards', __name__)


def _service():
    return CardService(get_codec(), get_gateway())


@cards_bp.route('/', methods=['GET'])
def lista():
    """Carte dell'utente con debito residuo e disponibilità"""
    try:
        return risposta(True, 'OK', cards=_service().card_overview(current_user_id()))
    except ObligationError as e:
        return errore(str(e), 422)
    except Exception as e:
        current_app.logger.exception(f"Errore nel caricamento delle carte: {e}")
        return errore(f'Errore nel caricamento delle carte: {str(e)}', 500)


@cards_bp.route('/', methods=['POST'])
def crea():
    success, message, card = _service().create(current_user_id(), json_body())
    return risposta(success, message, status_ok=201, **({'card': card.to_dict()} if success else {}))


@cards_bp.route('/<int:card_id>', methods=['PUT'])
def modifica(card_id):
    success, message, card = _service().update(current_user_id(), card_id, json_body())
    return risposta(success, message, **({'card': card.to_dict()} if success else {}))


@cards_bp.route('/<int:card_id>', methods=['DELETE'])
def elimina(card_id):
    success, message = _service().delete(current_user_id(), card_id)
    return risposta(success, message)
