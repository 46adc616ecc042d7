"""Blueprint per gli appuntamenti"""
from flask import Blueprint

from financeme.services.appointments.appointment_service import AppointmentService
from financeme.services.encryption import display_decoder
from financeme.services.groups.group_service import ScopeError
from financeme.views import current_user_id, errore, get_codec, get_gateway, get_scope, json_body, risposta

appointments_bp = Blueprint('appointments', __name__)


def _service():
    return AppointmentService(get_codec(), get_gateway())


@appointments_bp.route('/', methods=['GET'])
def lista():
    try:
        scope_id = get_scope()
        return risposta(True, 'OK', appointments=_service().list_decrypted(current_user_id(), scope_id))
    except ValueError as e:
        return errore(str(e), 400)
    except ScopeError as e:
        return errore(str(e), 403)


@appointments_bp.route('/', methods=['POST'])
def crea():
    data = json_body()
    try:
        scope_id = get_scope(data)
    except ValueError as e:
        return errore(str(e), 400)
    service = _service()
    success, message, appointment = service.create(current_user_id(), data, scope_id=scope_id)
    payload = {'appointment': appointment.to_decrypted_dict(display_decoder(service.codec))} if success else {}
    return risposta(success, message, status_ok=201, **payload)


@appointments_bp.route('/<int:appointment_id>', methods=['PUT'])
def modifica(appointment_id):
    service = _service()
    success, message, appointment = service.update(current_user_id(), appointment_id, json_body())
    payload = {'appointment': appointment.to_decrypted_dict(display_decoder(service.codec))} if success else {}
    return risposta(success, message, **payload)


@appointments_bp.route('/<int:appointment_id>', methods=['DELETE'])
def elimina(appointment_id):
    success, message = _service().delete(current_user_id(), appointment_id)
    return risposta(success, message)
