"""Blueprint per i gruppi di finanze condivise e i relativi inviti"""
from flask import Blueprint

from financeme.services.groups.group_service import GroupService
from financeme.utils import ValidationUtils
from financeme.views import current_user_email, current_user_id, errore, json_body, risposta

groups_bp = Blueprint('groups', __name__)
service = GroupService()


@groups_bp.route('/', methods=['GET'])
def lista():
    groups = service.get_groups_for_user(current_user_id())
    return risposta(True, 'OK', groups=[g.to_dict() for g in groups])


@groups_bp.route('/', methods=['POST'])
def crea():
    success, message, group = service.create(current_user_id(), json_body().get('name'))
    return risposta(success, message, status_ok=201, **({'group': group.to_dict()} if success else {}))


@groups_bp.route('/<int:group_id>/members', methods=['POST'])
def aggiungi_membro(group_id):
    success, message = service.add_member(group_id, current_user_id(), json_body().get('user_id'))
    return risposta(success, message, status_ok=201)


@groups_bp.route('/<int:group_id>/members/<user_id>', methods=['DELETE'])
def rimuovi_membro(group_id, user_id):
    success, message = service.remove_member(group_id, current_user_id(), user_id)
    return risposta(success, message)


@groups_bp.route('/<int:group_id>/invites', methods=['POST'])
def invita(group_id):
    """Invita un indirizzo email ({'email': ...}) nel gruppo"""
    success, message, invite = service.invite(group_id, current_user_id(), json_body().get('email'))
    return risposta(success, message, status_ok=201, **({'invite': invite.to_dict()} if success else {}))


@groups_bp.route('/<int:group_id>/invites', methods=['GET'])
def inviti_del_gruppo(group_id):
    invites = service.group_pending_invites(group_id, current_user_id())
    return risposta(True, 'OK', invites=[i.to_dict() for i in invites])


@groups_bp.route('/invites', methods=['GET'])
def miei_inviti():
    """Inviti in attesa per l'email dell'utente"""
    email = current_user_email()
    if not email:
        return errore("Email dell'utente non disponibile: impostarla nelle impostazioni", 400)
    return risposta(True, 'OK', invites=[i.to_dict() for i in service.pending_invites(email)])


@groups_bp.route('/invites/<int:invite_id>/respond', methods=['POST'])
def rispondi_invito(invite_id):
    """Accetta o rifiuta un invito ({'accept': true|false})"""
    data = json_body()
    if 'accept' not in data:
        return errore("Il campo accept è obbligatorio", 400)
    success, message = service.respond(invite_id, current_user_id(), current_user_email(),
                                       ValidationUtils.validate_bool(data['accept']))
    return risposta(success, message)
