"""Helper comuni alle view JSON."""
from flask import current_app, g, jsonify, request

from financeme.models.user_config import UserConfig
from financeme.services.groups.group_service import GroupService

MESSAGGI_NON_TROVATO = ('non trovato', 'non trovata')


def get_codec():
    return current_app.extensions['financeme']['codec']


def get_gateway():
    return current_app.extensions['financeme']['gateway']


def current_user_id():
    return g.user_id


def current_user_email():
    """Email dell'utente: header X-User-Email impostato dal proxy, altrimenti quella delle impostazioni."""
    email = (request.headers.get('X-User-Email') or '').strip()
    if email:
        return email.lower()
    config = UserConfig.query.filter_by(user_id=current_user_id()).first()
    return config.email.lower() if config and config.email else None


def json_body():
    return request.get_json(silent=True) or {}


def get_scope(data=None):
    """Ambito della richiesta: id del gruppo (parametro `scope`) oppure None."""
    value = request.args.get('scope')
    if value in (None, '') and data:
        value = data.get('scope')
    if value in (None, '', 'personal'):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Ambito non valido: {value!r}")


def risposta(success, message, status_ok=200, **payload):
    """Risposta JSON standard {'success', 'message', ...} con lo status HTTP adeguato."""
    body = {'success': success, 'message': message}
    body.update(payload)
    if success:
        return jsonify(body), status_ok
    if message and message.lower().endswith(MESSAGGI_NON_TROVATO):
        return jsonify(body), 404
    return jsonify(body), 400


def errore(message, status):
    return jsonify({'success': False, 'message': message}), status


def obligation_snapshot(view, scope_id, loader):
    """Snapshot delle obligation per la vista; l'accesso all'ambito è verificato a ogni richiesta."""
    user_id = current_user_id()
    GroupService().check_scope(user_id, scope_id)
    return current_app.extensions['financeme']['snapshots'].get((view, user_id, scope_id), loader)
