"""Blueprint principale: health check e gestori di errore"""
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from financeme import db
from financeme.services.groups.group_service import ScopeError
from financeme.views import errore

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """Verifica che l'app risponda e che il database sia raggiungibile"""
    try:
        db.session.execute(text('SELECT 1'))
        return jsonify({'status': 'ok'})
    except Exception as e:
        current_app.logger.exception(f"Health check fallito: {e}")
        return jsonify({'status': 'error', 'error': str(e)}), 500


@main_bp.app_errorhandler(ScopeError)
def scope_error(e):
    return errore(str(e), 403)


@main_bp.app_errorhandler(404)
def not_found(e):
    return errore('Risorsa non trovata', 404)


@main_bp.app_errorhandler(500)
def internal_error(e):
    return errore('Errore interno del server', 500)
