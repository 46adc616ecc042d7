"""Applicazione Flask FinanceMe: finanze personali e condivise"""

from flask import Flask, g, jsonify, request
from flask_sqlalchemy import SQLAlchemy
import logging
import os
from financeme.config import config

# Istanze globali
db = SQLAlchemy()

# Rotte accessibili senza identificazione dell'utente
ROTTE_PUBBLICHE = ('/health',)


def create_app(config_name='default'):
    """Factory pattern per creare l'applicazione Flask"""
    app = Flask(__name__)

    app.config.from_object(config[config_name])

    # Livello di log configurabile (FINANCEME_LOG_LEVEL)
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger('financeme').setLevel(level)

    # Inizializza le estensioni
    db.init_app(app)

    # Il codec di cifratura viene creato una volta e passato esplicitamente ai servizi
    from financeme.services.encryption import build_codec
    from financeme.services.gateway import PersistenceGateway
    from financeme.services.refresh import RefreshHub
    from financeme.services.snapshots import ObligationSnapshots, connect
    gateway = PersistenceGateway()
    hub = RefreshHub()
    snapshots = ObligationSnapshots(max_age=app.config.get('SNAPSHOT_MAX_AGE', 30))
    app.extensions['financeme'] = {
        'codec': build_codec(app.config),
        'gateway': gateway,
        'refresh': hub,
        'snapshots': snapshots,
        # le modifiche alle tabelle osservate svuotano gli snapshot
        'disconnect': connect(gateway, hub, snapshots),
    }

    # Importa e registra i blueprint
    from financeme.views.main import main_bp
    from financeme.views.transactions import transactions_bp
    from financeme.views.agenda import agenda_bp
    from financeme.views.projections import projections_bp
    from financeme.views.installments import installments_bp
    from financeme.views.appointments import appointments_bp
    from financeme.views.budgets import budgets_bp
    from financeme.views.goals import goals_bp
    from financeme.views.cards import cards_bp
    from financeme.views.groups import groups_bp
    from financeme.views.settings import settings_bp
    from financeme.views.reports import reports_bp
    from financeme.views.categories import categories_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(transactions_bp, url_prefix='/transactions')
    app.register_blueprint(agenda_bp, url_prefix='/agenda')
    app.register_blueprint(projections_bp, url_prefix='/projections')
    app.register_blueprint(installments_bp, url_prefix='/installments')
    app.register_blueprint(appointments_bp, url_prefix='/appointments')
    app.register_blueprint(budgets_bp, url_prefix='/budgets')
    app.register_blueprint(goals_bp, url_prefix='/goals')
    app.register_blueprint(cards_bp, url_prefix='/cards')
    app.register_blueprint(groups_bp, url_prefix='/groups')
    app.register_blueprint(settings_bp, url_prefix='/settings')
    app.register_blueprint(reports_bp, url_prefix='/reports')
    app.register_blueprint(categories_bp, url_prefix='/categories')

    # L'autenticazione è esterna: il proxy a monte imposta X-User-Id.
    @app.before_request
    def require_user():
        path = request.path or ''
        if path.startswith(ROTTE_PUBBLICHE):
            return None
        user_id = (request.headers.get('X-User-Id') or '').strip()
        if not user_id:
            return jsonify({'success': False, 'message': 'Utente non autenticato'}), 401
        g.user_id = user_id
        return None

    # Con SQLite creiamo le tabelle all'avvio per semplificare test ed esecuzioni locali
    db_uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if db_uri.startswith('sqlite:'):
        if db_uri.startswith('sqlite:///'):
            db_dir = os.path.dirname(db_uri[len('sqlite:///'):])
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)
        with app.app_context():
            import financeme.models  # noqa: F401 - registra i modelli
            db.create_all()

    return app
