"""Configurazione per l'applicazione FinanceMe"""
import os


class Config:
    """Configurazione principale dell'applicazione"""

    # Database
    # Il path di default punta alla cartella `db/` nella root del repository;
    # in produzione si passa un URI completo tramite FINANCEME_DATABASE_URL.
    BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'FINANCEME_DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "db", "financeme.db")}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Flask
    SECRET_KEY = os.environ.get('FINANCEME_SECRET_KEY', 'financeme-dev-secret-key')

    # Cifratura dei campi sensibili (importo, categoria, descrizione).
    # Senza chiave i valori vengono salvati in chiaro (PlainCodec).
    ENCRYPTION_KEY = os.environ.get('FINANCEME_ENCRYPTION_KEY')
    ENCRYPTION_SALT = os.environ.get('FINANCEME_ENCRYPTION_SALT', 'financeme-field-salt')

    # Server
    HOST = '0.0.0.0'
    PORT = 5001

    # Formato valuta usato da format_currency
    FORMATO_VALUTA = "R$ {:.2f}"

    # Proiezioni
    PROJECTION_DEFAULT_MONTHS = 12
    PROJECTION_MAX_MONTHS = 120

    # Durata massima (secondi) degli snapshot usati da proiezioni, agenda e rate
    SNAPSHOT_MAX_AGE = int(os.environ.get('FINANCEME_SNAPSHOT_MAX_AGE', '30'))

    LOG_LEVEL = os.environ.get('FINANCEME_LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    """Configurazione per la suite di test (database in memoria)"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    ENCRYPTION_KEY = 'test-passphrase'
    ENCRYPTION_SALT = 'test-salt'
    LOG_LEVEL = 'DEBUG'


config = {
    'default': Config,
    'testing': TestingConfig,
}
