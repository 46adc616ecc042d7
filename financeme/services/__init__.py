"""
Servizio base per la gestione della business logic
"""
from financeme import db
from datetime import datetime
import calendar

# Esporta le funzioni per l'import diretto
__all__ = ['BaseService', 'get_month_boundaries', 'month_key', 'parse_month']


class BaseService:
    """Classe base per i servizi con metodi comuni"""

    def __init__(self, codec=None):
        self.db = db
        self.codec = codec

    def save(self, obj):
        """Salva un oggetto nel database"""
        try:
            self.db.session.add(obj)
            self.db.session.commit()
            return True, "Operazione completata con successo"
        except Exception as e:
            self.db.session.rollback()
            return False, str(e)

    def delete(self, obj):
        """Elimina un oggetto dal database"""
        try:
            self.db.session.delete(obj)
            self.db.session.commit()
            return True, "Eliminazione completata con successo"
        except Exception as e:
            self.db.session.rollback()
            return False, str(e)

    def encode(self, value):
        return self.codec.encode(value)


def get_month_boundaries(date_obj):
    """Primo e ultimo giorno del mese di calendario che contiene `date_obj`."""
    start_date = date_obj.replace(day=1)
    last_day = calendar.monthrange(date_obj.year, date_obj.month)[1]
    end_date = date_obj.replace(day=last_day)
    return start_date, end_date


def month_key(date_obj):
    """Identificativo del mese nel formato YYYY-MM"""
    return date_obj.strftime('%Y-%m')


def parse_month(value):
    """Converte 'YYYY-MM' nel primo giorno del mese; solleva ValueError se malformato."""
    try:
        return datetime.strptime(str(value).strip(), '%Y-%m').date()
    except ValueError:
        raise ValueError(f"Formato mese non valido (YYYY-MM): {value!r}")
