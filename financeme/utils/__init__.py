"""
Utilità comuni per l'applicazione
"""
import re
from datetime import datetime

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationUtils:
    """Utilità per la validazione dell'input delle API"""

    @staticmethod
    def validate_required_field(value, field_name):
        """Valida che un campo obbligatorio non sia vuoto"""
        if value is None or not str(value).strip():
            raise ValueError(f"Il campo {field_name} è obbligatorio")
        return str(value).strip()

    @staticmethod
    def validate_optional_int(value, field_name, minimo=None, massimo=None):
        """Converte un intero opzionale controllandone l'intervallo"""
        if value is None or value == '':
            return None
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Il campo {field_name} deve essere un numero intero")
        if minimo is not None and number < minimo:
            raise ValueError(f"Il campo {field_name} deve essere almeno {minimo}")
        if massimo is not None and number > massimo:
            raise ValueError(f"Il campo {field_name} deve essere al massimo {massimo}")
        return number

    @staticmethod
    def validate_day_of_month(value, field_name):
        number = ValidationUtils.validate_optional_int(value, field_name, 1, 31)
        if number is None:
            raise ValueError(f"Il campo {field_name} è obbligatorio")
        return number

    @staticmethod
    def validate_time(value):
        """Valida un orario HH:MM (opzionale)"""
        if not value:
            return None
        try:
            return datetime.strptime(str(value), '%H:%M').time()
        except ValueError:
            raise ValueError("Formato orario non valido (HH:MM)")

    @staticmethod
    def validate_bool(value):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ('1', 'true', 'on', 'yes')

    @staticmethod
    def validate_email(value):
        """Valida un indirizzo email e lo restituisce in minuscolo"""
        email = ValidationUtils.validate_required_field(value, 'Email').lower()
        if not EMAIL_RE.match(email):
            raise ValueError(f"Indirizzo email non valido: {email}")
        return email
