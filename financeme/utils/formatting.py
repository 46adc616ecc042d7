from flask import current_app


def format_currency(value, fmt=None):
    """Formatta un valore numerico usando il formato definito in `FORMATO_VALUTA`."""
    if fmt is None:
        fmt = current_app.config.get('FORMATO_VALUTA', 'R$ {:.2f}') if current_app else 'R$ {:.2f}'

    # Decimal, int, float e stringhe numeriche
    val = 0.0 if value is None else float(value)
    return fmt.format(val)


def format_decimal(value, decimals=2):
    """Format a numeric value as a plain decimal string with fixed decimals.

    Used when storing amounts in encrypted text columns: the stored plaintext
    is always a plain numeric string (e.g. "123.45").
    """
    v = 0.0 if value is None else value
    return f"{v:.{int(decimals)}f}"
