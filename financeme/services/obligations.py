"""
Conversione delle righe salvate (cifrate) in Obligation per il motore di proiezione.

Un importo non decifrabile o non numerico non viene mai trattato come zero:
solleva InvalidAmountError indicando il record. I campi testuali non
decifrabili diventano stringa vuota (con un warning nel log).
"""
import logging

from financeme.services.encryption import is_decode_failure
from financeme.services.projection import (
    InvalidAmountError,
    InvalidRecurrenceError,
    Kind,
    Obligation,
    PaymentMethod,
    Recurrence,
    parse_amount,
)

logger = logging.getLogger(__name__)


def _decode_text(codec, value, label):
    if not value:
        return ''
    text = codec.decode(value)
    if is_decode_failure(text):
        logger.warning('Campo %s non decifrabile: uso stringa vuota', label)
        return ''
    return text


def _decode_amount(codec, value, label):
    text = codec.decode(value) if value else None
    if text is None or is_decode_failure(text):
        raise InvalidAmountError(f"Importo non decifrabile per {label}")
    try:
        return parse_amount(text)
    except InvalidAmountError:
        raise InvalidAmountError(f"Importo non numerico per {label}: {text!r}")


def _enum(enum_cls, value, label):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidRecurrenceError(f"Valore {value!r} non valido per {label}")


def transaction_to_obligation(tx, codec) -> Obligation:
    label = f"transazione {tx.id}"
    return Obligation(
        id=tx.id,
        kind=_enum(Kind, tx.kind, label),
        anchor_date=tx.date,
        amount=_decode_amount(codec, tx.amount, label),
        category=_decode_text(codec, tx.category, 'categoria'),
        description=_decode_text(codec, tx.description, 'descrizione'),
        recurrence=_enum(Recurrence, tx.recurrence or 'once', label),
        repetition_limit=tx.repetition_limit,
        payment_method=_enum(PaymentMethod, tx.payment_method, label) if tx.payment_method else None,
        card_id=tx.card_id,
        installment_total=tx.installment_total,
        installment_index=tx.installment_index,
        is_paid=bool(tx.is_paid),
        group_id=tx.group_id,
    )


def appointment_to_obligation(appt, codec) -> Obligation:
    label = f"appuntamento {appt.id}"
    return Obligation(
        id=appt.id,
        kind=Kind.APPOINTMENT,
        anchor_date=appt.date,
        amount=_decode_amount(codec, appt.amount, label) if appt.amount else None,
        category='',
        description=appt.title,
        recurrence=_enum(Recurrence, appt.recurrence or 'once', label),
        repetition_limit=appt.repetition_limit,
        group_id=appt.group_id,
    )


def to_obligations(transactions=(), appointments=(), codec=None):
    """Converte in blocco: al primo record non valido solleva l'errore."""
    result = [transaction_to_obligation(tx, codec) for tx in transactions]
    result.extend(appointment_to_obligation(a, codec) for a in appointments)
    return result
