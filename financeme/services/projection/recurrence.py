"""
Modello della ricorrenza (Obligation)

Un'Obligation unifica transazioni e appuntamenti ai fini della proiezione:
- kind: 'expense', 'income' o 'appointment'
- amount: importo decimale (assente per gli appuntamenti senza importo)
- anchor_date: data della prima occorrenza
- recurrence: 'once', 'daily' o 'monthly'
- repetition_limit: numero massimo di occorrenze (None = indefinita)
- installment_total / installment_index: solo per le rate della carta

Le serie finite scelte in fase di creazione (ripetizioni giornaliere e rate
della carta) vengono materializzate subito come N righe 'once'; la ricorrenza
mensile resta invece una sola riga valutata a ogni lettura, perché il numero
delle sue occorrenze può essere illimitato.
"""
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class ObligationError(ValueError):
    """Dato non valutabile (importo, data o ricorrenza malformati)."""


class InvalidAmountError(ObligationError):
    pass


class InvalidDateError(ObligationError):
    pass


class InvalidRecurrenceError(ObligationError):
    pass


class Kind(str, Enum):
    EXPENSE = 'expense'
    INCOME = 'income'
    APPOINTMENT = 'appointment'


class Recurrence(str, Enum):
    ONCE = 'once'
    DAILY = 'daily'
    MONTHLY = 'monthly'


class PaymentMethod(str, Enum):
    CASH = 'cash'
    PIX = 'pix'
    CARD = 'card'
    OTHER = 'other'
    INCOME = 'income'


@dataclass(frozen=True)
class Obligation:
    id: object
    kind: Kind
    anchor_date: date
    amount: Optional[Decimal] = None
    category: str = ''
    description: str = ''
    recurrence: Recurrence = Recurrence.ONCE
    repetition_limit: Optional[int] = None
    payment_method: Optional[PaymentMethod] = None
    card_id: Optional[object] = None
    installment_total: Optional[int] = None
    installment_index: Optional[int] = None
    is_paid: bool = False
    group_id: Optional[object] = None

    @property
    def is_installment(self) -> bool:
        return (self.installment_total or 0) > 1

    @property
    def is_card(self) -> bool:
        return self.payment_method == PaymentMethod.CARD

    def normalized(self) -> 'Obligation':
        """Per le righe 'once' il limite di ripetizioni non ha significato."""
        if self.recurrence == Recurrence.ONCE and self.repetition_limit is not None:
            return replace(self, repetition_limit=None)
        return self


def validate_obligation(obligation: Obligation) -> Obligation:
    """Valida un'Obligation e la restituisce normalizzata.

    Raises:
        InvalidDateError: anchor_date non è una data
        InvalidAmountError: importo presente ma non decimale finito
        InvalidRecurrenceError: cadenza sconosciuta o limite non positivo
    """
    if not isinstance(obligation.anchor_date, date):
        raise InvalidDateError(f"Data non valida per {obligation.id!r}: {obligation.anchor_date!r}")

    amount = obligation.amount
    if amount is not None and (not isinstance(amount, Decimal) or not amount.is_finite()):
        raise InvalidAmountError(f"Importo non valido per {obligation.id!r}: {amount!r}")

    if not isinstance(obligation.recurrence, Recurrence):
        raise InvalidRecurrenceError(f"Cadenza sconosciuta: {obligation.recurrence!r}")

    if obligation.recurrence == Recurrence.ONCE:
        return obligation.normalized()

    limit = obligation.repetition_limit
    if limit is not None:
        # bool è sottoclasse di int: lo escludiamo esplicitamente
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidRecurrenceError(
                f"Il limite di ripetizioni deve essere un intero positivo (ricevuto {limit!r})"
            )
    return obligation


def parse_amount(value) -> Decimal:
    """Converte un importo in Decimal senza mai ripiegare su zero."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise InvalidAmountError(f"Importo non valido: {value!r}")
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        text = str(value).strip().replace(',', '.')
        try:
            result = Decimal(text)
        except ArithmeticError:
            raise InvalidAmountError(f"Importo non valido: {value!r}")
    if not result.is_finite():
        raise InvalidAmountError(f"Importo non valido: {value!r}")
    return result


def parse_date(value) -> date:
    """Converte una stringa ISO (YYYY-MM-DD) in date."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise InvalidDateError(f"Formato data non valido (YYYY-MM-DD): {value!r}")


def parse_money(value) -> Decimal:
    """Come parse_amount, ma rifiuta più di due decimali invece di arrotondare."""
    result = parse_amount(value)
    if result.as_tuple().exponent < -2 and result != result.quantize(Decimal('0.01')):
        raise InvalidAmountError(f"Importo con più di due decimali: {value!r}")
    return result
