"""
Proiezione del flusso di cassa mese per mese.

Per ogni mese dell'orizzonte (a partire dal primo giorno del mese corrente):
1. ricorrenze mensili attive nel mese (0 <= offset < repetition_limit)
2. ricorrenze giornaliere moltiplicate per i giorni del mese
3. rate della carta non pagate con data nel mese
e il saldo progressivo viene aggiornato con entrate - uscite.

Nota: il controllo mensile è volutamente più grossolano di `is_due_on`
(non confronta il giorno del mese): una ricorrenza ancorata al 31 conta
anche nei mesi di 30 giorni.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Optional

from dateutil.relativedelta import relativedelta

from financeme.services.projection.due_date import month_offset
from financeme.services.projection.recurrence import (
    InvalidAmountError,
    Kind,
    Obligation,
    ObligationError,
    Recurrence,
    validate_obligation,
)

ZERO = Decimal('0')
INFLOW = 'inflow'
OUTFLOW = 'outflow'

MESI_BREVI = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


class YearMonth(NamedTuple):
    year: int
    month: int

    @classmethod
    def of(cls, d: date) -> 'YearMonth':
        return cls(d.year, d.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def __str__(self):
        return f'{self.year:04d}-{self.month:02d}'


def format_month_label(ym: YearMonth) -> str:
    """Etichetta breve del mese (es. 'Jan/24')."""
    return f"{MESI_BREVI[ym.month - 1]}/{ym.year % 100:02d}"


@dataclass(frozen=True)
class ProjectionPoint:
    month: YearMonth
    inflow: Decimal
    outflow: Decimal
    running_balance: Decimal

    def to_dict(self):
        return {
            'month': str(self.month),
            'label': format_month_label(self.month),
            'inflow': float(self.inflow),
            'outflow': float(self.outflow),
            'running_balance': float(self.running_balance),
        }


def bucket_of(obligation: Obligation) -> Optional[str]:
    """Classifica un'Obligation come entrata o uscita.

    Le righe pagate con carta sono sempre uscite, qualunque sia il tipo
    dichiarato. Appuntamenti e righe senza importo non contano.
    """
    if obligation.amount is None or obligation.kind == Kind.APPOINTMENT:
        return None
    if obligation.is_card:
        return OUTFLOW
    if obligation.kind == Kind.INCOME:
        return INFLOW
    if obligation.kind == Kind.EXPENSE:
        return OUTFLOW
    return None


def _checked(obligations: Iterable[Obligation]) -> List[Obligation]:
    # validiamo tutto prima di calcolare: o tutti i punti o nessuno
    return [validate_obligation(ob) for ob in obligations]


def _active_monthly(ob: Obligation, ym: YearMonth) -> bool:
    offset = month_offset(ob.anchor_date, ym.first_day)
    if offset < 0:
        return False
    return ob.repetition_limit is None or offset < ob.repetition_limit


def historical_balance(obligations: Iterable[Obligation]) -> Decimal:
    """Saldo storico: somma delle entrate meno somma delle uscite (o carta)."""
    balance = ZERO
    for ob in _checked(obligations):
        bucket = bucket_of(ob)
        if bucket == INFLOW:
            balance += ob.amount
        elif bucket == OUTFLOW:
            balance -= ob.amount
    return balance


def project(obligations: Iterable[Obligation], initial_balance, horizon_months: int,
            today: Optional[date] = None) -> List[ProjectionPoint]:
    """Calcola la proiezione mese per mese.

    Args:
        obligations: snapshot delle Obligation (non viene modificato)
        initial_balance: saldo di partenza (Decimal o valore convertibile)
        horizon_months: numero di mesi da proiettare (> 0)
        today: data di riferimento, default oggi

    Returns:
        Lista di ProjectionPoint, uno per mese, in ordine.

    Raises:
        ObligationError: input non valutabile; nessun risultato parziale.
    """
    if isinstance(horizon_months, bool) or not isinstance(horizon_months, int) or horizon_months < 1:
        raise ObligationError(f"L'orizzonte deve essere un intero positivo (ricevuto {horizon_months!r})")
    try:
        balance = initial_balance if isinstance(initial_balance, Decimal) else Decimal(str(initial_balance))
    except ArithmeticError:
        raise InvalidAmountError(f"Saldo iniziale non valido: {initial_balance!r}")
    if not balance.is_finite():
        raise InvalidAmountError(f"Saldo iniziale non valido: {initial_balance!r}")

    checked = _checked(obligations)
    monthly = [ob for ob in checked if ob.recurrence == Recurrence.MONTHLY and bucket_of(ob)]
    daily = [ob for ob in checked if ob.recurrence == Recurrence.DAILY and bucket_of(ob)]
    installments = [
        ob for ob in checked
        if ob.is_installment and not ob.is_paid and ob.amount is not None
    ]

    start = (today or date.today()).replace(day=1)
    points = []
    for i in range(horizon_months):
        ym = YearMonth.of(start + relativedelta(months=i))
        totals = {INFLOW: ZERO, OUTFLOW: ZERO}

        for ob in monthly:
            if _active_monthly(ob, ym):
                totals[bucket_of(ob)] += ob.amount

        # giornaliere: intero mese, una volta iniziate
        for ob in daily:
            if month_offset(ob.anchor_date, ym.first_day) >= 0:
                totals[bucket_of(ob)] += ob.amount * ym.days

        for ob in installments:
            if YearMonth.of(ob.anchor_date) == ym:
                totals[OUTFLOW] += ob.amount

        balance = balance + totals[INFLOW] - totals[OUTFLOW]
        points.append(ProjectionPoint(
            month=ym,
            inflow=totals[INFLOW],
            outflow=totals[OUTFLOW],
            running_balance=balance,
        ))
    return points
