"""Valutazione delle scadenze: un'Obligation cade in una certa data?"""
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List

from financeme.services.projection.recurrence import Kind, Obligation, Recurrence


def month_offset(anchor: date, target: date) -> int:
    """Differenza in mesi di calendario tra due date (il giorno è ignorato)."""
    return (target.year - anchor.year) * 12 + (target.month - anchor.month)


def is_due_on(obligation: Obligation, target_date: date) -> bool:
    """Restituisce True se un'occorrenza di `obligation` cade in `target_date`.

    - once: stessa data di calendario
    - daily: dal giorno di ancoraggio in poi, entro `repetition_limit` giorni
    - monthly: stesso giorno del mese, non prima dell'ancoraggio, entro
      `repetition_limit` mesi. Se il giorno non esiste nel mese (es. 31 in un
      mese di 30 giorni) non c'è occorrenza: nessun arrotondamento.
    """
    anchor = obligation.anchor_date
    recurrence = obligation.recurrence
    limit = obligation.repetition_limit

    if recurrence == Recurrence.ONCE:
        return target_date == anchor

    if target_date < anchor:
        return False

    if recurrence == Recurrence.DAILY:
        if limit is None:
            return True
        return (target_date - anchor).days < limit

    if recurrence == Recurrence.MONTHLY:
        if target_date.day != anchor.day:
            return False
        if limit is None:
            return True
        return month_offset(anchor, target_date) < limit

    return False


@dataclass
class AgendaDay:
    """Elementi in scadenza in un giorno, divisi come nell'agenda."""
    day: date
    card_installments: List[Obligation] = field(default_factory=list)
    other_expenses: List[Obligation] = field(default_factory=list)
    incomes: List[Obligation] = field(default_factory=list)
    appointments: List[Obligation] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.card_installments or self.other_expenses or self.incomes or self.appointments)


def items_due_on(obligations: Iterable[Obligation], target_date: date) -> AgendaDay:
    agenda = AgendaDay(day=target_date)
    for ob in obligations:
        if not is_due_on(ob, target_date):
            continue
        if ob.kind == Kind.APPOINTMENT:
            agenda.appointments.append(ob)
        elif ob.is_card:
            agenda.card_installments.append(ob)
        elif ob.kind == Kind.INCOME:
            agenda.incomes.append(ob)
        else:
            agenda.other_expenses.append(ob)
    return agenda
