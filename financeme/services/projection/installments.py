"""Raggruppamento delle rate della carta e avanzamento dei pagamenti."""
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from financeme.services.projection.recurrence import Obligation

# suffisso aggiunto in creazione: "Notebook 2/10" oppure "Notebook (2/10)"
_SUFFISSO_RATA = re.compile(r'\s+\(?\d+/\d+\)?$')


def normalize_description(description: Optional[str]) -> str:
    """Rimuove il suffisso " N/M" o " (N/M)" e recupera la descrizione dell'acquisto."""
    if not description:
        return ''
    return _SUFFISSO_RATA.sub('', description).strip()


def group_key(row: Obligation) -> Tuple[str, object, int]:
    return normalize_description(row.description), row.card_id, row.installment_total


@dataclass(frozen=True)
class InstallmentGroup:
    base_description: str
    card_id: object
    installment_total: int
    rows: Tuple[Obligation, ...]

    @property
    def category(self) -> str:
        return self.rows[0].category if self.rows else ''

    @property
    def paid_count(self) -> int:
        return sum(1 for r in self.rows if r.is_paid)

    @property
    def progress_percent(self) -> float:
        # rapporto grezzo: non viene limitato a 100
        return self.paid_count / self.installment_total * 100

    @property
    def display_progress(self) -> float:
        return min(self.progress_percent, 100.0)

    @property
    def is_fully_paid(self) -> bool:
        return self.paid_count == self.installment_total

    @property
    def next_unpaid_occurrence(self) -> Optional[Obligation]:
        if self.is_fully_paid:
            return None
        unpaid = [r for r in self.rows if not r.is_paid]
        if not unpaid:
            return None
        return min(unpaid, key=lambda r: r.installment_index or 0)

    @property
    def total_amount(self) -> Decimal:
        return sum((r.amount or Decimal('0') for r in self.rows), Decimal('0'))

    @property
    def paid_amount(self) -> Decimal:
        return sum((r.amount or Decimal('0') for r in self.rows if r.is_paid), Decimal('0'))

    @property
    def remaining_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    def to_dict(self):
        nxt = self.next_unpaid_occurrence
        return {
            'description': self.base_description,
            'card_id': self.card_id,
            'category': self.category,
            'installment_total': self.installment_total,
            'paid_count': self.paid_count,
            'progress_percent': self.progress_percent,
            'display_progress': self.display_progress,
            'is_fully_paid': self.is_fully_paid,
            'total_amount': float(self.total_amount),
            'remaining_amount': float(self.remaining_amount),
            'next_unpaid': None if nxt is None else {
                'id': nxt.id,
                'installment_index': nxt.installment_index,
                'date': nxt.anchor_date.isoformat(),
                'amount': float(nxt.amount) if nxt.amount is not None else None,
            },
            'rows': [
                {
                    'id': r.id,
                    'installment_index': r.installment_index,
                    'date': r.anchor_date.isoformat(),
                    'amount': float(r.amount) if r.amount is not None else None,
                    'is_paid': r.is_paid,
                }
                for r in self.rows
            ],
        }


def group_installments(transactions: Iterable[Obligation]) -> List[InstallmentGroup]:
    """Raggruppa le righe rateali per (descrizione base, carta, numero rate).

    Le righe con installment_total <= 1 sono escluse. I gruppi sono ordinati per
    la data della rata più vecchia; le righe di ogni gruppo per indice di rata.
    """
    groups = {}
    for row in transactions:
        if not row.is_installment:
            continue
        groups.setdefault(group_key(row), []).append(row)

    result = []
    for (descr, card_id, total), rows in groups.items():
        rows = sorted(rows, key=lambda r: (r.installment_index or 0, r.anchor_date))
        result.append(InstallmentGroup(
            base_description=descr,
            card_id=card_id,
            installment_total=total,
            rows=tuple(rows),
        ))
    result.sort(key=lambda g: min(r.anchor_date for r in g.rows))
    return result
