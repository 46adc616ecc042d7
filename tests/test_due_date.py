"""Test del valutatore delle scadenze e della composizione dell'agenda."""

from __future__ import annotations

from datetime import date, timedelta

from conftest import installment, ob
from financeme.services.projection import Kind, PaymentMethod, Recurrence, is_due_on, items_due_on


def test_once_due_only_on_anchor() -> None:
    o = ob(anchor=date(2024, 3, 10))
    assert is_due_on(o, date(2024, 3, 10))
    assert not is_due_on(o, date(2024, 3, 11))
    assert not is_due_on(o, date(2024, 4, 10))


def test_nothing_due_before_anchor() -> None:
    anchor = date(2024, 3, 10)
    for recurrence in Recurrence:
        o = ob(anchor=anchor, recurrence=recurrence)
        assert not is_due_on(o, anchor - timedelta(days=1))


def test_daily_with_limit() -> None:
    o = ob(anchor=date(2024, 1, 30), recurrence=Recurrence.DAILY, repetition_limit=3)
    assert is_due_on(o, date(2024, 1, 30))
    assert is_due_on(o, date(2024, 2, 1))
    assert not is_due_on(o, date(2024, 2, 2))


def test_daily_without_limit_runs_forever() -> None:
    o = ob(anchor=date(2024, 1, 1), recurrence=Recurrence.DAILY)
    assert is_due_on(o, date(2030, 6, 1))


def test_monthly_limit_counts_months() -> None:
    o = ob(anchor=date(2024, 1, 15), recurrence=Recurrence.MONTHLY, repetition_limit=3)
    assert is_due_on(o, date(2024, 1, 15))
    assert is_due_on(o, date(2024, 3, 15))
    assert not is_due_on(o, date(2024, 4, 15))
    assert not is_due_on(o, date(2024, 2, 16))


def test_monthly_on_31st_skips_short_months() -> None:
    o = ob(anchor=date(2024, 1, 31), recurrence=Recurrence.MONTHLY)
    assert not is_due_on(o, date(2024, 2, 29))
    assert not is_due_on(o, date(2024, 4, 30))
    assert is_due_on(o, date(2024, 3, 31))


def test_agenda_sections() -> None:
    day = date(2024, 1, 10)
    obligations = [
        installment(1, 1, anchor=day),
        ob(id=2, anchor=day, kind=Kind.INCOME, payment_method=PaymentMethod.INCOME),
        ob(id=3, anchor=day, payment_method=PaymentMethod.PIX),
        ob(id=4, anchor=day, kind=Kind.APPOINTMENT, amount=None, description='Dentista'),
        ob(id=5, anchor=day + timedelta(days=1)),
    ]
    agenda = items_due_on(obligations, day)
    assert [o.id for o in agenda.card_installments] == [1]
    assert [o.id for o in agenda.incomes] == [2]
    assert [o.id for o in agenda.other_expenses] == [3]
    assert [o.id for o in agenda.appointments] == [4]
    assert not agenda.is_empty
    assert items_due_on(obligations, day - timedelta(days=1)).is_empty
