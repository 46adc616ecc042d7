"""Test del motore di proiezione e del saldo storico."""

from __future__ import annotations

import random
from datetime import date
from decimal import Decimal

import pytest

from conftest import installment, ob
from financeme.services.projection import (
    InvalidAmountError,
    Kind,
    Obligation,
    ObligationError,
    PaymentMethod,
    Recurrence,
    YearMonth,
    bucket_of,
    format_month_label,
    historical_balance,
    project,
)

TODAY = date(2024, 1, 20)


def test_empty_projection_keeps_initial_balance() -> None:
    points = project([], Decimal('250'), 6, today=TODAY)
    assert len(points) == 6
    assert all(p.running_balance == Decimal('250') for p in points)
    assert [str(p.month) for p in points][:2] == ['2024-01', '2024-02']


def test_monthly_expense_with_limit() -> None:
    monthly = ob(anchor=date(2024, 1, 15), recurrence=Recurrence.MONTHLY, repetition_limit=3)
    points = project([monthly], 0, 4, today=TODAY)
    assert [p.outflow for p in points] == [Decimal('100')] * 3 + [Decimal('0')]
    assert [p.running_balance for p in points] == [Decimal(v) for v in (-100, -200, -300, -300)]


def test_running_balance_invariant() -> None:
    obligations = [
        ob(id=1, kind=Kind.INCOME, amount='3000', recurrence=Recurrence.MONTHLY, anchor=date(2023, 6, 5)),
        ob(id=2, amount='40', recurrence=Recurrence.DAILY, anchor=date(2024, 2, 10)),
        installment(3, 2, anchor=date(2024, 3, 10)),
    ]
    points = project(obligations, Decimal('100'), 5, today=TODAY)
    previous = Decimal('100')
    for p in points:
        assert p.running_balance == previous + p.inflow - p.outflow
        previous = p.running_balance


def test_daily_counts_whole_month_once_started() -> None:
    daily = ob(amount='10', recurrence=Recurrence.DAILY, anchor=date(2024, 2, 20))
    points = project([daily], 0, 3, today=TODAY)
    assert points[0].outflow == Decimal('0')
    assert points[1].outflow == Decimal('290')  # febbraio 2024: 29 giorni
    assert points[2].outflow == Decimal('310')


def test_unpaid_installments_count_in_their_month() -> None:
    rows = [
        installment(1, 1, total=3, paid=True, anchor=date(2024, 1, 10)),
        installment(2, 2, total=3, anchor=date(2024, 2, 10)),
        installment(3, 3, total=3, anchor=date(2024, 3, 10)),
    ]
    points = project(rows, 0, 3, today=TODAY)
    assert [p.outflow for p in points] == [Decimal('0'), Decimal('100'), Decimal('100')]


def test_card_rows_are_always_outflow() -> None:
    card_income = ob(kind=Kind.INCOME, payment_method=PaymentMethod.CARD)
    assert bucket_of(card_income) == 'outflow'
    assert bucket_of(ob(kind=Kind.INCOME)) == 'inflow'
    assert bucket_of(ob(kind=Kind.APPOINTMENT)) is None
    assert bucket_of(ob(amount=None)) is None


def test_once_rows_do_not_project() -> None:
    points = project([ob(anchor=date(2024, 2, 1))], 0, 2, today=TODAY)
    assert all(p.outflow == 0 for p in points)


@pytest.mark.parametrize('horizon', [0, -1, True, 2.5, '3'])
def test_invalid_horizon(horizon) -> None:
    with pytest.raises(ObligationError):
        project([], 0, horizon, today=TODAY)


def test_invalid_amount_aborts_whole_projection() -> None:
    bad = Obligation(id=7, kind=Kind.EXPENSE, anchor_date=date(2024, 1, 1), amount='abc',
                     recurrence=Recurrence.MONTHLY)
    with pytest.raises(InvalidAmountError):
        project([ob(recurrence=Recurrence.MONTHLY), bad], 0, 3, today=TODAY)


def test_input_not_mutated() -> None:
    obligations = [ob(recurrence=Recurrence.MONTHLY, repetition_limit=2)]
    snapshot = list(obligations)
    project(obligations, 0, 3, today=TODAY)
    assert obligations == snapshot


def test_historical_balance_is_order_independent() -> None:
    obligations = [
        ob(id=1, kind=Kind.INCOME, amount='1000'),
        ob(id=2, amount='250.50'),
        ob(id=3, kind=Kind.INCOME, amount='20', payment_method=PaymentMethod.CARD),
        ob(id=4, kind=Kind.APPOINTMENT, amount='999'),
    ]
    expected = Decimal('1000') - Decimal('250.50') - Decimal('20')
    assert historical_balance(obligations) == expected
    shuffled = obligations[:]
    random.Random(4).shuffle(shuffled)
    assert historical_balance(shuffled) == expected


def test_month_label() -> None:
    assert format_month_label(YearMonth(2024, 1)) == 'Jan/24'
    assert str(YearMonth(2024, 11)) == '2024-11'
