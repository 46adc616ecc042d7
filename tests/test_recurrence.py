"""Test del modello delle ricorrenze e della validazione degli input."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from conftest import ob
from financeme.services.projection import (
    InvalidAmountError,
    InvalidDateError,
    InvalidRecurrenceError,
    Kind,
    Obligation,
    Recurrence,
    parse_amount,
    parse_date,
    validate_obligation,
)


def test_parse_amount_accepts_comma_and_numbers() -> None:
    assert parse_amount('12,50') == Decimal('12.50')
    assert parse_amount(3) == Decimal('3')
    assert parse_amount(0.1) == Decimal('0.1')


@pytest.mark.parametrize('value', [None, '', 'abc', 'NaN', 'Infinity', True])
def test_parse_amount_never_falls_back_to_zero(value) -> None:
    with pytest.raises(InvalidAmountError):
        parse_amount(value)


def test_parse_date() -> None:
    assert parse_date('2024-02-29') == date(2024, 2, 29)
    with pytest.raises(InvalidDateError):
        parse_date('29/02/2024')


def test_once_rows_drop_repetition_limit() -> None:
    checked = validate_obligation(ob(repetition_limit=4))
    assert checked.repetition_limit is None


@pytest.mark.parametrize('limit', [0, -2, True, 1.5])
def test_invalid_repetition_limit(limit) -> None:
    with pytest.raises(InvalidRecurrenceError):
        validate_obligation(ob(recurrence=Recurrence.MONTHLY, repetition_limit=limit))


def test_unknown_recurrence_rejected() -> None:
    with pytest.raises(InvalidRecurrenceError):
        validate_obligation(ob(recurrence='weekly'))


def test_non_decimal_amount_rejected() -> None:
    bad = Obligation(id=9, kind=Kind.EXPENSE, anchor_date=date(2024, 1, 1), amount="cento")
    with pytest.raises(InvalidAmountError):
        validate_obligation(bad)
