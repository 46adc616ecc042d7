"""Test del raggruppamento delle rate e dell'avanzamento dei pagamenti."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from conftest import installment, ob
from financeme.services.projection import group_installments, normalize_description


def test_normalize_description() -> None:
    assert normalize_description('Notebook 2/10') == 'Notebook'
    assert normalize_description('Palestra (3/12)') == 'Palestra'
    assert normalize_description('Rata 2024') == 'Rata 2024'
    assert normalize_description(None) == ''


def test_progress_two_of_five() -> None:
    rows = [installment(i, i, total=5, paid=i <= 2) for i in range(1, 6)]
    (group,) = group_installments(rows)
    assert group.paid_count == 2
    assert group.progress_percent == 40.0
    assert group.next_unpaid_occurrence.installment_index == 3
    assert group.remaining_amount == Decimal('300')


def test_partial_group_uses_declared_total() -> None:
    rows = [installment(i, i, total=3, paid=i <= 2) for i in range(1, 4)]
    (group,) = group_installments(rows)
    assert group.progress_percent == pytest.approx(66.666, rel=1e-3)
    assert group.next_unpaid_occurrence.id == 3


def test_different_cards_make_different_groups() -> None:
    rows = [installment(1, 1, total=2, card_id=1), installment(2, 1, total=2, card_id=2)]
    assert len(group_installments(rows)) == 2


def test_non_installments_ignored() -> None:
    assert group_installments([ob(), ob(installment_total=1)]) == []


def test_toggle_paid_updates_group() -> None:
    rows = [installment(i, i, total=2) for i in (1, 2)]
    (group,) = group_installments(rows)
    assert not group.is_fully_paid

    rows = [replace(r, is_paid=True) for r in rows]
    (group,) = group_installments(rows)
    assert group.is_fully_paid
    assert group.next_unpaid_occurrence is None
    assert group.display_progress == 100.0

    rows[0] = replace(rows[0], is_paid=False)
    (group,) = group_installments(rows)
    assert group.next_unpaid_occurrence.installment_index == 1


def test_raw_progress_is_not_clamped() -> None:
    rows = [installment(i, i, total=2, paid=True) for i in (1, 2, 3)]
    (group,) = group_installments(rows)
    assert group.progress_percent == 150.0
    assert group.display_progress == 100.0
