"""Test del service delle transazioni: espansione dei lotti, idempotenza, stati."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from financeme import db
from financeme.models.transaction import Transaction
from financeme.services.cards.card_service import CardService
from financeme.services.encryption import FernetCodec
from financeme.services.groups.group_service import GroupService, ScopeError
from financeme.services.projection import Recurrence
from financeme.services.transactions.transaction_service import TransactionService


@pytest.fixture
def service(codec, gateway):
    return TransactionService(codec, gateway)


@pytest.fixture
def card(codec, gateway):
    ok, _, card = CardService(codec, gateway).create('alice', {
        'card_name': 'Visa', 'last_four_digits': '1234', 'spending_limit': '5000',
        'closing_day': 5, 'due_day': 12,
    })
    assert ok
    return card


def _base(**extra):
    data = {'amount': '100', 'category': 'Casa', 'description': 'Spesa', 'date': '2024-01-31',
            'payment_method': 'pix'}
    data.update(extra)
    return data


def test_single_row_is_encrypted(service) -> None:
    ok, _, (row,) = service.create('alice', _base())
    assert ok
    assert row.amount != '100.00'
    ob = service.obligations('alice')[0]
    assert ob.amount == Decimal('100.00')
    assert ob.category == 'Casa'
    assert ob.recurrence == Recurrence.ONCE


def test_daily_repetitions_expand(service) -> None:
    ok, _, rows = service.create('alice', _base(recurrence='daily', daily_repetitions=3))
    assert ok and len(rows) == 3
    obligations = service.obligations('alice')
    assert [o.anchor_date for o in obligations] == [date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]
    assert [o.description for o in obligations] == ['Spesa (1/3)', 'Spesa (2/3)', 'Spesa (3/3)']
    assert all(o.recurrence == Recurrence.ONCE for o in obligations)
    assert len({r.batch_id for r in rows}) == 1


def test_card_installments_with_interest(service, card) -> None:
    ok, _, rows = service.create('alice', _base(
        payment_method='card', card_id=card.id, installments=3, interest_rate='10', amount='100'))
    assert ok and len(rows) == 3
    obligations = service.obligations('alice')
    assert [o.amount for o in obligations] == [Decimal('36.67')] * 3
    assert [o.anchor_date for o in obligations] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
    assert [o.installment_index for o in obligations] == [1, 2, 3]
    assert obligations[1].description == 'Spesa 2/3'
    assert not any(o.is_paid for o in obligations)


def test_monthly_with_and_without_limit(service) -> None:
    service.create('alice', _base(recurrence='monthly', repetition_limit=6))
    service.create('alice', _base(recurrence='monthly', indefinite=True, repetition_limit=6))
    limits = sorted((o.repetition_limit or 0) for o in service.obligations('alice'))
    assert limits == [0, 6]


@pytest.mark.parametrize('bad', [
    {'amount': '0'},
    {'amount': 'dieci'},
    {'category': ''},
    {'payment_method': 'card'},
    {'recurrence': 'weekly'},
    {'recurrence': 'daily', 'daily_repetitions': 0},
    {'date': '31/01/2024'},
])
def test_validation_happens_before_any_write(service, bad) -> None:
    ok, message, rows = service.create('alice', _base(**bad))
    assert not ok and message and rows == []
    assert Transaction.query.count() == 0


def test_same_batch_id_is_idempotent(service, card) -> None:
    data = _base(payment_method='card', card_id=card.id, installments=4, batch_id='lotto-1')
    ok, _, first = service.create('alice', data)
    ok2, _, second = service.create('alice', data)
    assert ok and ok2
    assert Transaction.query.count() == 4
    assert [r.id for r in first] == [r.id for r in second]


def test_end_recurrence(service) -> None:
    _, _, (row,) = service.create('alice', _base(recurrence='monthly', repetition_limit=12))
    ok, _ = service.end_recurrence('alice', row.id)
    assert ok
    (ob,) = service.obligations('alice')
    assert ob.recurrence == Recurrence.ONCE and ob.repetition_limit is None
    assert service.end_recurrence('alice', row.id)[0] is False


def test_set_paid_only_touches_one_installment(service, card) -> None:
    _, _, rows = service.create('alice', _base(payment_method='card', card_id=card.id, installments=3))
    ok, _ = service.set_paid('alice', rows[1].id, True)
    assert ok
    assert [o.is_paid for o in service.obligations('alice')] == [False, True, False]

    _, _, (single,) = service.create('alice', _base())
    assert service.set_paid('alice', single.id, True)[0] is False


def test_update_rules(service, card) -> None:
    _, _, (single,) = service.create('alice', _base())
    ok, _, updated = service.update('alice', single.id, {'amount': '55.5', 'category': 'Svago'})
    assert ok
    ob = [o for o in service.obligations('alice') if o.id == updated.id][0]
    assert ob.amount == Decimal('55.50') and ob.category == 'Svago'

    _, _, (monthly,) = service.create('alice', _base(recurrence='monthly'))
    assert service.update('alice', monthly.id, {'amount': '1'})[0] is False

    _, _, rows = service.create('alice', _base(payment_method='card', card_id=card.id, installments=2))
    assert service.update('alice', rows[0].id, {'amount': '1'})[0] is False


def test_other_users_cannot_touch_rows(service) -> None:
    _, _, (row,) = service.create('alice', _base())
    assert service.delete('bob', row.id) == (False, 'Transazione non trovata')
    assert service.obligations('bob') == []
    assert service.delete('alice', row.id)[0] is True


def test_group_scope(service) -> None:
    _, _, group = GroupService().create('alice', 'Famiglia')
    GroupService().add_member(group.id, 'alice', 'bob')
    ok, _, _ = service.create('bob', _base(), scope_id=group.id)
    assert ok
    assert len(service.obligations('alice', group.id)) == 1
    assert service.obligations('alice') == []
    with pytest.raises(ScopeError):
        service.create('carol', _base(), scope_id=group.id)
    assert len(service.obligations('alice', group.id)) == 1


def test_update_keeps_undecodable_fields_intact(service) -> None:
    _, _, (row,) = service.create('alice', _base())
    foreign = FernetCodec('altra-chiave', 'altro-sale').encode('Descrizione di prima')
    row.description = foreign
    db.session.commit()

    ok, message, _ = service.update('alice', row.id, {'amount': '12'})
    assert not ok and 'description' in message
    assert db.session.get(Transaction, row.id).description == foreign

    ok, _, _ = service.update('alice', row.id, {'amount': '12', 'description': 'Nuova'})
    assert ok
    assert service.obligations('alice')[0].description == 'Nuova'


def test_batch_id_reused_by_another_user_keeps_rows_editable(service) -> None:
    _, _, (mine,) = service.create('alice', _base(batch_id='condiviso'))
    ok, _, rows = service.create('bob', _base(batch_id='condiviso'))
    assert ok and len(rows) == 1 and rows[0].id != mine.id
    assert service.update('alice', mine.id, {'amount': '20'})[0] is True
