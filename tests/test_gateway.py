"""Test del Persistence Gateway: filtri, ambito e notifiche di modifica."""

from __future__ import annotations

from datetime import date

import pytest

from financeme.services.gateway import GatewayError, any_of, scope_filter
from financeme.services.groups.group_service import GroupService
from financeme.services.refresh import RefreshHub


def _tx(user_id='alice', day=1, group_id=None, amount='10', **extra):
    values = {
        'user_id': user_id,
        'group_id': group_id,
        'kind': 'expense',
        'payment_method': 'cash',
        'category': 'Casa',
        'amount': amount,
        'date': date(2024, 1, day),
        'recurrence': 'once',
    }
    values.update(extra)
    return values


def test_insert_batch_and_filters(gateway) -> None:
    ok, _, rows = gateway.insert('transactions', [_tx(day=d) for d in (1, 10, 20)])
    assert ok and len(rows) == 3

    between = gateway.list('transactions', [('date', 'between', (date(2024, 1, 5), date(2024, 1, 25)))],
                           order_by='-date')
    assert [r.date.day for r in between] == [20, 10]
    assert len(gateway.list('transactions', [('date', 'lt', date(2024, 1, 10))])) == 1
    assert len(gateway.list('transactions', [('id', 'in', [rows[0].id, rows[2].id])])) == 2
    either = gateway.list('transactions', [any_of(('date', 'eq', date(2024, 1, 1)), ('date', 'eq', date(2024, 1, 20)))])
    assert len(either) == 2


def test_scope_filter_separates_personal_and_group(gateway) -> None:
    ok, _, group = GroupService().create('alice', 'Casa')
    assert ok
    gateway.insert('transactions', [
        _tx(user_id='alice'),
        _tx(user_id='bob'),
        _tx(user_id='alice', group_id=group.id),
    ])
    personal = gateway.list('transactions', scope_filter('alice', None))
    shared = gateway.list('transactions', scope_filter('alice', group.id))
    assert len(personal) == 1 and personal[0].group_id is None
    assert len(shared) == 1 and shared[0].group_id == group.id


def test_unknown_collection_and_field(gateway) -> None:
    with pytest.raises(GatewayError):
        gateway.list('nope')
    with pytest.raises(GatewayError):
        gateway.list('transactions', [('colore', 'eq', 'blu')])


def test_update_and_delete(gateway) -> None:
    _, _, (row,) = gateway.insert('transactions', _tx())
    ok, _, updated = gateway.update('transactions', row.id, {'is_paid': True})
    assert ok and updated.is_paid
    assert gateway.update('transactions', 999, {'is_paid': True})[0] is False
    assert gateway.delete('transactions', row.id)[0] is True
    assert gateway.get('transactions', row.id) is None


def test_subscribe_to_changes(gateway) -> None:
    hub = RefreshHub()
    events = []
    hub.add_listener(events.append)
    unsubscribe = gateway.subscribe_to_changes('transactions', hub.notify)
    try:
        _, _, (row,) = gateway.insert('transactions', _tx())
        row_id = row.id
        gateway.update('transactions', row_id, {'is_paid': True})
        gateway.delete('transactions', row_id)
    finally:
        unsubscribe()
    assert [e.action for e in events] == ['insert', 'update', 'delete']
    assert all(e.collection == 'transactions' and e.record_id == row_id for e in events)

    gateway.insert('transactions', _tx())
    assert len(events) == 3


def test_failing_listener_does_not_block_others() -> None:
    hub = RefreshHub()
    calls = []

    def broken(*args):
        raise RuntimeError('boom')

    hub.add_listener(broken)
    remove = hub.add_listener(lambda *a: calls.append(a))
    hub.refresh('x')
    assert calls == [('x',)]
    remove()
    assert len(hub) == 1
