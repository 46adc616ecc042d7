"""Fixture comuni: app di test con database SQLite in memoria."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from financeme import create_app, db
from financeme.services.projection import Kind, Obligation, PaymentMethod, Recurrence


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
    app.extensions['financeme']['disconnect']()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def codec(app):
    return app.extensions['financeme']['codec']


@pytest.fixture
def gateway(app):
    return app.extensions['financeme']['gateway']


def headers(user_id: str = 'alice') -> dict:
    return {'X-User-Id': user_id}


def ob(id=1, kind=Kind.EXPENSE, anchor=date(2024, 1, 15), amount='100', **kwargs) -> Obligation:
    """Costruisce un'Obligation di test con valori ragionevoli."""
    return Obligation(
        id=id,
        kind=kind,
        anchor_date=anchor,
        amount=Decimal(amount) if amount is not None else None,
        **kwargs,
    )


def installment(id, index, total=5, paid=False, description='Notebook', card_id=1,
                anchor=date(2024, 1, 10), amount='100'):
    return ob(
        id=id,
        anchor=anchor,
        amount=amount,
        description=f"{description} {index}/{total}",
        payment_method=PaymentMethod.CARD,
        card_id=card_id,
        installment_total=total,
        installment_index=index,
        is_paid=paid,
    )


__all__ = ['headers', 'ob', 'installment', 'Recurrence']
