"""Test delle API JSON tramite il client di test di Flask."""

from __future__ import annotations

from datetime import date

from conftest import headers
from financeme import db
from financeme.models.transaction import Transaction


def _post_tx(client, user='alice', **extra):
    data = {'amount': '100', 'category': 'Casa', 'date': date.today().isoformat(), 'payment_method': 'pix'}
    data.update(extra)
    return client.post('/transactions/', json=data, headers=headers(user))


def test_health_is_public(client) -> None:
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'ok'


def test_user_header_required(client) -> None:
    resp = client.get('/transactions/')
    assert resp.status_code == 401
    assert resp.get_json()['success'] is False


def test_only_health_is_public(app, client) -> None:
    assert client.get('/_health').status_code == 401
    assert 'format_currency' not in app.jinja_env.filters


def test_create_and_list_transactions(client) -> None:
    resp = _post_tx(client, recurrence='daily', daily_repetitions=2, description='Pranzo')
    assert resp.status_code == 201
    body = resp.get_json()
    assert [t['description'] for t in body['transactions']] == ['Pranzo (1/2)', 'Pranzo (2/2)']

    listed = client.get('/transactions/', headers=headers()).get_json()['transactions']
    assert len(listed) == 2
    assert listed[0]['amount'] == '100.00'
    assert client.get('/transactions/', headers=headers('bob')).get_json()['transactions'] == []


def test_validation_error_is_400(client) -> None:
    resp = _post_tx(client, amount='abc')
    assert resp.status_code == 400
    assert resp.get_json()['success'] is False


def test_missing_row_is_404(client) -> None:
    resp = client.delete('/transactions/999', headers=headers())
    assert resp.status_code == 404


def test_end_recurrence_and_projection(client) -> None:
    created = _post_tx(client, recurrence='monthly', repetition_limit=2).get_json()['transactions'][0]

    resp = client.get('/projections/?months=3&initial_balance=1000', headers=headers())
    assert resp.status_code == 200
    points = resp.get_json()['points']
    assert [p['running_balance'] for p in points] == [900.0, 800.0, 800.0]

    resp = client.post(f"/transactions/{created['id']}/end-recurrence", headers=headers())
    assert resp.status_code == 200
    points = client.get('/projections/?months=3&initial_balance=1000', headers=headers()).get_json()['points']
    assert all(p['running_balance'] == 1000.0 for p in points)


def test_projection_from_history(client) -> None:
    _post_tx(client, amount='250', payment_method='income')
    _post_tx(client, amount='50')
    body = client.get('/projections/?months=1&from_history=1', headers=headers()).get_json()
    assert body['initial_balance'] == 200.0


def test_projection_rejects_bad_horizon(client) -> None:
    assert client.get('/projections/?months=0', headers=headers()).status_code == 400
    assert client.get('/projections/?months=500', headers=headers()).status_code == 400


def test_projection_undecodable_amount_is_422(client) -> None:
    created = _post_tx(client, recurrence='monthly').get_json()['transactions'][0]
    row = db.session.get(Transaction, created['id'])
    row.amount = 'non-cifrato'
    db.session.commit()

    resp = client.get('/projections/', headers=headers())
    assert resp.status_code == 422
    assert str(created['id']) in resp.get_json()['message']


def test_installments_and_paid_toggle(client) -> None:
    card = client.post('/cards/', json={'card_name': 'Visa', 'closing_day': 1, 'due_day': 8,
                                        'spending_limit': '900'}, headers=headers()).get_json()['card']
    rows = _post_tx(client, payment_method='card', card_id=card['id'], installments=3,
                    amount='90', description='Notebook').get_json()['transactions']

    resp = client.post(f"/transactions/{rows[0]['id']}/paid", json={'is_paid': True}, headers=headers())
    assert resp.status_code == 200

    (group,) = client.get('/installments/', headers=headers()).get_json()['groups']
    assert group['description'] == 'Notebook'
    assert group['paid_count'] == 1
    assert group['next_unpaid']['installment_index'] == 2

    (overview,) = client.get('/cards/', headers=headers()).get_json()['cards']
    assert overview['outstanding'] == 60.0


def test_agenda(client) -> None:
    client.post('/appointments/', json={'title': 'Medico', 'date': '2024-05-10'}, headers=headers())
    _post_tx(client, date='2024-05-10', payment_method='income')
    body = client.get('/agenda/2024-05-10', headers=headers()).get_json()
    assert [a['description'] for a in body['appointments']] == ['Medico']
    assert len(body['incomes']) == 1
    assert client.get('/agenda/10-05-2024', headers=headers()).status_code == 400


def test_group_scope_over_http(client) -> None:
    group = client.post('/groups/', json={'name': 'Casa'}, headers=headers()).get_json()['group']
    resp = client.post(f"/groups/{group['id']}/members", json={'user_id': 'bob'}, headers=headers())
    assert resp.status_code == 201

    _post_tx(client, user='bob', scope=group['id'])
    shared = client.get(f"/transactions/?scope={group['id']}", headers=headers()).get_json()['transactions']
    assert len(shared) == 1
    assert client.get(f"/transactions/?scope={group['id']}", headers=headers('eve')).status_code == 403


def test_budgets_and_reports(client) -> None:
    _post_tx(client, date='2024-03-10', amount='40')
    client.post('/budgets/', json={'category': 'Casa', 'month': '2024-03', 'amount': '80'}, headers=headers())
    (budget,) = client.get('/budgets/?month=2024-03', headers=headers()).get_json()['budgets']
    assert budget['spent'] == 40.0 and budget['progress'] == 50.0

    summary = client.get('/reports/summary?start=2024-03-01&end=2024-03-31', headers=headers()).get_json()['summary']
    assert summary['total_expense'] == 40.0


def test_spending_limit_endpoints(client) -> None:
    assert client.get('/settings/spending-limit', headers=headers()).get_json()['spending_limit'] is None
    resp = client.put('/settings/spending-limit', json={'spending_limit': '30'}, headers=headers())
    assert resp.status_code == 200
    _post_tx(client, date='2024-03-10', amount='40')
    body = client.post('/settings/spending-limit/check?today=2024-03-15', headers=headers()).get_json()
    assert body['status'] == 'notified'


def test_categories(client) -> None:
    names = [c['name'] for c in client.get('/categories/', headers=headers()).get_json()['categories']]
    assert 'Casa' in names
    assert client.post('/categories/', json={'name': 'casa'}, headers=headers()).status_code == 400
    resp = client.post('/categories/', json={'name': 'Animali'}, headers=headers())
    assert resp.status_code == 201
    category_id = resp.get_json()['category']['id']
    assert client.delete(f'/categories/{category_id}', headers=headers('bob')).status_code == 404
    assert client.delete(f'/categories/{category_id}', headers=headers()).status_code == 200


def test_create_in_foreign_group_is_403(client) -> None:
    group = client.post('/groups/', json={'name': 'Casa'}, headers=headers()).get_json()['group']
    assert _post_tx(client, user='eve', scope=group['id']).status_code == 403
    resp = client.post('/budgets/', json={'category': 'Casa', 'month': '2024-03', 'amount': '80',
                                          'scope': group['id']}, headers=headers('eve'))
    assert resp.status_code == 403
    assert Transaction.query.count() == 0


def test_summary_filters_and_recurring_rows(client) -> None:
    _post_tx(client, date='2024-03-05', amount='3000', payment_method='income', category='Stipendio',
             recurrence='monthly')
    _post_tx(client, date='2024-03-10', amount='40')
    _post_tx(client, date='2024-03-12', amount='15', category='Svago')

    base = '/reports/summary?start=2024-03-01&end=2024-03-31'
    summary = client.get(base, headers=headers()).get_json()['summary']
    assert summary['total_income'] == 3000.0
    assert summary['total_expense'] == 55.0

    expenses = client.get(f'{base}&kind=expense&category=Svago', headers=headers()).get_json()['summary']
    assert expenses['total_income'] == 0.0 and expenses['total_expense'] == 15.0
    assert client.get(f'{base}&kind=appointment', headers=headers()).status_code == 400


def test_insights_endpoint(client) -> None:
    body = client.get('/reports/insights', headers=headers()).get_json()
    assert body['success'] is True and body['insights'] is None

    _post_tx(client, date='2024-01-10', amount='120')
    _post_tx(client, date='2024-02-10', amount='2000', payment_method='income', category='Stipendio')
    insights = client.get('/reports/insights', headers=headers()).get_json()['insights']
    assert insights['biggest_expense']['amount'] == 120.0
    assert insights['top_income_sources'] == [{'category': 'Stipendio', 'amount': 2000.0}]
    assert [m['month'] for m in insights['monthly_history']] == ['2024-01', '2024-02']


def test_group_invite_flow(client) -> None:
    group = client.post('/groups/', json={'name': 'Casa'}, headers=headers()).get_json()['group']
    resp = client.post(f"/groups/{group['id']}/invites", json={'email': 'bob@example.com'}, headers=headers())
    assert resp.status_code == 201
    invite_id = resp.get_json()['invite']['id']

    assert client.get('/groups/invites', headers=headers('bob')).status_code == 400
    bob = dict(headers('bob'), **{'X-User-Email': 'bob@example.com'})
    (pending,) = client.get('/groups/invites', headers=bob).get_json()['invites']
    assert pending['group_name'] == 'Casa'

    assert client.post(f'/groups/invites/{invite_id}/respond', json={'accept': True},
                       headers=headers('eve')).status_code == 404
    assert client.post(f'/groups/invites/{invite_id}/respond', json={'accept': True}, headers=bob).status_code == 200
    assert client.get(f"/transactions/?scope={group['id']}", headers=headers('bob')).status_code == 200
    assert client.get(f"/groups/{group['id']}/invites", headers=headers('eve')).status_code == 403
