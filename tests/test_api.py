def create_job(client, **overrides):
    data = {'date': '2024-03-11', 'address': '1200 Main St', 'city': 'Springfield',
            'amount': 450, 'payment_method': 'Cash', 'is_paid': True}
    data.update(overrides)
    return client.post('/api/jobs', json=data)


def test_profile_routes(client):
    assert client.get('/api/profile').get_json()['role'] == 'owner'
    resp = client.put('/api/profile', json={'commission_rate': 150})
    assert resp.status_code == 400
    assert 'Commission rate' in resp.get_json()['error']
    resp = client.put('/api/profile', json={'role': 'employee', 'commission_rate': 40})
    assert resp.status_code == 200
    assert client.get('/api/profile').get_json()['commission_rate'] == 40


def test_job_lifecycle(client):
    resp = create_job(client)
    assert resp.status_code == 201
    job_id = resp.get_json()['id']

    assert client.get(f'/api/job/{job_id}').get_json()['address'] == '1200 Main St'
    assert client.put(f'/api/job/{job_id}', json={'amount': 500}).get_json()['amount'] == 500
    assert client.post(f'/api/job/{job_id}/toggle-paid').get_json()['is_paid'] is False

    resp = client.post(f'/api/job/{job_id}/expenses',
                       json={'category': 'Fuel', 'description': 'Diesel', 'amount': 40})
    assert resp.status_code == 201
    assert resp.get_json()['job']['expense_total'] == 40

    resp = client.put(f'/api/job/{job_id}/billing', json={'invoice_number': 'INV-7'})
    assert resp.get_json()['billing_details']['invoice_number'] == 'INV-7'

    assert client.delete(f'/api/job/{job_id}').get_json() == {'ok': True}
    assert client.get(f'/api/job/{job_id}').status_code == 404
    assert client.delete(f'/api/job/{job_id}').status_code == 404


def test_job_validation_errors(client):
    resp = create_job(client, address='')
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Address is required'
    assert create_job(client, payment_method='Venmo').status_code == 400
    assert client.put('/api/job/999', json={'amount': 1}).status_code == 404


def test_job_search_and_range(client):
    create_job(client, date='2024-03-10', city='Riverside')
    create_job(client, date='2024-03-17', city='Oakland')
    assert len(client.get('/api/jobs').get_json()) == 2
    assert [j['city'] for j in client.get('/api/jobs?q=oak').get_json()] == ['Oakland']
    jobs = client.get('/api/jobs/range?start=2024-03-10&end=2024-03-16').get_json()
    assert [j['city'] for j in jobs] == ['Riverside']
    assert client.get('/api/jobs/range?start=2024-03-16&end=2024-03-10').status_code == 400
    assert client.get('/api/jobs/range?start=garbage').status_code == 400


def test_bill_routes(client):
    resp = client.post('/api/bills', json={'name': 'Truck Payment', 'amount': 850,
                                           'due_date': '2024-03-12', 'recurrence': 'Monthly',
                                           'category': 'Fixed'})
    assert resp.status_code == 201
    bill_id = resp.get_json()['id']
    assert client.post('/api/bills', json={'name': 'Bad', 'amount': 0,
                                           'due_date': '2024-03-12'}).status_code == 400

    paid = client.post(f'/api/bill/{bill_id}/pay', json={'paid_date': '2024-03-11'}).get_json()
    assert paid['is_paid'] is True
    unpaid = client.get('/api/bills?status=unpaid').get_json()
    assert [b['due_date'] for b in unpaid] == ['2024-04-12']

    calendar = client.get('/api/bills/calendar?date=2024-04-12').get_json()
    assert calendar['total'] == 850
    marks = client.get('/api/bills/calendar/dates?date=2024-04-01').get_json()
    assert marks == [{'date': '2024-04-12', 'bill_count': 1, 'total': 850}]

    assert client.post(f'/api/bill/{bill_id}/unpay').get_json()['is_paid'] is False
    assert client.post('/api/bill/999/pay').status_code == 404
    assert client.delete(f'/api/bill/{bill_id}').get_json() == {'ok': True}


def test_pay_bills_route(client):
    first = client.post('/api/bills', json={'name': 'Phone', 'amount': 120,
                                            'due_date': '2024-03-12'}).get_json()['id']
    result = client.post('/api/pay-bills', json={'bill_ids': [first, 999]}).get_json()
    assert result['paid_count'] == 1
    assert result['total_paid'] == 120
    assert client.post('/api/pay-bills', json={'bill_ids': []}).status_code == 400


def test_daily_expense_routes(client):
    resp = client.post('/api/daily-expenses', json={'date': '2024-03-11', 'amount': 20,
                                                    'category': 'Food'})
    assert resp.status_code == 201
    expense_id = resp.get_json()['id']
    expenses = client.get('/api/daily-expenses?start=2024-03-10&end=2024-03-16').get_json()
    assert [e['id'] for e in expenses] == [expense_id]

    assert client.put(f'/api/daily-expense/{expense_id}', json={'amount': 25}).get_json()['amount'] == 25
    summary = client.get('/api/daily-expenses/summary?start=2024-03-10&end=2024-03-16').get_json()
    assert summary[0]['total_amount'] == 25
    breakdown = client.get('/api/daily-expenses/breakdown?start=2024-03-10&end=2024-03-16').get_json()
    assert breakdown[0] == {'category': 'Food', 'amount': 25}
    assert client.delete(f'/api/daily-expense/{expense_id}').get_json() == {'ok': True}


def test_business_expenses_need_owner(client):
    data = {'date': '2024-03-11', 'amount': 80, 'category': 'Fuel'}
    resp = client.post('/api/business-expenses', json=data)
    assert resp.status_code == 201
    assert resp.get_json()['kind'] == 'business'

    client.put('/api/profile', json={'role': 'employee'})
    assert client.post('/api/business-expenses', json=data).status_code == 403
    assert client.get('/api/business-expenses').status_code == 403
    assert client.get('/api/daily-expenses/breakdown?kind=business').status_code == 403
    resp = client.post('/api/daily-expenses', json=dict(data, kind='business'))
    assert resp.status_code == 400


def test_weekly_goal_routes(client):
    bill_id = client.post('/api/bills', json={'name': 'Rent', 'amount': 1200,
                                              'due_date': '2024-03-15'}).get_json()['id']
    suggestion = client.get('/api/weekly-goals/suggest?date=2024-03-13').get_json()
    assert suggestion['income_target'] == 1200

    resp = client.post('/api/weekly-goals', json=suggestion)
    assert resp.status_code == 201
    goal = resp.get_json()
    assert goal['allocated_bills'][0]['bill_id'] == bill_id
    assert client.post('/api/weekly-goals', json=suggestion).status_code == 400

    week = client.get('/api/weekly-goals/week?date=2024-03-16').get_json()
    assert week['id'] == goal['id']

    goal = client.put(f"/api/weekly-goal/{goal['id']}/allocations/{bill_id}/complete", json={}).get_json()
    assert goal['allocated_bills'][0]['is_complete'] is True

    create_job(client, date='2024-03-12', amount=600)
    refreshed = client.post(f"/api/weekly-goal/{goal['id']}/refresh-income").get_json()
    assert refreshed['actual_income'] == 600
    assert refreshed['progress']['percent'] == 50

    assert client.delete(f"/api/weekly-goal/{goal['id']}").get_json() == {'ok': True}
    assert client.get(f"/api/weekly-goal/{goal['id']}").status_code == 404


def test_summary_routes(client):
    create_job(client, date='2024-03-11', amount=500)
    client.post('/api/daily-expenses', json={'date': '2024-03-12', 'amount': 50, 'category': 'Gas'})

    week = client.get('/api/summary/week?date=2024-03-13').get_json()
    assert week['earnings'] == 500
    net = client.get('/api/summary/week?date=2024-03-13&view=net').get_json()
    assert net['earnings'] == 450
    assert client.get('/api/summary/week?date=2024-03-13&view=daily').status_code == 400

    month = client.get('/api/summary/month?date=2024-03-01').get_json()
    assert month['total'] == 500
    year = client.get('/api/summary/year/2024').get_json()
    assert year['best_month'] == 'Mar'

    dashboard = client.get('/api/dashboard?date=2024-03-13').get_json()
    assert dashboard['income'] == 500
    view = client.get('/api/daily-expenses/week?date=2024-03-13').get_json()
    assert view['total_expenses'] == 50


def test_backup_restore_and_snapshots(client):
    create_job(client)
    backup = client.get('/api/backup').get_json()
    assert len(backup['jobs']) == 1

    create_job(client, date='2024-03-12')
    resp = client.post('/api/restore', json=backup)
    assert resp.status_code == 200
    assert len(client.get('/api/jobs').get_json()) == 1

    snapshots = client.get('/api/snapshots').get_json()
    assert snapshots[0]['description'] == 'Before restore'
    resp = client.post(f"/api/snapshots/{snapshots[0]['id']}/revert")
    assert len(resp.get_json()['jobs']) == 2

    assert client.post('/api/restore', json={'jobs': []}).status_code == 400
    assert len(client.get('/api/jobs').get_json()) == 2
    assert client.post('/api/snapshots/999/revert').status_code == 404


def test_export_year(client):
    create_job(client)
    resp = client.get('/api/export/year/2024')
    assert resp.status_code == 200
    assert resp.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert resp.data[:2] == b'PK'
    assert client.get('/api/export/year/0').status_code == 400


def test_seed_needs_owner(client):
    client.put('/api/profile', json={'role': 'employee'})
    assert client.post('/api/dev/seed').status_code == 403
