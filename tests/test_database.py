import sqlite3

import pytest

import database
from database import (COLLECTIONS, SNAPSHOT_LIMIT, build_snapshot, get_snapshot, list_snapshots,
                      restore_snapshot, save_snapshot)
from expenses import add_bill, add_daily_expense, list_bills
from jobs import add_job, add_job_expense, get_job, list_jobs
from user_profile import get_profile, update_profile
from weekly_goals import add_weekly_goal, get_weekly_goal


def test_init_db_is_idempotent_and_seeds_profile(db_path):
    database.init_db()
    conn = database.get_db()
    assert conn.execute('SELECT COUNT(*) FROM profile').fetchone()[0] == 1
    profile = get_profile(conn)
    conn.close()
    assert profile['role'] == 'owner'
    assert profile['commission_rate'] == 50
    assert profile['keeps_cash'] is True


def test_init_db_migrates_old_jobs_table(tmp_path, monkeypatch):
    path = str(tmp_path / 'old.db')
    old = sqlite3.connect(path)
    old.execute('''CREATE TABLE jobs (
        id INTEGER PRIMARY KEY AUTOINCREMENT, job_date TEXT NOT NULL, company_name TEXT,
        address TEXT, city TEXT, yards REAL, is_paid INTEGER, payment_method TEXT,
        amount REAL, notes TEXT, created_at TEXT, updated_at TEXT)''')
    old.commit()
    old.close()

    monkeypatch.setattr(database, 'DB_PATH', path)
    database.init_db()
    conn = database.get_db()
    cols = [row[1] for row in conn.execute('PRAGMA table_info(jobs)').fetchall()]
    conn.close()
    for col in ('check_number', 'paid_to_me', 'billing_details'):
        assert col in cols


def test_profile_update(conn):
    profile = update_profile(conn, {'role': 'employee', 'commission_rate': '40', 'keeps_check': False})
    assert profile['role'] == 'employee'
    assert profile['commission_rate'] == 40
    assert profile['keeps_check'] is False
    assert profile['keeps_cash'] is True
    for bad in ({'role': 'manager'}, {'commission_rate': 0}, {'commission_rate': 101},
                {'commission_rate': 'half'}):
        with pytest.raises(ValueError):
            update_profile(conn, bad)


def populate(conn, owner):
    job_id = add_job(conn, {'date': '2024-03-11', 'address': '1 Main St', 'amount': 450}, owner)
    add_job_expense(conn, job_id, {'category': 'Fuel', 'description': 'Diesel', 'amount': 60})
    bill_id = add_bill(conn, {'name': 'Rent', 'amount': 1200, 'due_date': '2024-03-31'})
    add_daily_expense(conn, {'date': '2024-03-11', 'amount': 15, 'category': 'Food',
                             'job_id': job_id}, owner)
    goal_id = add_weekly_goal(conn, {'week_start_date': '2024-03-10', 'income_target': 1600,
                                     'allocated_bills': [{'bill_id': bill_id, 'weekly_amount': 300}]})
    return job_id, bill_id, goal_id


def test_snapshot_has_every_collection(conn, owner):
    populate(conn, owner)
    snapshot = build_snapshot(conn)
    assert set(snapshot) == set(COLLECTIONS)
    assert len(snapshot['jobs']) == 1
    assert len(snapshot['jobs'][0]['expenses']) == 1
    assert snapshot['weeklyGoals'][0]['allocated_bills'][0]['weekly_amount'] == 300
    assert snapshot['profile']['role'] == 'owner'


def test_restore_replaces_everything(conn, owner):
    job_id, bill_id, goal_id = populate(conn, owner)
    snapshot = build_snapshot(conn)

    add_job(conn, {'date': '2024-03-12', 'address': '2 Oak Ave', 'amount': 300}, owner)
    conn.execute('DELETE FROM bills')
    update_profile(conn, {'role': 'employee'})

    restore_snapshot(conn, snapshot)
    assert [j['id'] for j in list_jobs(conn)] == [job_id]
    assert get_job(conn, job_id)['expense_total'] == 60
    assert [b['id'] for b in list_bills(conn)] == [bill_id]
    assert get_weekly_goal(conn, goal_id)['allocated_bills'][0]['bill_name'] == 'Rent'
    assert get_profile(conn)['role'] == 'owner'


def test_restore_rejects_incomplete_backup(conn):
    with pytest.raises(ValueError):
        restore_snapshot(conn, {'jobs': []})


def test_snapshots_are_capped(conn, owner):
    populate(conn, owner)
    first = save_snapshot(conn, 'first')
    assert get_snapshot(conn, first)['jobs'][0]['address'] == '1 Main St'
    for i in range(SNAPSHOT_LIMIT + 4):
        save_snapshot(conn, f'save {i}')
    snapshots = list_snapshots(conn)
    assert len(snapshots) == SNAPSHOT_LIMIT
    assert snapshots[0]['description'] == f'save {SNAPSHOT_LIMIT + 3}'
    assert get_snapshot(conn, first) is None
