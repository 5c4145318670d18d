import random
from datetime import date

from database import list_snapshots
from date_utils import parse_date, week_range
from expenses import list_bills
from jobs import PAYMENT_METHODS, list_jobs
from seed_data import BILL_TEMPLATES, generate_dummy_jobs, seed_demo_data
from weekly_goals import get_goal_for_week


def test_dummy_jobs_cover_a_year_of_weekdays():
    jobs = generate_dummy_jobs(date(2024, 1, 1), random.Random(7))
    days = [parse_date(j['date']) for j in jobs]
    assert min(days) >= date(2024, 1, 1)
    assert max(days) <= date(2024, 12, 31)
    assert all(d.weekday() < 5 for d in days)
    assert all(350 <= j['amount'] <= 500 for j in jobs)
    assert all(5 <= j['yards'] <= 25 for j in jobs)
    assert all(j['payment_method'] in PAYMENT_METHODS for j in jobs)

    per_week = {}
    for d in days:
        start = week_range(d)[0]
        per_week[start] = per_week.get(start, 0) + 1
    full_weeks = sorted(per_week)[:-1]
    assert all(3 <= per_week[w] <= 5 for w in full_weeks)


def test_seed_demo_data(conn):
    rng = random.Random(3)
    result = seed_demo_data(conn, rng, on='2024-03-13')
    assert result['jobs'] == len(list_jobs(conn))
    assert result['bills'] == len(BILL_TEMPLATES) == len(list_bills(conn))
    assert result['goal_added'] is True
    assert get_goal_for_week(conn, '2024-03-13')['allocated_bills']
    assert len(list_snapshots(conn)) == 1

    again = seed_demo_data(conn, rng, on='2024-03-13')
    assert again['goal_added'] is False
    assert len(list_snapshots(conn)) == 2
