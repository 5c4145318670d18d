"""Demo data: a year of jobs, a handful of recurring bills and this week's goal."""

import random
from datetime import date, timedelta

from database import get_db, init_db, save_snapshot
from date_utils import add_months, parse_date, to_date_string, today
from expenses import add_bill
from jobs import PAYMENT_METHODS, add_job
from user_profile import get_profile
from weekly_goals import add_weekly_goal, get_goal_for_week, suggest_weekly_goal

COMPANY_NAMES = [
    'Smith Construction', 'City Builders', 'Foundation Masters',
    'Concrete Solutions', 'Metro Builders', 'Urban Development',
    'Foundation Pro', 'Quality Concrete', 'Solid Foundations',
    'Premier Builders', 'Elite Construction', 'Home Builders Inc.',
]
CITIES = [
    'Springfield', 'Riverside', 'Oakland', 'Centerville', 'Fairview',
    'Newport', 'Brighton', 'Lakeside', 'Maplewood', 'Georgetown',
]
STREETS = [
    'Main St', 'Oak Ave', 'Maple Rd', 'Washington Blvd', 'Park Ave',
    'Cedar Ln', 'Highland Dr', 'Sunset Blvd', 'River Rd', 'Forest Ave',
]

# (name, amount, recurrence, category, days from today)
BILL_TEMPLATES = [
    ('Truck Payment', 850, 'Monthly', 'Fixed', 12),
    ('Truck Insurance', 350, 'Monthly', 'Fixed', 5),
    ('General Liability Insurance', 275, 'Monthly', 'Business', 20),
    ('Equipment Maintenance', 200, 'Monthly', 'Business', 26),
    ('Fuel', 600, 'Biweekly', 'Variable', 3),
    ('Phone Bill', 120, 'Monthly', 'Variable', 9),
]


def generate_dummy_jobs(start=None, rng=None):
    """A year of jobs from ``start``: 3-5 per week, weekdays only."""
    rng = rng or random.Random()
    start = parse_date(start) if start else date(today().year, 1, 1)
    end = add_months(start, 12)

    jobs = []
    current = start
    while current < end:
        jobs_this_week = rng.randint(3, 5)
        for i in range(jobs_this_week):
            if current.weekday() >= 5:
                current += timedelta(days=7 - current.weekday())
            if current >= end:
                break
            jobs.append({
                'date': to_date_string(current),
                'company_name': rng.choice(COMPANY_NAMES),
                'address': f'{rng.randint(1000, 9999)} {rng.choice(STREETS)}',
                'city': rng.choice(CITIES),
                'yards': rng.randint(5, 25),
                'is_paid': rng.random() < 0.8,
                'payment_method': rng.choice(PAYMENT_METHODS),
                'amount': rng.randint(350, 500),
                'notes': 'Special requirements noted by customer' if rng.random() < 0.3 else '',
            })
            # Roughly a third of the time the next job lands on the same day
            if i < jobs_this_week - 1 and rng.random() >= 0.3:
                current += timedelta(days=1)
        # On to the following Sunday
        current += timedelta(days=(6 - current.weekday()) or 7)
    return jobs


def seed_demo_data(conn, rng=None, on=None):
    """Load demo data on top of whatever is stored. A snapshot is saved first."""
    on = parse_date(on) if on else today()
    save_snapshot(conn, 'Before demo data')
    profile = get_profile(conn)

    jobs = generate_dummy_jobs(date(on.year, 1, 1), rng)
    for job in jobs:
        add_job(conn, job, profile)

    for name, amount, recurrence, category, offset in BILL_TEMPLATES:
        add_bill(conn, {
            'name': name,
            'amount': amount,
            'recurrence': recurrence,
            'category': category,
            'due_date': on + timedelta(days=offset),
        })

    goal_added = False
    if not get_goal_for_week(conn, on):
        suggestion = suggest_weekly_goal(conn, on)
        add_weekly_goal(conn, suggestion)
        goal_added = True

    print(f'[Seed] Added {len(jobs)} jobs, {len(BILL_TEMPLATES)} bills'
          f'{" and a weekly goal" if goal_added else ""}')
    return {'jobs': len(jobs), 'bills': len(BILL_TEMPLATES), 'goal_added': goal_added}


if __name__ == '__main__':
    init_db()
    conn = get_db()
    seed_demo_data(conn)
    conn.commit()
    conn.close()
