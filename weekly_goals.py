"""Weekly income goals and the bill allocations planned against them."""

import math
from datetime import timedelta

from date_utils import parse_date, to_date_string, week_range

DEFAULT_WEEKLY_TARGET = 1500
LOOKAHEAD_DAYS = 28
GOAL_MET = 1.0
GOAL_CLOSE = 0.7


def _allocations(conn, goal_id):
    rows = conn.execute(
        '''SELECT ga.bill_id, ga.weekly_amount, ga.is_complete, b.name as bill_name
           FROM goal_allocations ga LEFT JOIN bills b ON ga.bill_id = b.id
           WHERE ga.goal_id = ? ORDER BY ga.id''',
        (goal_id,)
    ).fetchall()
    return [
        {
            'bill_id': r['bill_id'],
            'bill_name': r['bill_name'] or '',
            'weekly_amount': r['weekly_amount'] or 0,
            'is_complete': bool(r['is_complete']),
        }
        for r in rows
    ]


def _to_goal(conn, row):
    return {
        'id': row['id'],
        'week_start_date': row['week_start_date'],
        'week_end_date': row['week_end_date'],
        'income_target': row['income_target'] or 0,
        'actual_income': row['actual_income'] or 0,
        'notes': row['notes'] or '',
        'allocated_bills': _allocations(conn, row['id']),
        'created_at': row['created_at'],
        'updated_at': row['updated_at'],
    }


def _clean_target(value):
    try:
        target = float(value)
    except (TypeError, ValueError):
        raise ValueError('Please enter a valid target amount')
    if target < 0:
        raise ValueError('Income target cannot be negative')
    return target


def _save_allocations(conn, goal_id, allocations):
    conn.execute('DELETE FROM goal_allocations WHERE goal_id = ?', (goal_id,))
    for alloc in allocations:
        bill_id = alloc.get('bill_id')
        if not conn.execute('SELECT 1 FROM bills WHERE id = ?', (bill_id,)).fetchone():
            raise ValueError(f'Bill {bill_id} does not exist')
        conn.execute(
            '''INSERT INTO goal_allocations (goal_id, bill_id, weekly_amount, is_complete)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(goal_id, bill_id) DO UPDATE SET
                   weekly_amount = excluded.weekly_amount, is_complete = excluded.is_complete''',
            (goal_id, bill_id, float(alloc.get('weekly_amount') or 0), int(bool(alloc.get('is_complete'))))
        )


def add_weekly_goal(conn, data):
    """Create the goal for the week containing ``data['week_start_date']``."""
    if not data.get('week_start_date'):
        raise ValueError('Week start date is required')
    start, end = week_range(data['week_start_date'])
    if get_goal_for_week(conn, start):
        raise ValueError(f'A goal already exists for the week of {to_date_string(start)}')

    cursor = conn.execute(
        '''INSERT INTO weekly_goals (week_start_date, week_end_date, income_target, actual_income, notes)
           VALUES (?, ?, ?, ?, ?)''',
        (to_date_string(start), to_date_string(end),
         _clean_target(data.get('income_target', DEFAULT_WEEKLY_TARGET)),
         float(data.get('actual_income') or 0), (data.get('notes') or '').strip())
    )
    goal_id = cursor.lastrowid
    _save_allocations(conn, goal_id, data.get('allocated_bills') or [])
    return goal_id


def update_weekly_goal(conn, goal_id, data):
    goal = get_weekly_goal(conn, goal_id)
    if not goal:
        return False
    target = _clean_target(data['income_target']) if 'income_target' in data else goal['income_target']
    actual = float(data['actual_income'] or 0) if 'actual_income' in data else goal['actual_income']
    notes = (data.get('notes') or '').strip() if 'notes' in data else goal['notes']
    conn.execute(
        '''UPDATE weekly_goals SET income_target = ?, actual_income = ?, notes = ?,
           updated_at = datetime('now','localtime') WHERE id = ?''',
        (target, actual, notes, goal_id)
    )
    if 'allocated_bills' in data:
        _save_allocations(conn, goal_id, data['allocated_bills'] or [])
    return True


def delete_weekly_goal(conn, goal_id):
    cursor = conn.execute('DELETE FROM weekly_goals WHERE id = ?', (goal_id,))
    return cursor.rowcount > 0


def get_weekly_goal(conn, goal_id):
    row = conn.execute('SELECT * FROM weekly_goals WHERE id = ?', (goal_id,)).fetchone()
    return _to_goal(conn, row) if row else None


def list_weekly_goals(conn):
    rows = conn.execute('SELECT * FROM weekly_goals ORDER BY week_start_date DESC').fetchall()
    return [_to_goal(conn, r) for r in rows]


def get_goal_for_week(conn, day):
    start, _ = week_range(day)
    row = conn.execute(
        'SELECT * FROM weekly_goals WHERE week_start_date = ?', (to_date_string(start),)
    ).fetchone()
    return _to_goal(conn, row) if row else None


def get_or_default_goal(conn, day):
    """The stored goal for the week, or an unsaved default one (``id`` None)."""
    goal = get_goal_for_week(conn, day)
    if goal:
        return goal
    start, end = week_range(day)
    return {
        'id': None,
        'week_start_date': to_date_string(start),
        'week_end_date': to_date_string(end),
        'income_target': DEFAULT_WEEKLY_TARGET,
        'actual_income': 0,
        'notes': '',
        'allocated_bills': [],
        'created_at': None,
        'updated_at': None,
    }


def allocate_bill_to_week(conn, goal_id, bill_id, amount):
    if not conn.execute('SELECT 1 FROM weekly_goals WHERE id = ?', (goal_id,)).fetchone():
        return False
    if not conn.execute('SELECT 1 FROM bills WHERE id = ?', (bill_id,)).fetchone():
        raise ValueError(f'Bill {bill_id} does not exist')
    amount = float(amount or 0)
    if amount < 0:
        raise ValueError('Weekly amount cannot be negative')
    conn.execute(
        '''INSERT INTO goal_allocations (goal_id, bill_id, weekly_amount, is_complete)
           VALUES (?, ?, ?, 0)
           ON CONFLICT(goal_id, bill_id) DO UPDATE SET weekly_amount = excluded.weekly_amount''',
        (goal_id, bill_id, amount)
    )
    conn.execute("UPDATE weekly_goals SET updated_at = datetime('now','localtime') WHERE id = ?", (goal_id,))
    return True


def mark_allocation_complete(conn, goal_id, bill_id, is_complete=True):
    cursor = conn.execute(
        'UPDATE goal_allocations SET is_complete = ? WHERE goal_id = ? AND bill_id = ?',
        (int(bool(is_complete)), goal_id, bill_id)
    )
    if cursor.rowcount:
        conn.execute("UPDATE weekly_goals SET updated_at = datetime('now','localtime') WHERE id = ?", (goal_id,))
    return cursor.rowcount > 0


def refresh_actual_income(conn, goal_id, income):
    cursor = conn.execute(
        "UPDATE weekly_goals SET actual_income = ?, updated_at = datetime('now','localtime') WHERE id = ?",
        (round(income or 0, 2), goal_id)
    )
    return cursor.rowcount > 0


def suggest_weekly_goal(conn, day):
    """Spread each unpaid bill due within the look-ahead window over the weeks left.

    A bill already overdue, or due this week, is allocated in full. The target
    is the sum of the weekly amounts, or the default target when nothing is due.
    """
    start, end = week_range(day)
    horizon = end + timedelta(days=LOOKAHEAD_DAYS)
    rows = conn.execute(
        'SELECT id, name, amount, due_date FROM bills WHERE is_paid = 0 AND due_date <= ? ORDER BY due_date, id',
        (to_date_string(horizon),)
    ).fetchall()

    allocations = []
    for bill in rows:
        due = parse_date(bill['due_date'])
        if due <= end:
            weeks_left = 1
        else:
            weeks_left = math.ceil(((due - start).days + 1) / 7)
        allocations.append({
            'bill_id': bill['id'],
            'bill_name': bill['name'],
            'due_date': bill['due_date'],
            'weekly_amount': round(bill['amount'] / weeks_left, 2),
            'is_complete': False,
        })

    target = round(sum(a['weekly_amount'] for a in allocations), 2)
    return {
        'week_start_date': to_date_string(start),
        'week_end_date': to_date_string(end),
        'income_target': target if allocations else DEFAULT_WEEKLY_TARGET,
        'allocated_bills': allocations,
    }


def goal_progress(income, target):
    if not target or target <= 0:
        return {'ratio': 0.0, 'percent': 0, 'status': 'behind', 'remaining': 0.0}
    ratio = (income or 0) / target
    if ratio >= GOAL_MET:
        status = 'met'
    elif ratio >= GOAL_CLOSE:
        status = 'close'
    else:
        status = 'behind'
    return {
        'ratio': round(ratio, 4),
        'percent': round(ratio * 100),
        'status': status,
        'remaining': round(max(target - (income or 0), 0), 2),
    }
