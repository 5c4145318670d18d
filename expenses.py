"""Bills (recurring or one-off) and day-to-day personal/business expenses."""

from collections import OrderedDict
from datetime import timedelta

from date_utils import RECURRENCES, add_recurrence, parse_date, to_date_string, today
from user_profile import is_owner

BILL_CATEGORIES = ('Fixed', 'Variable', 'Business', 'Personal', 'Other')

PERSONAL_CATEGORIES = ('Gas', 'Food', 'Water', 'Entertainment', 'Supplies', 'Tools', 'Repairs', 'Other')
BUSINESS_CATEGORIES = ('Fuel', 'Food', 'Supplies', 'Maintenance', 'Tools', 'Office',
                       'Marketing', 'Insurance', 'Tax', 'Employee', 'Other')
EXPENSE_KINDS = {'personal': PERSONAL_CATEGORIES, 'business': BUSINESS_CATEGORIES}

DUE_SOON_DAYS = 7


def _to_bill(row):
    return {
        'id': row['id'],
        'name': row['name'],
        'amount': row['amount'] or 0,
        'due_date': row['due_date'],
        'is_paid': bool(row['is_paid']),
        'paid_date': row['paid_date'],
        'category': row['category'],
        'recurrence': row['recurrence'],
        'next_due_date': row['next_due_date'],
        'notes': row['notes'] or '',
        'created_at': row['created_at'],
        'updated_at': row['updated_at'],
    }


def _clean_bill(data):
    name = (data.get('name') or '').strip()
    if not name:
        raise ValueError('Bill name is required')
    amount = float(data.get('amount') or 0)
    if amount <= 0:
        raise ValueError('Amount must be greater than zero')
    if not data.get('due_date'):
        raise ValueError('Due date is required')
    due_date = parse_date(data['due_date'])

    category = data.get('category') or 'Other'
    if category not in BILL_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(BILL_CATEGORIES)}")
    recurrence = data.get('recurrence') or 'OneTime'
    if recurrence not in RECURRENCES:
        raise ValueError(f"Recurrence must be one of: {', '.join(RECURRENCES)}")

    is_paid = bool(data.get('is_paid'))
    paid_date = None
    if is_paid:
        paid_date = to_date_string(data.get('paid_date') or today())

    return {
        'name': name,
        'amount': amount,
        'due_date': to_date_string(due_date),
        'is_paid': int(is_paid),
        'paid_date': paid_date,
        'category': category,
        'recurrence': recurrence,
        'next_due_date': to_date_string(add_recurrence(due_date, recurrence)),
        'notes': (data.get('notes') or '').strip(),
    }


def add_bill(conn, data):
    bill = _clean_bill(data)
    cols = list(bill)
    cursor = conn.execute(
        f"INSERT INTO bills ({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)})",
        [bill[c] for c in cols]
    )
    return cursor.lastrowid


def update_bill(conn, bill_id, data):
    existing = get_bill(conn, bill_id)
    if not existing:
        return False
    merged = dict(existing)
    merged.update(data)
    bill = _clean_bill(merged)
    assignments = ', '.join(f'{c} = ?' for c in bill)
    conn.execute(
        f"UPDATE bills SET {assignments}, updated_at = datetime('now','localtime') WHERE id = ?",
        [bill[c] for c in bill] + [bill_id]
    )
    return True


def delete_bill(conn, bill_id):
    cursor = conn.execute('DELETE FROM bills WHERE id = ?', (bill_id,))
    return cursor.rowcount > 0


def get_bill(conn, bill_id):
    row = conn.execute('SELECT * FROM bills WHERE id = ?', (bill_id,)).fetchone()
    return _to_bill(row) if row else None


def list_bills(conn, search=None, is_paid=None, category=None):
    """Filtered bills, unpaid first, then by due date."""
    bills = [_to_bill(r) for r in conn.execute('SELECT * FROM bills ORDER BY id').fetchall()]
    if search:
        q = search.strip().lower()
        bills = [b for b in bills if q in b['name'].lower()]
    if is_paid is not None:
        bills = [b for b in bills if b['is_paid'] == is_paid]
    if category:
        bills = [b for b in bills if b['category'] == category]
    bills.sort(key=lambda b: (b['is_paid'], b['due_date']))
    return bills


def generate_next_occurrence(conn, bill):
    """Create the next unpaid occurrence of a recurring bill, unless it already exists."""
    if bill['recurrence'] == 'OneTime':
        return None
    next_due = add_recurrence(bill['due_date'], bill['recurrence'])
    next_due_str = to_date_string(next_due)
    existing = conn.execute(
        'SELECT id FROM bills WHERE name = ? AND due_date = ? AND amount = ?',
        (bill['name'], next_due_str, bill['amount'])
    ).fetchone()
    if existing:
        return None

    cursor = conn.execute(
        '''INSERT INTO bills (name, amount, due_date, is_paid, category, recurrence, next_due_date, notes)
           VALUES (?, ?, ?, 0, ?, ?, ?, ?)''',
        (bill['name'], bill['amount'], next_due_str, bill['category'], bill['recurrence'],
         to_date_string(add_recurrence(next_due, bill['recurrence'])), bill['notes'])
    )
    print(f"[Bills] Scheduled next {bill['recurrence'].lower()} '{bill['name']}' for {next_due_str}")
    return cursor.lastrowid


def mark_bill_paid(conn, bill_id, paid_date=None):
    bill = get_bill(conn, bill_id)
    if not bill:
        return False
    conn.execute(
        "UPDATE bills SET is_paid = 1, paid_date = ?, updated_at = datetime('now','localtime') WHERE id = ?",
        (to_date_string(paid_date or today()), bill_id)
    )
    generate_next_occurrence(conn, bill)
    return True


def mark_bill_unpaid(conn, bill_id):
    cursor = conn.execute(
        "UPDATE bills SET is_paid = 0, paid_date = NULL, updated_at = datetime('now','localtime') WHERE id = ?",
        (bill_id,)
    )
    return cursor.rowcount > 0


def get_upcoming_bills(conn, start, end):
    """Bills due in the range plus anything unpaid and overdue before it."""
    start, end = to_date_string(start), to_date_string(end)
    rows = conn.execute(
        '''SELECT * FROM bills
           WHERE due_date BETWEEN ? AND ? OR (is_paid = 0 AND due_date < ?)
           ORDER BY due_date, id''',
        (start, end, start)
    ).fetchall()
    return [_to_bill(r) for r in rows]


def get_bills_due_on(conn, day):
    rows = conn.execute(
        'SELECT * FROM bills WHERE due_date = ? AND is_paid = 0 ORDER BY id',
        (to_date_string(day),)
    ).fetchall()
    bills = [_to_bill(r) for r in rows]
    return bills, round(sum(b['amount'] for b in bills), 2)


def get_bill_dates(conn, start, end):
    """Dates in the range with unpaid bills due, for marking the calendar."""
    rows = conn.execute(
        '''SELECT due_date, COUNT(*) as bill_count, SUM(amount) as total
           FROM bills WHERE is_paid = 0 AND due_date BETWEEN ? AND ?
           GROUP BY due_date ORDER BY due_date''',
        (to_date_string(start), to_date_string(end))
    ).fetchall()
    return [
        {'date': r['due_date'], 'bill_count': r['bill_count'], 'total': round(r['total'] or 0, 2)}
        for r in rows
    ]


def get_bills_paid_in_range(conn, start, end):
    rows = conn.execute(
        'SELECT * FROM bills WHERE is_paid = 1 AND paid_date BETWEEN ? AND ? ORDER BY paid_date, id',
        (to_date_string(start), to_date_string(end))
    ).fetchall()
    return [_to_bill(r) for r in rows]


def bill_status(bill, on=None):
    if bill['is_paid']:
        return 'Paid'
    on = parse_date(on) if on else today()
    due = parse_date(bill['due_date'])
    if due < on:
        return 'Overdue'
    if due == on:
        return 'Due Today'
    if due <= on + timedelta(days=DUE_SOON_DAYS):
        return 'Due Soon'
    return 'Upcoming'


# ─── Daily expenses ─────────────────────────────────────────────

def _to_daily(row):
    return {
        'id': row['id'],
        'date': row['expense_date'],
        'amount': row['amount'] or 0,
        'kind': row['kind'],
        'category': row['category'],
        'description': row['description'] or '',
        'job_id': row['job_id'],
        'notes': row['notes'] or '',
        'created_at': row['created_at'],
        'updated_at': row['updated_at'],
    }


def _clean_daily(conn, data, profile):
    kind = data.get('kind') or 'personal'
    if kind not in EXPENSE_KINDS:
        raise ValueError("Kind must be 'personal' or 'business'")
    if kind == 'business' and not is_owner(profile):
        raise ValueError('Only the owner can record business expenses')

    categories = EXPENSE_KINDS[kind]
    category = data.get('category') or 'Other'
    if category not in categories:
        raise ValueError(f"Category must be one of: {', '.join(categories)}")

    amount = float(data.get('amount') or 0)
    if amount <= 0:
        raise ValueError('Amount must be greater than zero')
    if not data.get('date'):
        raise ValueError('Date is required')

    job_id = data.get('job_id') or None
    if job_id is not None:
        if not conn.execute('SELECT 1 FROM jobs WHERE id = ?', (job_id,)).fetchone():
            raise ValueError(f'Job {job_id} does not exist')

    return {
        'expense_date': to_date_string(data['date']),
        'amount': amount,
        'kind': kind,
        'category': category,
        'description': (data.get('description') or '').strip(),
        'job_id': job_id,
        'notes': (data.get('notes') or '').strip(),
    }


def add_daily_expense(conn, data, profile):
    expense = _clean_daily(conn, data, profile)
    cols = list(expense)
    cursor = conn.execute(
        f"INSERT INTO daily_expenses ({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)})",
        [expense[c] for c in cols]
    )
    return cursor.lastrowid


def update_daily_expense(conn, expense_id, data, profile):
    existing = get_daily_expense(conn, expense_id)
    if not existing:
        return False
    merged = dict(existing)
    merged.update(data)
    expense = _clean_daily(conn, merged, profile)
    assignments = ', '.join(f'{c} = ?' for c in expense)
    conn.execute(
        f"UPDATE daily_expenses SET {assignments}, updated_at = datetime('now','localtime') WHERE id = ?",
        [expense[c] for c in expense] + [expense_id]
    )
    return True


def delete_daily_expense(conn, expense_id):
    cursor = conn.execute('DELETE FROM daily_expenses WHERE id = ?', (expense_id,))
    return cursor.rowcount > 0


def get_daily_expense(conn, expense_id):
    row = conn.execute('SELECT * FROM daily_expenses WHERE id = ?', (expense_id,)).fetchone()
    return _to_daily(row) if row else None


def get_daily_expenses(conn, start, end, kind=None):
    sql = 'SELECT * FROM daily_expenses WHERE expense_date BETWEEN ? AND ?'
    params = [to_date_string(start), to_date_string(end)]
    if kind:
        sql += ' AND kind = ?'
        params.append(kind)
    rows = conn.execute(sql + ' ORDER BY expense_date, id', params).fetchall()
    return [_to_daily(r) for r in rows]


def get_total_daily_expenses(conn, start, end, kind=None):
    return round(sum(e['amount'] for e in get_daily_expenses(conn, start, end, kind)), 2)


def get_daily_expense_summary(conn, start, end):
    """Expenses grouped per date, newest date first."""
    groups = OrderedDict()
    for expense in get_daily_expenses(conn, start, end):
        groups.setdefault(expense['date'], []).append(expense)
    return [
        {
            'date': day,
            'total_amount': round(sum(e['amount'] for e in items), 2),
            'expenses': items,
        }
        for day, items in sorted(groups.items(), reverse=True)
    ]


def get_category_breakdown(conn, start, end, kind='personal'):
    if kind not in EXPENSE_KINDS:
        raise ValueError("Kind must be 'personal' or 'business'")
    totals = {category: 0 for category in EXPENSE_KINDS[kind]}
    for expense in get_daily_expenses(conn, start, end, kind):
        totals[expense['category']] = totals.get(expense['category'], 0) + expense['amount']
    return sorted(
        ({'category': c, 'amount': round(a, 2)} for c, a in totals.items()),
        key=lambda item: item['amount'],
        reverse=True,
    )
