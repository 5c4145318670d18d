"""Job store: CRUD, search, date-range queries and per-job expense line items."""

import json

from date_utils import to_date_string
from user_profile import is_owner

PAYMENT_METHODS = ('Cash', 'Check', 'Zelle', 'Square', 'Charge')
JOB_EXPENSE_CATEGORIES = ('Fuel', 'Food', 'Materials', 'Equipment', 'Labor', 'Repairs', 'Other')
BILLING_FIELDS = ('invoice_number', 'billing_date', 'due_date',
                  'contact_person', 'contact_email', 'contact_phone')


def _to_job(row):
    billing = None
    if row['billing_details']:
        try:
            billing = json.loads(row['billing_details'])
        except (json.JSONDecodeError, TypeError):
            billing = None
    return {
        'id': row['id'],
        'date': row['job_date'],
        'company_name': row['company_name'] or '',
        'address': row['address'] or '',
        'city': row['city'] or '',
        'yards': row['yards'] or 0,
        'is_paid': bool(row['is_paid']),
        'payment_method': row['payment_method'],
        'amount': row['amount'] or 0,
        'check_number': row['check_number'] or '',
        'notes': row['notes'] or '',
        'paid_to_me': bool(row['paid_to_me']),
        'billing_details': billing,
        'created_at': row['created_at'],
        'updated_at': row['updated_at'],
    }


def _to_expense(row):
    return {
        'id': row['id'],
        'job_id': row['job_id'],
        'category': row['category'],
        'description': row['description'] or '',
        'amount': row['amount'] or 0,
        'date': row['expense_date'],
        'created_at': row['created_at'],
    }


def _clean_billing(details):
    if not details:
        return ''
    if not isinstance(details, dict):
        raise ValueError('Billing details must be an object')
    cleaned = {f: str(details.get(f) or '').strip() for f in BILLING_FIELDS}
    if not any(cleaned.values()):
        return ''
    return json.dumps(cleaned)


def _clean_job(data, profile):
    if not data.get('date'):
        raise ValueError('Job date is required')
    job_date = to_date_string(data['date'])

    address = (data.get('address') or '').strip()
    if not address:
        raise ValueError('Address is required')

    method = data.get('payment_method') or 'Cash'
    if method not in PAYMENT_METHODS:
        raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")

    amount = float(data.get('amount') or 0)
    if amount < 0:
        raise ValueError('Amount cannot be negative')
    yards = float(data.get('yards') or 0)
    if yards < 0:
        raise ValueError('Yards cannot be negative')

    # Only an employee can hold a payment, and only cash or checks they keep
    keeps = ((method == 'Cash' and profile.get('keeps_cash')) or
             (method == 'Check' and profile.get('keeps_check')))
    paid_to_me = bool(data.get('paid_to_me')) and not is_owner(profile) and bool(keeps)

    return {
        'job_date': job_date,
        'company_name': (data.get('company_name') or '').strip(),
        'address': address,
        'city': (data.get('city') or '').strip(),
        'yards': yards,
        'is_paid': int(bool(data.get('is_paid'))),
        'payment_method': method,
        'amount': amount,
        'check_number': (data.get('check_number') or '').strip(),
        'notes': (data.get('notes') or '').strip(),
        'paid_to_me': int(paid_to_me),
        'billing_details': _clean_billing(data.get('billing_details')),
    }


def add_job(conn, data, profile):
    job = _clean_job(data, profile)
    cols = list(job)
    cursor = conn.execute(
        f"INSERT INTO jobs ({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)})",
        [job[c] for c in cols]
    )
    return cursor.lastrowid


def update_job(conn, job_id, data, profile):
    """Replace a job's editable fields. Fields missing from ``data`` keep their values."""
    existing = get_job(conn, job_id)
    if not existing:
        return False
    merged = dict(existing)
    merged.update(data)
    job = _clean_job(merged, profile)
    assignments = ', '.join(f'{c} = ?' for c in job)
    conn.execute(
        f"UPDATE jobs SET {assignments}, updated_at = datetime('now','localtime') WHERE id = ?",
        [job[c] for c in job] + [job_id]
    )
    return True


def delete_job(conn, job_id):
    cursor = conn.execute('DELETE FROM jobs WHERE id = ?', (job_id,))
    return cursor.rowcount > 0


def get_job(conn, job_id):
    row = conn.execute('SELECT * FROM jobs WHERE id = ?', (job_id,)).fetchone()
    if not row:
        return None
    job = _to_job(row)
    job['expenses'] = get_job_expenses(conn, job_id)
    job['expense_total'] = round(sum(e['amount'] for e in job['expenses']), 2)
    return job


def assign_sequence_numbers(jobs):
    """Number each day's jobs 1..n in the order they were entered (by id)."""
    by_date = {}
    for job in jobs:
        by_date.setdefault(to_date_string(job['date']), []).append(job)

    numbered = []
    for day_jobs in by_date.values():
        for index, job in enumerate(sorted(day_jobs, key=lambda j: j['id']), start=1):
            numbered.append(dict(job, sequence_number=index))
    return numbered


def list_jobs(conn, search=None, newest_first=True):
    jobs = [_to_job(r) for r in conn.execute('SELECT * FROM jobs ORDER BY id').fetchall()]
    if search:
        q = search.strip().lower()
        jobs = [
            j for j in jobs
            if q in j['company_name'].lower() or q in j['address'].lower() or q in j['city'].lower()
        ]
    jobs = assign_sequence_numbers(jobs)
    jobs.sort(key=lambda j: (j['date'], j['sequence_number']), reverse=newest_first)
    return jobs


def get_jobs_by_date_range(conn, start, end):
    """Jobs dated between start and end inclusive, compared on calendar date only."""
    rows = conn.execute(
        'SELECT * FROM jobs WHERE job_date BETWEEN ? AND ? ORDER BY job_date, id',
        (to_date_string(start), to_date_string(end))
    ).fetchall()
    return [_to_job(r) for r in rows]


def toggle_paid(conn, job_id):
    row = conn.execute('SELECT is_paid FROM jobs WHERE id = ?', (job_id,)).fetchone()
    if not row:
        return None
    new_state = not bool(row['is_paid'])
    conn.execute(
        "UPDATE jobs SET is_paid = ?, updated_at = datetime('now','localtime') WHERE id = ?",
        (int(new_state), job_id)
    )
    return new_state


def set_billing_details(conn, job_id, details):
    cursor = conn.execute(
        "UPDATE jobs SET billing_details = ?, updated_at = datetime('now','localtime') WHERE id = ?",
        (_clean_billing(details), job_id)
    )
    return cursor.rowcount > 0


# ─── Job expenses ───────────────────────────────────────────────

def get_job_expenses(conn, job_id):
    rows = conn.execute(
        'SELECT * FROM job_expenses WHERE job_id = ? ORDER BY id', (job_id,)
    ).fetchall()
    return [_to_expense(r) for r in rows]


def add_job_expense(conn, job_id, data):
    job = conn.execute('SELECT job_date FROM jobs WHERE id = ?', (job_id,)).fetchone()
    if not job:
        return None

    category = data.get('category') or 'Other'
    if category not in JOB_EXPENSE_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(JOB_EXPENSE_CATEGORIES)}")
    description = (data.get('description') or '').strip()
    if not description:
        raise ValueError('Description is required')
    amount = float(data.get('amount') or 0)
    if amount <= 0:
        raise ValueError('Amount must be greater than zero')
    expense_date = to_date_string(data['date']) if data.get('date') else job['job_date']

    cursor = conn.execute(
        'INSERT INTO job_expenses (job_id, category, description, amount, expense_date) VALUES (?,?,?,?,?)',
        (job_id, category, description, amount, expense_date)
    )
    conn.execute("UPDATE jobs SET updated_at = datetime('now','localtime') WHERE id = ?", (job_id,))
    return cursor.lastrowid


def delete_job_expense(conn, job_id, expense_id):
    cursor = conn.execute(
        'DELETE FROM job_expenses WHERE id = ? AND job_id = ?', (expense_id, job_id)
    )
    return cursor.rowcount > 0


def job_expense_total(conn, start, end):
    """Sum of job-level expenses attached to jobs dated in the range."""
    return conn.execute(
        '''SELECT COALESCE(SUM(je.amount), 0) FROM job_expenses je
           JOIN jobs j ON je.job_id = j.id
           WHERE j.job_date BETWEEN ? AND ?''',
        (to_date_string(start), to_date_string(end))
    ).fetchone()[0]
