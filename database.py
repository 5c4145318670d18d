import sqlite3
import json
import os

DB_PATH = os.environ.get(
    'JOB_TRACKER_DB',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'jobs.db'),
)

SNAPSHOT_LIMIT = 20

# Top-level keys of a backup document
COLLECTIONS = ('jobs', 'expenses', 'dailyExpenses', 'weeklyGoals', 'profile')

def get_db():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn

def init_db():
    os.makedirs(os.path.dirname(DB_PATH), exist_ok=True)
    conn = get_db()
    conn.executescript('''
        CREATE TABLE IF NOT EXISTS profile (
            id INTEGER PRIMARY KEY CHECK(id = 1),
            display_name TEXT NOT NULL DEFAULT '',
            role TEXT NOT NULL DEFAULT 'owner' CHECK(role IN ('owner','employee')),
            commission_rate INTEGER NOT NULL DEFAULT 50 CHECK(commission_rate BETWEEN 1 AND 100),
            keeps_cash INTEGER NOT NULL DEFAULT 1,
            keeps_check INTEGER NOT NULL DEFAULT 1,
            updated_at TEXT NOT NULL DEFAULT (datetime('now','localtime'))
        );

        CREATE TABLE IF NOT EXISTS jobs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            job_date TEXT NOT NULL,
            company_name TEXT DEFAULT '',
            address TEXT NOT NULL DEFAULT '',
            city TEXT DEFAULT '',
            yards REAL DEFAULT 0,
            is_paid INTEGER NOT NULL DEFAULT 0,
            payment_method TEXT NOT NULL DEFAULT 'Cash'
                CHECK(payment_method IN ('Cash','Check','Zelle','Square','Charge')),
            amount REAL DEFAULT 0,
            notes TEXT DEFAULT '',
            created_at TEXT NOT NULL DEFAULT (datetime('now','localtime')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now','localtime'))
        );

        CREATE TABLE IF NOT EXISTS job_expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            job_id INTEGER NOT NULL,
            category TEXT NOT NULL DEFAULT 'Other',
            description TEXT DEFAULT '',
            amount REAL DEFAULT 0,
            expense_date TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now','localtime')),
            FOREIGN KEY (job_id) REFERENCES jobs(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS bills (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            amount REAL DEFAULT 0,
            due_date TEXT NOT NULL,
            is_paid INTEGER NOT NULL DEFAULT 0,
            paid_date TEXT,
            category TEXT NOT NULL DEFAULT 'Other'
                CHECK(category IN ('Fixed','Variable','Business','Personal','Other')),
            recurrence TEXT NOT NULL DEFAULT 'OneTime'
                CHECK(recurrence IN ('OneTime','Daily','Weekly','Biweekly','Monthly','Quarterly','Yearly')),
            next_due_date TEXT,
            notes TEXT DEFAULT '',
            created_at TEXT NOT NULL DEFAULT (datetime('now','localtime')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now','localtime'))
        );

        CREATE TABLE IF NOT EXISTS daily_expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            expense_date TEXT NOT NULL,
            amount REAL DEFAULT 0,
            kind TEXT NOT NULL DEFAULT 'personal' CHECK(kind IN ('personal','business')),
            category TEXT NOT NULL DEFAULT 'Other',
            description TEXT DEFAULT '',
            job_id INTEGER,
            notes TEXT DEFAULT '',
            created_at TEXT NOT NULL DEFAULT (datetime('now','localtime')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now','localtime')),
            FOREIGN KEY (job_id) REFERENCES jobs(id) ON DELETE SET NULL
        );

        CREATE TABLE IF NOT EXISTS weekly_goals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            week_start_date TEXT NOT NULL UNIQUE,
            week_end_date TEXT NOT NULL,
            income_target REAL DEFAULT 0,
            actual_income REAL DEFAULT 0,
            notes TEXT DEFAULT '',
            created_at TEXT NOT NULL DEFAULT (datetime('now','localtime')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now','localtime'))
        );

        CREATE TABLE IF NOT EXISTS goal_allocations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            goal_id INTEGER NOT NULL,
            bill_id INTEGER NOT NULL,
            weekly_amount REAL DEFAULT 0,
            is_complete INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (goal_id) REFERENCES weekly_goals(id) ON DELETE CASCADE,
            FOREIGN KEY (bill_id) REFERENCES bills(id) ON DELETE CASCADE,
            UNIQUE(goal_id, bill_id)
        );

        CREATE TABLE IF NOT EXISTS snapshots (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            snapshot TEXT NOT NULL,
            description TEXT DEFAULT '',
            created_at TEXT NOT NULL DEFAULT (datetime('now','localtime'))
        );

        /* ─── Indexes ─── */
        CREATE INDEX IF NOT EXISTS idx_jobs_date ON jobs(job_date);
        CREATE INDEX IF NOT EXISTS idx_job_expenses_job ON job_expenses(job_id);
        CREATE INDEX IF NOT EXISTS idx_bills_due ON bills(due_date);
        CREATE INDEX IF NOT EXISTS idx_daily_expenses_date ON daily_expenses(expense_date);
        CREATE INDEX IF NOT EXISTS idx_goal_allocations_goal ON goal_allocations(goal_id);
    ''')

    # Migration: columns added to jobs after the first release
    job_cols = [row[1] for row in conn.execute("PRAGMA table_info(jobs)").fetchall()]
    for col, typedef in [
        ('check_number', "TEXT DEFAULT ''"),
        ('paid_to_me', "INTEGER NOT NULL DEFAULT 0"),
        ('billing_details', "TEXT DEFAULT ''"),
    ]:
        if col not in job_cols:
            conn.execute(f"ALTER TABLE jobs ADD COLUMN {col} {typedef}")

    # Seed the profile row if it doesn't exist
    if conn.execute("SELECT COUNT(*) FROM profile").fetchone()[0] == 0:
        conn.execute(
            '''INSERT INTO profile (id, display_name, role, commission_rate, keeps_cash, keeps_check)
               VALUES (1, ?, ?, ?, ?, ?)''',
            ('', 'owner', 50, 1, 1)
        )

    conn.commit()
    conn.close()


def _rows(conn, sql, params=()):
    return [dict(r) for r in conn.execute(sql, params).fetchall()]


def build_snapshot(conn):
    """Build a complete JSON snapshot of every collection."""
    jobs = _rows(conn, 'SELECT * FROM jobs ORDER BY id')
    for job in jobs:
        job['expenses'] = _rows(
            conn, 'SELECT * FROM job_expenses WHERE job_id = ? ORDER BY id', (job['id'],)
        )

    goals = _rows(conn, 'SELECT * FROM weekly_goals ORDER BY id')
    for goal in goals:
        goal['allocated_bills'] = _rows(
            conn,
            'SELECT bill_id, weekly_amount, is_complete FROM goal_allocations WHERE goal_id = ? ORDER BY id',
            (goal['id'],)
        )

    profile = conn.execute('SELECT * FROM profile WHERE id = 1').fetchone()
    return {
        'jobs': jobs,
        'expenses': _rows(conn, 'SELECT * FROM bills ORDER BY id'),
        'dailyExpenses': _rows(conn, 'SELECT * FROM daily_expenses ORDER BY id'),
        'weeklyGoals': goals,
        'profile': dict(profile) if profile else {},
    }

def save_snapshot(conn, description='Auto-save'):
    """Save current state as a snapshot, then clean up old snapshots."""
    snapshot = build_snapshot(conn)
    cursor = conn.execute(
        'INSERT INTO snapshots (snapshot, description) VALUES (?, ?)',
        (json.dumps(snapshot), description)
    )
    conn.execute('''
        DELETE FROM snapshots WHERE id NOT IN (
            SELECT id FROM snapshots ORDER BY id DESC LIMIT ?
        )
    ''', (SNAPSHOT_LIMIT,))
    return cursor.lastrowid

def list_snapshots(conn):
    return _rows(conn, 'SELECT id, description, created_at FROM snapshots ORDER BY id DESC')

def get_snapshot(conn, snapshot_id):
    row = conn.execute('SELECT * FROM snapshots WHERE id = ?', (snapshot_id,)).fetchone()
    if not row:
        return None
    return json.loads(row['snapshot'])

def _insert(conn, table, record, columns):
    present = [c for c in columns if c in record]
    conn.execute(
        f"INSERT INTO {table} ({', '.join(present)}) VALUES ({', '.join('?' for _ in present)})",
        [record[c] for c in present]
    )

def restore_snapshot(conn, snapshot_data):
    """Replace every collection with the contents of a snapshot dict."""
    missing = [key for key in COLLECTIONS if key not in snapshot_data]
    if missing:
        raise ValueError(f"Snapshot is missing: {', '.join(missing)}")

    for table in ('goal_allocations', 'weekly_goals', 'daily_expenses',
                  'job_expenses', 'jobs', 'bills'):
        conn.execute(f'DELETE FROM {table}')

    for job in snapshot_data['jobs']:
        _insert(conn, 'jobs', job, (
            'id', 'job_date', 'company_name', 'address', 'city', 'yards', 'is_paid',
            'payment_method', 'amount', 'check_number', 'notes', 'paid_to_me',
            'billing_details', 'created_at', 'updated_at'))
        for exp in job.get('expenses', []):
            _insert(conn, 'job_expenses', dict(exp, job_id=job['id']), (
                'id', 'job_id', 'category', 'description', 'amount', 'expense_date', 'created_at'))

    for bill in snapshot_data['expenses']:
        _insert(conn, 'bills', bill, (
            'id', 'name', 'amount', 'due_date', 'is_paid', 'paid_date', 'category',
            'recurrence', 'next_due_date', 'notes', 'created_at', 'updated_at'))

    for exp in snapshot_data['dailyExpenses']:
        _insert(conn, 'daily_expenses', exp, (
            'id', 'expense_date', 'amount', 'kind', 'category', 'description', 'job_id',
            'notes', 'created_at', 'updated_at'))

    for goal in snapshot_data['weeklyGoals']:
        _insert(conn, 'weekly_goals', goal, (
            'id', 'week_start_date', 'week_end_date', 'income_target', 'actual_income',
            'notes', 'created_at', 'updated_at'))
        for alloc in goal.get('allocated_bills', []):
            _insert(conn, 'goal_allocations', dict(alloc, goal_id=goal['id']), (
                'goal_id', 'bill_id', 'weekly_amount', 'is_complete'))

    profile = snapshot_data['profile']
    if profile:
        conn.execute(
            '''UPDATE profile SET display_name = ?, role = ?, commission_rate = ?,
               keeps_cash = ?, keeps_check = ?, updated_at = datetime('now','localtime') WHERE id = 1''',
            (profile.get('display_name', ''), profile.get('role', 'owner'),
             profile.get('commission_rate', 50), profile.get('keeps_cash', 1),
             profile.get('keeps_check', 1))
        )
    print(f"[Backup] Restored {len(snapshot_data['jobs'])} jobs, "
          f"{len(snapshot_data['expenses'])} bills, {len(snapshot_data['weeklyGoals'])} goals")
