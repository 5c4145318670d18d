from flask import Flask, request, jsonify, send_file
from functools import wraps
import os
import socket
import sqlite3
from datetime import timedelta
from dotenv import load_dotenv
load_dotenv()
from database import init_db, get_db, build_snapshot, save_snapshot, restore_snapshot, list_snapshots, get_snapshot
from date_utils import parse_date, today, week_range, month_range, to_date_string
from user_profile import get_profile, update_profile, is_owner
from jobs import (add_job, update_job, delete_job, get_job, list_jobs, get_jobs_by_date_range,
                  assign_sequence_numbers, toggle_paid, set_billing_details, add_job_expense,
                  delete_job_expense)
from expenses import (add_bill, update_bill, delete_bill, get_bill, list_bills, mark_bill_paid,
                      mark_bill_unpaid, get_upcoming_bills, get_bills_due_on, get_bill_dates, bill_status,
                      add_daily_expense, update_daily_expense, delete_daily_expense,
                      get_daily_expense, get_daily_expenses, get_daily_expense_summary,
                      get_category_breakdown)
from weekly_goals import (LOOKAHEAD_DAYS, add_weekly_goal, update_weekly_goal, delete_weekly_goal,
                          get_weekly_goal, list_weekly_goals, get_or_default_goal, suggest_weekly_goal,
                          allocate_bill_to_week, mark_allocation_complete, refresh_actual_income,
                          goal_progress)
from earnings import earnings_for_view
from reports import (weekly_summary, monthly_summary, yearly_summary, weekly_dashboard,
                     daily_expense_view, pay_bills, build_year_workbook)
from seed_data import seed_demo_data

app = Flask(__name__)
app.config['JSON_SORT_KEYS'] = False

# ─── Helpers ─────────────────────────────────────────────────────

def api_owner_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        conn = get_db()
        profile = get_profile(conn)
        conn.close()
        if not is_owner(profile):
            return jsonify({'error': 'Access denied'}), 403
        return f(*args, **kwargs)
    return decorated

def _date_arg(name, default=None):
    value = request.args.get(name, '').strip()
    if not value:
        return default if default is not None else today()
    return parse_date(value)

def _flag_arg(name):
    return request.args.get(name, '').lower() in ('1', 'true', 'yes')

def _with_status(bills):
    on = today()
    return [dict(b, status=bill_status(b, on)) for b in bills]

# ─── Profile ─────────────────────────────────────────────────────

@app.route('/api/profile')
def api_profile():
    conn = get_db()
    profile = get_profile(conn)
    conn.close()
    return jsonify(profile)

@app.route('/api/profile', methods=['PUT'])
def api_profile_update():
    data = request.get_json() or {}
    conn = get_db()
    try:
        profile = update_profile(conn, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    conn.close()
    return jsonify(profile)

# ─── Jobs ────────────────────────────────────────────────────────

@app.route('/api/jobs')
def api_jobs():
    q = request.args.get('q', '').strip()
    newest_first = request.args.get('sort', 'newest') != 'oldest'
    conn = get_db()
    jobs = list_jobs(conn, search=q or None, newest_first=newest_first)
    conn.close()
    return jsonify(jobs)

@app.route('/api/jobs', methods=['POST'])
def api_job_create():
    data = request.get_json() or {}
    conn = get_db()
    try:
        job_id = add_job(conn, data, get_profile(conn))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    job = get_job(conn, job_id)
    conn.close()
    return jsonify(job), 201

@app.route('/api/jobs/range')
def api_jobs_range():
    try:
        start = _date_arg('start')
        end = _date_arg('end', start)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    if end < start:
        return jsonify({'error': 'End date must be on or after start date'}), 400
    conn = get_db()
    jobs = assign_sequence_numbers(get_jobs_by_date_range(conn, start, end))
    conn.close()
    return jsonify(jobs)

@app.route('/api/job/<int:job_id>')
def api_job(job_id):
    conn = get_db()
    job = get_job(conn, job_id)
    conn.close()
    if not job:
        return jsonify({'error': 'Job not found'}), 404
    return jsonify(job)

@app.route('/api/job/<int:job_id>', methods=['PUT'])
def api_job_update(job_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        found = update_job(conn, job_id, data, get_profile(conn))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Job not found'}), 404
    conn.commit()
    job = get_job(conn, job_id)
    conn.close()
    return jsonify(job)

@app.route('/api/job/<int:job_id>', methods=['DELETE'])
def api_job_delete(job_id):
    conn = get_db()
    deleted = delete_job(conn, job_id)
    conn.commit()
    conn.close()
    if not deleted:
        return jsonify({'error': 'Job not found'}), 404
    return jsonify({'ok': True})

@app.route('/api/job/<int:job_id>/toggle-paid', methods=['POST'])
def api_job_toggle_paid(job_id):
    conn = get_db()
    state = toggle_paid(conn, job_id)
    conn.commit()
    conn.close()
    if state is None:
        return jsonify({'error': 'Job not found'}), 404
    return jsonify({'id': job_id, 'is_paid': state})

@app.route('/api/job/<int:job_id>/billing', methods=['PUT'])
def api_job_billing(job_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        found = set_billing_details(conn, job_id, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Job not found'}), 404
    conn.commit()
    job = get_job(conn, job_id)
    conn.close()
    return jsonify(job)

@app.route('/api/job/<int:job_id>/expenses', methods=['POST'])
def api_job_expense_create(job_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        expense_id = add_job_expense(conn, job_id, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if expense_id is None:
        conn.close()
        return jsonify({'error': 'Job not found'}), 404
    conn.commit()
    job = get_job(conn, job_id)
    conn.close()
    return jsonify({'id': expense_id, 'job': job}), 201

@app.route('/api/job/<int:job_id>/expenses/<int:expense_id>', methods=['DELETE'])
def api_job_expense_delete(job_id, expense_id):
    conn = get_db()
    deleted = delete_job_expense(conn, job_id, expense_id)
    conn.commit()
    conn.close()
    if not deleted:
        return jsonify({'error': 'Expense not found'}), 404
    return jsonify({'ok': True})

# ─── Bills ───────────────────────────────────────────────────────

@app.route('/api/bills')
def api_bills():
    q = request.args.get('q', '').strip()
    status = request.args.get('status', '')
    is_paid = {'paid': True, 'unpaid': False}.get(status)
    category = request.args.get('category', '').strip() or None
    conn = get_db()
    bills = list_bills(conn, search=q or None, is_paid=is_paid, category=category)
    conn.close()
    return jsonify(_with_status(bills))

@app.route('/api/bills', methods=['POST'])
def api_bill_create():
    data = request.get_json() or {}
    conn = get_db()
    try:
        bill_id = add_bill(conn, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    bill = get_bill(conn, bill_id)
    conn.close()
    return jsonify(bill), 201

@app.route('/api/bills/upcoming')
def api_bills_upcoming():
    try:
        start = _date_arg('start')
        end = _date_arg('end', start + timedelta(days=LOOKAHEAD_DAYS))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    bills = [b for b in get_upcoming_bills(conn, start, end) if not b['is_paid']]
    conn.close()
    return jsonify({
        'start_date': to_date_string(start),
        'end_date': to_date_string(end),
        'bills': _with_status(bills),
        'total': round(sum(b['amount'] for b in bills), 2),
    })

@app.route('/api/bills/calendar')
def api_bills_calendar():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    bills, total = get_bills_due_on(conn, day)
    conn.close()
    return jsonify({'date': to_date_string(day), 'bills': _with_status(bills), 'total': total})

@app.route('/api/bills/calendar/dates')
def api_bills_calendar_dates():
    try:
        start, end = month_range(_date_arg('date'))
        start = _date_arg('start', start)
        end = _date_arg('end', end)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    if end < start:
        return jsonify({'error': 'End date must be on or after start date'}), 400
    conn = get_db()
    dates = get_bill_dates(conn, start, end)
    conn.close()
    return jsonify(dates)

@app.route('/api/bill/<int:bill_id>')
def api_bill(bill_id):
    conn = get_db()
    bill = get_bill(conn, bill_id)
    conn.close()
    if not bill:
        return jsonify({'error': 'Bill not found'}), 404
    return jsonify(dict(bill, status=bill_status(bill)))

@app.route('/api/bill/<int:bill_id>', methods=['PUT'])
def api_bill_update(bill_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        found = update_bill(conn, bill_id, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Bill not found'}), 404
    conn.commit()
    bill = get_bill(conn, bill_id)
    conn.close()
    return jsonify(bill)

@app.route('/api/bill/<int:bill_id>', methods=['DELETE'])
def api_bill_delete(bill_id):
    conn = get_db()
    deleted = delete_bill(conn, bill_id)
    conn.commit()
    conn.close()
    if not deleted:
        return jsonify({'error': 'Bill not found'}), 404
    return jsonify({'ok': True})

@app.route('/api/bill/<int:bill_id>/pay', methods=['POST'])
def api_bill_pay(bill_id):
    data = request.get_json(silent=True) or {}
    conn = get_db()
    try:
        found = mark_bill_paid(conn, bill_id, data.get('paid_date'))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Bill not found'}), 404
    conn.commit()
    bill = get_bill(conn, bill_id)
    conn.close()
    return jsonify(bill)

@app.route('/api/bill/<int:bill_id>/unpay', methods=['POST'])
def api_bill_unpay(bill_id):
    conn = get_db()
    found = mark_bill_unpaid(conn, bill_id)
    if not found:
        conn.close()
        return jsonify({'error': 'Bill not found'}), 404
    conn.commit()
    bill = get_bill(conn, bill_id)
    conn.close()
    return jsonify(bill)

@app.route('/api/pay-bills', methods=['POST'])
def api_pay_bills():
    data = request.get_json() or {}
    bill_ids = data.get('bill_ids') or []
    if not isinstance(bill_ids, list) or not bill_ids:
        return jsonify({'error': 'Select at least one bill to pay'}), 400
    conn = get_db()
    try:
        result = pay_bills(conn, bill_ids, data.get('paid_date'))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    conn.close()
    print(f"[Bills] Paid {result['paid_count']} bill(s), total {result['total_paid']:.2f}")
    return jsonify(result)

# ─── Daily Expenses ──────────────────────────────────────────────

def _expense_range():
    start = _date_arg('start', week_range(today())[0])
    end = _date_arg('end', week_range(start)[1])
    return start, end

@app.route('/api/daily-expenses')
def api_daily_expenses():
    try:
        start, end = _expense_range()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    expenses = get_daily_expenses(conn, start, end, kind='personal')
    conn.close()
    return jsonify(expenses)

@app.route('/api/daily-expenses', methods=['POST'])
def api_daily_expense_create():
    data = request.get_json() or {}
    conn = get_db()
    try:
        expense_id = add_daily_expense(conn, data, get_profile(conn))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    expense = get_daily_expense(conn, expense_id)
    conn.close()
    return jsonify(expense), 201

@app.route('/api/daily-expenses/summary')
def api_daily_expense_summary():
    try:
        start, end = _expense_range()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    summary = get_daily_expense_summary(conn, start, end)
    conn.close()
    return jsonify(summary)

@app.route('/api/daily-expenses/breakdown')
def api_daily_expense_breakdown():
    kind = request.args.get('kind', 'personal')
    try:
        start, end = _expense_range()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    if kind == 'business' and not is_owner(get_profile(conn)):
        conn.close()
        return jsonify({'error': 'Access denied'}), 403
    try:
        breakdown = get_category_breakdown(conn, start, end, kind)
    except ValueError as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.close()
    return jsonify(breakdown)

@app.route('/api/daily-expenses/week')
def api_daily_expense_week():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    view = daily_expense_view(conn, day)
    conn.close()
    return jsonify(view)

@app.route('/api/daily-expense/<int:expense_id>', methods=['PUT'])
def api_daily_expense_update(expense_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        found = update_daily_expense(conn, expense_id, data, get_profile(conn))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Expense not found'}), 404
    conn.commit()
    expense = get_daily_expense(conn, expense_id)
    conn.close()
    return jsonify(expense)

@app.route('/api/daily-expense/<int:expense_id>', methods=['DELETE'])
def api_daily_expense_delete(expense_id):
    conn = get_db()
    deleted = delete_daily_expense(conn, expense_id)
    conn.commit()
    conn.close()
    if not deleted:
        return jsonify({'error': 'Expense not found'}), 404
    return jsonify({'ok': True})

@app.route('/api/business-expenses')
@api_owner_required
def api_business_expenses():
    try:
        start, end = _expense_range()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    expenses = get_daily_expenses(conn, start, end, kind='business')
    conn.close()
    return jsonify(expenses)

@app.route('/api/business-expenses', methods=['POST'])
@api_owner_required
def api_business_expense_create():
    data = dict(request.get_json() or {}, kind='business')
    conn = get_db()
    try:
        expense_id = add_daily_expense(conn, data, get_profile(conn))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    expense = get_daily_expense(conn, expense_id)
    conn.close()
    return jsonify(expense), 201

# ─── Weekly Goals ────────────────────────────────────────────────

@app.route('/api/weekly-goals')
def api_weekly_goals():
    conn = get_db()
    goals = list_weekly_goals(conn)
    conn.close()
    return jsonify(goals)

@app.route('/api/weekly-goals/week')
def api_weekly_goal_for_week():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    goal = get_or_default_goal(conn, day)
    conn.close()
    return jsonify(goal)

@app.route('/api/weekly-goals/suggest')
def api_weekly_goal_suggest():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    suggestion = suggest_weekly_goal(conn, day)
    conn.close()
    return jsonify(suggestion)

@app.route('/api/weekly-goals', methods=['POST'])
def api_weekly_goal_create():
    data = request.get_json() or {}
    conn = get_db()
    try:
        goal_id = add_weekly_goal(conn, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.commit()
    goal = get_weekly_goal(conn, goal_id)
    conn.close()
    return jsonify(goal), 201

@app.route('/api/weekly-goal/<int:goal_id>')
def api_weekly_goal(goal_id):
    conn = get_db()
    goal = get_weekly_goal(conn, goal_id)
    conn.close()
    if not goal:
        return jsonify({'error': 'Goal not found'}), 404
    return jsonify(dict(goal, progress=goal_progress(goal['actual_income'], goal['income_target'])))

@app.route('/api/weekly-goal/<int:goal_id>', methods=['PUT'])
def api_weekly_goal_update(goal_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        found = update_weekly_goal(conn, goal_id, data)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Goal not found'}), 404
    conn.commit()
    goal = get_weekly_goal(conn, goal_id)
    conn.close()
    return jsonify(goal)

@app.route('/api/weekly-goal/<int:goal_id>', methods=['DELETE'])
def api_weekly_goal_delete(goal_id):
    conn = get_db()
    deleted = delete_weekly_goal(conn, goal_id)
    conn.commit()
    conn.close()
    if not deleted:
        return jsonify({'error': 'Goal not found'}), 404
    return jsonify({'ok': True})

@app.route('/api/weekly-goal/<int:goal_id>/allocate', methods=['POST'])
def api_weekly_goal_allocate(goal_id):
    data = request.get_json() or {}
    conn = get_db()
    try:
        found = allocate_bill_to_week(conn, goal_id, data.get('bill_id'), data.get('weekly_amount'))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    if not found:
        conn.close()
        return jsonify({'error': 'Goal not found'}), 404
    conn.commit()
    goal = get_weekly_goal(conn, goal_id)
    conn.close()
    return jsonify(goal)

@app.route('/api/weekly-goal/<int:goal_id>/allocations/<int:bill_id>/complete', methods=['PUT'])
def api_weekly_goal_allocation_complete(goal_id, bill_id):
    data = request.get_json(silent=True) or {}
    conn = get_db()
    found = mark_allocation_complete(conn, goal_id, bill_id, data.get('is_complete', True))
    if not found:
        conn.close()
        return jsonify({'error': 'Allocation not found'}), 404
    conn.commit()
    goal = get_weekly_goal(conn, goal_id)
    conn.close()
    return jsonify(goal)

@app.route('/api/weekly-goal/<int:goal_id>/refresh-income', methods=['POST'])
def api_weekly_goal_refresh_income(goal_id):
    conn = get_db()
    goal = get_weekly_goal(conn, goal_id)
    if not goal:
        conn.close()
        return jsonify({'error': 'Goal not found'}), 404
    jobs = get_jobs_by_date_range(conn, goal['week_start_date'], goal['week_end_date'])
    refresh_actual_income(conn, goal_id, sum(j['amount'] for j in jobs))
    conn.commit()
    goal = get_weekly_goal(conn, goal_id)
    conn.close()
    return jsonify(dict(goal, progress=goal_progress(goal['actual_income'], goal['income_target'])))

# ─── Summaries ───────────────────────────────────────────────────

def _summary_response(build, period):
    view = request.args.get('view', 'gross')
    conn = get_db()
    try:
        summary = build(conn, period, get_profile(conn), include_bills=_flag_arg('include_bills'))
        summary['view'] = view
        summary['earnings'] = earnings_for_view(summary, view)
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.close()
    return jsonify(summary)

@app.route('/api/summary/week')
def api_summary_week():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return _summary_response(weekly_summary, day)

@app.route('/api/summary/month')
def api_summary_month():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return _summary_response(monthly_summary, day)

@app.route('/api/summary/year/<int:year>')
def api_summary_year(year):
    return _summary_response(yearly_summary, year)

@app.route('/api/dashboard')
def api_dashboard():
    try:
        day = _date_arg('date')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    conn = get_db()
    dashboard = weekly_dashboard(conn, day, get_profile(conn))
    conn.commit()
    conn.close()
    dashboard['upcoming_bills'] = _with_status(dashboard['upcoming_bills'])
    return jsonify(dashboard)

# ─── Backup & Snapshots ──────────────────────────────────────────

@app.route('/api/backup')
def api_backup():
    conn = get_db()
    data = build_snapshot(conn)
    conn.close()
    return jsonify(data)

@app.route('/api/restore', methods=['POST'])
def api_restore():
    data = request.get_json()
    if not isinstance(data, dict):
        return jsonify({'error': 'Backup must be a JSON object'}), 400
    conn = get_db()
    try:
        save_snapshot(conn, 'Before restore')
        restore_snapshot(conn, data)
    except (ValueError, TypeError, KeyError, AttributeError, sqlite3.Error) as e:
        conn.rollback()
        conn.close()
        print(f'[Backup] Restore failed: {e}')
        return jsonify({'error': f'Invalid backup: {e}'}), 400
    conn.commit()
    result = build_snapshot(conn)
    conn.close()
    return jsonify(result)

@app.route('/api/snapshots')
def api_snapshots():
    conn = get_db()
    snapshots = list_snapshots(conn)
    conn.close()
    return jsonify(snapshots)

@app.route('/api/snapshots/<int:snapshot_id>')
def api_snapshot(snapshot_id):
    conn = get_db()
    data = get_snapshot(conn, snapshot_id)
    conn.close()
    if data is None:
        return jsonify({'error': 'Snapshot not found'}), 404
    return jsonify(data)

@app.route('/api/snapshots/<int:snapshot_id>/revert', methods=['POST'])
def api_snapshot_revert(snapshot_id):
    conn = get_db()
    data = get_snapshot(conn, snapshot_id)
    if data is None:
        conn.close()
        return jsonify({'error': 'Snapshot not found'}), 404

    save_snapshot(conn, f'Before revert to snapshot {snapshot_id}')
    restore_snapshot(conn, data)
    conn.commit()

    result = build_snapshot(conn)
    conn.close()
    return jsonify(result)

# ─── Export ──────────────────────────────────────────────────────

@app.route('/api/export/year/<int:year>')
def api_export_year(year):
    conn = get_db()
    try:
        buf = build_year_workbook(conn, year, get_profile(conn))
    except (ValueError, TypeError) as e:
        conn.close()
        return jsonify({'error': str(e)}), 400
    conn.close()
    return send_file(buf, as_attachment=True, download_name=f'jobs_{year}.xlsx',
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')

# ─── Demo Data ───────────────────────────────────────────────────

@app.route('/api/dev/seed', methods=['POST'])
@api_owner_required
def api_dev_seed():
    conn = get_db()
    result = seed_demo_data(conn)
    conn.commit()
    conn.close()
    return jsonify(result), 201

# ─── Startup ────────────────────────────────────────────────────

def get_local_ip():
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(('8.8.8.8', 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return '127.0.0.1'

if __name__ == '__main__':
    init_db()
    port = int(os.environ.get('PORT', 5001))
    local_ip = get_local_ip()
    print(f'\n  Job & Earnings Tracker')
    print(f'  ────────────────────────────────')
    print(f'  Local:   http://localhost:{port}')
    print(f'  Network: http://{local_ip}:{port}')
    print(f'  ────────────────────────────────\n')
    app.run(host='0.0.0.0', port=port, debug=True)
