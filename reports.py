"""Weekly, monthly and yearly earnings summaries, the weekly dashboard, and exports."""

import io
from datetime import date, timedelta

from date_utils import group_by_date, month_range, to_date_string, today, week_range, year_range
from earnings import (calculate_pay, earnings_for_view, legacy_net_earnings, net_take_home,
                      suggest_bill_payments, summarize_jobs)
from expenses import (get_bills_paid_in_range, get_daily_expense_summary, get_total_daily_expenses,
                      get_upcoming_bills, mark_bill_paid)
from jobs import assign_sequence_numbers, get_jobs_by_date_range, job_expense_total
from weekly_goals import (LOOKAHEAD_DAYS, get_goal_for_week, get_or_default_goal, goal_progress,
                          refresh_actual_income, suggest_weekly_goal)

MONTH_LABELS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def _round_all(values):
    return {k: round(v, 2) if isinstance(v, float) else v for k, v in values.items()}


def _summarize(jobs, profile, daily_total, job_exp_total, bills_total, start, end):
    totals = summarize_jobs(jobs)
    pay = calculate_pay(jobs, profile)
    summary = {
        'start_date': to_date_string(start),
        'end_date': to_date_string(end),
        **_round_all(totals),
        'by_method': _round_all(totals['by_method']),
        **pay,
        'daily_expenses': round(daily_total, 2),
        'job_expenses': round(job_exp_total, 2),
        'bills_paid': round(bills_total, 2),
    }
    summary['net_take_home'] = net_take_home(
        pay['pay'], daily_expenses=daily_total, job_expenses=job_exp_total, bills=bills_total
    )
    summary['gross'] = earnings_for_view(summary, 'gross')
    summary['net'] = earnings_for_view(summary, 'net')
    return summary


def period_summary(conn, start, end, profile, include_bills=False):
    """Totals, pay and take-home for every job dated start..end inclusive."""
    jobs = get_jobs_by_date_range(conn, start, end)
    bills_total = 0.0
    if include_bills:
        bills_total = sum(b['amount'] for b in get_bills_paid_in_range(conn, start, end))
    return _summarize(
        jobs, profile,
        get_total_daily_expenses(conn, start, end),
        job_expense_total(conn, start, end),
        bills_total, start, end,
    )


def weekly_summary(conn, day, profile, include_bills=False):
    start, end = week_range(day)
    summary = period_summary(conn, start, end, profile, include_bills)
    jobs = assign_sequence_numbers(get_jobs_by_date_range(conn, start, end))
    grouped = group_by_date(jobs)
    summary['days'] = []
    for i in range(7):
        day_key = to_date_string(start + timedelta(days=i))
        day_jobs = grouped.get(day_key, [])
        summary['days'].append({
            'date': day_key,
            'jobs': day_jobs,
            'total': round(sum(j['amount'] for j in day_jobs), 2),
        })
    goal = get_or_default_goal(conn, start)
    summary['goal'] = goal
    summary['progress'] = goal_progress(summary['total'], goal['income_target'])
    return summary


def monthly_summary(conn, day, profile, include_bills=False):
    start, end = month_range(day)
    summary = period_summary(conn, start, end, profile, include_bills)
    summary['year'] = start.year
    summary['month'] = start.month

    weeks = []
    week_start, _ = week_range(start)
    while week_start <= end:
        week_end = week_start + timedelta(days=6)
        # Clip to the month so weeks that straddle months aren't counted twice
        clipped_start, clipped_end = max(week_start, start), min(week_end, end)
        week_jobs = get_jobs_by_date_range(conn, clipped_start, clipped_end)
        week_totals = summarize_jobs(week_jobs)
        weeks.append({
            'week_start_date': to_date_string(clipped_start),
            'week_end_date': to_date_string(clipped_end),
            'total_jobs': week_totals['total_jobs'],
            'total': round(week_totals['total'], 2),
            'pay': calculate_pay(week_jobs, profile)['pay'],
        })
        week_start += timedelta(days=7)
    summary['weeks'] = weeks
    return summary


def yearly_summary(conn, year, profile, include_bills=False):
    start, end = year_range(int(year))
    summary = period_summary(conn, start, end, profile, include_bills)
    summary['year'] = start.year

    months = []
    for month in range(1, 13):
        m_start, m_end = month_range(date(start.year, month, 1))
        month_jobs = get_jobs_by_date_range(conn, m_start, m_end)
        expenses_total = get_total_daily_expenses(conn, m_start, m_end) + job_expense_total(conn, m_start, m_end)
        months.append({
            'month': month,
            'label': MONTH_LABELS[month - 1],
            'total_jobs': len(month_jobs),
            'earnings': round(sum(j['amount'] for j in month_jobs), 2),
            'pay': calculate_pay(month_jobs, profile)['pay'],
            'expenses': round(expenses_total, 2),
        })
    summary['monthly_breakdown'] = months
    summary['best_month'] = max(months, key=lambda m: m['earnings'])['label'] if summary['total_jobs'] else None
    return summary


def weekly_dashboard(conn, day, profile, on=None):
    """Everything the week view needs: jobs, income, bills, goal and suggested payments."""
    on = on or today()
    start, end = week_range(day)
    jobs = get_jobs_by_date_range(conn, start, end)
    income = round(sum(j['amount'] for j in jobs), 2)
    pay = calculate_pay(jobs, profile)['pay']

    bills = get_upcoming_bills(conn, start, end + timedelta(days=LOOKAHEAD_DAYS))

    goal = get_goal_for_week(conn, start)
    if goal is None:
        # Unsaved goal built from the bills coming due
        goal = dict(suggest_weekly_goal(conn, start), id=None, actual_income=income, notes='',
                    created_at=None, updated_at=None)
    elif goal['actual_income'] != income:
        refresh_actual_income(conn, goal['id'], income)
        goal['actual_income'] = income

    suggestions, remaining = suggest_bill_payments(bills, max(pay, 0), on)
    return {
        'week_start_date': to_date_string(start),
        'week_end_date': to_date_string(end),
        'jobs': assign_sequence_numbers(jobs),
        'income': income,
        'pay': pay,
        'upcoming_bills': [b for b in bills if not b['is_paid']],
        'goal': goal,
        'progress': goal_progress(income, goal['income_target']),
        'suggested_payments': suggestions,
        'suggested_total': round(sum(b['amount'] for b in suggestions), 2),
        'funds_after_suggestions': remaining,
    }


def daily_expense_view(conn, day):
    """The week's spending against the half-split weekly net."""
    start, end = week_range(day)
    jobs = get_jobs_by_date_range(conn, start, end)
    totals = summarize_jobs(jobs)
    weekly_earnings = legacy_net_earnings(totals['total'], totals['cash_payments'])
    total_expenses = get_total_daily_expenses(conn, start, end)
    return {
        'week_start_date': to_date_string(start),
        'week_end_date': to_date_string(end),
        'days': get_daily_expense_summary(conn, start, end),
        'total_expenses': total_expenses,
        'weekly_earnings': weekly_earnings,
        'remaining_earnings': round(weekly_earnings - total_expenses, 2),
    }


def pay_bills(conn, bill_ids, paid_date=None):
    """Mark the selected bills paid. Unknown or already-paid ids are skipped."""
    paid = []
    for bill_id in bill_ids:
        row = conn.execute('SELECT amount, is_paid FROM bills WHERE id = ?', (bill_id,)).fetchone()
        if not row or row['is_paid']:
            continue
        mark_bill_paid(conn, bill_id, paid_date)
        paid.append((bill_id, row['amount']))
    return {
        'paid_count': len(paid),
        'paid_ids': [bill_id for bill_id, _ in paid],
        'total_paid': round(sum(amount for _, amount in paid), 2),
    }


def build_year_workbook(conn, year, profile):
    """Excel workbook with every job of the year and a monthly summary sheet."""
    from openpyxl import Workbook
    from openpyxl.styles import Font, PatternFill, Alignment
    from openpyxl.utils import get_column_letter

    summary = yearly_summary(conn, year, profile)
    start, end = year_range(int(year))
    jobs = assign_sequence_numbers(get_jobs_by_date_range(conn, start, end))

    wb = Workbook()
    header_fill = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
    header_font = Font(color='FFFFFF', bold=True, size=11)
    money_format = '#,##0.00'

    ws1 = wb.active
    ws1.title = 'Jobs'
    headers1 = ['Date', '#', 'Company', 'Address', 'City', 'Yards',
                'Payment', 'Amount', 'Paid', 'Paid To Me', 'Check #', 'Notes']
    ws1.append(headers1)
    for job in jobs:
        ws1.append([
            job['date'], job['sequence_number'], job['company_name'], job['address'], job['city'],
            job['yards'], job['payment_method'], job['amount'],
            'Yes' if job['is_paid'] else 'No', 'Yes' if job['paid_to_me'] else 'No',
            job['check_number'], job['notes'],
        ])
    for row in ws1.iter_rows(min_row=2, min_col=8, max_col=8):
        for cell in row:
            cell.number_format = money_format

    ws2 = wb.create_sheet('Monthly')
    headers2 = ['Month', 'Jobs', 'Earnings', 'Your Pay', 'Expenses']
    ws2.append(headers2)
    for m in summary['monthly_breakdown']:
        ws2.append([m['label'], m['total_jobs'], m['earnings'], m['pay'], m['expenses']])
    ws2.append([])
    ws2.append(['Total', summary['total_jobs'], summary['total'], summary['pay'],
                summary['daily_expenses'] + summary['job_expenses']])
    ws2.append(['Unpaid', None, summary['unpaid']])
    ws2.append(['Take-home', None, summary['net_take_home']])
    for row in ws2.iter_rows(min_row=2, min_col=3, max_col=5):
        for cell in row:
            cell.number_format = money_format

    for ws, headers in ((ws1, headers1), (ws2, headers2)):
        for col, _ in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal='center')
            ws.column_dimensions[get_column_letter(col)].width = 14
        ws.freeze_panes = 'A2'

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf
