"""Earnings calculator.

Pure functions over lists of job/bill dicts. Everything that reports pay goes
through ``summarize_jobs`` and ``calculate_pay`` so the weekly, monthly and
yearly views agree with each other.

Pay rules:
  * An owner keeps everything the jobs brought in: pay = total.
  * An employee earns ``commission_rate`` percent of the total. Money they
    already hold is taken back out of that commission: paid cash jobs when
    the profile keeps cash, paid check jobs when it keeps checks, and any
    other paid cash or check job flagged ``paid_to_me``. A job is only
    deducted once.
"""

from date_utils import parse_date, today

VIEWS = ('gross', 'net')


def _money(value):
    return round(value or 0, 2)


def summarize_jobs(jobs):
    totals = {
        'total_jobs': len(jobs),
        'total': 0.0,
        'paid': 0.0,
        'unpaid': 0.0,
        'cash_payments': 0.0,
        'check_payments': 0.0,
        'paid_to_me_amount': 0.0,
        'by_method': {},
    }
    for job in jobs:
        amount = job['amount'] or 0
        totals['total'] += amount
        method = job['payment_method']
        totals['by_method'][method] = totals['by_method'].get(method, 0) + amount
        if not job['is_paid']:
            totals['unpaid'] += amount
            continue
        totals['paid'] += amount
        if method == 'Cash':
            totals['cash_payments'] += amount
        elif method == 'Check':
            totals['check_payments'] += amount
        if job.get('paid_to_me'):
            totals['paid_to_me_amount'] += amount
    return totals


def _retained_amount(jobs, profile):
    """Money an employee already holds: kept cash/checks plus other paid-to-me jobs."""
    keeps_cash = profile.get('keeps_cash')
    keeps_check = profile.get('keeps_check')
    retained_cash = retained_check = other_paid_to_me = 0.0
    for job in jobs:
        if not job['is_paid']:
            continue
        method = job['payment_method']
        if method == 'Cash' and keeps_cash:
            retained_cash += job['amount'] or 0
        elif method == 'Check' and keeps_check:
            retained_check += job['amount'] or 0
        elif job.get('paid_to_me') and method in ('Cash', 'Check'):
            other_paid_to_me += job['amount'] or 0
    return retained_cash, retained_check, other_paid_to_me


def calculate_pay(jobs, profile):
    """Role-aware pay for one period's jobs."""
    total = sum(job['amount'] or 0 for job in jobs)
    if profile.get('role') == 'owner':
        return {
            'is_owner': True,
            'commission_rate': 100,
            'commission': _money(total),
            'cash_deduction': 0.0,
            'check_deduction': 0.0,
            'paid_to_me_deduction': 0.0,
            'pay': _money(total),
        }

    rate = profile.get('commission_rate') or 0
    commission = total * rate / 100
    cash, check, paid_to_me = _retained_amount(jobs, profile)
    return {
        'is_owner': False,
        'commission_rate': rate,
        'commission': _money(commission),
        'cash_deduction': _money(cash),
        'check_deduction': _money(check),
        'paid_to_me_deduction': _money(paid_to_me),
        'pay': _money(commission - cash - check - paid_to_me),
    }


def net_take_home(pay, daily_expenses=0, job_expenses=0, bills=0):
    return _money(pay - daily_expenses - job_expenses - bills)


def earnings_for_view(summary, view='gross'):
    """The headline figure for the gross/net toggle."""
    if view not in VIEWS:
        raise ValueError("View must be 'gross' or 'net'")
    return summary['net_take_home'] if view == 'net' else summary['pay']


def legacy_net_earnings(total, cash_payments):
    """Half-split net used by the week's daily-expense view: (total / 2) - cash."""
    return _money(total / 2 - cash_payments)


def suggest_bill_payments(bills, available, on=None):
    """Pick unpaid bills to pay from ``available`` funds.

    Overdue bills come first, then upcoming ones, each in due-date order. A
    bill is suggested when the remaining funds cover it in full; smaller bills
    further down the list can still fit after a larger one is skipped.
    """
    on = parse_date(on) if on else today()
    unpaid = sorted((b for b in bills if not b['is_paid']), key=lambda b: b['due_date'])
    overdue = [b for b in unpaid if parse_date(b['due_date']) < on]
    upcoming = [b for b in unpaid if parse_date(b['due_date']) >= on]

    remaining = available or 0
    suggestions = []
    for bill in overdue + upcoming:
        if remaining >= bill['amount']:
            suggestions.append(bill)
            remaining -= bill['amount']
    return suggestions, _money(remaining)
