"""Date helpers: calendar-date parsing, week/month/year ranges, recurrence math."""

import calendar
from collections import OrderedDict
from datetime import date, datetime, timedelta

SUNDAY = 6  # date.weekday() numbering, Monday = 0
WEEK_STARTS_ON = SUNDAY

# (days, months) advanced per period
RECURRENCE_STEPS = {
    'Daily': (1, 0),
    'Weekly': (7, 0),
    'Biweekly': (14, 0),
    'Monthly': (0, 1),
    'Quarterly': (0, 3),
    'Yearly': (0, 12),
}
RECURRENCES = ('OneTime',) + tuple(RECURRENCE_STEPS)


def parse_date(value):
    """Return the calendar date of a date, datetime or ISO string.

    Only the date part of a timestamp is used, so '2024-03-10T23:30:00Z'
    is March 10th regardless of the server's timezone.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'Invalid date: {value!r}')
    date_part = value.strip().split('T')[0].split(' ')[0]
    try:
        return datetime.strptime(date_part, '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f'Invalid date: {value!r}')


def to_date_string(value):
    return parse_date(value).strftime('%Y-%m-%d')


def today():
    return date.today()


def week_range(value, week_starts_on=WEEK_STARTS_ON):
    d = parse_date(value)
    offset = (d.weekday() - week_starts_on) % 7
    start = d - timedelta(days=offset)
    return start, start + timedelta(days=6)


def month_range(value):
    d = parse_date(value)
    start = d.replace(day=1)
    last_day = calendar.monthrange(d.year, d.month)[1]
    return start, d.replace(day=last_day)


def year_range(value):
    if isinstance(value, int):
        return date(value, 1, 1), date(value, 12, 31)
    d = parse_date(value)
    return date(d.year, 1, 1), date(d.year, 12, 31)


def previous_week(value):
    return parse_date(value) - timedelta(weeks=1)


def next_week(value):
    return parse_date(value) + timedelta(weeks=1)


def previous_month(value):
    return add_months(value, -1)


def next_month(value):
    return add_months(value, 1)


def is_date_in_range(value, start, end):
    return parse_date(start) <= parse_date(value) <= parse_date(end)


def group_by_date(items, key='date'):
    """Group dict-like items by the date part of ``item[key]``, keeping input order."""
    groups = OrderedDict()
    for item in items:
        groups.setdefault(to_date_string(item[key]), []).append(item)
    return groups


def add_months(value, months):
    """Shift by whole months, clamping the day to the end of a shorter month."""
    d = parse_date(value)
    index = d.year * 12 + d.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def add_recurrence(value, recurrence):
    """Advance a due date by one recurrence period. OneTime dates stay put."""
    d = parse_date(value)
    if recurrence == 'OneTime':
        return d
    if recurrence not in RECURRENCE_STEPS:
        raise ValueError(f'Unknown recurrence: {recurrence}')
    days, months = RECURRENCE_STEPS[recurrence]
    return add_months(d, months) + timedelta(days=days)


def days_until(value, on=None):
    return (parse_date(value) - (parse_date(on) if on else today())).days


def format_currency(amount):
    amount = round(amount or 0, 2)
    if amount < 0:
        return f'-${abs(amount):,.2f}'
    return f'${amount:,.2f}'
