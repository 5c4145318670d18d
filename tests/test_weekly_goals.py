import pytest

from expenses import add_bill, delete_bill
from weekly_goals import (DEFAULT_WEEKLY_TARGET, add_weekly_goal, allocate_bill_to_week,
                          delete_weekly_goal, get_goal_for_week, get_or_default_goal, get_weekly_goal,
                          goal_progress, list_weekly_goals, mark_allocation_complete,
                          refresh_actual_income, suggest_weekly_goal, update_weekly_goal)


def test_goal_is_stored_against_its_week(conn):
    goal_id = add_weekly_goal(conn, {'week_start_date': '2024-03-13', 'income_target': 2000})
    goal = get_weekly_goal(conn, goal_id)
    assert goal['week_start_date'] == '2024-03-10'
    assert goal['week_end_date'] == '2024-03-16'
    assert goal['income_target'] == 2000
    assert goal['allocated_bills'] == []
    assert get_goal_for_week(conn, '2024-03-16')['id'] == goal_id


def test_one_goal_per_week(conn):
    add_weekly_goal(conn, {'week_start_date': '2024-03-10'})
    with pytest.raises(ValueError):
        add_weekly_goal(conn, {'week_start_date': '2024-03-14'})


@pytest.mark.parametrize('data', [
    {},
    {'week_start_date': '2024-03-10', 'income_target': -1},
    {'week_start_date': '2024-03-10', 'income_target': 'lots'},
])
def test_add_goal_validation(conn, data):
    with pytest.raises(ValueError):
        add_weekly_goal(conn, data)


def test_default_goal_when_none_saved(conn):
    goal = get_or_default_goal(conn, '2024-03-13')
    assert goal['id'] is None
    assert goal['income_target'] == DEFAULT_WEEKLY_TARGET
    assert goal['week_start_date'] == '2024-03-10'


def test_update_list_and_delete(conn):
    first = add_weekly_goal(conn, {'week_start_date': '2024-03-03'})
    second = add_weekly_goal(conn, {'week_start_date': '2024-03-10'})
    assert update_weekly_goal(conn, first, {'income_target': 1800, 'notes': ' slow week '}) is True
    goal = get_weekly_goal(conn, first)
    assert goal['income_target'] == 1800
    assert goal['notes'] == 'slow week'
    assert update_weekly_goal(conn, 999, {'income_target': 1}) is False

    assert [g['id'] for g in list_weekly_goals(conn)] == [second, first]
    assert delete_weekly_goal(conn, first) is True
    assert delete_weekly_goal(conn, first) is False
    assert [g['id'] for g in list_weekly_goals(conn)] == [second]


def test_allocations(conn):
    goal_id = add_weekly_goal(conn, {'week_start_date': '2024-03-10'})
    bill_id = add_bill(conn, {'name': 'Rent', 'amount': 1200, 'due_date': '2024-03-31'})

    assert allocate_bill_to_week(conn, goal_id, bill_id, 300) is True
    assert allocate_bill_to_week(conn, goal_id, bill_id, 400) is True
    allocations = get_weekly_goal(conn, goal_id)['allocated_bills']
    assert allocations == [{'bill_id': bill_id, 'bill_name': 'Rent', 'weekly_amount': 400, 'is_complete': False}]

    assert mark_allocation_complete(conn, goal_id, bill_id) is True
    assert get_weekly_goal(conn, goal_id)['allocated_bills'][0]['is_complete'] is True
    assert mark_allocation_complete(conn, goal_id, bill_id + 1) is False

    assert allocate_bill_to_week(conn, 999, bill_id, 100) is False
    with pytest.raises(ValueError):
        allocate_bill_to_week(conn, goal_id, 999, 100)
    with pytest.raises(ValueError):
        allocate_bill_to_week(conn, goal_id, bill_id, -5)

    delete_bill(conn, bill_id)
    assert get_weekly_goal(conn, goal_id)['allocated_bills'] == []


def test_goal_created_with_allocations(conn):
    bill_id = add_bill(conn, {'name': 'Phone', 'amount': 120, 'due_date': '2024-03-14'})
    goal_id = add_weekly_goal(conn, {
        'week_start_date': '2024-03-10',
        'income_target': 1600,
        'allocated_bills': [{'bill_id': bill_id, 'weekly_amount': 120}],
    })
    assert get_weekly_goal(conn, goal_id)['allocated_bills'][0]['weekly_amount'] == 120
    with pytest.raises(ValueError):
        update_weekly_goal(conn, goal_id, {'allocated_bills': [{'bill_id': 999, 'weekly_amount': 1}]})


def test_refresh_actual_income(conn):
    goal_id = add_weekly_goal(conn, {'week_start_date': '2024-03-10'})
    assert refresh_actual_income(conn, goal_id, 1234.5) is True
    assert get_weekly_goal(conn, goal_id)['actual_income'] == 1234.5
    assert refresh_actual_income(conn, 999, 10) is False


def test_suggest_spreads_bills_over_remaining_weeks(conn):
    add_bill(conn, {'name': 'Overdue', 'amount': 200, 'due_date': '2024-03-01'})
    add_bill(conn, {'name': 'This week', 'amount': 100, 'due_date': '2024-03-15'})
    add_bill(conn, {'name': 'Three weeks out', 'amount': 300, 'due_date': '2024-03-30'})
    add_bill(conn, {'name': 'Too far', 'amount': 500, 'due_date': '2024-04-20'})
    add_bill(conn, {'name': 'Paid', 'amount': 80, 'due_date': '2024-03-12',
                    'is_paid': True, 'paid_date': '2024-03-05'})

    suggestion = suggest_weekly_goal(conn, '2024-03-13')
    amounts = {a['bill_name']: a['weekly_amount'] for a in suggestion['allocated_bills']}
    assert amounts == {'Overdue': 200, 'This week': 100, 'Three weeks out': 100}
    assert suggestion['income_target'] == 400
    assert suggestion['week_start_date'] == '2024-03-10'


def test_suggest_without_bills_uses_default(conn):
    suggestion = suggest_weekly_goal(conn, '2024-03-13')
    assert suggestion['allocated_bills'] == []
    assert suggestion['income_target'] == DEFAULT_WEEKLY_TARGET


def test_goal_progress():
    assert goal_progress(1500, 1500)['status'] == 'met'
    assert goal_progress(1800, 1500)['remaining'] == 0
    close = goal_progress(1200, 1500)
    assert close['status'] == 'close'
    assert close['percent'] == 80
    behind = goal_progress(500, 1500)
    assert behind['status'] == 'behind'
    assert behind['remaining'] == 1000
    assert goal_progress(100, 0)['status'] == 'behind'
