from datetime import date
from decimal import Decimal

import pytest

from planilla.calc import notice_days, salary_for_month, settle, severance_days, tenure_days
from planilla.calc.settlement import days_worked_in_month, shift_months, tenure_months, trailing_months
from planilla.domain import EmployeeRecord, SalaryChange


@pytest.mark.parametrize('months, expected', [
    (0, 0), (2.9, 0), (3, 7), (5, 7), (6, 15), (11.9, 15), (12, 30), (200, 30),
])
def test_notice_days(months, expected):
    assert notice_days(months) == Decimal(expected)


@pytest.mark.parametrize('months, expected', [
    (2, '0'), (3, '7'), (6, '14'), (11, '14'),
    (12, '19.5'), (24, '20'), (36, '20.5'), (48, '21'),
    (60, '21.24'), (72, '21.5'), (84, '22'), (96, '22'), (240, '22'),
])
def test_severance_days(months, expected):
    assert severance_days(months) == Decimal(expected)


def test_tenure():
    assert tenure_days('2024-01-01', '2024-01-31') == 30
    assert tenure_days(None, '2024-01-31') == 0
    assert tenure_months(90) == 3


def test_shift_months_clamps_day():
    assert shift_months(date(2024, 3, 31), 1) == date(2024, 2, 29)
    assert shift_months(date(2024, 1, 15), 1) == date(2023, 12, 15)
    assert trailing_months(date(2024, 3, 31), 3) == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]


CHANGES = [
    SalaryChange(effective_date=date(2023, 6, 15), previous_salary=500000, new_salary=550000),
    SalaryChange(effective_date=date(2023, 9, 1), previous_salary=550000, new_salary=600000),
]


@pytest.mark.parametrize('month, expected', [
    (date(2022, 12, 1), 0),
    (date(2023, 3, 1), 500000),
    (date(2023, 6, 1), 550000),
    (date(2023, 7, 1), 550000),
    (date(2023, 9, 1), 600000),
    (date(2024, 2, 1), 600000),
])
def test_salary_for_month(month, expected):
    assert salary_for_month(month, 600000, date(2023, 1, 10), CHANGES) == Decimal(expected)


def test_salary_for_month_without_history():
    assert salary_for_month(date(2023, 3, 1), 450000, date(2023, 1, 1)) == Decimal(450000)


def test_salary_before_first_change_without_previous():
    changes = [SalaryChange(effective_date=date(2023, 6, 1), new_salary=700000)]
    assert salary_for_month(date(2023, 2, 1), 650000, date(2023, 1, 1), changes) == Decimal(650000)


def test_days_worked_partial_months():
    hire, end = date(2023, 3, 16), date(2023, 5, 10)
    assert days_worked_in_month(date(2023, 2, 1), hire, end) == 0
    assert days_worked_in_month(date(2023, 3, 1), hire, end) == 15
    assert days_worked_in_month(date(2023, 4, 1), hire, end) == 30
    assert days_worked_in_month(date(2023, 5, 1), hire, end) == 10
    assert days_worked_in_month(date(2023, 6, 1), hire, end) == 0


def _employee(**kwargs):
    data = dict(name='Ana', base_salary=600000, hire_date=date(2023, 1, 1))
    data.update(kwargs)
    return EmployeeRecord(**data)


def test_settle_one_year():
    result = settle(_employee(), end_date=date(2023, 12, 31))
    assert result.days == 364
    assert result.average_monthly == Decimal(600000)
    assert result.average_daily == Decimal(20000)
    assert result.notice_days == 30
    assert result.notice_amount == Decimal(600000)
    assert result.severance_days == Decimal('19.5')
    assert result.severance_amount == Decimal(390000)
    assert result.aguinaldo == Decimal(600000)
    assert result.vacation_amount == Decimal(20000)
    assert result.total == Decimal(1610000)


def test_settle_adds_accumulated_amounts_and_vacation_days():
    base = settle(_employee(), end_date=date(2023, 12, 31))
    result = settle(
        _employee(accumulated_severance=1000, accumulated_aguinaldo=500),
        end_date=date(2023, 12, 31),
        vacation_days=4,
    )
    assert result.vacation_amount == Decimal(80000)
    assert result.total == base.total + Decimal(60000) + 1500


def test_settle_short_tenure_ignores_months_before_hire():
    result = settle(_employee(hire_date=date(2023, 10, 1)), end_date=date(2023, 12, 31))
    assert result.notice_days == 7
    assert result.severance_days == 7
    assert result.average_monthly == Decimal(600000)
    assert [m.amount for m in result.history[:3]] == [0, 0, 0]
    assert result.aguinaldo == Decimal(150000)


def test_settle_under_three_months_has_no_notice_or_severance():
    result = settle(_employee(hire_date=date(2023, 11, 1)), end_date=date(2023, 12, 31))
    assert result.notice_amount == 0
    assert result.severance_amount == 0


def test_settle_averages_salary_history():
    employee = _employee(hire_date=date(2022, 1, 1), base_salary=600000)
    result = settle(employee, CHANGES, end_date=date(2023, 8, 31))
    # Mar-May at 500000, Jun-Aug at 550000
    assert result.average_monthly == Decimal(525000)


def test_settle_falls_back_to_termination_date():
    result = settle(_employee(termination_date=date(2023, 12, 31)))
    assert result.end_date == date(2023, 12, 31)
