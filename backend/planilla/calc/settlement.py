"""Liquidación (settlement) arithmetic.

Tenure uses the fixed-denominator convention of the labour tables:
a year is 360 days and a month is 30 days.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from ..domain.records import EmployeeRecord, SalaryChange
from .currency import to_decimal

COSTA_RICA_TZ = timezone(timedelta(hours=-6))
DAYS_PER_MONTH = 30
AVERAGE_WINDOW_MONTHS = 6
AGUINALDO_WINDOW_MONTHS = 12

# (upper bound in months, days); first matching "months < bound" wins
NOTICE_TIERS = ((3, 0), (6, 7), (12, 15))
NOTICE_MAX_DAYS = Decimal(30)

SEVERANCE_MONTH_TIERS = ((3, 0), (6, 7), (12, 14))
# (upper bound in years, days) once a full year is reached
SEVERANCE_YEAR_TIERS = (
    (2, "19.5"),
    (3, "20"),
    (4, "20.5"),
    (5, "21"),
    (6, "21.24"),
    (7, "21.5"),
    (8, "22"),
)
SEVERANCE_MAX_DAYS = Decimal(22)


def cr_today() -> date:
    return datetime.now(COSTA_RICA_TZ).date()


def as_date(value) -> Optional[date]:
    """Coerce ISO strings and datetimes to a date; junk gives None."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def tenure_days(hire_date, end_date=None) -> int:
    hire = as_date(hire_date)
    if hire is None:
        return 0
    end = as_date(end_date) or cr_today()
    return math.ceil((end - hire).days)


def tenure_years(days) -> Decimal:
    return Decimal(days) / 360


def tenure_months(days) -> Decimal:
    return Decimal(days) / DAYS_PER_MONTH


def notice_days(months) -> Decimal:
    months = to_decimal(months)
    for bound, days in NOTICE_TIERS:
        if months < bound:
            return Decimal(days)
    return NOTICE_MAX_DAYS


def severance_days(months) -> Decimal:
    months = to_decimal(months)
    for bound, days in SEVERANCE_MONTH_TIERS:
        if months < bound:
            return Decimal(days)
    years = months / 12
    for bound, days in SEVERANCE_YEAR_TIERS:
        if years < bound:
            return Decimal(days)
    return SEVERANCE_MAX_DAYS


def shift_months(day: date, months_back: int) -> date:
    return day - relativedelta(months=months_back)


def trailing_months(end_date: date, count: int) -> List[date]:
    """``count`` month markers ending at ``end_date``, oldest first."""
    return [shift_months(end_date, i) for i in range(count - 1, -1, -1)]


def _month_key(day: date):
    return day.year, day.month


def salary_for_month(month: date, base_salary, hire_date, changes: Iterable[SalaryChange] = ()) -> Decimal:
    """Salary in effect during ``month`` according to the increase history."""
    base = to_decimal(base_salary)
    hire = as_date(hire_date)
    if hire is None:
        return base
    if _month_key(month) < _month_key(hire):
        return Decimal(0)

    ordered = sorted(changes or (), key=lambda c: c.effective_date)
    if not ordered:
        return base

    for change in ordered:
        if _month_key(change.effective_date) == _month_key(month):
            return to_decimal(change.new_salary)

    earlier = [c for c in ordered if _month_key(c.effective_date) < _month_key(month)]
    if earlier:
        return to_decimal(earlier[-1].new_salary)

    first = ordered[0]
    if first.previous_salary is not None:
        return to_decimal(first.previous_salary)
    return base


def days_worked_in_month(month: date, hire_date, end_date) -> int:
    """Days worked in ``month`` on a 30-day month basis."""
    hire = as_date(hire_date)
    end = as_date(end_date)
    if hire is None:
        return 0
    key = _month_key(month)
    if _month_key(hire) > key:
        return 0
    if end is not None and _month_key(end) < key:
        return 0

    start_day = hire.day if _month_key(hire) == key else 1
    end_day = DAYS_PER_MONTH
    if end is not None and _month_key(end) == key:
        end_day = min(end.day, DAYS_PER_MONTH)
    return max(0, min(DAYS_PER_MONTH, end_day - start_day + 1))


@dataclass
class MonthlyPay:
    month: date
    salary: Decimal
    days_worked: int
    amount: Decimal


def monthly_history(
    employee: EmployeeRecord,
    changes: Iterable[SalaryChange],
    end_date: date,
    count: int,
) -> List[MonthlyPay]:
    changes = list(changes or ())
    history = []
    for month in trailing_months(end_date, count):
        salary = salary_for_month(month, employee.base_salary, employee.hire_date, changes)
        worked = days_worked_in_month(month, employee.hire_date, end_date)
        history.append(MonthlyPay(
            month=month,
            salary=salary,
            days_worked=worked,
            amount=salary / DAYS_PER_MONTH * worked,
        ))
    return history


def average_monthly(history: Iterable[MonthlyPay], base_salary) -> Decimal:
    worked = [m.amount for m in history if m.amount > 0]
    if not worked:
        return to_decimal(base_salary)
    return sum(worked, Decimal(0)) / len(worked)


@dataclass
class Settlement:
    hire_date: Optional[date]
    end_date: date
    days: int
    years: Decimal
    months: Decimal
    history: List[MonthlyPay] = field(default_factory=list)
    average_monthly: Decimal = Decimal(0)
    average_daily: Decimal = Decimal(0)
    notice_days: Decimal = Decimal(0)
    notice_amount: Decimal = Decimal(0)
    severance_days: Decimal = Decimal(0)
    severance_amount: Decimal = Decimal(0)
    aguinaldo: Decimal = Decimal(0)
    vacation_days: Decimal = Decimal(0)
    vacation_amount: Decimal = Decimal(0)
    accumulated_severance: Decimal = Decimal(0)
    accumulated_aguinaldo: Decimal = Decimal(0)
    total: Decimal = Decimal(0)


def settle(
    employee: EmployeeRecord,
    changes: Iterable[SalaryChange] = (),
    end_date=None,
    vacation_days=1,
) -> Settlement:
    """Compute the full liquidación for ``employee``.

    ``end_date`` falls back to the employee's termination date and then to
    today in Costa Rica.
    """
    changes = list(changes or ())
    end = as_date(end_date) or as_date(employee.termination_date) or cr_today()
    days = tenure_days(employee.hire_date, end)
    months = tenure_months(days)

    history = monthly_history(employee, changes, end, AVERAGE_WINDOW_MONTHS)
    avg_monthly = average_monthly(history, employee.base_salary)
    avg_daily = avg_monthly / DAYS_PER_MONTH

    yearly = monthly_history(employee, changes, end, AGUINALDO_WINDOW_MONTHS)
    aguinaldo = sum((m.amount for m in yearly), Decimal(0)) / AGUINALDO_WINDOW_MONTHS

    notice = notice_days(months)
    severance = severance_days(months)
    vacation = to_decimal(vacation_days)

    result = Settlement(
        hire_date=as_date(employee.hire_date),
        end_date=end,
        days=days,
        years=tenure_years(days),
        months=months,
        history=history,
        average_monthly=avg_monthly,
        average_daily=avg_daily,
        notice_days=notice,
        notice_amount=avg_daily * notice,
        severance_days=severance,
        severance_amount=avg_daily * severance,
        aguinaldo=aguinaldo,
        vacation_days=vacation,
        vacation_amount=avg_daily * vacation,
        accumulated_severance=to_decimal(employee.accumulated_severance),
        accumulated_aguinaldo=to_decimal(employee.accumulated_aguinaldo),
    )
    result.total = (
        result.aguinaldo
        + result.vacation_amount
        + result.notice_amount
        + result.severance_amount
        + result.accumulated_severance
        + result.accumulated_aguinaldo
    )
    return result
