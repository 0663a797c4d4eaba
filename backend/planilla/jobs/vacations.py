import logging
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from .. import models
from ..calc.settlement import cr_today

logger = logging.getLogger(__name__)


def months_between(start: date, end: date) -> int:
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def is_hire_day(hire_date: date, today: date) -> bool:
    return hire_date.day == today.day


def accrue_vacations(db: Session, today: Optional[date] = None) -> int:
    """Grant one vacation day to every active employee on their monthly hire day.

    An employee without a balance gets one (1 assigned, 0 enjoyed) once a
    full calendar month has passed since hiring. Returns how many balances
    were touched.
    """
    today = today or cr_today()
    employees = (
        db.query(models.Employee)
        .filter(
            models.Employee.active.is_(True),
            models.Employee.termination_date.is_(None),
            models.Employee.hire_date.isnot(None),
        )
        .all()
    )

    touched = 0
    for employee in employees:
        if not is_hire_day(employee.hire_date, today):
            continue
        balance = employee.vacation_balance
        if balance is None:
            if months_between(employee.hire_date, today) < 1:
                continue
            employee.vacation_balance = models.VacationBalance(
                assigned_days=1, enjoyed_days=0, last_accrued_on=today
            )
        elif balance.last_accrued_on == today:
            continue
        else:
            balance.assigned_days = (balance.assigned_days or 0) + 1
            balance.last_accrued_on = today
        touched += 1

    db.commit()
    logger.info("vacation accrual on %s: %s balances updated", today, touched)
    return touched


def run_vacation_accrual(session_factory) -> int:
    db = session_factory()
    try:
        return accrue_vacations(db)
    finally:
        db.close()
