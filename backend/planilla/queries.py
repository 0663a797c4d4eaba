"""Database reads shared by the payroll endpoints and the mail job."""

from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from . import models
from .domain.enums import RecordStatus

# category name -> adjustment table, in the order they appear on a payslip
ADJUSTMENT_MODELS = {
    "increases": models.SalaryIncrease,
    "overtime": models.Overtime,
    "metric_bonuses": models.MetricBonus,
    "deductions": models.Deduction,
}

# statuses shown on the review screen
REVIEW_STATUSES = (
    RecordStatus.PENDIENTE,
    RecordStatus.APROBADO,
    RecordStatus.PROCESADA,
)


def eligible_employees(db: Session, payroll: models.Payroll) -> List[models.Employee]:
    """Active employees of the payroll's company paid in its currency and period."""
    return (
        db.query(models.Employee)
        .filter(
            models.Employee.company_id == payroll.company_id,
            models.Employee.currency == payroll.currency,
            models.Employee.pay_period == payroll.pay_period,
            models.Employee.active.is_(True),
            models.Employee.termination_date.is_(None),
            models.Employee.base_salary.isnot(None),
        )
        .order_by(models.Employee.name)
        .all()
    )


def adjustment_records(db: Session, model, payroll_id: int, statuses: Iterable[RecordStatus]):
    values = [RecordStatus.parse(s).value for s in statuses]
    return (
        db.query(model)
        .filter(model.payroll_id == payroll_id, model.status.in_(values))
        .order_by(model.id)
        .all()
    )


def amounts_by_employee(records) -> Dict[int, list]:
    grouped = defaultdict(list)
    for record in records:
        grouped[record.employee_id].append(record.amount)
    return dict(grouped)


def load_adjustments(db: Session, payroll_id: int, statuses: Iterable[RecordStatus]) -> Dict[str, Dict[int, list]]:
    statuses = list(statuses)
    return {
        name: amounts_by_employee(adjustment_records(db, model, payroll_id, statuses))
        for name, model in ADJUSTMENT_MODELS.items()
    }
