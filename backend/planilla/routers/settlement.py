import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..calc.currency import format_currency
from ..calc.settlement import settle
from ..domain.enums import RecordStatus
from ..domain.records import EmployeeRecord, SalaryChange
from ..database import get_db
from ..schemas.settlement import MonthlyPayRead, SettlementRead
from .employees import get_employee

logger = logging.getLogger(__name__)

router = APIRouter()


def salary_changes(db: Session, employee_id: int) -> list[SalaryChange]:
    """Applied increases of an employee, oldest first."""
    records = (
        db.query(models.SalaryIncrease)
        .filter(
            models.SalaryIncrease.employee_id == employee_id,
            models.SalaryIncrease.status == RecordStatus.PROCESADA.value,
            models.SalaryIncrease.effective_date.isnot(None),
            models.SalaryIncrease.new_salary.isnot(None),
        )
        .order_by(models.SalaryIncrease.effective_date, models.SalaryIncrease.id)
        .all()
    )
    return [SalaryChange.model_validate(r) for r in records]


@router.get("/{empleado_id}", response_model=SettlementRead)
def liquidacion(empleado_id: int, fecha_salida: date | None = None, db: Session = Depends(get_db)):
    employee = get_employee(db, empleado_id)
    if employee.hire_date is None:
        raise HTTPException(status_code=422, detail="El empleado no tiene fecha de ingreso")
    end_date = fecha_salida or employee.termination_date
    if end_date is not None and end_date < employee.hire_date:
        raise HTTPException(status_code=422, detail="La fecha de salida es anterior al ingreso")

    balance = employee.vacation_balance
    vacation_days = max(balance.remaining_days, 0) if balance is not None else 1

    record = EmployeeRecord.model_validate(employee)
    result = settle(record, salary_changes(db, employee.id), end_date, vacation_days)
    logger.info("settlement for employee %s at %s: %s", employee.id, result.end_date, result.total)

    return SettlementRead(
        employee_id=employee.id,
        name=employee.name,
        currency=employee.currency,
        hire_date=result.hire_date,
        end_date=result.end_date,
        days=result.days,
        years=result.years,
        months=result.months,
        history=[MonthlyPayRead.model_validate(m) for m in result.history],
        average_monthly=result.average_monthly,
        average_daily=result.average_daily,
        notice_days=result.notice_days,
        notice_amount=result.notice_amount,
        severance_days=result.severance_days,
        severance_amount=result.severance_amount,
        aguinaldo=result.aguinaldo,
        vacation_days=result.vacation_days,
        vacation_amount=result.vacation_amount,
        accumulated_severance=result.accumulated_severance,
        accumulated_aguinaldo=result.accumulated_aguinaldo,
        total=result.total,
        total_formatted=format_currency(result.total, employee.currency),
    )
