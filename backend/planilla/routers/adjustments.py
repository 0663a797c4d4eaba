"""CRUD endpoints for the four per-payroll adjustment categories.

Increases, overtime, metric bonuses and deductions share one router factory;
only the way each category derives its ``amount`` differs.
"""

import logging
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..calc.currency import to_decimal
from ..database import get_db
from ..domain.enums import IncreaseKind, PayrollState
from ..schemas.adjustments import (
    DeductionCreate,
    DeductionRead,
    DeductionUpdate,
    IncreaseCreate,
    IncreaseRead,
    IncreaseUpdate,
    MetricBonusCreate,
    MetricBonusRead,
    MetricBonusUpdate,
    OvertimeCreate,
    OvertimeRead,
    OvertimeUpdate,
)
from .employees import get_employee

logger = logging.getLogger(__name__)


def _enum_value(value):
    return getattr(value, "value", value)


def get_open_payroll(db: Session, payroll_id: int) -> models.Payroll:
    payroll = db.get(models.Payroll, payroll_id)
    if payroll is None:
        raise HTTPException(status_code=404, detail="Planilla no encontrada")
    if payroll.state != PayrollState.EN_PROCESO.value:
        raise HTTPException(status_code=409, detail=f"Planilla {payroll.code} ya está {payroll.state}")
    return payroll


def increase_amount(kind, value, salary) -> Decimal:
    value = to_decimal(value)
    if _enum_value(kind) == IncreaseKind.PORCENTAJE.value:
        return to_decimal(salary) * value / 100
    return value


def price_increase(record: models.SalaryIncrease, employee: models.Employee, payroll: models.Payroll):
    previous = to_decimal(employee.base_salary)
    record.amount = increase_amount(record.kind, record.value, previous)
    record.previous_salary = previous
    record.new_salary = previous + to_decimal(record.amount)
    if record.effective_date is None:
        record.effective_date = payroll.start_date or date.today()


def price_overtime(record: models.Overtime, employee, payroll):
    if record.amount is None:
        record.amount = to_decimal(record.hours) * to_decimal(record.rate)


def price_as_given(record, employee, payroll):
    if record.amount is None:
        record.amount = Decimal(0)


def build_router(model, create_schema, update_schema, read_schema, price) -> APIRouter:
    router = APIRouter()
    label = model.__tablename__

    def get_record(db: Session, record_id: int):
        record = db.get(model, record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Registro no encontrado")
        return record

    @router.post("/", response_model=read_schema)
    def create(payload: create_schema, db: Session = Depends(get_db)):
        employee = get_employee(db, payload.employee_id)
        payroll = get_open_payroll(db, payload.payroll_id)
        data = {k: _enum_value(v) for k, v in payload.model_dump().items()}
        record = model(company_id=employee.company_id, **data)
        price(record, employee, payroll)
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info("%s %s created for employee %s", label, record.id, employee.id)
        return record

    @router.get("/", response_model=list[read_schema])
    def list_all(
        planilla_id: int | None = None,
        empleado_id: int | None = None,
        db: Session = Depends(get_db),
    ):
        query = db.query(model)
        if planilla_id is not None:
            query = query.filter(model.payroll_id == planilla_id)
        if empleado_id is not None:
            query = query.filter(model.employee_id == empleado_id)
        return query.order_by(model.id).all()

    @router.get("/{record_id}", response_model=read_schema)
    def read(record_id: int, db: Session = Depends(get_db)):
        return get_record(db, record_id)

    @router.put("/{record_id}", response_model=read_schema)
    def update(record_id: int, payload: update_schema, db: Session = Depends(get_db)):
        record = get_record(db, record_id)
        get_open_payroll(db, record.payroll_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in changes.items():
            setattr(record, key, _enum_value(value))
        if model is models.SalaryIncrease and {"kind", "value"} & changes.keys():
            employee = get_employee(db, record.employee_id)
            price(record, employee, db.get(models.Payroll, record.payroll_id))
        elif model is models.Overtime and "amount" not in changes and {"hours", "rate"} & changes.keys():
            record.amount = None
            price(record, None, None)
        db.commit()
        db.refresh(record)
        return record

    @router.delete("/{record_id}")
    def delete(record_id: int, db: Session = Depends(get_db)):
        record = get_record(db, record_id)
        get_open_payroll(db, record.payroll_id)
        db.delete(record)
        db.commit()
        return {"status": "deleted"}

    return router


increases = build_router(models.SalaryIncrease, IncreaseCreate, IncreaseUpdate, IncreaseRead, price_increase)
overtime = build_router(models.Overtime, OvertimeCreate, OvertimeUpdate, OvertimeRead, price_overtime)
metric_bonuses = build_router(models.MetricBonus, MetricBonusCreate, MetricBonusUpdate, MetricBonusRead,
                              price_as_given)
deductions = build_router(models.Deduction, DeductionCreate, DeductionUpdate, DeductionRead, price_as_given)
