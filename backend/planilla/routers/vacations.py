from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..database import get_db
from ..domain.enums import RecordStatus
from ..schemas.vacation import VacationBalanceRead, VacationCreate, VacationRead, VacationUpdate
from .employees import get_employee

router = APIRouter()

# statuses whose days count as enjoyed
TAKEN = (RecordStatus.APROBADO.value, RecordStatus.PROCESADA.value)


def get_vacation(db: Session, vacation_id: int) -> models.Vacation:
    vacation = db.get(models.Vacation, vacation_id)
    if vacation is None:
        raise HTTPException(status_code=404, detail="Vacación no encontrada")
    return vacation


def sync_enjoyed_days(db: Session, employee: models.Employee) -> models.VacationBalance:
    """Recompute enjoyed days from the approved requests of ``employee``."""
    taken = (
        db.query(models.Vacation)
        .filter(models.Vacation.employee_id == employee.id, models.Vacation.status.in_(TAKEN))
        .all()
    )
    balance = employee.vacation_balance
    if balance is None:
        balance = models.VacationBalance(employee=employee, assigned_days=0)
        db.add(balance)
    balance.enjoyed_days = sum((Decimal(v.days or 0) for v in taken), Decimal(0))
    return balance


def balance_schema(employee_id: int, balance) -> VacationBalanceRead:
    if balance is None:
        return VacationBalanceRead(employee_id=employee_id)
    return VacationBalanceRead(
        employee_id=employee_id,
        assigned_days=balance.assigned_days or 0,
        enjoyed_days=balance.enjoyed_days or 0,
        remaining_days=balance.remaining_days,
    )


@router.post("/", response_model=VacationRead)
def create(payload: VacationCreate, db: Session = Depends(get_db)):
    employee = get_employee(db, payload.employee_id)
    if payload.days <= 0:
        raise HTTPException(status_code=422, detail="La cantidad de días debe ser positiva")
    vacation = models.Vacation(
        employee_id=employee.id,
        company_id=employee.company_id,
        start_date=payload.start_date,
        days=payload.days,
        reason=payload.reason,
        status=payload.status.value,
    )
    db.add(vacation)
    db.flush()
    sync_enjoyed_days(db, employee)
    db.commit()
    db.refresh(vacation)
    return vacation


@router.get("/", response_model=list[VacationRead])
def list_all(empleado_id: int | None = None, db: Session = Depends(get_db)):
    query = db.query(models.Vacation)
    if empleado_id is not None:
        query = query.filter(models.Vacation.employee_id == empleado_id)
    return query.order_by(models.Vacation.start_date).all()


@router.put("/{vacation_id}", response_model=VacationRead)
def update(vacation_id: int, payload: VacationUpdate, db: Session = Depends(get_db)):
    vacation = get_vacation(db, vacation_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(vacation, key, getattr(value, "value", value))
    db.flush()
    sync_enjoyed_days(db, get_employee(db, vacation.employee_id))
    db.commit()
    db.refresh(vacation)
    return vacation


@router.delete("/{vacation_id}")
def delete(vacation_id: int, db: Session = Depends(get_db)):
    vacation = get_vacation(db, vacation_id)
    employee = get_employee(db, vacation.employee_id)
    db.delete(vacation)
    db.flush()
    sync_enjoyed_days(db, employee)
    db.commit()
    return {"status": "deleted"}


@router.get("/saldo/{empleado_id}", response_model=VacationBalanceRead)
def balance(empleado_id: int, db: Session = Depends(get_db)):
    employee = get_employee(db, empleado_id)
    return balance_schema(employee.id, employee.vacation_balance)
