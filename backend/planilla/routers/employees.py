from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..database import get_db
from ..schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate

router = APIRouter()


def get_employee(db: Session, employee_id: int) -> models.Employee:
    employee = db.get(models.Employee, employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return employee


def _enum_value(value):
    return getattr(value, "value", value)


@router.post("/", response_model=EmployeeRead)
def create(payload: EmployeeCreate, db: Session = Depends(get_db)):
    if db.get(models.Company, payload.company_id) is None:
        raise HTTPException(status_code=404, detail="Empresa no encontrada")
    data = {k: _enum_value(v) for k, v in payload.model_dump().items()}
    employee = models.Employee(**data)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@router.get("/", response_model=list[EmployeeRead])
def list_all(
    company_id: int | None = None,
    active: bool | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(models.Employee)
    if company_id is not None:
        query = query.filter(models.Employee.company_id == company_id)
    if active is not None:
        query = query.filter(models.Employee.active == active)
    return query.order_by(models.Employee.id).all()


@router.get("/{employee_id}", response_model=EmployeeRead)
def read(employee_id: int, db: Session = Depends(get_db)):
    return get_employee(db, employee_id)


@router.put("/{employee_id}", response_model=EmployeeRead)
def update(employee_id: int, payload: EmployeeUpdate, db: Session = Depends(get_db)):
    employee = get_employee(db, employee_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(employee, key, _enum_value(value))
    db.commit()
    db.refresh(employee)
    return employee


@router.delete("/{employee_id}")
def delete(employee_id: int, db: Session = Depends(get_db)):
    employee = get_employee(db, employee_id)
    db.delete(employee)
    db.commit()
    return {"status": "deleted"}
