from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models
from ..database import get_db
from ..schemas.employee import CompanyCreate, CompanyRead

router = APIRouter()


@router.post("/", response_model=CompanyRead)
def create(payload: CompanyCreate, db: Session = Depends(get_db)):
    company = models.Company(name=payload.name, fee=payload.fee)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@router.get("/", response_model=list[CompanyRead])
def list_all(db: Session = Depends(get_db)):
    return db.query(models.Company).order_by(models.Company.id).all()
