from datetime import date
from pydantic import BaseModel
from typing import Optional

from ..domain.enums import Currency, PayPeriod


class CompanyCreate(BaseModel):
    name: str
    fee: float = 0.05


class CompanyRead(CompanyCreate):
    id: int

    model_config = {
        "from_attributes": True,
    }


class EmployeeBase(BaseModel):
    company_id: int
    name: str
    member_code: Optional[str] = None
    national_id: Optional[str] = None
    email: Optional[str] = None
    position: Optional[str] = None
    base_salary: float = 0
    pay_period: PayPeriod = PayPeriod.MENSUAL
    currency: Currency = Currency.COLONES
    rtn_flag: int = 0
    ccss_flag: int = 0
    insured_amount: float = 0
    hire_date: Optional[date] = None
    termination_date: Optional[date] = None
    active: bool = True
    accumulated_severance: float = 0
    accumulated_aguinaldo: float = 0


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    member_code: Optional[str] = None
    national_id: Optional[str] = None
    email: Optional[str] = None
    position: Optional[str] = None
    base_salary: Optional[float] = None
    pay_period: Optional[PayPeriod] = None
    currency: Optional[Currency] = None
    rtn_flag: Optional[int] = None
    ccss_flag: Optional[int] = None
    insured_amount: Optional[float] = None
    hire_date: Optional[date] = None
    termination_date: Optional[date] = None
    active: Optional[bool] = None
    accumulated_severance: Optional[float] = None
    accumulated_aguinaldo: Optional[float] = None


class EmployeeRead(EmployeeBase):
    id: int
    base_salary: Optional[float] = None
    pay_period: Optional[str] = None
    currency: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
