from datetime import date
from decimal import Decimal
from pydantic import BaseModel, field_validator
from typing import Optional, Union


class EmployeeRecord(BaseModel):
    """Read-only view of an employee as the calculators see it."""

    id: Optional[int] = None
    name: str = ""
    member_code: Optional[str] = None
    national_id: Optional[str] = None
    email: Optional[str] = None
    base_salary: Decimal = Decimal(0)
    pay_period: Optional[str] = "mensual"
    currency: Optional[str] = "colones"
    # stored as 0/1 but older rows carry strings
    rtn_flag: Union[int, str, None] = 0
    ccss_flag: Union[int, str, None] = 0
    insured_amount: Decimal = Decimal(0)
    hire_date: Optional[date] = None
    termination_date: Optional[date] = None
    accumulated_severance: Decimal = Decimal(0)
    accumulated_aguinaldo: Decimal = Decimal(0)

    model_config = {
        "from_attributes": True,
    }

    @field_validator(
        "base_salary", "insured_amount", "accumulated_severance", "accumulated_aguinaldo", mode="before"
    )
    @classmethod
    def _blank_is_zero(cls, value):
        if value is None or value == "":
            return Decimal(0)
        return value


class SalaryChange(BaseModel):
    effective_date: date
    previous_salary: Optional[Decimal] = None
    new_salary: Decimal

    model_config = {
        "from_attributes": True,
    }
