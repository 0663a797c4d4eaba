from datetime import date
from pydantic import BaseModel
from typing import Optional

from .adjustments import StatusMixin
from ..domain.enums import RecordStatus


class VacationCreate(StatusMixin):
    employee_id: int
    start_date: date
    days: float
    reason: Optional[str] = None


class VacationUpdate(StatusMixin):
    start_date: Optional[date] = None
    days: Optional[float] = None
    reason: Optional[str] = None
    status: Optional[RecordStatus] = None


class VacationRead(BaseModel):
    id: int
    employee_id: int
    company_id: int
    start_date: date
    days: float
    reason: Optional[str] = None
    status: str

    model_config = {
        "from_attributes": True,
    }


class VacationBalanceRead(BaseModel):
    employee_id: int
    assigned_days: float = 0
    enjoyed_days: float = 0
    remaining_days: float = 0

    model_config = {
        "from_attributes": True,
    }
