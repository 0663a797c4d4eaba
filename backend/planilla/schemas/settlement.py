from datetime import date
from pydantic import BaseModel
from typing import List, Optional


class MonthlyPayRead(BaseModel):
    month: date
    salary: float
    days_worked: int
    amount: float

    model_config = {
        "from_attributes": True,
    }


class SettlementRead(BaseModel):
    employee_id: int
    name: str
    currency: Optional[str] = None
    hire_date: Optional[date] = None
    end_date: date
    days: int
    years: float
    months: float
    history: List[MonthlyPayRead] = []
    average_monthly: float
    average_daily: float
    notice_days: float
    notice_amount: float
    severance_days: float
    severance_amount: float
    aguinaldo: float
    vacation_days: float
    vacation_amount: float
    accumulated_severance: float
    accumulated_aguinaldo: float
    total: float
    total_formatted: str
