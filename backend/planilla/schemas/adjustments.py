from datetime import date
from pydantic import BaseModel, field_validator
from typing import Optional

from ..domain.enums import IncreaseKind, RecordStatus


class StatusMixin(BaseModel):
    status: RecordStatus = RecordStatus.PENDIENTE

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        if value is None:
            return None
        return RecordStatus.parse(value)


class AdjustmentRead(BaseModel):
    id: int
    employee_id: int
    company_id: int
    payroll_id: int
    amount: float
    status: str

    model_config = {
        "from_attributes": True,
    }


# --- aumentos ---

class IncreaseCreate(StatusMixin):
    employee_id: int
    payroll_id: int
    kind: IncreaseKind = IncreaseKind.MONTO
    value: float
    effective_date: Optional[date] = None


class IncreaseUpdate(StatusMixin):
    kind: Optional[IncreaseKind] = None
    value: Optional[float] = None
    effective_date: Optional[date] = None
    status: Optional[RecordStatus] = None


class IncreaseRead(AdjustmentRead):
    kind: Optional[str] = None
    value: Optional[float] = None
    previous_salary: Optional[float] = None
    new_salary: Optional[float] = None
    effective_date: Optional[date] = None


# --- compensación extra ---

class OvertimeCreate(StatusMixin):
    employee_id: int
    payroll_id: int
    kind: Optional[str] = None
    hours: float = 0
    rate: float = 0
    amount: Optional[float] = None
    description: Optional[str] = None
    counts_for_annual: bool = True


class OvertimeUpdate(StatusMixin):
    kind: Optional[str] = None
    hours: Optional[float] = None
    rate: Optional[float] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    counts_for_annual: Optional[bool] = None
    status: Optional[RecordStatus] = None


class OvertimeRead(AdjustmentRead):
    kind: Optional[str] = None
    hours: Optional[float] = None
    rate: Optional[float] = None
    description: Optional[str] = None
    counts_for_annual: Optional[bool] = None


# --- compensación por métrica ---

class MetricBonusCreate(StatusMixin):
    employee_id: int
    payroll_id: int
    kind: str = "productividad"
    amount: float
    reason: Optional[str] = None
    counts_for_annual: bool = True


class MetricBonusUpdate(StatusMixin):
    kind: Optional[str] = None
    amount: Optional[float] = None
    reason: Optional[str] = None
    counts_for_annual: Optional[bool] = None
    status: Optional[RecordStatus] = None


class MetricBonusRead(AdjustmentRead):
    kind: Optional[str] = None
    reason: Optional[str] = None
    counts_for_annual: Optional[bool] = None


# --- rebajos ---

class DeductionCreate(StatusMixin):
    employee_id: int
    payroll_id: int
    kind: Optional[str] = None
    hours: float = 0
    amount: float
    reason: Optional[str] = None
    counts_for_annual: bool = True


class DeductionUpdate(StatusMixin):
    kind: Optional[str] = None
    hours: Optional[float] = None
    amount: Optional[float] = None
    reason: Optional[str] = None
    counts_for_annual: Optional[bool] = None
    status: Optional[RecordStatus] = None


class DeductionRead(AdjustmentRead):
    kind: Optional[str] = None
    hours: Optional[float] = None
    reason: Optional[str] = None
    counts_for_annual: Optional[bool] = None
