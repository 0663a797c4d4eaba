from datetime import date
from pydantic import BaseModel
from typing import List, Optional

from ..domain.enums import Currency, PayPeriod


class PayrollCreate(BaseModel):
    company_id: int
    currency: Currency = Currency.COLONES
    pay_period: PayPeriod = PayPeriod.MENSUAL
    code: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PayrollRead(BaseModel):
    id: int
    code: str
    company_id: int
    currency: str
    pay_period: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    state: str
    mail_sent: bool = False

    model_config = {
        "from_attributes": True,
    }


class PayrollRow(BaseModel):
    employee_id: int
    name: str
    national_id: Optional[str] = None
    compensation_base: str
    devengado: str
    devengado_amount: float
    social_charges: str
    rtn: str
    rtn_amount: float


class PayrollTotalsRead(BaseModel):
    total_devengado: float
    tarifa: float
    suma_rti: float
    iva: float
    total_facturar: float
    fee: float


class PayrollSummary(BaseModel):
    payroll: PayrollRead
    rows: List[PayrollRow] = []
    totals: PayrollTotalsRead


class MailResultRead(BaseModel):
    success: bool
    employee: Optional[str] = None
    email: Optional[str] = None
    payroll: Optional[str] = None
    message_id: Optional[str] = None
    error: Optional[str] = None


class NotificationReport(BaseModel):
    payroll: str
    sent: int
    total: int
    results: List[MailResultRead] = []
