import logging
import secrets
import string
from collections import defaultdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from .. import models
from ..calc.currency import to_decimal
from ..calc.payroll import employee_breakdown, payroll_totals
from ..config import settings
from ..database import get_db
from ..domain.enums import Currency, PayrollState, RecordStatus
from ..domain.records import EmployeeRecord
from ..jobs.payroll_mail import PayrollMailJob
from ..mail.sender import get_mailer
from ..queries import ADJUSTMENT_MODELS, REVIEW_STATUSES, adjustment_records, eligible_employees, load_adjustments
from ..schemas.payroll import (
    MailResultRead,
    NotificationReport,
    PayrollCreate,
    PayrollRead,
    PayrollRow,
    PayrollSummary,
    PayrollTotalsRead,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CODE_SYMBOLS = {
    Currency.COLONES.value: "₡",
    Currency.DOLARES.value: "$",
    Currency.COLONES_Y_DOLARES.value: "₡$",
}
CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(currency: str, pay_period: str, today: date | None = None) -> str:
    """Payroll reference such as ``PL₡-GT3-Quin-20250805-GHUH31``."""
    today = today or date.today()
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(6))
    symbol = CODE_SYMBOLS.get(currency, "₡")
    return f"PL{symbol}-GT3-{pay_period[:4].capitalize()}-{today:%Y%m%d}-{suffix}"


def get_payroll(db: Session, payroll_id: int) -> models.Payroll:
    payroll = db.get(models.Payroll, payroll_id)
    if payroll is None:
        raise HTTPException(status_code=404, detail="Planilla no encontrada")
    return payroll


def require_open(payroll: models.Payroll):
    if payroll.state != PayrollState.EN_PROCESO.value:
        raise HTTPException(status_code=409, detail=f"Planilla {payroll.code} ya está {payroll.state}")


@router.post("/", response_model=PayrollRead)
def create(payload: PayrollCreate, db: Session = Depends(get_db)):
    if db.get(models.Company, payload.company_id) is None:
        raise HTTPException(status_code=404, detail="Empresa no encontrada")
    code = payload.code or generate_code(payload.currency.value, payload.pay_period.value)
    if db.query(models.Payroll).filter(models.Payroll.code == code).first() is not None:
        raise HTTPException(status_code=409, detail=f"Ya existe la planilla {code}")
    payroll = models.Payroll(
        code=code,
        company_id=payload.company_id,
        currency=payload.currency.value,
        pay_period=payload.pay_period.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        state=PayrollState.EN_PROCESO.value,
        mail_sent=False,
    )
    db.add(payroll)
    db.commit()
    db.refresh(payroll)
    logger.info("payroll %s created", payroll.code)
    return payroll


@router.get("/", response_model=list[PayrollRead])
def list_all(company_id: int | None = None, state: str | None = None, db: Session = Depends(get_db)):
    query = db.query(models.Payroll)
    if company_id is not None:
        query = query.filter(models.Payroll.company_id == company_id)
    if state:
        query = query.filter(models.Payroll.state == state)
    return query.order_by(models.Payroll.id.desc()).all()


@router.get("/{payroll_id}", response_model=PayrollRead)
def read(payroll_id: int, db: Session = Depends(get_db)):
    return get_payroll(db, payroll_id)


@router.get("/{payroll_id}/resumen", response_model=PayrollSummary)
def summary(payroll_id: int, db: Session = Depends(get_db)):
    payroll = get_payroll(db, payroll_id)
    adjustments = load_adjustments(db, payroll.id, REVIEW_STATUSES)

    rows = []
    breakdowns = []
    for employee in eligible_employees(db, payroll):
        record = EmployeeRecord.model_validate(employee)
        b = employee_breakdown(
            record,
            increases=adjustments["increases"].get(employee.id, []),
            overtime=adjustments["overtime"].get(employee.id, []),
            metric_bonuses=adjustments["metric_bonuses"].get(employee.id, []),
            deductions=adjustments["deductions"].get(employee.id, []),
        )
        breakdowns.append(b)
        rows.append(PayrollRow(
            employee_id=employee.id,
            name=employee.name,
            national_id=employee.national_id,
            compensation_base=b.base_formatted,
            devengado=b.devengado.formatted,
            devengado_amount=b.devengado.amount,
            social_charges=b.ccss.formatted,
            rtn=b.rtn.formatted,
            rtn_amount=b.rtn.amount,
        ))

    fee = payroll.company.fee if payroll.company and payroll.company.fee is not None else settings.DEFAULT_FEE
    totals = payroll_totals(breakdowns, fee)
    return PayrollSummary(
        payroll=PayrollRead.model_validate(payroll),
        rows=rows,
        totals=PayrollTotalsRead(
            total_devengado=totals.total_devengado,
            tarifa=totals.tarifa,
            suma_rti=totals.suma_rti,
            iva=totals.iva,
            total_facturar=totals.total_facturar,
            fee=totals.fee,
        ),
    )


@router.post("/{payroll_id}/aplicar")
def approve(payroll_id: int, db: Session = Depends(get_db)):
    """Approve every pending record of the payroll."""
    payroll = get_payroll(db, payroll_id)
    require_open(payroll)
    approved = {}
    for name, model in ADJUSTMENT_MODELS.items():
        records = adjustment_records(db, model, payroll.id, [RecordStatus.PENDIENTE])
        for record in records:
            record.status = RecordStatus.APROBADO.value
        approved[name] = len(records)
    db.commit()
    logger.info("payroll %s approved: %s", payroll.code, approved)
    return {"planilla": payroll.code, "aprobados": approved}


@router.post("/{payroll_id}/procesar", response_model=PayrollRead)
def process(payroll_id: int, db: Session = Depends(get_db)):
    """Apply approved increases to salaries and close the approved records."""
    payroll = get_payroll(db, payroll_id)
    require_open(payroll)

    increases = defaultdict(list)
    for record in adjustment_records(db, models.SalaryIncrease, payroll.id, [RecordStatus.APROBADO]):
        increases[record.employee_id].append(record)

    for employee_id, records in increases.items():
        employee = db.get(models.Employee, employee_id)
        salary = to_decimal(employee.base_salary)
        for record in records:
            record.previous_salary = salary
            salary += to_decimal(record.amount)
            record.new_salary = salary
        logger.info("employee %s salary %s -> %s", employee.id, employee.base_salary, salary)
        employee.base_salary = salary

    for model in ADJUSTMENT_MODELS.values():
        for record in adjustment_records(db, model, payroll.id, [RecordStatus.APROBADO]):
            record.status = RecordStatus.PROCESADA.value

    payroll.state = PayrollState.PROCESADA.value
    db.commit()
    db.refresh(payroll)
    logger.info("payroll %s processed", payroll.code)
    return payroll


@router.post("/{payroll_id}/notificar", response_model=NotificationReport)
def notify(payroll_id: int, db: Session = Depends(get_db), mailer=Depends(get_mailer)):
    payroll = get_payroll(db, payroll_id)
    if payroll.state != PayrollState.PROCESADA.value:
        raise HTTPException(status_code=409, detail=f"Planilla {payroll.code} no está procesada")
    if payroll.mail_sent:
        raise HTTPException(status_code=409, detail=f"Planilla {payroll.code} ya fue notificada")

    code = payroll.code
    # release the request transaction before the job writes on its own sessions
    db.rollback()
    job = PayrollMailJob(sessionmaker(bind=db.get_bind()), mailer_factory=lambda: mailer)
    results = job.notify(payroll_id)
    return NotificationReport(
        payroll=code,
        sent=sum(1 for r in results if r.success),
        total=len(results),
        results=[MailResultRead(**r.to_dict()) for r in results],
    )
