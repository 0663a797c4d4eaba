from sqlalchemy import Boolean, Column, Integer, String, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import declarative_base, declared_attr, relationship
from datetime import datetime

from .domain.enums import PayrollState, RecordStatus

Base = declarative_base()


class Company(Base):
    __tablename__ = 'empresas'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # service fee, either 0.05 or 5 for five percent
    fee = Column(Numeric(8, 4), default=0.05)

    employees = relationship("Employee", back_populates="company")


class Employee(Base):
    __tablename__ = 'empleados'

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey('empresas.id'), nullable=False, index=True)
    member_code = Column(String, nullable=True)
    name = Column(String, nullable=False)
    national_id = Column(String, nullable=True)
    email = Column(String, nullable=True)
    position = Column(String, nullable=True)
    base_salary = Column(Numeric(14, 2), nullable=True)
    pay_period = Column(String, default="mensual")
    currency = Column(String, default="colones")
    rtn_flag = Column(Integer, default=0)
    ccss_flag = Column(Integer, default=0)
    insured_amount = Column(Numeric(14, 2), default=0)
    hire_date = Column(Date, nullable=True)
    termination_date = Column(Date, nullable=True)
    active = Column(Boolean, default=True)
    accumulated_severance = Column(Numeric(14, 2), default=0)
    accumulated_aguinaldo = Column(Numeric(14, 2), default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    company = relationship("Company", back_populates="employees")
    vacation_balance = relationship("VacationBalance", uselist=False, back_populates="employee",
                                    cascade="all, delete-orphan")


class Payroll(Base):
    __tablename__ = 'planillas'

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, nullable=False, unique=True)
    company_id = Column(Integer, ForeignKey('empresas.id'), nullable=False, index=True)
    currency = Column(String, nullable=False)
    pay_period = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    state = Column(String, default=PayrollState.EN_PROCESO.value)
    mail_sent = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    company = relationship("Company")


class AdjustmentMixin:
    """Columns shared by every per-payroll adjustment table."""

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    status = Column(String, default=RecordStatus.PENDIENTE.value)
    created_at = Column(DateTime, default=datetime.utcnow)

    @declared_attr
    def employee_id(cls):
        return Column(Integer, ForeignKey('empleados.id'), nullable=False, index=True)

    @declared_attr
    def company_id(cls):
        return Column(Integer, ForeignKey('empresas.id'), nullable=False)

    @declared_attr
    def payroll_id(cls):
        return Column(Integer, ForeignKey('planillas.id'), nullable=False, index=True)


class SalaryIncrease(AdjustmentMixin, Base):
    __tablename__ = 'aumentos'

    kind = Column(String, default="monto")  # monto | porcentaje
    value = Column(Numeric(14, 2), default=0)
    previous_salary = Column(Numeric(14, 2), nullable=True)
    new_salary = Column(Numeric(14, 2), nullable=True)
    effective_date = Column(Date, nullable=True)


class Overtime(AdjustmentMixin, Base):
    __tablename__ = 'compensaciones_extra'

    kind = Column(String, nullable=True)
    hours = Column(Numeric(8, 2), default=0)
    rate = Column(Numeric(14, 2), default=0)
    description = Column(String, nullable=True)
    counts_for_annual = Column(Boolean, default=True)


class MetricBonus(AdjustmentMixin, Base):
    __tablename__ = 'compensaciones_metrica'

    kind = Column(String, default="productividad")
    reason = Column(String, nullable=True)
    counts_for_annual = Column(Boolean, default=True)


class Deduction(AdjustmentMixin, Base):
    __tablename__ = 'rebajos'

    kind = Column(String, nullable=True)
    hours = Column(Numeric(8, 2), default=0)
    reason = Column(String, nullable=True)
    counts_for_annual = Column(Boolean, default=True)


class Vacation(Base):
    __tablename__ = 'vacaciones'

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey('empleados.id'), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey('empresas.id'), nullable=False)
    start_date = Column(Date, nullable=False)
    days = Column(Numeric(6, 2), nullable=False)
    reason = Column(String, nullable=True)
    status = Column(String, default=RecordStatus.PENDIENTE.value)
    created_at = Column(DateTime, default=datetime.utcnow)


class VacationBalance(Base):
    __tablename__ = 'saldo_vacaciones'

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey('empleados.id'), nullable=False, unique=True)
    assigned_days = Column(Numeric(6, 2), default=0)
    enjoyed_days = Column(Numeric(6, 2), default=0)
    last_accrued_on = Column(Date, nullable=True)

    employee = relationship("Employee", back_populates="vacation_balance")

    @property
    def remaining_days(self):
        return (self.assigned_days or 0) - (self.enjoyed_days or 0)
