"""Payroll arithmetic shared by the review endpoint, the mail job and settlements.

Every function here is pure: it reads plain values or :class:`EmployeeRecord`
instances and never touches the database. Bad numeric input degrades to 0
instead of raising.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..domain.enums import Currency, PayPeriod
from ..domain.records import EmployeeRecord
from .currency import format_currency, to_decimal, to_flag

# 52 weeks / 12 months, as fixed by the labour code
WEEKS_PER_MONTH = Decimal("4.33")
RTN_RATE = Decimal("0.01")
IVA_RATE = Decimal("0.13")
DEFAULT_FEE = Decimal("0.05")


@dataclass
class Amount:
    amount: Decimal
    formatted: str


@dataclass
class Charge:
    applies: bool
    amount: Decimal
    formatted: str
    description: str = ""


@dataclass
class PayrollTotals:
    total_devengado: Decimal
    tarifa: Decimal
    suma_rti: Decimal
    iva: Decimal
    total_facturar: Decimal
    fee: Decimal


def scale_by_period(amount: Decimal, pay_period: Optional[str]) -> Decimal:
    period = str(pay_period or "").strip().lower()
    if period == PayPeriod.QUINCENAL.value:
        return amount / 2
    if period == PayPeriod.SEMANAL.value:
        return amount * WEEKS_PER_MONTH
    # mensual and anything unrecognised pass through
    return amount


def compensation_base(base_salary, pay_period: Optional[str]) -> Decimal:
    """Base pay for one period; non-positive salaries yield 0."""
    salary = to_decimal(base_salary)
    if salary <= 0:
        return Decimal(0)
    return scale_by_period(salary, pay_period)


def _format_positive(amount: Decimal, currency) -> str:
    if amount <= 0:
        return "0"
    if str(currency or "").strip().lower() == Currency.DOLARES.value:
        return format_currency(amount, Currency.DOLARES)
    return format_currency(amount, Currency.COLONES)


def format_compensation_base(base: Decimal, currency, base_salary=None, pay_period=None) -> str:
    if base <= 0:
        return "0"
    if str(currency or "").strip().lower() == Currency.COLONES_Y_DOLARES.value:
        both = compensation_base(base_salary if base_salary is not None else base, pay_period)
        return f"{format_currency(both, Currency.COLONES)} / {format_currency(both, Currency.DOLARES)}"
    return _format_positive(base, currency)


def sum_amounts(amounts: Iterable) -> Decimal:
    return sum((to_decimal(a) for a in amounts or ()), Decimal(0))


def earned_total(
    base: Decimal,
    increases: Iterable = (),
    overtime: Iterable = (),
    metric_bonuses: Iterable = (),
    deductions: Iterable = (),
    currency: Optional[str] = Currency.COLONES.value,
) -> Amount:
    """Devengado: base plus every additive adjustment minus deductions.

    The lists hold raw amounts. A total at or below zero is displayed as the
    literal ``"0"``.
    """
    total = to_decimal(base)
    total += sum_amounts(increases)
    total += sum_amounts(overtime)
    total += sum_amounts(metric_bonuses)
    total -= sum_amounts(deductions)
    return Amount(amount=total, formatted=_format_positive(total, currency))


def rtn(base: Decimal, rtn_flag) -> Charge:
    if to_flag(rtn_flag) != 1:
        return Charge(applies=False, amount=Decimal(0), formatted="0", description="No aplica")
    base = to_decimal(base)
    if base <= 0:
        return Charge(applies=True, amount=Decimal(0), formatted="0",
                      description="Compensación base inválida")
    amount = base * RTN_RATE
    return Charge(
        applies=True,
        amount=amount,
        formatted=format_currency(amount, Currency.COLONES),
        description="RTN 1% sobre compensación base",
    )


def rtn_net_total(employee: EmployeeRecord, base: Decimal) -> Charge:
    """RTN for an employee; always reported in colones."""
    return rtn(base, employee.rtn_flag)


def social_charges(employee: EmployeeRecord) -> Charge:
    """S.T.I CCSS on the insured amount, scaled like the compensation base.

    Callers must check both ``applies`` and ``amount``: an employee flagged
    for CCSS with no insured amount still "applies" with a zero amount.
    """
    if to_flag(employee.ccss_flag) != 1:
        return Charge(applies=False, amount=Decimal(0), formatted="0", description="No aplica")
    insured = to_decimal(employee.insured_amount)
    if insured <= 0:
        return Charge(applies=True, amount=Decimal(0), formatted="0",
                      description="Monto asegurado inválido")
    amount = scale_by_period(insured, employee.pay_period)
    return Charge(
        applies=True,
        amount=amount,
        formatted=format_currency(amount, Currency.COLONES),
        description=f"S.T.I CCSS sobre monto asegurado ({employee.pay_period or 'mensual'})",
    )


def normalize_fee(fee) -> Decimal:
    """Accept 0.05 or 5 for five percent."""
    value = to_decimal(fee)
    if value < 0:
        return Decimal(0)
    if value > 1:
        return value / 100
    return value


def payroll_totals(rows: Iterable, fee=DEFAULT_FEE) -> PayrollTotals:
    """Invoice totals for a payroll run.

    ``rows`` expose ``devengado`` and ``rtn`` numbers. CCSS is not part of
    the invoice: only devengado, the service fee and RTN feed the VAT base.
    """
    fee = normalize_fee(fee)
    total_devengado = Decimal(0)
    suma_rti = Decimal(0)
    for row in rows or ():
        total_devengado += to_decimal(_field(row, "devengado"))
        suma_rti += to_decimal(_field(row, "rtn"))

    tarifa = total_devengado * fee
    iva = (total_devengado + tarifa + suma_rti) * IVA_RATE
    return PayrollTotals(
        total_devengado=total_devengado,
        tarifa=tarifa,
        suma_rti=suma_rti,
        iva=iva,
        total_facturar=total_devengado + tarifa + suma_rti + iva,
        fee=fee,
    )


def _field(row, name):
    if isinstance(row, dict):
        value = row.get(name)
    else:
        value = getattr(row, name, None)
    # breakdowns carry Amount/Charge objects rather than bare numbers
    return getattr(value, "amount", value)


@dataclass
class EmployeeBreakdown:
    employee: EmployeeRecord
    base: Decimal
    base_formatted: str
    increases: Decimal
    overtime: Decimal
    metric_bonuses: Decimal
    deductions: Decimal
    devengado: Amount
    rtn: Charge
    ccss: Charge


def employee_breakdown(
    employee: EmployeeRecord,
    increases: Iterable = (),
    overtime: Iterable = (),
    metric_bonuses: Iterable = (),
    deductions: Iterable = (),
) -> EmployeeBreakdown:
    """Everything the review table and the payroll email show for one person."""
    increases, overtime = list(increases), list(overtime)
    metric_bonuses, deductions = list(metric_bonuses), list(deductions)

    base = compensation_base(employee.base_salary, employee.pay_period)
    return EmployeeBreakdown(
        employee=employee,
        base=base,
        base_formatted=format_compensation_base(
            base, employee.currency, employee.base_salary, employee.pay_period
        ),
        increases=sum_amounts(increases),
        overtime=sum_amounts(overtime),
        metric_bonuses=sum_amounts(metric_bonuses),
        deductions=sum_amounts(deductions),
        devengado=earned_total(base, increases, overtime, metric_bonuses, deductions,
                               employee.currency),
        rtn=rtn_net_total(employee, base),
        ccss=social_charges(employee),
    )
