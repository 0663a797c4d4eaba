"""HTML body of the per-employee payroll email.

The markup lives in ``templates/payroll.html``; this module prepares the
values it shows.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from jinja2 import Environment, PackageLoader

from ..calc.currency import format_currency, to_decimal
from ..calc.payroll import EmployeeBreakdown
from ..domain.enums import Currency

PERIOD_LABELS = {
    "mensual": "Mensual",
    "quincenal": "Quincenal",
    "semanal": "Semanal",
}

# (category key, category label, action label, sign)
DETAIL_ROWS = (
    ("increases", "Compensación Anual", "Aumento", "+"),
    ("overtime", "Compensación Extra", "Ingreso", "+"),
    ("metric_bonuses", "Compensación por Métrica", "Ingreso", "+"),
    ("deductions", "Rebajo a Compensación", "Deducción", "-"),
)

env = Environment(loader=PackageLoader("planilla", "mail/templates"), autoescape=True)
env.filters["money"] = format_currency


@dataclass
class DetailRow:
    category: str
    action: str
    amount: str
    sign: str


def period_label(pay_period) -> str:
    key = str(pay_period or "").strip().lower()
    return PERIOD_LABELS.get(key, key.capitalize() or "Mensual")


def display_currency(currency) -> str:
    """Colones-and-dollars payrolls render line items in colones."""
    if str(currency or "").strip().lower() == Currency.DOLARES.value:
        return Currency.DOLARES.value
    return Currency.COLONES.value


def currency_label(currency) -> str:
    if display_currency(currency) == Currency.DOLARES.value:
        return "Dólares ($)"
    return "Colones (₡)"


def detail_rows(breakdown: EmployeeBreakdown, adjustments: Dict[str, Iterable], currency) -> List[DetailRow]:
    rows = []
    for key, category, action, sign in DETAIL_ROWS:
        for amount in adjustments.get(key, ()):
            rows.append(DetailRow(category, action, format_currency(to_decimal(amount), currency), sign))
    # withholding rows only when they actually withhold something
    if breakdown.rtn.applies and breakdown.rtn.amount > 0:
        rows.append(DetailRow("RTN", "Deducción", breakdown.rtn.formatted, "-"))
    if breakdown.ccss.applies and breakdown.ccss.amount > 0:
        rows.append(DetailRow("S.T.I CCSS", "Deducción", breakdown.ccss.formatted, "-"))
    return rows


def render_payroll_email(
    payroll,
    breakdown: EmployeeBreakdown,
    adjustments: Optional[Dict[str, Iterable]] = None,
    company_name: Optional[str] = None,
) -> str:
    employee = breakdown.employee
    currency = display_currency(employee.currency)
    return env.get_template("payroll.html").render(
        payroll=payroll,
        breakdown=breakdown,
        employee=employee,
        currency=currency,
        currency_name=currency_label(employee.currency),
        kind=period_label(payroll.pay_period),
        rows=detail_rows(breakdown, adjustments or {}, currency),
        company_name=company_name,
    )


def subject_for(payroll) -> str:
    return f"Planilla de Compensación - {payroll.code}"
