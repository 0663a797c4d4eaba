from .currency import format_currency, to_decimal, to_flag
from .payroll import (
    Amount,
    Charge,
    EmployeeBreakdown,
    PayrollTotals,
    compensation_base,
    earned_total,
    employee_breakdown,
    format_compensation_base,
    normalize_fee,
    payroll_totals,
    rtn,
    rtn_net_total,
    social_charges,
)
from .settlement import (
    Settlement,
    notice_days,
    salary_for_month,
    settle,
    severance_days,
    tenure_days,
    tenure_months,
    tenure_years,
)

__all__ = [
    "Amount",
    "Charge",
    "EmployeeBreakdown",
    "PayrollTotals",
    "Settlement",
    "compensation_base",
    "earned_total",
    "employee_breakdown",
    "format_compensation_base",
    "format_currency",
    "normalize_fee",
    "notice_days",
    "payroll_totals",
    "rtn",
    "rtn_net_total",
    "salary_for_month",
    "settle",
    "severance_days",
    "social_charges",
    "tenure_days",
    "tenure_months",
    "tenure_years",
    "to_decimal",
    "to_flag",
]
