from .enums import Currency, IncreaseKind, PayPeriod, PayrollState, RecordStatus
from .records import EmployeeRecord, SalaryChange

__all__ = [
    "Currency",
    "EmployeeRecord",
    "IncreaseKind",
    "PayPeriod",
    "PayrollState",
    "RecordStatus",
    "SalaryChange",
]
