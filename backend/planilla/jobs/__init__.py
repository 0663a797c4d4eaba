from ..config import settings
from .payroll_mail import PayrollMailJob
from .scheduler import IntervalJob
from .vacations import run_vacation_accrual


def build_jobs(session_factory, config=settings) -> list:
    mail_job = PayrollMailJob(session_factory, timeout=config.FETCH_TIMEOUT)
    return [
        IntervalJob("payroll-mail", mail_job.run, config.PAYROLL_MAIL_INTERVAL),
        IntervalJob("vacation-accrual", lambda: run_vacation_accrual(session_factory),
                    config.VACATION_ACCRUAL_INTERVAL),
    ]


__all__ = ["IntervalJob", "PayrollMailJob", "build_jobs", "run_vacation_accrual"]
