"""Emails every eligible employee of a processed payroll, once per payroll."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FetchTimeout
from typing import Callable, Dict, List, Optional

from .. import models
from ..calc.payroll import employee_breakdown
from ..config import settings
from ..domain.enums import PayrollState, RecordStatus
from ..domain.records import EmployeeRecord
from ..mail.sender import MailResult, get_mailer, send_payroll_email
from ..queries import ADJUSTMENT_MODELS, adjustment_records, amounts_by_employee, eligible_employees

logger = logging.getLogger(__name__)

# category -> callable(payroll_id) returning {employee_id: [amounts]}
Fetcher = Callable[[int], Dict[int, list]]

# serialises notifications so a payroll is never mailed by two callers at once
_send_lock = threading.Lock()


def db_fetchers(session_factory, statuses=(RecordStatus.PROCESADA,)) -> Dict[str, Fetcher]:
    def make(model):
        def fetch(payroll_id: int):
            db = session_factory()
            try:
                return amounts_by_employee(adjustment_records(db, model, payroll_id, statuses))
            finally:
                db.close()
        return fetch

    return {name: make(model) for name, model in ADJUSTMENT_MODELS.items()}


def fetch_adjustments(payroll_id: int, fetchers: Dict[str, Fetcher], timeout: float) -> Dict[str, Dict[int, list]]:
    """Run every fetcher concurrently; a slow or failing one yields ``{}``."""
    results = {}
    pool = ThreadPoolExecutor(max_workers=max(1, len(fetchers)), thread_name_prefix="planilla-fetch")
    try:
        futures = {name: pool.submit(fetch, payroll_id) for name, fetch in fetchers.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result(timeout=timeout) or {}
            except FetchTimeout:
                logger.warning("fetching %s for payroll %s timed out after %ss", name, payroll_id, timeout)
                results[name] = {}
            except Exception:
                logger.exception("fetching %s for payroll %s failed", name, payroll_id)
                results[name] = {}
    finally:
        pool.shutdown(wait=False, cancel_futures=True)
    return results


class PayrollMailJob:
    def __init__(
        self,
        session_factory,
        mailer_factory=get_mailer,
        fetchers: Optional[Dict[str, Fetcher]] = None,
        timeout: float = settings.FETCH_TIMEOUT,
    ):
        self.session_factory = session_factory
        self.mailer_factory = mailer_factory
        self.fetchers = fetchers if fetchers is not None else db_fetchers(session_factory)
        self.timeout = timeout

    def pending_payrolls(self) -> List[int]:
        db = self.session_factory()
        try:
            rows = (
                db.query(models.Payroll.id)
                .filter(
                    models.Payroll.state == PayrollState.PROCESADA.value,
                    models.Payroll.mail_sent.isnot(True),
                )
                .order_by(models.Payroll.id)
                .all()
            )
            return [row.id for row in rows]
        finally:
            db.close()

    def notify(self, payroll_id: int) -> List[MailResult]:
        """Mail one payroll; returns [] when it was already notified."""
        with _send_lock:
            db = self.session_factory()
            try:
                payroll = db.get(models.Payroll, payroll_id)
                if payroll is None:
                    raise LookupError(f"payroll {payroll_id} not found")
                if payroll.mail_sent:
                    logger.info("payroll %s already notified", payroll.code)
                    return []

                employees = [EmployeeRecord.model_validate(e) for e in eligible_employees(db, payroll)]
                adjustments = fetch_adjustments(payroll.id, self.fetchers, self.timeout)
                company_name = payroll.company.name if payroll.company else None
                mailer = self.mailer_factory()

                results = []
                for employee in employees:
                    mine = {name: found.get(employee.id, []) for name, found in adjustments.items()}
                    breakdown = employee_breakdown(
                        employee,
                        increases=mine.get("increases", []),
                        overtime=mine.get("overtime", []),
                        metric_bonuses=mine.get("metric_bonuses", []),
                        deductions=mine.get("deductions", []),
                    )
                    results.append(send_payroll_email(mailer, payroll, breakdown, mine, company_name))

                payroll.mail_sent = True
                db.commit()
                sent = sum(1 for r in results if r.success)
                logger.info("payroll %s: %s/%s emails sent", payroll.code, sent, len(results))
                return results
            finally:
                db.close()

    def run(self) -> int:
        """Notify every processed payroll that has not been mailed yet."""
        notified = 0
        for payroll_id in self.pending_payrolls():
            self.notify(payroll_id)
            notified += 1
        return notified
