import logging
import re
import smtplib
from dataclasses import asdict, dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Dict, Iterable, Optional

from ..calc.payroll import EmployeeBreakdown
from ..config import settings
from .template import render_payroll_email, subject_for

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(address: Optional[str]) -> bool:
    return bool(address) and EMAIL_RE.match(address.strip()) is not None


@dataclass
class MailResult:
    success: bool
    employee: Optional[str] = None
    email: Optional[str] = None
    payroll: Optional[str] = None
    message_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class SmtpMailer:
    """Sends HTML mail through one SMTP connection per message."""

    def __init__(self, host: str, port: int, user: str = "", password: str = "",
                 sender: str = "", use_ssl: bool = True, timeout: float = 30):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender
        self.use_ssl = use_ssl
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config=settings) -> "SmtpMailer":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            user=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            sender=config.MAIL_FROM,
            use_ssl=config.SMTP_SSL,
        )

    def _connect(self):
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        smtp.starttls()
        return smtp

    def send(self, to: str, subject: str, html: str) -> str:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self.sender.split("@")[-1] or None)
        message.set_content("Este mensaje requiere un cliente de correo con soporte HTML.")
        message.add_alternative(html, subtype="html")

        with self._connect() as smtp:
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(message)
        return message["Message-ID"]


def get_mailer() -> SmtpMailer:
    return SmtpMailer.from_settings()


def send_payroll_email(
    mailer,
    payroll,
    breakdown: EmployeeBreakdown,
    adjustments: Optional[Dict[str, Iterable]] = None,
    company_name: Optional[str] = None,
) -> MailResult:
    """Send one employee's payslip; failures are reported, never raised."""
    employee = breakdown.employee
    result = MailResult(
        success=False,
        employee=employee.name,
        email=employee.email,
        payroll=getattr(payroll, "code", None),
    )
    if not employee.email:
        result.error = "Empleado no tiene correo configurado"
    elif not is_valid_email(employee.email):
        result.error = f"Email inválido: {employee.email}"
    elif not result.payroll:
        result.error = "Planilla no tiene código válido"
    if result.error:
        logger.warning("payroll mail skipped for %s: %s", employee.name, result.error)
        return result

    html = render_payroll_email(payroll, breakdown, adjustments, company_name)
    try:
        result.message_id = mailer.send(employee.email.strip(), subject_for(payroll), html)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("payroll mail to %s failed: %s", employee.email, e)
        result.error = str(e)
        return result

    logger.info("payroll %s sent to %s (%s)", result.payroll, employee.email, result.message_id)
    result.success = True
    return result
