from .sender import MailResult, SmtpMailer, get_mailer, is_valid_email, send_payroll_email
from .template import render_payroll_email

__all__ = [
    "MailResult",
    "SmtpMailer",
    "get_mailer",
    "is_valid_email",
    "render_payroll_email",
    "send_payroll_email",
]
