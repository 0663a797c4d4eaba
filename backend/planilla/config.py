import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # <project>/backend
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _default_sqlite_uri():
    return f"sqlite:///{(BASE_DIR / 'planilla.db').as_posix()}"


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL") or _default_sqlite_uri()

    SMTP_HOST = os.getenv("SMTP_HOST", "smtp.hostinger.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "465"))
    SMTP_SSL = _flag("SMTP_SSL", "1")
    SMTP_USER = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
    MAIL_FROM = os.getenv("MAIL_FROM", "info@gt3cr.com")

    ENABLE_JOBS = _flag("ENABLE_JOBS")
    PAYROLL_MAIL_INTERVAL = int(os.getenv("PAYROLL_MAIL_INTERVAL", "10"))
    VACATION_ACCRUAL_INTERVAL = int(os.getenv("VACATION_ACCRUAL_INTERVAL", "86400"))
    FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "8"))

    DEFAULT_FEE = os.getenv("DEFAULT_FEE", "0.05")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
