import os
import smtplib

# keep the app's own engine in memory and the scheduler off during tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_JOBS"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from planilla import models
from planilla.database import get_db
from planilla.mail.sender import get_mailer
from planilla.main import app


class FakeMailer:
    def __init__(self, reject=()):
        self.sent = []
        self.reject = set(reject)

    def send(self, to, subject, html):
        if to in self.reject:
            raise smtplib.SMTPRecipientsRefused({to: (550, b"mailbox unavailable")})
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"<{len(self.sent)}@test.local>"


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{(tmp_path / 'planilla.db').as_posix()}",
        connect_args={"check_same_thread": False},
    )
    models.Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(session_factory, mailer):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def company(client):
    res = client.post("/api/empresas/", json={"name": "Acme S.A.", "fee": 0.05})
    assert res.status_code == 200
    return res.json()


@pytest.fixture
def make_employee(client, company):
    def make(**overrides):
        body = {
            "company_id": company["id"],
            "name": "Ana Mora",
            "member_code": "E-001",
            "national_id": "1-1111-1111",
            "email": "ana@example.com",
            "base_salary": 320000,
            "pay_period": "quincenal",
            "currency": "colones",
            "rtn_flag": 1,
            "ccss_flag": 1,
            "insured_amount": 300000,
            "hire_date": "2023-01-01",
        }
        body.update(overrides)
        res = client.post("/api/empleados/", json=body)
        assert res.status_code == 200, res.text
        return res.json()
    return make


@pytest.fixture
def make_payroll(client, company):
    def make(**overrides):
        body = {
            "company_id": company["id"],
            "currency": "colones",
            "pay_period": "quincenal",
            "start_date": "2024-03-01",
            "end_date": "2024-03-15",
        }
        body.update(overrides)
        res = client.post("/api/planillas/", json=body)
        assert res.status_code == 200, res.text
        return res.json()
    return make
