# tests/conftest.py
import asyncio
import os
import tempfile
from datetime import timedelta

# Keep the app's own engine and log files out of the working directory
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_PATH", tempfile.mkdtemp())

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from task_tracker.main import app
from task_tracker.database import Base, get_db
from task_tracker.models import Account, Project
from task_tracker.config import settings
from task_tracker.security import create_access_token, get_password_hash
from task_tracker.services.deadlines import today_in_zone
from task_tracker.services.mailer import TransportError, get_mail_transport

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeTransport:
    """Records sent mail instead of talking to an SMTP server"""

    def __init__(self):
        self.sent = []
        self.fail_for_subjects = set()
        self.delay = 0

    async def send(self, to, subject, html):
        if self.delay:
            await asyncio.sleep(self.delay)
        if any(marker in subject for marker in self.fail_for_subjects):
            raise TransportError(f"Relay refused message: {subject}")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return f"<msg-{len(self.sent)}@test>"


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool  # Needed for SQLite in-memory database
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def override_settings():
    """Override settings for testing"""
    originals = {
        "BCRYPT_ROUNDS": settings.BCRYPT_ROUNDS,
        "CRON_SECRET": settings.CRON_SECRET,
        "ENABLE_SCHEDULER": settings.ENABLE_SCHEDULER,
        "NOTIFICATION_FALLBACK_EMAIL": settings.NOTIFICATION_FALLBACK_EMAIL,
        "NOTIFICATION_SEND_TIMEOUT_SECONDS": settings.NOTIFICATION_SEND_TIMEOUT_SECONDS,
    }

    settings.BCRYPT_ROUNDS = 4
    settings.CRON_SECRET = None
    settings.ENABLE_SCHEDULER = False
    settings.NOTIFICATION_FALLBACK_EMAIL = "fallback@example.com"

    yield

    for name, value in originals.items():
        setattr(settings, name, value)


@pytest.fixture
def mail_transport():
    return FakeTransport()


@pytest.fixture
def client(db_session, mail_transport):
    """Test client using the test database and fake mail transport"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_transport] = lambda: mail_transport
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_account(db_session, email):
    account = Account(email=email, hashed_password=get_password_hash("password123"))
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def account(db_session):
    return _create_account(db_session, "owner@example.com")


@pytest.fixture
def other_account(db_session):
    return _create_account(db_session, "someone-else@example.com")


@pytest.fixture
def auth_headers(account):
    return {"Authorization": f"Bearer {create_access_token({'sub': account.id})}"}


@pytest.fixture
def other_auth_headers(other_account):
    return {"Authorization": f"Bearer {create_access_token({'sub': other_account.id})}"}


@pytest.fixture
def today():
    return today_in_zone()


@pytest.fixture
def make_project(db_session, account, today):
    """Factory creating projects whose deadline is `days` from today"""
    def _make_project(days=10, owner=None, title="Quarterly VAT return", **flags):
        project = Project(
            owner_id=(owner or account).id,
            title=title,
            client_name="Acme Ltd",
            deadline=today + timedelta(days=days),
            **flags
        )
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)
        return project
    return _make_project


@pytest.fixture
def sample_project(make_project):
    return make_project(days=10)
