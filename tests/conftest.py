"""Shared test fixtures."""

import os

# Must be set before src.database creates its engine.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from contextlib import asynccontextmanager  # noqa: E402
from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.config import settings  # noqa: E402
from src.contact.models import Inquiry  # noqa: E402
from src.database import Base, get_db  # noqa: E402
from src.notifications.transport import reset_transport  # noqa: E402
from src.rate_limit import limiter  # noqa: E402

# Models must be imported so Base.metadata.create_all() sees all tables.
_ALL_MODELS = [Inquiry]


@pytest.fixture
def db_session():
    """In-memory SQLite database shared across threads via StaticPool."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def _fresh_transport():
    reset_transport()
    yield
    reset_transport()


@pytest.fixture
def email_disabled(monkeypatch):
    monkeypatch.setattr(settings, "email_enabled", "false")


@pytest.fixture
def email_settings(monkeypatch):
    """Complete SMTP configuration on port 587 (STARTTLS)."""
    values = {
        "email_enabled": "true",
        "smtp_host": "smtp.mailhost.io",
        "smtp_port": "587",
        "smtp_user": "mailer@sgglobaladvisors.com",
        "smtp_pass": "app-password",
        "email_from": "noreply@sgglobaladvisors.com",
        "email_to": "contact@sgglobaladvisors.com",
    }
    for key, value in values.items():
        monkeypatch.setattr(settings, key, value)
    return values


@pytest.fixture
def make_inquiry():
    """Build an unsaved Inquiry with sensible defaults."""

    def _make(**overrides) -> Inquiry:
        fields = {
            "id": 42,
            "name": "Jane Doe",
            "email": "jane.doe@acme-consulting.com",
            "phone": None,
            "company": None,
            "message": "We would like to discuss a market entry strategy.",
            "created_at": None,
        }
        fields.update(overrides)
        return Inquiry(**fields)

    return _make


@pytest.fixture
def app_client(db_session, email_disabled):
    """TestClient with lifespan skipped (no migrations) and the DB bound to db_session."""
    from src.main import create_app

    @asynccontextmanager
    async def _test_lifespan(app):
        yield

    def _test_db():
        yield db_session

    limiter.enabled = False
    with patch("src.main.lifespan", _test_lifespan):
        app = create_app()
        app.dependency_overrides[get_db] = _test_db
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client
    limiter.enabled = True
