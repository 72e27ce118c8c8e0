"""Shared test fixtures."""

import os

# The rate limiter reads this once at import, before any app is created
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from contact_intel.config import Settings  # noqa: E402
from contact_intel.contacts.models import Contact  # noqa: E402
from contact_intel.database.base import Base, get_db  # noqa: E402

# Models must be imported so Base.metadata.create_all() sees all tables.
_ALL_MODELS = [Contact]


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing.

    Note: SQLite stores the PostgreSQL UUID column as CHAR(32) and drops
    timezone info, which is fine for service logic testing.
    """
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


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url="sqlite:///:memory:",
        run_migrations=False,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def client(db_session, test_settings):
    """TestClient backed by the in-memory session, no migrations."""
    from contact_intel.main import create_app

    app = create_app(test_settings)

    def _test_db():
        yield db_session

    app.dependency_overrides[get_db] = _test_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def valid_fields():
    return {
        "name": "Al",
        "email": "al@x.com",
        "phone": "5551234567",
        "message": "Met at conference, interested in enterprise plan",
    }
