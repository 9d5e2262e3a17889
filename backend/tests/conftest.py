"""
TipMate Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── database_url:     SQLite file URL inside the test's tmp_path
    ├── connector:        real DatabaseConnector on that SQLite file
    ├── app:              FastAPI app bound to `connector`
    ├── test_client:      HTTPX AsyncClient talking to `app` over ASGITransport
    ├── mock_db_session:  AsyncMock session (no database at all)
    ├── fake_connector:   connector double yielding `mock_db_session`
    └── sample_payload:   valid POST body
"""

import os
import tempfile
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

# Point settings at throwaway storage BEFORE any tipmate import
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="tipmate_test_"), "test.db")
)
os.environ["DB_CREATE_SCHEMA"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from tipmate.database import DatabaseConnector  # noqa: E402
from tipmate.models import register_models  # noqa: E402


@pytest.fixture
def database_url(tmp_path):
    """A fresh SQLite database file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'tipmate.db'}"


@pytest_asyncio.fixture
async def connector(database_url):
    """
    Real connector on the per-test SQLite file; tables are created on the
    first connect.
    """
    conn = DatabaseConnector(
        url=database_url,
        metadata=register_models(),
        create_schema=True,
    )
    yield conn
    await conn.dispose()


@pytest.fixture
def app(connector):
    from tipmate.main import create_app
    return create_app(connector=connector)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client routed straight into the app (no server, no lifespan;
    the connector connects lazily on the first request).
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = [...]
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_connector(mock_db_session):
    """Connector double: connect() succeeds, session() yields mock_db_session."""
    fake = MagicMock(spec=DatabaseConnector)
    fake.connect = AsyncMock()

    @asynccontextmanager
    async def session():
        yield mock_db_session

    fake.session = session
    return fake


@pytest.fixture
def sample_payload():
    """A valid create body as the calculator sends it."""
    return {
        "customerName": "Asha Rao",
        "mobileNumber": "9876543210",
        "billAmount": 200.0,
        "tipAmount": 36.0,
        "totalAmount": 236.0,
        "tipPercentage": 18,
    }
