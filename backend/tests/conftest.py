"""
Driver Telemetry API: Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── store:            Real Store on a temporary SQLite file (aiosqlite)
    ├── test_client:      HTTPX AsyncClient bound to an app using `store`
    ├── mock_db_session:  AsyncMock session for store-failure paths
    ├── mock_store:       Store stand-in yielding `mock_db_session`
    └── mock_client:      HTTPX AsyncClient bound to an app using `mock_store`

The ASGI transport does not run the lifespan handler, so fixtures connect
the store themselves and inject it with create_app(store=...).
"""

import os
import tempfile
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

# Set before any application import so Settings picks them up
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="driver_telemetry_test_"), "unused.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from driver_telemetry.database import Store
from driver_telemetry.main import create_app


@pytest_asyncio.fixture
async def store(tmp_path):
    """
    A connected store backed by a fresh SQLite file.

    File-based (not :memory:) so concurrent sessions get separate
    connections, as they would against PostgreSQL.
    """
    store = Store(f"sqlite+aiosqlite:///{tmp_path / 'telemetry.db'}")
    await store.connect(timeout=5)
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def test_client(store):
    """
    Async HTTP client talking to an app wired to the SQLite store.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    A mock async session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
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
def mock_store(mock_db_session):
    """Store stand-in whose sessions are `mock_db_session`."""

    @asynccontextmanager
    async def session():
        yield mock_db_session

    store = MagicMock(spec=Store)
    store.session = session
    store.ping = AsyncMock(return_value=True)
    return store


@pytest_asyncio.fixture
async def mock_client(mock_store):
    app = create_app(store=mock_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def driver_payload():
    """A valid POST /conductor body."""
    return {
        "nombre": "Ana Torres",
        "edad": 34,
        "sexo": "Femenino",
        "turno": "Nocturno",
        "enfermedad": "Ninguna",
    }
