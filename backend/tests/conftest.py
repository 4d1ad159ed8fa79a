"""
Notes API: Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides run before any notes_api import, so the engine
       is built against a throwaway SQLite file instead of PostgreSQL.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── sample_note_data: Note field values
    ├── db_tables: fresh notes table in the test database
    ├── db_session: real AsyncSession on the test database
    ├── test_client: HTTPX AsyncClient talking to the FastAPI app
    └── notes_client: NotesClient talking to the FastAPI app
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
_test_dir = tempfile.mkdtemp(prefix="notes_api_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/test.db"
os.environ["API_PREFIX"] = "/api"
os.environ["DEBUG"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from notes_api.database import Base, async_session_factory, engine  # noqa: E402
from notes_api.models.note import Note  # noqa: E402, F401


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_read(mock_db_session):
            result = MagicMock()
            result.scalar_one_or_none.return_value = Note(title="x")
            mock_db_session.execute.return_value = result
            note = await note_store.read(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_note_data():
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return {
        "id": 7,
        "title": "Mi primera nota",
        "content": "Esta es una nota de prueba.",
        "created_at": created,
        "updated_at": created,
    }


@pytest_asyncio.fixture
async def db_tables():
    """Drop and recreate every table, then release pooled connections afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_tables):
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_tables):
    """
    HTTPX AsyncClient routed straight into the app (no server).

    raise_app_exceptions=False lets tests observe the 500 envelope that the
    catch-all handler sends before Starlette re-raises the error.
    """
    from notes_api.main import app

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def notes_client(db_tables):
    from notes_api.client.api_client import NotesClient
    from notes_api.main import app

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with NotesClient(base_url="http://test/api", transport=transport) as client:
        yield client
