"""
Notes API: Database Session Management
=======================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine (pooled for server databases), provides a
       session dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow:  from settings (server databases only)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour

    SQLite URLs skip the pool arguments; aiosqlite picks its own pool class
    and rejects QueuePool sizing for in-memory databases. SQLite connections
    also get a Unicode-aware lower() for case-insensitive title search.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


if settings.is_sqlite:
    # SQLite's built-in lower() only folds ASCII, so "Árbol" would not match "árbol"
    @event.listens_for(engine.sync_engine, "connect")
    def _register_unicode_lower(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after the dependency commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models inherit from this class to register with the shared metadata
    that Alembic and create_tables() read.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/notes/{note_id}")
        async def show_note(note_id: int, db: AsyncSession = Depends(get_db_session)):
            return await note_store.read(db, note_id)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # The global error handlers build the response
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping_database() -> None:
    """
    What:  Round-trips a trivial query to prove the database is reachable.
    Who:   GET /health.
    Raises whatever the driver raises when the database is down.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables() -> None:
    """
    What:  Creates every table registered on Base.metadata that is missing.
    When:  Startup with AUTO_CREATE_TABLES=true, the seed command, and tests.
    """
    # Registers Note on Base.metadata
    from notes_api.models import note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
