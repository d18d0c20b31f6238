"""
Notes — Database Session Management
=====================================

What:  The notes database: engine, session factory, declarative base.
How:   One async engine per process built from DATABASE_URL. Each request
       gets its own session that commits when the handler returns and
       rolls back when it raises.
Who:   Route handlers (through Depends), the app lifespan and the tests.
When:  The engine exists from import time on; sessions live for one request.

Connection Pooling:
    pool_size / max_overflow: from settings (PostgreSQL only)
    pool_pre_ping:    validates connections before use
    pool_recycle=3600: recycles connections every hour

    SQLite (tests, local development) uses SQLAlchemy's default pool for the
    aiosqlite dialect, which does not accept the sizing arguments.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_app.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # SQL echo only in DEBUG mode
        "echo": settings.log_level == "DEBUG",
    }
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

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, so route
# handlers can serialize the ORM object once the session has committed
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Declarative base shared by the ORM models.

    All models inherit from this class so they share one metadata object,
    which Alembic and `create_tables()` both read.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session for the notes routes.

    Sequence:
        1. Open a session from async_session_factory
        2. Hand it to the route, which passes it to NoteService
        3. Commit if the route returned normally
        4. Roll back if anything raised, then re-raise
        5. Close the session so its connection goes back to the pool

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            return await note_service.list_notes(db)

    Raises:
        Any exception is propagated to the global error handlers,
        which return appropriate HTTP status codes.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables() -> None:
    """
    What:  Creates every table registered on `Base.metadata` if missing.
    When:  Startup with DB_CREATE_TABLES=true, and the test suite.
    """
    # Imported for its side effect of registering the model with Base
    from notes_app.models.note import Note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drops every table registered on `Base.metadata`. Used by tests."""
    from notes_app.models.note import Note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """
    What:  Closes every pooled connection.
    When:  Lifespan shutdown, and after each test that touched the database.
    """
    await engine.dispose()
