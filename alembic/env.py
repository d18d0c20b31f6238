"""
Alembic Migration Environment
===============================

What:  Runs the notes migrations against DATABASE_URL.
How:   The URL comes from notes_app.config.Settings, never from alembic.ini.
       Online mode drives an async engine (asyncpg or aiosqlite) and hands
       the sync connection to Alembic through run_sync.
Who:   `alembic upgrade head`, `alembic downgrade -1`, `alembic revision`.

SQLite cannot ALTER most column properties in place, so migrations run in
batch mode there (copy-and-move tables).
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from notes_app.config import settings
from notes_app.database import Base
from notes_app.models.note import Note  # noqa: F401  registers the notes table

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)


def _migration_options() -> dict:
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": settings.is_sqlite,
    }


def run_offline() -> None:
    """Print the migration SQL for settings.database_url instead of executing it."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_migration_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, **_migration_options())
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    # NullPool: one short-lived connection, nothing left open afterwards
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
