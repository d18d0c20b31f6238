"""
Notes — Migration Tests
=========================

What:  Runs the Alembic revisions against the SQLite test database.
How:   A Config built in code (no alembic.ini) so fileConfig does not
       reconfigure the test run's loggers.

What we test:
    ✅ upgrade head creates the notes table and its created_at index
    ✅ downgrade base removes them again
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from notes_app.config import settings

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


def alembic_config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    return config


def sync_inspector():
    # Same file as the async engine, through the stdlib sqlite3 driver
    engine = create_engine(settings.database_url.replace("+aiosqlite", ""))
    return engine, inspect(engine)


class TestMigrations:

    def test_upgrade_then_downgrade(self):
        config = alembic_config()

        command.upgrade(config, "head")
        engine, inspector = sync_inspector()
        try:
            assert "notes" in inspector.get_table_names()
            columns = {column["name"] for column in inspector.get_columns("notes")}
            assert columns == {"id", "title", "content", "tags", "created_at", "updated_at"}
            indexes = {index["name"] for index in inspector.get_indexes("notes")}
            assert "idx_notes_created_at" in indexes
        finally:
            engine.dispose()

        command.downgrade(config, "base")
        engine, inspector = sync_inspector()
        try:
            assert "notes" not in inspector.get_table_names()
        finally:
            engine.dispose()
