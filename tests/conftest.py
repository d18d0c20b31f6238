"""
Notes — Test Configuration (conftest.py)
==========================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession for service unit tests
    ├── database:        Real SQLite tables, created and dropped per test
    ├── test_client:     HTTPX AsyncClient wired to the FastAPI app
    ├── make_note:       Factory for client-side Note objects
    └── fake_api:        In-memory stand-in for NotesApiClient
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Settings are read at import time, so the environment must be in place
# before anything from notes_app is imported
_TEST_DIR = tempfile.mkdtemp(prefix="notes_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notes_app.client.models import Note


# ══════════════════════════════════════════════════════════════════════════
# Server fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
        result = await note_service.update_note(mock_db_session, note_id, payload)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database():
    """
    Fresh tables in the SQLite test database for one test.

    The engine is disposed afterwards so no pooled connection outlives the
    test's event loop.
    """
    from notes_app.database import create_tables, dispose_engine, drop_tables

    await create_tables()
    yield
    await drop_tables()
    await dispose_engine()


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_liveness(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from notes_app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Client fixtures
# ══════════════════════════════════════════════════════════════════════════

BASE_TIME = datetime(2024, 3, 4, 21, 5, tzinfo=timezone.utc)


@pytest.fixture
def make_note():
    """Factory for client Note objects with sensible defaults."""

    def _make(
        title: str = "Title",
        content: str = "Body",
        tags: Optional[List[str]] = None,
        note_id: Optional[str] = None,
        minutes: int = 0,
        edited: bool = False,
    ) -> Note:
        created = BASE_TIME + timedelta(minutes=minutes)
        return Note(
            id=note_id or str(uuid4()),
            title=title,
            content=content,
            tags=list(tags or []),
            created_at=created,
            updated_at=created + timedelta(minutes=5) if edited else created,
        )

    return _make


class FakeNotesApi:
    """
    In-memory implementation of the calls NotesStore makes.

    Set `fail_with` to an exception to make the next matching call raise it;
    `calls` records every method invoked.
    """

    def __init__(self, notes: Optional[List[Note]] = None):
        self.notes: List[Note] = list(notes or [])
        self.calls: List[str] = []
        self.fail_with: dict = {}
        self._clock = BASE_TIME + timedelta(days=1)

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        error = self.fail_with.pop(name, None)
        if error is not None:
            raise error

    async def get_all_notes(self) -> List[Note]:
        self._maybe_fail("get_all_notes")
        return sorted(self.notes, key=lambda n: n.created_at, reverse=True)

    async def get_all_tags(self) -> List[str]:
        self._maybe_fail("get_all_tags")
        return sorted({tag for note in self.notes for tag in note.tags})

    async def create_note(self, title, content, tags=None) -> Note:
        self._maybe_fail("create_note")
        self._clock += timedelta(seconds=1)
        note = Note(
            id=str(uuid4()), title=title, content=content, tags=list(tags or []),
            created_at=self._clock, updated_at=self._clock,
        )
        self.notes.append(note)
        return note

    async def update_note(self, note_id, title=None, content=None, tags=None) -> Note:
        self._maybe_fail("update_note")
        self._clock += timedelta(seconds=1)
        current = next(n for n in self.notes if n.id == note_id)
        updated = current.model_copy(update={
            "title": title if title is not None else current.title,
            "content": content if content is not None else current.content,
            "tags": list(tags) if tags is not None else current.tags,
            "updated_at": self._clock,
        })
        self.notes = [updated if n.id == note_id else n for n in self.notes]
        return updated

    async def delete_note(self, note_id) -> None:
        self._maybe_fail("delete_note")
        self.notes = [n for n in self.notes if n.id != note_id]


@pytest.fixture
def fake_api(make_note):
    return FakeNotesApi([
        make_note("Groceries", "Milk and eggs", ["home", "shopping"], note_id="n-1", minutes=0),
        make_note("Standup", "# Yesterday\n- reviewed PR", ["work"], note_id="n-2", minutes=10),
    ])
