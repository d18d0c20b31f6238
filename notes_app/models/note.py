"""
Notes — Note SQLAlchemy Model
===============================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python so the id is known before flush
      on every backend (PostgreSQL and SQLite)
    - tags: JSON list, keeps insertion order and duplicates exactly as sent
    - created_at / updated_at: timezone-aware, written by the service in UTC

    Index on created_at DESC serves the only list query (newest first).
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notes_app.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A personal note with free-text tags.

    Lifecycle:
        1. Created by POST /notes (id, created_at, updated_at assigned)
        2. Mutated in place by PUT /notes/{id} (updated_at refreshed)
        3. Removed permanently by DELETE /notes/{id}
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # May contain lightweight markup; storage treats it as opaque text
    content: Mapped[str] = mapped_column(Text, nullable=False)

    tags: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, tags={self.tags!r})>"
