"""
Notes — Note Service (Business Logic)
=======================================

What:  CRUD operations on notes plus tag aggregation.
How:   Runs SQLAlchemy queries on the session it is handed and converts
       rows into response schemas.
Who:   Called by route handlers.

Error Handling Strategy:
    - Unknown (or malformed) note ids raise NotFoundError → 404
    - Any other failure is logged with the operation name and wrapped in
      DatabaseError carrying a fixed message per operation → 500

Concurrency:
    Each call works inside its own request-scoped session. Two clients
    editing the same note is last-write-wins; there is no version token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, NoReturn, Optional
from uuid import UUID, uuid4

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.exceptions import DatabaseError, NotFoundError, NotesError
from notes_app.models.note import Note, utc_now
from notes_app.schemas.note import (
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_note_id(note_id: str) -> Optional[UUID]:
    try:
        return UUID(str(note_id))
    except ValueError:
        return None


def unique_sorted_tags(tag_lists: List[List[str]]) -> List[str]:
    """Flatten per-note tag lists into one deduplicated, sorted list."""
    return sorted({tag for tags in tag_lists for tag in (tags or [])})


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes():  every note, newest first
        - create_note(): validate-then-persist a new note
        - update_note(): partial update, refreshes updated_at
        - delete_note(): permanent removal
        - list_tags():   distinct tags across all notes
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return all notes ordered by creation time, newest first.

        Query plan:
            SELECT * FROM notes ORDER BY created_at DESC
            → served by idx_notes_created_at
        """
        try:
            result = await db.execute(select(Note).order_by(desc(Note.created_at)))
            notes = result.scalars().all()
            return [NoteResponse.model_validate(note) for note in notes]
        except Exception as e:
            self._fail("Failed to fetch notes", "list_notes", e)

    async def create_note(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        """
        Persist a new note and return it with its generated id and timestamps.

        created_at and updated_at come from a single clock reading, so a
        freshly created note always has createdAt == updatedAt.
        """
        now = utc_now()
        note = Note(
            id=uuid4(),
            title=data.title,
            content=data.content,
            tags=list(data.tags),
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(note)
            await db.flush()
        except Exception as e:
            self._fail("Failed to create note", "create_note", e)

        logger.info("Note created: %s (%d tags)", note.id, len(note.tags))
        return NoteResponse.model_validate(note)

    async def update_note(
        self, db: AsyncSession, note_id: str, data: NoteUpdate
    ) -> NoteResponse:
        """
        Apply the supplied fields to an existing note.

        Fields left out of the request keep their stored values. updated_at
        always moves strictly forward, even when the wall clock has not
        ticked since the previous write.

        Raises:
            NotFoundError: no note with this id
            DatabaseError: query or flush failed
        """
        note = await self._get_or_404(db, note_id, operation="update_note")

        try:
            for field, value in data.changes().items():
                setattr(note, field, list(value) if field == "tags" else value)

            now = utc_now()
            previous = _as_utc(note.updated_at)
            if now <= previous:
                now = previous + timedelta(microseconds=1)
            note.updated_at = now
            await db.flush()
        except Exception as e:
            self._fail("Failed to update note", "update_note", e, note_id=note_id)

        logger.info("Note updated: %s", note.id)
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, note_id: str) -> MessageResponse:
        """
        Permanently remove a note.

        Returns a confirmation payload rather than the deleted note.

        Raises:
            NotFoundError: no note with this id
            DatabaseError: delete failed
        """
        note = await self._get_or_404(db, note_id, operation="delete_note")

        try:
            await db.delete(note)
            await db.flush()
        except Exception as e:
            self._fail("Failed to delete note", "delete_note", e, note_id=note_id)

        logger.info("Note deleted: %s", note_id)
        return MessageResponse(message="Note deleted successfully")

    async def list_tags(self, db: AsyncSession) -> List[str]:
        """
        Scan every note's tags and return the distinct values sorted.

        The result depends only on the set of stored tags, not on the
        order notes were inserted.
        """
        try:
            result = await db.execute(select(Note.tags))
            tag_lists = list(result.scalars().all())
        except Exception as e:
            self._fail("Failed to fetch tags", "list_tags", e)

        return unique_sorted_tags(tag_lists)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_or_404(self, db: AsyncSession, note_id: str, operation: str) -> Note:
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        try:
            result = await db.execute(select(Note).where(Note.id == parsed_id))
            note = result.scalar_one_or_none()
        except Exception as e:
            self._fail(
                f"Failed to {operation.split('_')[0]} note", operation, e, note_id=note_id
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    @staticmethod
    def _fail(message: str, operation: str, error: Exception, **context) -> NoReturn:
        if isinstance(error, NotesError):
            raise error
        logger.error(
            "Database error in %s: %s", operation, str(error), exc_info=True
        )
        raise DatabaseError(
            message=message,
            context={"operation": operation, "error_type": type(error).__name__, **context},
        ) from error


# ── Singleton Instance ────────────────────────────────────────────────────
# NoteService is stateless; one shared instance serves every request
note_service = NoteService()
