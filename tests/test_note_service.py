"""
Notes — Note Service Unit Tests
=================================

What:  Tests for NoteService business logic against a mocked session.
How:   Uses the mock_db_session fixture; no database involved.

What we test:
    ✅ Unknown and malformed ids raise NotFoundError
    ✅ Query failures become DatabaseError with a fixed message
    ✅ Partial updates only touch supplied fields
    ✅ Tag aggregation is independent of note order
"""

import itertools
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from notes_app.exceptions import DatabaseError, NotFoundError
from notes_app.models.note import Note
from notes_app.schemas.note import NoteCreate, NoteUpdate
from notes_app.services.note_service import NoteService, unique_sorted_tags


def stored_note(**overrides) -> Note:
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    fields = dict(
        id=uuid4(),
        title="Title",
        content="Content",
        tags=["a", "b"],
        created_at=created,
        updated_at=created,
    )
    fields.update(overrides)
    return Note(**fields)


def result_with(note):
    result = MagicMock()
    result.scalar_one_or_none.return_value = note
    return result


class TestNoteServiceList:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes_converts_rows(self, mock_db_session):
        notes = [stored_note(title="second"), stored_note(title="first")]
        result = MagicMock()
        result.scalars.return_value.all.return_value = notes
        mock_db_session.execute.return_value = result

        listed = await self.service.list_notes(mock_db_session)

        assert [n.title for n in listed] == ["second", "first"]
        assert listed[0].tags == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_notes_failure_is_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection reset")

        with pytest.raises(DatabaseError) as excinfo:
            await self.service.list_notes(mock_db_session)

        assert excinfo.value.message == "Failed to fetch notes"
        assert excinfo.value.context["error_type"] == "RuntimeError"


class TestNoteServiceCreate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_sets_matching_timestamps(self, mock_db_session):
        created = await self.service.create_note(
            mock_db_session, NoteCreate(title="A", content="B")
        )

        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()
        assert created.tags == []
        assert created.created_at == created.updated_at

    @pytest.mark.asyncio
    async def test_create_flush_failure_is_database_error(self, mock_db_session):
        mock_db_session.flush.side_effect = RuntimeError("disk full")

        with pytest.raises(DatabaseError, match="Failed to create note"):
            await self.service.create_note(
                mock_db_session, NoteCreate(title="A", content="B", tags=["x"])
            )


class TestNoteServiceUpdate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_only_supplied_fields(self, mock_db_session):
        note = stored_note()
        mock_db_session.execute.return_value = result_with(note)

        updated = await self.service.update_note(
            mock_db_session, str(note.id), NoteUpdate(tags=["c"])
        )

        assert updated.title == "Title"
        assert updated.content == "Content"
        assert updated.tags == ["c"]
        assert updated.updated_at > updated.created_at

    @pytest.mark.asyncio
    async def test_updated_at_moves_forward_even_with_future_timestamp(self, mock_db_session):
        future = datetime.now(timezone.utc) + timedelta(hours=1)
        note = stored_note(updated_at=future)
        mock_db_session.execute.return_value = result_with(note)

        updated = await self.service.update_note(
            mock_db_session, str(note.id), NoteUpdate(title="New")
        )

        assert updated.updated_at > future

    @pytest.mark.asyncio
    async def test_update_handles_naive_stored_timestamps(self, mock_db_session):
        naive = datetime(2024, 1, 15, 12, 0)
        note = stored_note(created_at=naive, updated_at=naive)
        mock_db_session.execute.return_value = result_with(note)

        updated = await self.service.update_note(
            mock_db_session, str(note.id), NoteUpdate(content="New")
        )

        assert updated.created_at.tzinfo is not None
        assert updated.updated_at > updated.created_at

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, str(uuid4()), NoteUpdate(title="X"))

    @pytest.mark.asyncio
    async def test_malformed_id_never_queries(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, "42", NoteUpdate(title="X"))

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_failure_is_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("timeout")

        with pytest.raises(DatabaseError, match="Failed to update note"):
            await self.service.update_note(mock_db_session, str(uuid4()), NoteUpdate(title="X"))


class TestNoteServiceDelete:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_returns_confirmation(self, mock_db_session):
        note = stored_note()
        mock_db_session.execute.return_value = result_with(note)

        result = await self.service.delete_note(mock_db_session, str(note.id))

        mock_db_session.delete.assert_awaited_once_with(note)
        assert result.message == "Note deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_unknown_id_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_db_session, str(uuid4()))

        mock_db_session.delete.assert_not_awaited()


class TestTagAggregation:

    def test_flattens_dedupes_and_sorts(self):
        assert unique_sorted_tags([["b", "a"], ["c", "a", "a"], []]) == ["a", "b", "c"]

    def test_independent_of_note_order(self):
        tag_lists = [["work", "ideas"], ["home"], ["ideas", "zz"], ["Alpha"]]
        results = {tuple(unique_sorted_tags(list(p))) for p in itertools.permutations(tag_lists)}
        assert results == {("Alpha", "home", "ideas", "work", "zz")}

    @pytest.mark.asyncio
    async def test_list_tags_reads_tag_column(self, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [["y", "x"], ["x"]]
        mock_db_session.execute.return_value = result

        assert await NoteService().list_tags(mock_db_session) == ["x", "y"]

    @pytest.mark.asyncio
    async def test_list_tags_failure_is_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("gone")

        with pytest.raises(DatabaseError, match="Failed to fetch tags"):
            await NoteService().list_tags(mock_db_session)
