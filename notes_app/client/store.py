"""
Notes Client — Notes Store
============================

What:  The authoritative client-side copy of notes and tags.
How:   Every mutation goes to the server first; local state changes only
       after the server confirms. Subscribed views are notified after each
       state change so they can re-render.
Who:   Created once per front end and passed explicitly to every component
       (NotesPage, NoteForm, NoteCard, the CLI). Tests hand it a fake API.

State:
    notes           most recent first
    tags            deduplicated, sorted
    loading         initial fetch / refresh in progress
    action_loading  per-action flags: add, edit, delete (advisory, not locks)
    error           single display message; any failing action overwrites it

Error policy:
    load()/refresh() record the error and swallow it (the page shows the
    banner with a retry action). add/edit/delete record the error and
    re-raise so the calling form or card can keep its own state accurate.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from notes_app.client.models import EditNoteData, Note, NoteFormData

logger = logging.getLogger(__name__)

Listener = Callable[["NotesStore"], None]


class NotesApi(Protocol):
    """The subset of NotesApiClient the store depends on."""

    async def get_all_notes(self) -> List[Note]: ...

    async def get_all_tags(self) -> List[str]: ...

    async def create_note(self, title: str, content: str, tags: Optional[List[str]] = None) -> Note: ...

    async def update_note(
        self,
        note_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Note: ...

    async def delete_note(self, note_id: str) -> None: ...


@dataclass
class ActionLoading:
    add: bool = False
    edit: bool = False
    delete: bool = False


def error_message(error: Exception, fallback: str) -> str:
    """Display text for an exception: its own message, else the fallback."""
    return str(error) or fallback


def merge_tags(known: List[str], incoming: List[str]) -> List[str]:
    """Add genuinely new tags to a known tag list, keeping it sorted and unique."""
    new_tags = [tag for tag in incoming if tag not in known]
    if not new_tags:
        return known
    return sorted(set(known) | set(new_tags))


class NotesStore:
    """
    Client state for the notes front end.

    Args:
        api: Anything implementing NotesApi, normally a NotesApiClient.
    """

    def __init__(self, api: NotesApi):
        self.api = api
        self.notes: List[Note] = []
        self.tags: List[str] = []
        self.loading: bool = True
        self.error: Optional[str] = None
        self.action_loading = ActionLoading()
        self._listeners: List[Listener] = []
        self._closed = False

    # ── Subscriptions ─────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(store)` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach the store from its views; completions after this are not broadcast."""
        self._closed = True
        self._listeners.clear()

    def _notify(self) -> None:
        if self._closed:
            return
        for listener in list(self._listeners):
            listener(self)

    # ── Loading ───────────────────────────────────────────────────────────

    async def load(self) -> None:
        """Initial load: fetch notes and tags concurrently."""
        await self._fetch_all("Failed to load data")

    async def refresh(self) -> None:
        """Re-fetch notes and tags wholesale. Also the error banner's retry action."""
        await self._fetch_all("Failed to refresh data")

    async def _fetch_all(self, fallback: str) -> None:
        self.loading = True
        self.error = None
        self._notify()
        try:
            notes, tags = await asyncio.gather(
                self.api.get_all_notes(),
                self.api.get_all_tags(),
            )
            self.notes = list(notes)
            self.tags = list(tags)
        except Exception as e:
            logger.error("Error loading data: %s", e)
            self.error = error_message(e, fallback)
        finally:
            self.loading = False
            self._notify()

    # ── Actions ───────────────────────────────────────────────────────────

    async def add_note(self, data: NoteFormData) -> Note:
        self._start("add")
        try:
            note = await self.api.create_note(data.title, data.content, list(data.tags))
            self.notes = [note] + self.notes
            self.tags = merge_tags(self.tags, note.tags)
            return note
        except Exception as e:
            self._record("Error adding note", e, "Failed to add note")
            raise
        finally:
            self._finish("add")

    async def edit_note(self, data: EditNoteData) -> Note:
        self._start("edit")
        try:
            note = await self.api.update_note(
                data.id, title=data.title, content=data.content, tags=list(data.tags)
            )
            self.notes = [note if existing.id == data.id else existing for existing in self.notes]
            self.tags = merge_tags(self.tags, note.tags)
            return note
        except Exception as e:
            self._record("Error editing note", e, "Failed to edit note")
            raise
        finally:
            self._finish("edit")

    async def delete_note(self, note_id: str) -> None:
        """
        Delete on the server, drop the note locally, then re-fetch tags.

        The tag list comes back from the server because a deleted note may
        have held the last copy of some tag.
        """
        self._start("delete")
        try:
            await self.api.delete_note(note_id)
            self.notes = [note for note in self.notes if note.id != note_id]
            self.tags = list(await self.api.get_all_tags())
        except Exception as e:
            self._record("Error deleting note", e, "Failed to delete note")
            raise
        finally:
            self._finish("delete")

    def get_all_tags(self) -> List[str]:
        return self.tags

    # ── Helpers ───────────────────────────────────────────────────────────

    def _start(self, action: str) -> None:
        setattr(self.action_loading, action, True)
        self.error = None
        self._notify()

    def _finish(self, action: str) -> None:
        setattr(self.action_loading, action, False)
        self._notify()

    def _record(self, context: str, error: Exception, fallback: str) -> None:
        logger.error("%s: %s", context, error)
        self.error = error_message(error, fallback)
