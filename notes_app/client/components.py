"""
Notes Client — Presentation Components
========================================

What:  Text-mode view components for the notes front end.
How:   Each component keeps only its own UI state (open/closed, toggles,
       confirmation steps) and renders to a string. Data comes from the
       NotesStore handed in by the caller; user intents are forwarded to
       the callbacks it was built with.
Who:   Composed by NotesPage and driven by the `notes` CLI.

Component Inventory:
    NoteForm        create/edit form with tag autocomplete
    NoteCard        one note with markup toggle, edit, confirmed delete
    SearchBar       free-text + single tag filter over loaded notes
    NotesPage       header, error banner, form button, search, cards, footer
    render_skeleton / render_search_bar_skeleton / render_error_banner
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from notes_app.client.markup import has_markup_syntax, render_markup
from notes_app.client.models import EditNoteData, Note, NoteFormData
from notes_app.client.search import filter_notes
from notes_app.client.store import NotesStore

logger = logging.getLogger(__name__)

MAX_TAG_SUGGESTIONS = 8
RULE = "─" * 60


def format_date(value: datetime) -> str:
    """en-US style: 'Mar 4, 2024, 09:05 PM'."""
    return f"{value:%b} {value.day}, {value:%Y, %I:%M %p}"


# ══════════════════════════════════════════════════════════════════════════
# Loading skeletons and error banner
# ══════════════════════════════════════════════════════════════════════════


def render_skeleton(count: int = 6) -> str:
    """Placeholder cards shown while the initial load is in flight."""
    block = "\n".join([
        "┌" + "─" * 38 + "┐",
        "│ " + "░" * 24 + " " * 13 + "│",
        "│ " + "░" * 36 + " │",
        "│ " + "░" * 30 + " " * 7 + "│",
        "│ " + "░░░░ ░░░░░" + " " * 27 + "│",
        "└" + "─" * 38 + "┘",
    ])
    return "\n".join(block for _ in range(count))


def render_search_bar_skeleton() -> str:
    return "[" + "░" * 40 + "]  [" + "░" * 12 + "]"


def render_error_banner(message: str, can_retry: bool = True) -> str:
    lines = ["✖ Something went wrong", f"  {message}"]
    if can_retry:
        lines.append("  ↻ Try again")
    return "\n".join(lines)


# ══════════════════════════════════════════════════════════════════════════
# Note form
# ══════════════════════════════════════════════════════════════════════════


class NoteForm:
    """
    One form for both creating and editing notes.

    The mode follows `editing_note`: opening the form with a note switches it
    to edit mode and pre-fills the fields. The form cannot be closed while a
    submission is in flight.

    Args:
        on_add:          awaited with NoteFormData in create mode
        on_edit:         awaited with EditNoteData in edit mode
        on_cancel_edit:  called whenever the form resets
        available_tags:  callable returning the known tag set (for autocomplete)
    """

    def __init__(
        self,
        on_add: Callable[[NoteFormData], Awaitable[object]],
        on_edit: Optional[Callable[[EditNoteData], Awaitable[object]]] = None,
        on_cancel_edit: Optional[Callable[[], None]] = None,
        available_tags: Callable[[], Iterable[str]] = lambda: (),
    ):
        self.on_add = on_add
        self.on_edit = on_edit
        self.on_cancel_edit = on_cancel_edit
        self.available_tags = available_tags
        self.is_open = False
        self.editing_note: Optional[Note] = None
        self.title = ""
        self.content = ""
        self.tags: List[str] = []
        self.submitting = False
        self.error: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_note is not None

    @property
    def mode(self) -> str:
        return "edit" if self.is_editing else "create"

    @property
    def can_submit(self) -> bool:
        return not self.submitting and bool(self.title.strip()) and bool(self.content.strip())

    def open(self, editing_note: Optional[Note] = None) -> None:
        self.editing_note = editing_note
        if editing_note is not None:
            self.title = editing_note.title
            self.content = editing_note.content
            self.tags = list(editing_note.tags)
        self.error = None
        self.is_open = True

    def close(self) -> bool:
        """Cancel while idle. Returns False (and stays open) during a submission."""
        if self.submitting:
            return False
        self.reset()
        return True

    def reset(self) -> None:
        self.title = ""
        self.content = ""
        self.tags = []
        self.is_open = False
        self.error = None
        self.editing_note = None
        if self.on_cancel_edit:
            self.on_cancel_edit()

    # ── Tags ──────────────────────────────────────────────────────────────

    def add_tag(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = [existing for existing in self.tags if existing != tag]

    def suggest_tags(self, query: str) -> List[str]:
        """Known tags containing `query` (case-insensitive) that are not on the form yet."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            tag
            for tag in self.available_tags()
            if needle in tag.lower() and tag not in self.tags
        ][:MAX_TAG_SUGGESTIONS]

    # ── Submission ────────────────────────────────────────────────────────

    async def submit(self) -> bool:
        """
        Validate locally, then hand the data to on_add/on_edit.

        Returns True on success (the form resets and closes). On failure the
        form stays open with `error` set to the message to display.
        """
        if not self.title.strip() or not self.content.strip():
            self.error = "Title and content are required"
            return False

        self.submitting = True
        self.error = None
        try:
            if self.is_editing and self.on_edit is not None:
                await self.on_edit(EditNoteData(
                    id=self.editing_note.id,
                    title=self.title,
                    content=self.content,
                    tags=list(self.tags),
                ))
            else:
                await self.on_add(NoteFormData(
                    title=self.title, content=self.content, tags=list(self.tags)
                ))
        except Exception as e:
            self.error = str(e) or "Failed to save note"
            return False
        finally:
            self.submitting = False

        self.reset()
        return True

    def render_button(self, loading: bool = False) -> str:
        if self.is_editing:
            return ""
        return "[ … Loading... ]" if loading else "[ + Add New Note ]"

    def render(self) -> str:
        if not self.is_open:
            return ""
        heading = "Edit Note" if self.is_editing else "Create New Note"
        if self.submitting:
            action = "Updating..." if self.is_editing else "Creating..."
        else:
            action = "Update Note" if self.is_editing else "Create Note"
        lines = [heading, RULE]
        if self.error:
            lines.append(f"! {self.error}")
        lines += [
            f"Title:   {self.title}",
            "Content: (supports Markdown formatting)",
            self.content,
            "Tags:    " + (", ".join(self.tags) if self.tags else "-"),
            f"[ {action} ]  [ Cancel ]",
        ]
        return "\n".join(lines)


# ══════════════════════════════════════════════════════════════════════════
# Note card
# ══════════════════════════════════════════════════════════════════════════


class NoteCard:
    """
    Renders a single note and exposes its edit/delete actions.

    The rendered/raw toggle only exists when the content looks like markup.
    Deleting is a two-step action: request_delete() opens the confirmation,
    confirm_delete() performs it. A failed delete leaves the confirmation open.
    """

    def __init__(
        self,
        note: Note,
        on_delete: Callable[[str], Awaitable[None]],
        on_edit: Callable[[Note], None],
        is_deleting: bool = False,
    ):
        self.note = note
        self.on_delete = on_delete
        self.on_edit = on_edit
        self.is_deleting = is_deleting
        self.show_markup = True
        self.confirming_delete = False
        self.deleting = False

    @property
    def has_markup_toggle(self) -> bool:
        return has_markup_syntax(self.note.content)

    @property
    def actions_disabled(self) -> bool:
        return self.is_deleting or self.deleting

    def toggle_markup(self) -> None:
        if self.has_markup_toggle and not self.actions_disabled:
            self.show_markup = not self.show_markup

    def edit(self) -> None:
        if not self.actions_disabled:
            self.on_edit(self.note)

    def request_delete(self) -> None:
        if not self.actions_disabled:
            self.confirming_delete = True

    def cancel_delete(self) -> None:
        if not self.deleting:
            self.confirming_delete = False

    async def confirm_delete(self) -> bool:
        """Perform the delete opened by request_delete(). False if none is open."""
        if not self.confirming_delete or self.deleting:
            return False
        self.deleting = True
        try:
            await self.on_delete(self.note.id)
        except Exception as e:
            logger.error("Error deleting note %s: %s", self.note.id, e)
            return False
        finally:
            self.deleting = False
        self.confirming_delete = False
        return True

    def render_content(self) -> str:
        if self.show_markup and self.has_markup_toggle:
            return render_markup(self.note.content)
        return self.note.content

    def render(self) -> str:
        note = self.note
        header = f"■ {note.title}"
        if self.deleting:
            header += "  (deleting...)"
        elif self.has_markup_toggle:
            header += "  [raw]" if self.show_markup else "  [markdown]"

        lines = [header, self.render_content()]
        if note.tags:
            lines.append(" ".join(f"#{tag}" for tag in note.tags))
        dates = f"Created {format_date(note.created_at)}"
        if note.was_edited:
            dates += f" · Updated {format_date(note.updated_at)}"
        lines.append(dates)
        lines.append(f"id: {note.id}")
        if self.confirming_delete:
            lines.append(f"Delete “{note.title}”? This cannot be undone. [ Delete ] [ Cancel ]")
        return "\n".join(lines)


# ══════════════════════════════════════════════════════════════════════════
# Search bar
# ══════════════════════════════════════════════════════════════════════════


class SearchBar:
    """Holds the search term and selected tag; filtering never leaves the client."""

    def __init__(self, search_term: str = "", selected_tag: Optional[str] = None):
        self.search_term = search_term
        self.selected_tag = selected_tag

    def apply(self, notes: Iterable[Note]) -> List[Note]:
        return filter_notes(notes, self.search_term, self.selected_tag)

    def render(self, available_tags: Iterable[str]) -> str:
        term = self.search_term or "Search notes..."
        tag = self.selected_tag or "All tags"
        options = ", ".join(available_tags)
        line = f"🔍 {term}  ▾ {tag}"
        return f"{line}\n   tags: {options}" if options else line


# ══════════════════════════════════════════════════════════════════════════
# Page
# ══════════════════════════════════════════════════════════════════════════


class NotesPage:
    """
    The whole front end, composed from the store and the components above.

    Subscribes to the store on construction; `dirty` flips to True whenever
    the store changes so a driver loop knows to re-render.
    """

    def __init__(self, store: NotesStore):
        self.store = store
        self.search = SearchBar()
        self.form = NoteForm(
            on_add=store.add_note,
            on_edit=store.edit_note,
            available_tags=store.get_all_tags,
        )
        self._cards: Dict[str, NoteCard] = {}
        self.dirty = True
        self._unsubscribe = store.subscribe(self._on_change)

    def _on_change(self, store: NotesStore) -> None:
        self.dirty = True

    def close(self) -> None:
        self._unsubscribe()

    def start_edit(self, note: Note) -> None:
        self.form.open(note)

    @property
    def visible_notes(self) -> List[Note]:
        return self.search.apply(self.store.notes)

    def card_for(self, note: Note) -> NoteCard:
        card = self._cards.get(note.id)
        if card is None:
            card = NoteCard(note, on_delete=self.store.delete_note, on_edit=self.start_edit)
            self._cards[note.id] = card
        card.note = note
        card.is_deleting = self.store.action_loading.delete
        return card

    def render(self) -> str:
        store = self.store
        parts = ["My Notes", "Organize your thoughts with tags, markdown support, and powerful search", RULE]

        if store.error and not store.loading:
            parts.append(render_error_banner(store.error, can_retry=True))
            self.dirty = False
            return "\n".join(parts)

        button = self.form.render_button(loading=store.loading or store.action_loading.add)
        if button:
            parts.append(button)
        if self.form.is_open:
            parts.append(self.form.render())

        if store.loading:
            parts += [render_search_bar_skeleton(), render_skeleton(6)]
            self.dirty = False
            return "\n".join(parts)

        if store.notes:
            parts.append(self.search.render(store.tags))

        visible = self.visible_notes
        live_ids = {note.id for note in store.notes}
        self._cards = {key: card for key, card in self._cards.items() if key in live_ids}

        if visible:
            parts += [self.card_for(note).render() + "\n" + RULE for note in visible]
        elif store.notes:
            parts += ["No notes found", "Try adjusting your search terms or filters"]
        else:
            parts += ["No notes yet", "Create your first note to get started!"]

        if store.notes:
            footer = f"{len(visible)} of {len(store.notes)} notes shown"
            if store.tags:
                footer += f" • {len(store.tags)} unique tags"
            parts.append(footer)

        self.dirty = False
        return "\n".join(parts)
