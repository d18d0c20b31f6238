"""Local, synchronous note filtering for the search bar."""

from typing import Iterable, List, Optional

from notes_app.client.models import Note


def matches_search(note: Note, search_term: str) -> bool:
    """Case-insensitive substring match against title, content and tags."""
    term = search_term.strip().lower()
    if not term:
        return True
    return (
        term in note.title.lower()
        or term in note.content.lower()
        or any(term in tag.lower() for tag in note.tags)
    )


def filter_notes(
    notes: Iterable[Note],
    search_term: str = "",
    selected_tag: Optional[str] = None,
) -> List[Note]:
    """
    Notes matching the search term and, when given, carrying `selected_tag`.

    Order is preserved from `notes`. An empty term and no tag returns
    everything.
    """
    return [
        note
        for note in notes
        if (not selected_tag or selected_tag in note.tags) and matches_search(note, search_term)
    ]
