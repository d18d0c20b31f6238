"""
Notes — Client Package
========================

The front end of the notes application, talking to the API over HTTP.

Module Inventory:
    - api.py:         NotesApiClient (httpx), ApiConnectionError, ApiServerError
    - models.py:      Note, NoteFormData, EditNoteData
    - store.py:       NotesStore: client state, passed explicitly to views
    - search.py:      filter_notes (local, synchronous)
    - markup.py:      has_markup_syntax, render_markup
    - components.py:  NoteForm, NoteCard, SearchBar, NotesPage, skeletons, banner
    - cli.py:         `notes` command-line front end
"""
