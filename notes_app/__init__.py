"""
Notes — Application Package Initializer
=========================================

What: Marks the `notes_app` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest and the `notes` command-line client.

Architecture Note:
    The server half follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← CRUD orchestration, tag aggregation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The client half (`notes_app.client`) talks to the routes over HTTP:

    ┌─────────────────────────────────────┐
    │   Components / CLI (Presentation)   │  ← render store state, forward intents
    ├─────────────────────────────────────┤
    │          NotesStore (State)         │  ← authoritative client-side copy
    ├─────────────────────────────────────┤
    │        NotesApiClient (HTTP)        │  ← httpx, logging, error normalization
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
