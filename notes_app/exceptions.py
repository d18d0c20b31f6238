"""
Notes — Custom Exception Hierarchy
====================================

What:  Application-specific exceptions for the API service.
How:   Every exception has a display-safe `message` and a private `context`
       dict. Handlers in main.py turn them into JSON error bodies.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    NotesError (base)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error

Client-side errors (no response, server error response) live in
`notes_app.client.api` because they describe the HTTP boundary as seen
from the caller, not a server condition.
"""

from typing import Any, Dict, Optional


class NotesError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Text shown to the client as-is
        context:  Extra fields for the server log only
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(NotesError):
    """
    The note addressed by the request is not stored.

    When:    PUT or DELETE /notes/{id} with an id that is unknown or not a UUID.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records (not an exception); the
    service layer converts None into this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(NotesError):
    """
    A storage operation failed.

    What:    A query, insert, update or delete failed.
    HTTP:    500 Internal Server Error

    The message is fixed per operation ("Failed to fetch notes", ...).
    The original exception type travels in `context` and is logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
