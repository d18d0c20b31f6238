"""
Notes — Pydantic Request/Response Schemas
===========================================

What:  Pydantic models defining the API contract between client and server.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate the OpenAPI documentation.
Who:   Used by route handlers and NoteService.

Wire format:
    Python attributes are snake_case; JSON keys are camelCase
    (`createdAt`, `updatedAt`). Response models declare camelCase
    serialization aliases so they can still be built from ORM objects
    by attribute name.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


def _require_text(value: str, label: str) -> str:
    # Only the empty string is rejected; the stored value is kept verbatim
    if not value:
        raise PydanticCustomError("value_required", f"{label} is required")
    return value


def _reject_null(value, label: str):
    # Defaults are never validated, so a None here was sent explicitly
    if value is None:
        raise PydanticCustomError("value_not_null", f"{label} cannot be null")
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /notes.

    `tags` is optional and defaults to an empty list. Duplicates are kept.
    """
    title: str = Field(description="Note title (required, non-empty)")
    content: str = Field(description="Note body, may contain lightweight markup")
    tags: List[str] = Field(default_factory=list, description="Free-text labels")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _require_text(v, "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _require_text(v, "Content")


class NoteUpdate(BaseModel):
    """
    Body of PUT /notes/{id}.

    Every field is optional, but a field that is present must hold a value:
    `title`/`content` non-empty strings, `tags` a list. Explicit nulls are 400s.
    """
    title: Optional[str] = Field(default=None)
    content: Optional[str] = Field(default=None)
    tags: Optional[List[str]] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _require_text(_reject_null(v, "Title"), "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> str:
        return _require_text(_reject_null(v, "Content"), "Content")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> List[str]:
        return _reject_null(v, "Tags")

    def changes(self) -> dict:
        """Fields the client actually supplied."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a note: `{id, title, content, tags, createdAt, updatedAt}`.

    Returned by GET /notes (as a list), POST /notes and PUT /notes/{id}.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(description="Creation time (ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (ISO 8601)")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        # SQLite drops tzinfo on the way back; stored values are always UTC
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


class MessageResponse(BaseModel):
    """Plain `{message}` payload: delete confirmation and liveness probe."""
    message: str


class FieldViolation(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Field violations for validation errors, absent otherwise
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[List[FieldViolation]] = Field(default=None)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Readiness report returned by GET /health."""
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
