"""
Client-side data types.

The API sends camelCase JSON with ISO-8601 timestamps; these models parse
it into snake_case attributes holding `datetime` values.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Note(BaseModel):
    """A note as held by the client store."""

    id: str
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel, serialization_alias=to_camel),
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="after")
    def default_updated_at(self) -> "Note":
        # Older servers omitted updatedAt on fresh notes
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)
        return self

    @property
    def was_edited(self) -> bool:
        return self.updated_at != self.created_at


class NoteFormData(BaseModel):
    """Fields submitted by the note form when creating a note."""

    title: str
    content: str
    tags: List[str] = Field(default_factory=list)


class EditNoteData(NoteFormData):
    """Form submission for an existing note."""

    id: str
