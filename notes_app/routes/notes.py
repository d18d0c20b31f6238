"""
Notes — Note and Tag Route Handlers
=====================================

What:  GET/POST /notes, PUT/DELETE /notes/{note_id} and GET /tags.
How:   Validates bodies through Pydantic schemas, delegates to NoteService,
       returns JSON. Errors surface through the global exception handlers.
Who:   Called by `notes_app.client.api.NotesApiClient`.

Routes stay thin: status codes and request parsing here, everything else in
the service.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.database import get_db_session
from notes_app.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from notes_app.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all notes, newest first",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    return await note_service.list_notes(db)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Validation error", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Create a note from `{title, content, tags?}`.

    Returns 201 with the stored note, including its generated id and
    identical createdAt/updatedAt timestamps.
    """
    return await note_service.create_note(db, payload)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Validation error", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update some or all fields of a note",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Partially update a note.

    `note_id` is taken as an opaque string; ids that are not valid UUIDs
    simply do not exist and yield 404 rather than a validation error.
    """
    return await note_service.update_note(db, note_id, payload)


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a note permanently",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.delete_note(db, note_id)


@router.get(
    "/tags",
    response_model=List[str],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List distinct tags across all notes, sorted",
)
async def list_tags(db: AsyncSession = Depends(get_db_session)) -> List[str]:
    return await note_service.list_tags(db)
