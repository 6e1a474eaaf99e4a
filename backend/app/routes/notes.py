"""
Luminar Notes Backend: Notes Route Handlers
============================================

What:  The six notes endpoints, mounted under /api/notes.
How:   Each handler delegates to NoteService and returns its result; errors
       propagate as application exceptions and are formatted by the global
       handlers in main.py.

Route Inventory:
    GET    /api/notes              list, newest first          200
    POST   /api/notes              create                      201
    DELETE /api/notes/clear/all    delete every note           200
    GET    /api/notes/{note_id}    fetch one                   200 | 404
    PUT    /api/notes/{note_id}    update                      200 | 404
    DELETE /api/notes/{note_id}    delete one                  200 | 404

`note_id` is taken as a plain string so that a malformed identifier is
reported by the store as a 400 ValidationError rather than FastAPI's 422.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.dependencies import get_note_service
from app.schemas.note import (
    ClearResponse,
    DeleteResponse,
    ErrorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from app.services.note_service import NoteService

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_BAD_REQUEST = {400: {"description": "Invalid input or write failure", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Store error", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={**_SERVER_ERROR},
    summary="List all notes, most recent first",
)
async def list_notes(service: NoteService = Depends(get_note_service)) -> List[NoteResponse]:
    return await service.list_notes()


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses={**_BAD_REQUEST},
    summary="Create a note",
    description=(
        "Creates a note. `content` must not be blank and `date` is required; "
        "`title` defaults to 'Untitled Page' and `timestamp` to the current time."
    ),
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.create_note(payload)


# Declared before the /{note_id} routes so the literal path is matched first
@router.delete(
    "/clear/all",
    response_model=ClearResponse,
    responses={**_SERVER_ERROR},
    summary="Delete every note",
)
async def clear_notes(service: NoteService = Depends(get_note_service)) -> ClearResponse:
    return await service.clear_notes()


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.get_note(note_id)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Update a note",
    description=(
        "Applies the supplied `title`, `content` and `date`; other fields are ignored. "
        "The note's `timestamp` is refreshed on every update."
    ),
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.update_note(note_id, payload)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> DeleteResponse:
    return await service.delete_note(note_id)
