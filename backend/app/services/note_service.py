"""
Luminar Notes Backend: Note Service
====================================

What:  One method per notes endpoint, sitting between the routes (HTTP) and
       NoteStore (persistence).
How:   Each method issues exactly one store operation, turns a missing note
       into NotFoundError, stamps StoreError with the endpoint's status code
       and converts ORM rows into response schemas.
Who:   Built per request by `app.dependencies.get_note_service`, which
       injects the store and a request-scoped logger.

Store failure status by endpoint:
    list / get / clear-all   → 500
    create / update / delete → 400
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Union

from app.exceptions import NotFoundError, StoreError
from app.schemas.note import (
    ClearResponse,
    DeleteResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from app.services.note_store import NoteStore

READ_FAILURE_STATUS = 500
WRITE_FAILURE_STATUS = 400


@contextmanager
def store_failures(status_code: int) -> Iterator[None]:
    """Assigns `status_code` to any StoreError raised inside the block."""
    try:
        yield
    except StoreError as e:
        e.status_code = status_code
        raise


class NoteService:
    """
    Request-level note operations.

    Stateless apart from its collaborators; a fresh instance is built for
    every request.
    """

    def __init__(
        self,
        store: NoteStore,
        log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ):
        self.store = store
        self.log = log or logging.getLogger(__name__)

    async def list_notes(self) -> List[NoteResponse]:
        self.log.info("Fetching all notes")
        with store_failures(READ_FAILURE_STATUS):
            notes = await self.store.find_all()
        self.log.info("Found %d notes", len(notes))
        return [NoteResponse.model_validate(note) for note in notes]

    async def create_note(self, payload: NoteCreate) -> NoteResponse:
        """
        Stores a new note.

        Raises:
            ValidationError: blank content or missing date (→ 400)
            StoreError: the insert failed (→ 400)
        """
        self.log.info("Creating note (title=%r, date=%r)", payload.title, payload.date)
        with store_failures(WRITE_FAILURE_STATUS):
            note = await self.store.insert(payload.model_dump())
        self.log.info("Note %s saved", note.id)
        return NoteResponse.model_validate(note)

    async def get_note(self, note_id: Any) -> NoteResponse:
        with store_failures(READ_FAILURE_STATUS):
            note = await self.store.find_by_id(note_id)
        if note is None:
            self.log.warning("Note %s not found", note_id)
            raise NotFoundError(resource_id=str(note_id))
        return NoteResponse.model_validate(note)

    async def update_note(self, note_id: Any, payload: NoteUpdate) -> NoteResponse:
        """
        Applies the fields present in `payload` and refreshes the timestamp.

        Raises:
            ValidationError: malformed id, blank content or blank date (→ 400)
            NotFoundError: no note with this id (→ 404)
            StoreError: the update failed (→ 400)
        """
        changes = payload.changes()
        self.log.info("Updating note %s (fields=%s)", note_id, sorted(changes))
        with store_failures(WRITE_FAILURE_STATUS):
            note = await self.store.update_by_id(note_id, changes)
        if note is None:
            self.log.warning("Update failed: note %s not found", note_id)
            raise NotFoundError(resource_id=str(note_id))
        self.log.info("Note %s updated (timestamp=%d)", note.id, note.timestamp)
        return NoteResponse.model_validate(note)

    async def delete_note(self, note_id: Any) -> DeleteResponse:
        self.log.info("Deleting note %s", note_id)
        with store_failures(WRITE_FAILURE_STATUS):
            removed = await self.store.delete_by_id(note_id)
        if not removed:
            self.log.warning("Delete failed: note %s not found", note_id)
            raise NotFoundError(resource_id=str(note_id))
        return DeleteResponse(message="Note deleted successfully")

    async def clear_notes(self) -> ClearResponse:
        self.log.warning("Deleting all notes")
        with store_failures(READ_FAILURE_STATUS):
            deleted = await self.store.delete_all()
        self.log.info("Deleted %d notes", deleted)
        return ClearResponse(message=f"Deleted {deleted} notes", deleted_count=deleted)
