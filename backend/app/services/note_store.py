"""
Luminar Notes Backend: Note Store (Persistence Layer)
======================================================

What:  The mapper between request payloads and rows of the `notes` table.
How:   Wraps one AsyncSession; every public method is a single logical store
       operation. Schema rules (required fields, defaults, identifier format)
       are enforced here, before anything reaches the database.
Who:   Constructed per request by the `get_note_service` dependency.

Contract:
    insert(fields)              → Note                (ValidationError)
    find_all()                  → List[Note]          newest timestamp first
    find_by_id(id)              → Note | None         (ValidationError on malformed id)
    update_by_id(id, changes)   → Note | None         (ValidationError)
    delete_by_id(id)            → bool
    delete_all()                → int                 rows removed
    count()                     → int

Each write commits before returning, so a failed commit surfaces as a
StoreError inside the request instead of after the response is sent.
Driver failures (SQLAlchemyError) are wrapped in StoreError; the service
layer decides which HTTP status they map to.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import StoreError, ValidationError
from app.models.note import DEFAULT_TITLE, Note, now_ms, utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "date")


def parse_note_id(note_id: Any) -> uuid.UUID:
    """
    Converts a path identifier into a UUID.

    Raises:
        ValidationError: the identifier is not a UUID.
    """
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id))
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(
            message=f"Invalid note id '{note_id}'",
            field="id",
        )


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class NoteStore:
    """Single-collection note persistence over one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert(self, fields: Dict[str, Any]) -> Note:
        """
        Persists a new note.

        `title` falls back to "Untitled Page", `timestamp` to the current time.
        `content` must be non-blank and `date` present (non-empty; the display
        string is stored as sent).
        """
        content = fields.get("content")
        date = fields.get("date")
        if _is_blank(content):
            raise ValidationError(message="Note content cannot be empty", field="content")
        if not date:
            raise ValidationError(message="Date is required", field="date")

        title = fields.get("title")
        note = Note(
            title=DEFAULT_TITLE if _is_blank(title) else title,
            content=content,
            date=date,
            timestamp=fields.get("timestamp") or now_ms(),
        )
        try:
            self.session.add(note)
            await self.session.commit()
            await self.session.refresh(note)
        except SQLAlchemyError as e:
            raise self._store_error("insert", e)
        return note

    async def update_by_id(self, note_id: Any, changes: Dict[str, Any]) -> Optional[Note]:
        """
        Merges `changes` onto an existing note and refreshes its timestamp.

        Only title, content and date are applied; other keys are ignored.
        The new timestamp is the current time, or previous + 1 when the clock
        has not moved past the stored value.

        Returns:
            The updated note, or None when no note has this id.
        """
        key = parse_note_id(note_id)
        fields = self._validate_changes(changes)

        try:
            note = await self.session.get(Note, key)
            if note is None:
                return None
            for name, value in fields.items():
                setattr(note, name, value)
            note.timestamp = max(now_ms(), note.timestamp + 1)
            note.updated_at = utcnow()
            await self.session.commit()
            await self.session.refresh(note)
        except SQLAlchemyError as e:
            raise self._store_error("update", e, note_id=str(key))
        return note

    async def delete_by_id(self, note_id: Any) -> bool:
        key = parse_note_id(note_id)
        try:
            result = await self.session.execute(delete(Note).where(Note.id == key))
            await self.session.commit()
        except SQLAlchemyError as e:
            raise self._store_error("delete", e, note_id=str(key))
        return result.rowcount > 0

    async def delete_all(self) -> int:
        """Removes every note and returns how many were removed."""
        try:
            result = await self.session.execute(delete(Note))
            await self.session.commit()
        except SQLAlchemyError as e:
            raise self._store_error("delete_all", e)
        return result.rowcount or 0

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[Note]:
        """All notes, most recent `timestamp` first (ties: newest createdAt first)."""
        query = select(Note).order_by(Note.timestamp.desc(), Note.created_at.desc())
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise self._store_error("find_all", e)
        return list(result.scalars().all())

    async def find_by_id(self, note_id: Any) -> Optional[Note]:
        key = parse_note_id(note_id)
        try:
            return await self.session.get(Note, key)
        except SQLAlchemyError as e:
            raise self._store_error("find_by_id", e, note_id=str(key))

    async def count(self) -> int:
        try:
            result = await self.session.execute(select(func.count()).select_from(Note))
        except SQLAlchemyError as e:
            raise self._store_error("count", e)
        return result.scalar_one()

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _validate_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
        fields = {name: changes[name] for name in UPDATABLE_FIELDS if name in changes}

        if "content" in fields and _is_blank(fields["content"]):
            raise ValidationError(message="Note content cannot be empty", field="content")
        if "date" in fields and not fields["date"]:
            raise ValidationError(message="Date is required", field="date")
        if "title" in fields and _is_blank(fields["title"]):
            fields["title"] = DEFAULT_TITLE
        return fields

    @staticmethod
    def _store_error(operation: str, error: SQLAlchemyError, **context: Any) -> StoreError:
        logger.error("Store %s failed: %s", operation, str(error), exc_info=True)
        return StoreError(
            context={"operation": operation, "error_type": type(error).__name__, **context},
        )
