"""
Luminar Notes Backend: Note SQLAlchemy Model
=============================================

What:  ORM model for the `notes` collection (one row per note document).
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by NoteStore for every CRUD operation.

Column notes:
    - id: UUID4 assigned in Python at insert time, immutable afterwards
    - title: falls back to "Untitled Page"
    - content / date: required; `date` is the client's display string, never parsed
    - timestamp: epoch milliseconds; the list endpoint sorts on it
    - created_at / updated_at: maintained by the mapper (default / onupdate)

Types are dialect-neutral (Uuid, BigInteger, DateTime) so the same model
runs on PostgreSQL in production and SQLite in tests.
"""

import time
import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Index, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

DEFAULT_TITLE = "Untitled Page"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A titled, timestamped text page.

    Lifecycle:
        1. Created on POST /api/notes
        2. Mutated in place on PUT (timestamp refreshed on every write)
        3. Destroyed on DELETE (single or clear-all)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_TITLE,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    date: Mapped[str] = mapped_column(Text, nullable=False)

    timestamp: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=now_ms,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Newest-first listing is the only query pattern besides primary key lookup
    __table_args__ = (
        Index("idx_notes_timestamp", timestamp.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', timestamp={self.timestamp})>"
