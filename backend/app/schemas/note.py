"""
Luminar Notes Backend: Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI validates request bodies against the *Create/*Update models and
       serializes responses through the *Response models (by alias, so the
       wire format uses `_id`, `createdAt` and `updatedAt`).

Request models keep every field optional on purpose: presence and emptiness
rules live in NoteStore so that a missing `content` or `date` surfaces as a
400 ValidationError with a readable message, not as FastAPI's generic 422.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    Unknown keys are ignored. `timestamp` is optional; the server uses the
    current time when it is absent.
    """
    title: Optional[str] = Field(default=None, description="Defaults to 'Untitled Page'")
    content: Optional[str] = Field(default=None, description="Note body, must not be blank")
    date: Optional[str] = Field(default=None, description="Client-formatted display date")
    timestamp: Optional[int] = Field(default=None, description="Epoch milliseconds")


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}.

    Only the allow-listed fields below can be changed; anything else in the
    body (id, timestamp, createdAt, ...) is dropped. Only keys the client
    actually sent are applied (see `changes`).
    """
    title: Optional[str] = None
    content: Optional[str] = None
    date: Optional[str] = None

    def changes(self) -> dict:
        """The fields explicitly present in the request body."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a stored note.

    `_id` mirrors `id`; the frontend keys its list on `_id`.
    """
    id: uuid.UUID = Field(description="Server-assigned note identifier")
    title: str
    content: str
    date: str
    timestamp: int = Field(description="Last write time, epoch milliseconds")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @computed_field(alias="_id")
    @property
    def document_id(self) -> str:
        return str(self.id)


class DeleteResponse(BaseModel):
    message: str = Field(default="Note deleted successfully")


class ClearResponse(BaseModel):
    """Result of DELETE /api/notes/clear/all."""
    message: str
    deleted_count: int = Field(alias="deletedCount")

    model_config = ConfigDict(populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by every non-2xx response.

    Example:
        {
            "error": "validation_error",
            "message": "Note content cannot be empty",
            "details": {"field": "content"},
            "request_id": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness plus store connectivity, returned by GET /health."""
    status: str = Field(description="healthy or unhealthy")
    message: str = Field(default="Server running")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
