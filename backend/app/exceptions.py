"""
Luminar Notes Backend: Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the note CRUD cycle.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       JSON error responses with the right HTTP status code.
Who:   Raised by the note store and note service; caught by global handlers.

Exception Hierarchy:
    NotesError (base)
    ├── ValidationError      → 400 Bad Request
    ├── NotFoundError        → 404 Not Found
    ├── StoreError           → 500 on reads, 400 on writes (status_code attribute)
    └── ConfigurationError   → fatal at startup, never reaches a client
"""

from typing import Any, Dict, Optional


class NotesError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesError):
    """
    Raised when client input fails validation.

    When:    Empty content, missing date, malformed note identifier.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Note content cannot be empty",
            "details": {"field": "content"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotesError):
    """
    Raised when a requested note does not exist.

    The store returns None for missing rows; the service layer converts that
    into this exception so routes never deal with None.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        message: str = "Note not found",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(NotesError):
    """
    Raised when a store operation fails unexpectedly.

    What:    Connection lost, constraint violation, driver error.
    HTTP:    `status_code`: reads answer 500, writes answer 400.

    The message returned to the client is generic; the driver error is kept
    in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        status_code: int = 500,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class ConfigurationError(NotesError):
    """Raised at startup when required settings are missing or the store is unreachable."""
