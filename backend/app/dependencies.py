"""
Luminar Notes Backend: FastAPI Dependencies
============================================

What:  Wires the per-request collaborators of the notes routes.
How:   get_db_session (database.py) → NoteStore → NoteService, with a
       request-scoped logger injected alongside.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.middleware.logging import RequestLoggerAdapter
from app.middleware.request_id import request_id_var
from app.services.note_service import NoteService
from app.services.note_store import NoteStore


def get_request_logger(request: Request) -> RequestLoggerAdapter:
    """Logger bound to the current request ID."""
    rid = getattr(request.state, "request_id", "") or request_id_var.get("")
    return RequestLoggerAdapter(logging.getLogger("luminar.notes"), {"request_id": rid})


def get_note_store(db: AsyncSession = Depends(get_db_session)) -> NoteStore:
    return NoteStore(db)


def get_note_service(
    store: NoteStore = Depends(get_note_store),
    log: RequestLoggerAdapter = Depends(get_request_logger),
) -> NoteService:
    return NoteService(store, log)
