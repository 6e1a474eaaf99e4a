"""
Luminar Notes Backend: Application Package
===========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       NoteService (per endpoint)    │  ← status mapping, not-found
    ├─────────────────────────────────────┤
    │        NoteStore (mapper)           │  ← schema rules, one store op
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
