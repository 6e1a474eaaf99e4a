# Routes package init
"""
Luminar Notes Backend: API Routes Package
==========================================

Route Inventory:
    - notes.py:   /api/notes CRUD (six endpoints)
    - health.py:  GET /health (liveness + store connectivity)

Routes stay thin: extract path/body, call NoteService, return its result.
"""
