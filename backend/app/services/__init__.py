# Services package init
"""
Luminar Notes Backend: Services Layer
======================================

Service Inventory:
    - NoteStore: persistence of note documents (schema rules, one store op per call)
    - NoteService: one method per notes endpoint, built on NoteStore
"""
