# Middleware package init
"""
Luminar Notes Backend: Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every later log line can carry the ID
    - Logging records status and duration on the way back out
"""
