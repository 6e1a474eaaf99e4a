"""
Luminar Notes Backend: Health Check Route
==========================================

What:  Liveness endpoint that also reports store connectivity.
How:   Answers 200 whenever the process is serving requests; the body says
       whether a `SELECT 1` against the notes store succeeds.

Status levels:
    - healthy:   store reachable
    - unhealthy: store unreachable (process still up)
"""

import logging
import time

from fastapi import APIRouter, Request

from app import __version__
from app.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    database = request.app.state.database
    connected = await database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        message="Server running",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
