"""
Luminar Notes Backend: FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() returns a configured FastAPI instance; the store handle
       is either injected (tests) or built from settings during startup.
Who:   uvicorn (`uvicorn app.main:app`, or the `luminar-notes` script).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌─────────────────┐       │
    │  │ /api/notes (6 CRUD)  │ │ GET /health     │       │
    │  └──────────────────────┘ └─────────────────┘       │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Store→400/500│   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (DATABASE_URL is required)
    3. Connect to the store; abort startup when unreachable
    4. Create the notes table if configured to

    Shutdown:
    1. Dispose the database engine (close all connections)
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings
from app.database import Database
from app.exceptions import (
    ConfigurationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import health, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure console logging for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Handler messages carry their request ID as a "[rid]" prefix
    (see RequestLoggerAdapter).
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(app_settings: Settings):
    """Returns the lifespan context manager bound to `app_settings`."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(app_settings.log_level)
        logger.info("Luminar Notes backend starting up...")

        if app.state.database is None:
            try:
                app_settings.validate_required()
            except ConfigurationError as e:
                logger.critical("%s", e.message)
                raise
            app.state.database = Database.from_settings(app_settings)

        database: Database = app.state.database
        if not await database.ping():
            await database.dispose()
            logger.critical("Could not connect to the notes store (%s)", database.backend_name)
            raise ConfigurationError("Initial database connection failed")
        logger.info("Connected to the notes store (%s)", database.backend_name)

        if app_settings.db_auto_create:
            await database.create_all()
            logger.info("Collection ready: notes")

        logger.info("Server ready on port %d", app_settings.backend_port)

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("Luminar Notes backend shutting down...")
        await database.dispose()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, error: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    """
    JSON error body shared by every handler; `message` is always present.

    The request ID header is set here as well: the fallback 500 handler runs
    outside RequestIDMiddleware, which never sees that response.
    """
    request_id = request_id_var.get("")
    content = {
        "error": error,
        "message": message,
        "request_id": request_id,
    }
    if details:
        content["details"] = details
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError         → 400
        RequestValidationError  → 400 (malformed JSON, wrong field types)
        NotFoundError           → 404
        StoreError              → exc.status_code (500 reads, 400 writes)
        Exception (fallback)    → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        fields = [
            ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
            for err in exc.errors()
        ]
        message = "Invalid request body: " + "; ".join(
            f"{field}: {err.get('msg', 'invalid')}" for field, err in zip(fields, exc.errors())
        )
        logger.warning("[%s] %s", request_id_var.get(""), message)
        return error_response(400, "validation_error", message, {"fields": fields})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        # Driver details stay in the server log
        logger.error(
            "[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return error_response(exc.status_code, "store_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment-loaded ones)
        database:     Pre-built store handle; when omitted the lifespan builds
                      one from `app_settings.database_url`
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Luminar Notes API",
        description="Create, list, edit and delete notes.",
        version=__version__,
        lifespan=build_lifespan(app_settings),
    )
    app.state.database = database
    app.state.settings = app_settings

    # Middleware executes in REVERSE order of addition
    origins = app_settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


async def store_reachable(app_settings: Settings) -> bool:
    """Opens a throwaway handle and pings the store once."""
    database = Database.from_settings(app_settings)
    try:
        return await database.ping()
    finally:
        await database.dispose()


def run(app_settings: Optional[Settings] = None) -> None:
    """
    Console entry point: validate configuration, check the store, then serve
    with uvicorn.

    Exits with status 1 when DATABASE_URL is missing or the initial
    connection fails.
    """
    import uvicorn

    app_settings = app_settings or settings
    setup_logging(app_settings.log_level)
    try:
        app_settings.validate_required()
    except ConfigurationError as e:
        logger.critical("%s", e.message)
        sys.exit(1)

    if not asyncio.run(store_reachable(app_settings)):
        logger.critical("Initial database connection failed; exiting")
        sys.exit(1)

    uvicorn.run(
        "app.main:app",
        host=app_settings.backend_host,
        port=app_settings.backend_port,
        log_level=app_settings.log_level.lower(),
    )
