"""
MovieLibrary Backend: FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn movielibrary.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────────────┐ ┌────────────────┐ ┌──────┐ ┌──────┐ │
    │  │ Correlation ID │→│ Access Logging │→│ GZip │→│ CORS │ │
    │  └────────────────┘ └────────────────┘ └──────┘ └──────┘ │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────┐ ┌───────────────┐ ┌─────────────┐      │
    │  │ /api/movies  │ │ /api/rentals  │ │ GET /health │      │
    │  └──────────────┘ └───────────────┘ └─────────────┘      │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ Validation/Input/State→400 │ NotFound→404          │  │
    │  │ Conflict→409               │ Database→500          │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from movielibrary import __version__
from movielibrary.config import settings
from movielibrary.database import dispose_engine
from movielibrary.exceptions import (
    ConcurrencyConflictError,
    DatabaseError,
    InvalidInputError,
    InvalidStateTransitionError,
    MovieLibraryError,
    NotFoundError,
    ValidationFailedError,
)
from movielibrary.middleware.logging import RequestLoggingMiddleware
from movielibrary.middleware.request_id import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from movielibrary.routes import health, movies, rentals

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once from the lifespan, before anything else logs.
    Format: timestamp, level, logger name, message. The access logger adds
    the correlation ID to its message.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("MovieLibrary Backend %s starting up...", __version__)
    logger.info("Database backend: %s", "sqlite" if settings.is_sqlite else "postgresql")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("MovieLibrary Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the standard error body; the correlation ID comes from the request context."""
    rid = request_id_var.get("")
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": details,
            "request_id": rid,
        },
        headers={CORRELATION_ID_HEADER: rid, REQUEST_ID_HEADER: rid} if rid else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the typed failures of the services to HTTP responses.

    Handler hierarchy:
        ValidationFailedError        → 400 (per-field errors in details)
        InvalidInputError            → 400
        InvalidStateTransitionError  → 400
        NotFoundError                → 404
        ConcurrencyConflictError     → 409 (caller re-reads and resubmits)
        DatabaseError                → 500 (generic message, context logged)
        MovieLibraryError (base)     → 500
        Exception (fallback)         → 500 (stack trace logged, never returned)
    """

    @app.exception_handler(ValidationFailedError)
    async def handle_validation_failed(request: Request, exc: ValidationFailedError):
        logger.warning("[%s] Validation failed: %s", request_id_var.get(""), exc.context)
        return error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(request: Request, exc: InvalidInputError):
        logger.warning("[%s] Invalid input: %s", request_id_var.get(""), exc.message)
        return error_response(400, "invalid_input", exc.message, exc.context)

    @app.exception_handler(InvalidStateTransitionError)
    async def handle_invalid_state(request: Request, exc: InvalidStateTransitionError):
        logger.warning("[%s] Invalid state transition: %s", request_id_var.get(""), exc.message)
        return error_response(400, "invalid_state_transition", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message, exc.context)

    @app.exception_handler(ConcurrencyConflictError)
    async def handle_conflict(request: Request, exc: ConcurrencyConflictError):
        logger.warning("[%s] Concurrency conflict: %s", request_id_var.get(""), exc.context)
        return error_response(409, "concurrency_conflict", exc.message, exc.context)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Context stays in the server log
        logger.error(
            "[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return error_response(500, "server_error", exc.message)

    @app.exception_handler(MovieLibraryError)
    async def handle_library_error(request: Request, exc: MovieLibraryError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="MovieLibrary API",
        description=(
            "Movie catalog and rental records with optimistic concurrency: every "
            "update carries the row_version it was based on and is rejected with "
            "409 when that version is stale."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_ID_HEADER, REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(movies.router)
    app.include_router(rentals.router)
    app.include_router(health.router)

    return app


# uvicorn expects `movielibrary.main:app`
app = create_app()
