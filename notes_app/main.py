"""
Notes — FastAPI Application Factory
=====================================

What:  Builds the Notes API application.
How:   create_app() wires middleware, exception handlers and routers onto a
       fresh FastAPI instance; the module-level `app` is one such instance.
Who:   Called by uvicorn (uvicorn notes_app.main:app) or the `notes-api` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────┐     │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│ CORS │     │
    │  └──────────┘ └─────────────┘ └──────┘ └──────┘     │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────┐ ┌──────────┐ ┌───────────────┐  │
    │  │ /notes (CRUD)  │ │ GET /tags│ │ GET / /health │  │
    │  └────────────────┘ └──────────┘ └───────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB/other→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables, log readiness
    Shutdown: dispose the database engine
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notes_app import __version__
from notes_app.config import settings
from notes_app.database import create_tables, dispose_engine
from notes_app.exceptions import (
    DatabaseError,
    NotesError,
    NotFoundError,
)
from notes_app.log import setup_logging
from notes_app.middleware.logging import RequestLoggingMiddleware
from notes_app.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_app.routes import health, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown work around the serving period.

    Startup sequence:
        1. Setup logging
        2. Create tables when DB_CREATE_TABLES is enabled
        3. Log successful startup

    Shutdown sequence:
        1. Dispose database engine (close all pooled connections)
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("Notes API %s starting up...", __version__)

    if settings.db_create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "path", "query")]
    return ".".join(parts) or "body"


def request_validation_details(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Flatten FastAPI's validation errors into {"field", "message"} items."""
    return [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]


def _request_id(request: Request) -> str:
    # The catch-all handler runs in ServerErrorMiddleware, outside
    # RequestIDMiddleware, after the ContextVar has been reset
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error_body(request: Request, error: str, message: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": _request_id(request),
    }
    if details is not None:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the JSON error body `{error, message, details?, request_id}`.

    Handler hierarchy:
        RequestValidationError  → 400 Bad Request (schema violations, field list)
        NotFoundError           → 404 Not Found
        DatabaseError           → 500 (fixed per-operation message)
        NotesError (base)       → 500
        Exception (fallback)    → 500 generic

    Exception handlers never put stack traces or SQL in the response body;
    details are logged server-side.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = request_validation_details(exc)
        logger.warning(
            "[%s] Validation error on %s %s: %s",
            _request_id(request), request.method, request.url.path, details,
        )
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", "Validation error", details),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body(request, "not_found", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            _request_id(request), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", exc.message),
        )

    @app.exception_handler(NotesError)
    async def handle_app_error(request: Request, exc: NotesError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            _request_id(request), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error on %s %s: %s",
            _request_id(request),
            request.method,
            request.url.path,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Build a Notes API application with middleware, handlers and routes attached.
    """
    app = FastAPI(
        title="Notes API",
        description="Personal notes with tags: create, list, update, delete, and tag listing.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    allow_any = origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=not allow_any,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Entry point for the `notes-api` script."""
    import uvicorn

    uvicorn.run(
        "notes_app.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `notes_app.main:app` to be importable
app = create_app()
