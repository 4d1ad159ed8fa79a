"""
Notes API: FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn notes_api.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐ ┌──────┐ │
    │  │  Req ID  │→│  Logging        │→│ GZip │→│ CORS │ │
    │  └──────────┘ └─────────────────┘ └──────┘ └──────┘ │
    │                                                     │
    │  Routes (under API_PREFIX):                         │
    │  ┌──────────────────────────┐ ┌─────────────────┐   │
    │  │ /notes, /notes/{id}      │ │ GET /health     │   │
    │  └──────────────────────────┘ └─────────────────┘   │
    │                                                     │
    │  Exception Handlers (one envelope builder):         │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotesError → kind │ 404/405 │ 422 │ other→500│   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → configuration check → optional table creation
    Shutdown: dispose database engine
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api import __version__
from notes_api.config import settings
from notes_api.database import create_tables, dispose_engine
from notes_api.exceptions import ErrorKind, FieldErrors, NotesError
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from notes_api.routes import health, notes
from notes_api.schemas.note import ErrorEnvelope

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / the process supervisor)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Notes API starting up...")

    try:
        settings.validate_for_startup()
    except ValueError as e:
        # Keep serving so /health can report the broken database
        logger.error("Configuration error: %s", str(e))

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ensured (AUTO_CREATE_TABLES=true)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    kind: ErrorKind,
    message: Optional[str] = None,
    errors: Optional[FieldErrors] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Single place where an error kind becomes an HTTP response."""
    body = ErrorEnvelope(
        message=message or kind.default_message,
        errors=errors if errors is not None else kind.default_errors,
    )
    return JSONResponse(
        status_code=kind.status_code,
        content=body.model_dump(),
        headers=headers,
    )


def _field_errors(exc: RequestValidationError) -> FieldErrors:
    """
    Group pydantic errors by field name.

    loc ("body", "title") → "title"; loc ("body",) → "body";
    nested locations are dotted ("body", "meta", "x") → "meta.x".
    A tail without any field name, such as the character offset of a JSON
    decode error ("body", 1), falls back to the source: "body".
    """
    grouped: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = list(error.get("loc", ()))
        tail = loc[1:]
        if any(isinstance(part, str) for part in tail):
            field = ".".join(str(part) for part in tail)
        else:
            field = str(loc[0]) if loc else "request"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return grouped


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for the `{data, message, errors}` envelope.

    Handler map:
        NotesError              → exc.kind (422 / 404 / 500)
        HTTPException 404       → UNKNOWN_ROUTE
        HTTPException 405       → METHOD_NOT_ALLOWED
        RequestValidationError  → VALIDATION (body/query) or NOT_FOUND (path)
        Exception (fallback)    → UNHANDLED, detail only when DEBUG is on
    """

    @app.exception_handler(NotesError)
    async def handle_notes_error(request: Request, exc: NotesError):
        rid = request_id_var.get("")
        if exc.kind is ErrorKind.STORE_UNAVAILABLE:
            logger.error("[%s] Store unavailable: %s | Context: %s", rid, exc.message, exc.context)
        elif exc.kind is ErrorKind.VALIDATION:
            logger.warning("[%s] Validation error: %s", rid, exc.errors)
        else:
            logger.info("[%s] %s: %s", rid, exc.kind.name, exc.context)
        return error_response(exc.kind, exc.message, exc.errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        headers = getattr(exc, "headers", None)
        if exc.status_code == 404:
            return error_response(ErrorKind.UNKNOWN_ROUTE, headers=headers)
        if exc.status_code == 405:
            return error_response(ErrorKind.METHOD_NOT_ALLOWED, headers=headers)
        body = ErrorEnvelope(message=str(exc.detail), errors={"http": [str(exc.detail)]})
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        # A non-integer id cannot name a note
        if any(error.get("loc", ("",))[0] == "path" for error in exc.errors()):
            return error_response(ErrorKind.NOT_FOUND)
        errors = _field_errors(exc)
        logger.warning("[%s] Request validation error: %s", rid, errors)
        return error_response(ErrorKind.VALIDATION, errors=errors)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: the stack trace is logged, and returned only in debug mode."""
        # Runs in ServerErrorMiddleware, outside RequestIDMiddleware, so the
        # response header is set here
        rid = getattr(request.state, "request_id", None) or request_id_var.get("")
        headers = {REQUEST_ID_HEADER: rid} if rid else None
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        if settings.debug:
            trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            return error_response(
                ErrorKind.UNHANDLED,
                message=str(exc) or type(exc).__name__,
                errors={"debug": [trace]},
                headers=headers,
            )
        return error_response(ErrorKind.UNHANDLED, headers=headers)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Notes API",
        description="Create, search, paginate, edit and delete notes.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
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
    app.include_router(notes.router, prefix=settings.api_prefix)
    app.include_router(health.router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> Dict[str, str]:
        return {"message": "Notes API is running"}

    return app


# uvicorn expects `notes_api.main:app` to be importable
app = create_app()
