"""
Postboard — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings, database) returns a configured
       FastAPI instance holding both on app.state.
Who:   Called by the entry point (postboard.__main__) and by tests.
When:  Once at server startup; the returned app handles all requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌─────────┐ ┌─────────┐ ┌─────────┐ ┌──────┐ ┌──────┐   │
    │  │ Req ID  │→│ Logging │→│ Timeout │→│ GZip │→│ CORS │   │
    │  └─────────┘ └─────────┘ └─────────┘ └──────┘ └──────┘   │
    │                                                          │
    │  Routes:                                                 │
    │  /api/posts  /api/comments  /api/users                   │
    │  /api/categories  /api/auth  /health                     │
    │                                                          │
    │  Exception Handlers:                                     │
    │  PostboardError → its status │ RequestValidation → 400   │
    │  Exception → 500                                         │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Ping the database; an unreachable database aborts startup, and
       uvicorn exits before binding the listening socket

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from postboard import __version__
from postboard.config import Settings, load_settings
from postboard.database import Database
from postboard.exceptions import DatabaseError, PostboardError
from postboard.middleware.logging import RequestLoggingMiddleware
from postboard.middleware.request_id import RequestIDMiddleware, request_id_var
from postboard.middleware.timeout import RequestTimeoutMiddleware
from postboard.routes import auth, categories, comments, health, posts, users
from postboard.schemas.validation import first_error_field, first_error_message

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and verify the database answers.
    Shutdown: dispose the engine.

    A failed ping is re-raised, which makes uvicorn report the startup
    failure and exit without serving.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("Postboard %s starting up...", __version__)

    try:
        await database.ping()
    except Exception as e:
        logger.error("Database unreachable at startup: %s", str(e))
        await database.dispose()
        raise

    logger.info("Database connected")
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Postboard shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        PostboardError          → exc.status_code (400/401/403/404/500/504)
        RequestValidationError  → 400 with the first failing field's message
        Exception (fallback)    → 500 Internal Server Error

    Every response uses the envelope {error, message, details, request_id}.
    Server-side failures never expose their context; it is logged instead.
    """

    @app.exception_handler(PostboardError)
    async def handle_postboard_error(request: Request, exc: PostboardError):
        rid = _request_id(request)
        details = exc.context or None
        if isinstance(exc, DatabaseError) or exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
            details = None
        else:
            logger.info("[%s] %s: %s", rid, exc.error_code, exc.message)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": details,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body, query and path problems all become one 400 message."""
        rid = _request_id(request)
        errors = exc.errors()
        message = first_error_message(errors) or "Invalid request"
        field = first_error_field(errors)
        logger.info("[%s] Validation error: %s", rid, message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": message,
                "details": {"field": field} if field else None,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace is logged server-side ONLY."""
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "details": None,
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration; loaded from the environment when omitted
                  (exits the process if required variables are missing)
        database: data-access handle; built from settings when omitted

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    if settings is None:
        settings = load_settings()
    if database is None:
        database = Database(settings)

    app = FastAPI(
        title="Postboard API",
        description=(
            "Social posting backend: posts, comments, likes and categories "
            "behind bearer-token authentication."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → Timeout → GZip → CORS → router
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestTimeoutMiddleware, timeout=settings.request_timeout)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(posts.router)
    app.include_router(comments.router)
    app.include_router(users.router)
    app.include_router(categories.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app
