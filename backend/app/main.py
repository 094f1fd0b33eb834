"""
Invoice Manager Backend — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌───────────────┐ │
    │  │ Req ID   │→│  Logging        │→│  GZip / CORS  │ │
    │  └──────────┘ └─────────────────┘ └───────────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────────────────────┐ ┌─────────────┐  │
    │  │ /dashboard/invoices[/{id}...] │ │ GET /health │  │
    │  └───────────────────────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Redirect→303 │ NotFound→404 │ DB→500 │ *→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, wait for the database, log the listening address
    Shutdown: dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine, wait_for_database
from app.exceptions import InvoiceManagerError, NotFoundError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.navigation import RedirectSignal
from app.routes import health, invoices
from app.services.cache_service import path_cache

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before anything else logs.
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    # These log every statement / connection at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Invoice Manager Backend starting up...")
    await wait_for_database()
    logger.info("Database connection verified")
    logger.info("Invoice list view: %s", settings.invoices_path)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Invoice Manager Backend shutting down...")
    path_cache.clear()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RedirectSignal          → 303 See Other (navigation, not an error)
        NotFoundError           → 404 Not Found
        InvoiceManagerError     → 500 Internal Server Error (DatabaseError and others)
        Exception (fallback)    → 500 Internal Server Error (unexpected errors)

    Responses never include stack traces, SQL or driver messages; those
    are logged server-side with the request id.
    """

    @app.exception_handler(RedirectSignal)
    async def handle_redirect(request: Request, exc: RedirectSignal):
        """A handler finished and wants the client on another view."""
        return RedirectResponse(url=exc.path, status_code=exc.status_code)

    def error_body(status_code: int, error: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={"error": error, "message": message, "request_id": request_id_var.get("")},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_body(404, "not_found", exc.message)

    @app.exception_handler(InvoiceManagerError)
    async def handle_application_error(request: Request, exc: InvoiceManagerError):
        # DatabaseError lands here too; its message is already user-safe
        logger.error(
            "[%s] %s: %s | context=%s",
            request_id_var.get(""), type(exc).__name__, exc.message, exc.context,
        )
        return error_body(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Anything else: generic 500, traceback in the server log only."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), exc, exc_info=True)
        return error_body(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Invoice Manager API",
        description=(
            "Invoice pages backend: list invoices and handle the create, "
            "edit and delete form submissions."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Request logging — logs method, path, status, duration
    app.add_middleware(RequestLoggingMiddleware)

    # Request ID — runs first so every later log line can carry it
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(invoices.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
