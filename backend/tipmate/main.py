"""
TipMate Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() registers the ORM models, builds the
       DatabaseConnector and wires middleware, exception handlers and routes.
Who:   Called by uvicorn (uvicorn tipmate.main:app) and by the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────────┐ ┌─────────────────┐ │
    │  │ GET/POST /api/tip-calc...  │ │ GET /health     │ │
    │  └────────────────────────────┘ └─────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ DatabaseError→500      │   │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  app.state.connector: DatabaseConnector             │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Process start:  models registered, connector created (not yet connected)
    Startup:        logging configured
    First request:  connector establishes the shared connection
    Shutdown:       connector disposed (pool closed)
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

from tipmate import __version__
from tipmate.config import settings
from tipmate.database import DatabaseConnector
from tipmate.exceptions import DatabaseError, TipMateError, ValidationError
from tipmate.middleware.logging import RequestLoggingMiddleware
from tipmate.middleware.request_id import RequestIDMiddleware, request_id_var
from tipmate.models import register_models
from tipmate.routes import health, tip_calculations

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by the container runtime)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
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
    Startup: configure logging and report where the API listens.
    Shutdown: dispose the database connector.

    The database connection itself is made lazily by the first request.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("TipMate Backend v%s starting up...", __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("TipMate Backend shutting down...")
    await app.state.connector.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and flat `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (malformed JSON / wrong types)
        DatabaseError           → 500 Internal Server Error
        TipMateError (base)     → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Internal details go to the log only, never into the response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent a payload missing required fields."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body could not be parsed into the request schema."""
        rid = request_id_var.get("")
        logger.warning("[%s] Request body rejected: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"error": INVALID_BODY_MESSAGE})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Storage failure: generic message to the client, context to the log."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(TipMateError)
    async def handle_app_error(request: Request, exc: TipMateError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred"},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(connector: Optional[DatabaseConnector] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        connector: DatabaseConnector to use. When omitted, one is built from
                   settings with the registered model metadata.

    Returns: Fully configured FastAPI instance.
    """
    metadata = register_models()
    if connector is None:
        connector = DatabaseConnector(
            url=settings.database_url,
            metadata=metadata,
            create_schema=settings.db_create_schema,
        )
    elif connector.metadata is None:
        connector.metadata = metadata

    app = FastAPI(
        title="TipMate API",
        description="Compute tips on bills, store each calculation and list the recent ones.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.connector = connector

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(tip_calculations.router)
    app.include_router(health.router)

    return app


# uvicorn expects `tipmate.main:app` to be importable
app = create_app()
