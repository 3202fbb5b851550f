"""
Journey Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn journey.main:app` or `python -m journey`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────┐  │
    │  │  Req ID  │→│ Logging  │→│   GZip   │→│  CORS  │  │
    │  └──────────┘ └──────────┘ └──────────┘ └────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌─────────────┐ ┌──────────────────────┐ ┌───────┐ │
    │  │ POST /trips │ │ PATCH /participants/ │ │/health│ │
    │  │ (+501 stubs)│ │   {id}/confirm       │ │       │ │
    │  └─────────────┘ └──────────────────────┘ └───────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ClientError→400 │ Unimplemented→501 │ *→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration
    3. Build Database → SqlTripStore → SmtpMailer → services on app.state

    Shutdown:
    1. Drain detached email tasks (bounded grace period)
    2. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from journey import __version__
from journey.config import settings
from journey.database import Database
from journey.exceptions import (
    ClientError,
    JourneyError,
    RequestFailedError,
    UnimplementedError,
    ValidationError,
)
from journey.middleware.logging import RequestLoggingMiddleware
from journey.middleware.request_id import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    request_id_var,
)
from journey.routes import health, participants, trips
from journey.services.background import BackgroundDispatcher
from journey.services.participant_service import ParticipantService
from journey.services.smtp_mailer import SmtpMailer
from journey.services.trip_service import TripService
from journey.services.trip_store import SqlTripStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s
    Called once during app startup, before any other initialization.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the service graph on startup and tear it down on shutdown.

    The pool is created here and passed explicitly to the store; nothing
    else opens database connections.
    """
    setup_logging()
    logger.info("Journey Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    database = Database.from_settings(settings)
    store = SqlTripStore(database)
    mailer = SmtpMailer(store, settings)
    dispatcher = BackgroundDispatcher()

    app.state.database = database
    app.state.dispatcher = dispatcher
    app.state.trip_service = TripService(store, mailer, dispatcher)
    app.state.participant_service = ParticipantService(store)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Journey Backend shutting down...")
    await dispatcher.drain(timeout=settings.shutdown_grace_period)
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message, "request_id": request_id_var.get("")}


def to_validation_error(exc: RequestValidationError) -> ValidationError:
    """Collapse FastAPI's per-field errors into one ValidationError."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return ValidationError(message="Invalid JSON.")

    fields = [
        ".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in errors
    ]
    message = "Invalid fields: " + "; ".join(
        f"{field}: {err.get('msg')}" for field, err in zip(fields, errors)
    )
    return ValidationError(message=message, field=fields[0] if fields else None)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        RequestValidationError  → ValidationError → 400 (bad JSON or fields)
        RequestFailedError      → 400 (store failed; generic message)
        ClientError             → 400 (message shown as-is)
        UnimplementedError      → 501
        JourneyError (base)     → 500
        Exception (fallback)    → 500

    Exception handlers never expose internal details; context is logged only.
    """

    @app.exception_handler(RequestFailedError)
    async def handle_request_failed(request: Request, exc: RequestFailedError):
        # The service has already logged the underlying store failure
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(ClientError)
    async def handle_client_error(request: Request, exc: ClientError):
        logger.info("Client error (%s): %s", exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return await handle_client_error(request, to_validation_error(exc))

    @app.exception_handler(UnimplementedError)
    async def handle_unimplemented(request: Request, exc: UnimplementedError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(JourneyError)
    async def handle_journey_error(request: Request, exc: JourneyError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers."""
    app = FastAPI(
        title="Journey API",
        description="Plan trips, invite participants and confirm attendance.",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition
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

    register_exception_handlers(app)

    app.include_router(trips.router)
    app.include_router(participants.router)
    app.include_router(health.router)

    return app


app = create_app()
