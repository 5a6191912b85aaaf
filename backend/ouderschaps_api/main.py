"""
Ouderschaps API: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers and
       returns the app; `app = create_app()` is what uvicorn serves
       (uvicorn ouderschaps_api.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware: RateLimit → RequestID → AccessLog → GZip →  │
    │              CORS                                        │
    │                                                          │
    │  Routers (/api): dossiers, kinderen, omgang, zorg,       │
    │    ouderschapsplan, plan, communicatie, alimentatie,     │
    │    personen, user, lookups, subscription    + /health    │
    │                                                          │
    │  Exception handlers → {"success": false, "error": ...}   │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check (logged, never fatal, so /health
              stays reachable), store implementation in use.
    Shutdown: dispose the database engine.
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
from starlette.exceptions import HTTPException as StarletteHTTPException

from ouderschaps_api import __version__
from ouderschaps_api.config import settings
from ouderschaps_api.database import dispose_engine
from ouderschaps_api.exceptions import CircuitBreakerOpenError, OuderschapsApiError
from ouderschaps_api.middleware.logging import RequestLoggingMiddleware
from ouderschaps_api.middleware.rate_limit import RateLimitMiddleware
from ouderschaps_api.middleware.request_id import RequestIDMiddleware, request_id_var
from ouderschaps_api.routes import (
    alimentatie,
    communicatie,
    dossiers,
    health,
    kinderen,
    lookups,
    omgang,
    ouderschapsplan,
    personen,
    plan,
    subscription,
    user,
    zorg,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] ouderschaps_api.services.cascade: message
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise; our access log covers requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Ouderschaps API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        logger.error("Fix the configuration and restart the server.")

    if settings.skip_auth:
        logger.warning("SKIP_AUTH is enabled: every request runs as user %d", settings.dev_user_id)
    logger.info(
        "Data access: %s stores",
        "repository" if settings.use_repository_pattern else "legacy",
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Ouderschaps API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def validation_message(exc: RequestValidationError) -> str:
    """
    "Validation failed: dagId: Input should be less than or equal to 7, ..."

    Field errors are prefixed with the offending field; model-level errors
    (raised by validators across fields) are reported as-is.
    """
    parts = []
    for error in exc.errors():
        msg = error.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "Validation failed: " + ", ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every exception onto the error envelope.

    Handler hierarchy:
        OuderschapsApiError     → exc.status_code (400/401/403/404/409/500/501/503)
        RequestValidationError  → 400 "Validation failed: ..."
        StarletteHTTPException  → its own status (unknown route 404, 405)
        Exception (fallback)    → 500, stack trace logged, never returned
    """

    @app.exception_handler(OuderschapsApiError)
    async def handle_app_error(request: Request, exc: OuderschapsApiError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = None
        if isinstance(exc, CircuitBreakerOpenError):
            headers = {"Retry-After": str(exc.recovery_time)}
        return _error(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = validation_message(exc)
        logger.info("[%s] %s", request_id_var.get(""), message)
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return _error(500, "An unexpected error occurred. Please try again or contact support.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Ouderschaps API",
        description=(
            "Dossiers, partijen, kinderen, omgangs- en zorgregelingen, alimentatie "
            "and subscriptions for composing Dutch parenting plans."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(dossiers.router)
    app.include_router(kinderen.router)
    app.include_router(omgang.router)
    app.include_router(zorg.router)
    app.include_router(ouderschapsplan.router)
    app.include_router(plan.router)
    app.include_router(communicatie.router)
    app.include_router(alimentatie.router)
    app.include_router(personen.router)
    app.include_router(user.router)
    app.include_router(lookups.router)
    app.include_router(subscription.router)
    app.include_router(health.router)

    return app


app = create_app()
