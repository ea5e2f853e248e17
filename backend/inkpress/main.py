"""
Inkpress Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds every component from one Settings object,
       stores them on app.state, then registers middleware, exception
       handlers, routes and the /uploads static mount.
Who:   uvicorn (uvicorn inkpress.main:app) and the test suite, which calls
       create_app() with its own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  app.state: settings, db, user_service,             │
    │             token_service, file_service,            │
    │             post_service                            │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /register    │ │ POST/PUT     │ │ GET /health │  │
    │  │ /login       │ │   /post      │ │ /uploads/*  │  │
    │  │ /profile     │ │ GET /post    │ └─────────────┘  │
    │  │ /logout      │ │ GET /post/id │                  │
    │  └──────────────┘ └──────────────┘                  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation/Authorization→400 │ Auth→401      │   │
    │  │ NotFound→404 │ Storage/Signing/DB/other→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, optional table creation
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from inkpress import __version__
from inkpress.config import Settings
from inkpress.database import Database
from inkpress.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    FileStorageError,
    InkpressError,
    NotFoundError,
    TokenSigningError,
    ValidationError,
)
from inkpress.middleware.logging import RequestLoggingMiddleware
from inkpress.middleware.request_id import RequestIDMiddleware, request_id_var
from inkpress.middleware.security_headers import SecurityHeadersMiddleware
from inkpress.routes import auth, health, posts
from inkpress.services.file_service import PUBLIC_PREFIX, FileService
from inkpress.services.post_service import PostService
from inkpress.services.token_service import TokenService
from inkpress.services.user_service import UserService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] inkpress.services.user_service: message
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Inkpress Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Development defaults still work; production operators see this first
        logger.warning("Configuration warning: %s", str(e))

    if settings.create_tables:
        await app.state.db.create_all()
        logger.info("Database tables ensured")

    logger.info("Upload directory: %s", app.state.file_service.upload_dir)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Inkpress Backend shutting down...")
    await app.state.db.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and one JSON error format.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        AuthorizationError      → 400 Bad Request
        AuthenticationError     → 401 Unauthorized
        NotFoundError           → 404 Not Found
        FileStorageError        → 500 Internal Server Error
        TokenSigningError       → 500 Internal Server Error
        DatabaseError           → 500 Internal Server Error
        InkpressError (base)    → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    5xx responses never include exception context; it is logged instead.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        logger.warning("[%s] Authorization error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "not_author", exc.message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, "unauthorized", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error("[%s] File storage error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(TokenSigningError)
    async def handle_token_signing_error(request: Request, exc: TokenSigningError):
        logger.error("[%s] Token signing error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(InkpressError)
    async def handle_inkpress_error(request: Request, exc: InkpressError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(500, "internal_server_error", "Something broke! Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration for this app instance. Read from the
                  environment when omitted.

    Returns:
        Fully configured FastAPI instance. Its components live on app.state
        and are shared by every request it serves.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Inkpress API",
        description="Minimal blogging backend: accounts, cookie sessions, posts with cover images.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Components ────────────────────────────────────────────────────────
    file_service = FileService(settings.upload_dir, settings.max_upload_size)
    app.state.settings = settings
    app.state.db = Database(settings)
    app.state.user_service = UserService(bcrypt_rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(settings.jwt_secret, settings.jwt_algorithm)
    app.state.file_service = file_service
    app.state.post_service = PostService(file_service)

    # ── Middleware ────────────────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(posts.router)
    app.include_router(health.router)
    app.mount(
        f"/{PUBLIC_PREFIX}",
        StaticFiles(directory=str(file_service.upload_dir)),
        name=PUBLIC_PREFIX,
    )

    return app


# uvicorn expects `inkpress.main:app` to be importable
app = create_app()
