"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Internal imports
from ..config.environment import IS_PRODUCTION_ENVIRONMENT  # Environment must be imported first
from ..config.cors import CORS_CONFIG
from ..utils.logging_config import setup_logging
from .. import __version__
from ..db import (
    ConflictError,
    ConnectionCache,
    ConnectionError as DatabaseConnectionError,
    DatabaseConfig,
    DatabaseError,
    connect_database,
)
from ..validation import ValidationError
from . import responses
from .routes import bookings, events, health

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

def _register_error_handlers(app: FastAPI) -> None:
    """Translate domain errors into the response envelope."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return responses.failure(400, "Validation failed", str(exc), exc.messages)

    @app.exception_handler(ConflictError)
    async def conflict_error_handler(request: Request, exc: ConflictError):
        return responses.failure(409, "Resource already exists", str(exc))

    @app.exception_handler(DatabaseConnectionError)
    async def connection_error_handler(request: Request, exc: DatabaseConnectionError):
        logger.error(f"Database connection failed: {exc}")
        return responses.failure(503, "Database connection failed", "Database unavailable")

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        logger.error(f"Database error: {exc}")
        return responses.failure(500, "Internal server error", "Database error")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return responses.failure(exc.status_code, str(exc.detail), str(exc.detail))

def create_application(cache: Optional[ConnectionCache] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        cache: Connection cache to use. By default one is built at startup
               from DATABASE_URL; a missing DATABASE_URL aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        db_cache = cache or ConnectionCache(partial(connect_database, DatabaseConfig.from_env()))
        app.state.db_cache = db_cache
        try:
            await db_cache.acquire()
            logger.info("Database initialized successfully")
        except DatabaseError as e:
            # Retried lazily by the first request that needs the database
            logger.error(f"Database initialization failed: {e}")
        yield
        # Shutdown
        await db_cache.release()

    app = FastAPI(
        title="DevEvents API",
        description="API for event listings and bookings",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    _register_error_handlers(app)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api")
    app.include_router(bookings.router, prefix="/api")

    return app

# Create the application instance
app = create_application()
