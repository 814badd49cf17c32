"""Core database functionality and configuration.

This module provides database configuration read from the environment,
the database error hierarchy, and DatabaseHandle: one async engine with
its session factory, which the ConnectionCache hands out to callers.
"""

from contextlib import asynccontextmanager
import json
import logging
import os
from typing import Optional, Dict, Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..models import Base

logger = logging.getLogger(__name__)

ASYNC_DRIVERS = {
    'postgres': 'postgresql+psycopg',
    'postgresql': 'postgresql+psycopg',
    'sqlite': 'sqlite+aiosqlite',
}

def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

def _json_serializer(value: Any) -> str:
    # Keep non-ASCII tags searchable as plain text
    return json.dumps(value, ensure_ascii=False)

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_timeout: int = 5,
        pool_recycle: int = 1800,
        connect_timeout: int = 5,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        Args:
            database_url: Connection URL. If not provided, the DATABASE_URL
                        environment variable is used
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            connect_timeout: Seconds to wait when opening a server connection
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ValueError: If no database URL is provided either via database_url
                      or the DATABASE_URL environment variable
        """
        self.database_url = database_url or os.environ.get('DATABASE_URL')
        if not self.database_url:
            raise ValueError(
                "Database URL must be provided either via database_url parameter "
                "or DATABASE_URL environment variable"
            )

        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.connect_timeout = connect_timeout
        self.pool_pre_ping = pool_pre_ping

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        """Build the configuration from DATABASE_URL and the optional DB_* variables."""
        return cls(
            database_url=os.environ.get('DATABASE_URL'),
            echo=os.environ.get('DB_ECHO', 'false').lower() == 'true',
            pool_size=_env_int('DB_POOL_SIZE', 10),
            max_overflow=_env_int('DB_MAX_OVERFLOW', 5),
            pool_timeout=_env_int('DB_POOL_TIMEOUT', 5),
            pool_recycle=_env_int('DB_POOL_RECYCLE', 1800),
            connect_timeout=_env_int('DB_CONNECT_TIMEOUT', 5),
        )

    @property
    def connection_url(self) -> URL:
        """Get the connection URL with an async driver selected."""
        try:
            url = make_url(self.database_url)
        except ArgumentError as e:
            raise ValueError(f"Invalid database URL: {e}") from e

        driver = ASYNC_DRIVERS.get(url.drivername)
        if driver:
            url = url.set(drivername=driver)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.connection_url.get_backend_name() == 'sqlite'

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args: Dict[str, Any] = {
            "echo": self.echo,
            "json_serializer": _json_serializer,
        }

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            args["poolclass"] = StaticPool

        # Server database configuration
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping,
                "connect_args": {"connect_timeout": self.connect_timeout},
            })

        return args

class DatabaseError(Exception):
    """Base exception for database-related errors."""
    pass

class ConnectionError(DatabaseError):
    """Raised when there are issues connecting to the database."""
    pass

class SessionError(DatabaseError):
    """Raised when there are issues with database sessions."""
    pass

class ConflictError(DatabaseError):
    """Raised when a write violates a uniqueness constraint."""
    pass

class DatabaseHandle:
    """A live engine plus session factory, handed out by the ConnectionCache."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        self._ready = False

    async def connect(self) -> None:
        """Open a connection and run a trivial query to prove the server answers."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            raise ConnectionError(f"Failed to connect to database: {e}") from e
        self._ready = True

    def is_ready(self) -> bool:
        return self._ready

    def mark_unready(self) -> None:
        """Flag the handle as degraded; the cache reconnects on next acquire."""
        if self._ready:
            logger.warning("Database connection marked as not ready")
        self._ready = False

    async def close(self) -> None:
        self._ready = False
        await self.engine.dispose()

    async def create_tables(self) -> None:
        """Create missing tables and indexes."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database schema initialized successfully")
        except Exception as e:
            raise DatabaseError(f"Failed to initialize database schema: {e}") from e

    def info(self) -> Dict[str, Any]:
        url = self.engine.url
        return {
            'driver': url.drivername,
            'database': url.database,
            'host': url.host,
            'port': url.port,
        }

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success and rolls back on any error. Database errors
        and validation errors propagate unchanged; SQLAlchemy errors are
        translated:

            IntegrityError            -> ConflictError
            OperationalError / lost
            connection                -> ConnectionError (handle marked not ready)
            anything else from SQLAlchemy -> SessionError

        Example:
            async with handle.session() as session:
                event = await operations.get_event(session, "react-summit")
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ConflictError(f"Unique constraint violated: {e.orig}") from e
            except (OperationalError, DBAPIError) as e:
                await session.rollback()
                if isinstance(e, OperationalError) or e.connection_invalidated:
                    self.mark_unready()
                    raise ConnectionError(f"Database connection error: {e}") from e
                raise SessionError(f"Database session error: {e}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise SessionError(f"Database session error: {e}") from e
            except BaseException:
                await session.rollback()
                raise

async def connect_database(config: DatabaseConfig, init_schema: bool = True) -> DatabaseHandle:
    """Create an engine for the configuration and verify it connects.

    Raises:
        ConnectionError: If the engine cannot be created or the server is unreachable
    """
    url = config.connection_url
    logger.info(f"Connecting to {url.render_as_string(hide_password=True)}")

    try:
        engine = create_async_engine(url, **config.get_engine_args())
    except Exception as e:
        raise ConnectionError(f"Failed to create database engine: {e}") from e

    handle = DatabaseHandle(engine)
    try:
        await handle.connect()
        if init_schema:
            await handle.create_tables()
    except BaseException:
        # also covers a cancelled attempt
        await engine.dispose()
        raise
    return handle
