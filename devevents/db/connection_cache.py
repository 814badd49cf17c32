"""Process-wide cache of one live database handle.

Request handlers call acquire() on every request. The first call opens the
connection; every later call gets the cached handle back without I/O for
as long as the handle reports ready. Callers that arrive while a connection
attempt is in flight wait on that same attempt instead of opening their own.

States:
    unconnected --acquire--> connecting --success--> ready --release--> unconnected
    connecting --failure--> unconnected

A ready handle that degrades is only noticed by the next acquire().
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, Protocol, TypeVar

from .db_core import ConnectionError

logger = logging.getLogger(__name__)

class ConnectionHandle(Protocol):
    """What the cache needs from the handle it memoizes."""

    def is_ready(self) -> bool: ...

    async def close(self) -> None: ...

    def info(self) -> Dict[str, Any]: ...

H = TypeVar('H', bound=ConnectionHandle)

UNCONNECTED = 'unconnected'
CONNECTING = 'connecting'
READY = 'ready'

def _consume_result(task: 'asyncio.Task[Any]') -> None:
    # The attempt may outlive all of its waiters; its failure is logged in _open
    if not task.cancelled():
        task.exception()

class ConnectionCache(Generic[H]):
    """Memoizes a single connection handle and de-duplicates concurrent connects.

    Create one at process start, share it by reference, and call release()
    on shutdown.

    Args:
        connect: Async factory that opens a new handle or raises
    """

    def __init__(self, connect: Callable[[], Awaitable[H]]):
        self._connect = connect
        self._handle: Optional[H] = None
        self._pending: Optional['asyncio.Task[H]'] = None
        self.connect_attempts = 0

    @property
    def state(self) -> str:
        if self._pending is not None:
            return CONNECTING
        if self.is_ready():
            return READY
        return UNCONNECTED

    def is_ready(self) -> bool:
        """Non-blocking check of the cached handle."""
        return self._handle is not None and self._handle.is_ready()

    async def acquire(self) -> H:
        """Return the cached handle, connecting first if needed.

        Raises:
            Whatever the connect factory raised, to every caller waiting on
            that attempt. The next call starts a fresh attempt.
        """
        if self.is_ready():
            logger.debug("Using cached database connection")
            return self._handle

        if self._pending is None:
            stale, self._handle = self._handle, None
            if stale is not None:
                logger.warning("Cached database connection is no longer ready, reconnecting")
            logger.info("Creating new database connection...")
            self._pending = asyncio.ensure_future(self._open(stale))
            self._pending.add_done_callback(_consume_result)

        pending = self._pending
        try:
            # shield: one waiter being cancelled must not cancel the shared attempt
            return await asyncio.shield(pending)
        except asyncio.CancelledError:
            if pending.cancelled():
                raise ConnectionError("Database connection was released while connecting") from None
            raise

    async def _open(self, stale: Optional[H]) -> H:
        task = asyncio.current_task()
        self.connect_attempts += 1

        if stale is not None:
            try:
                await stale.close()
            except Exception as e:
                logger.warning(f"Error closing stale database connection: {e}")

        try:
            handle = await self._connect()
        except Exception as e:
            logger.error(f"Database connection error: {e}")
            if self._pending is task:
                self._pending = None
            raise

        if self._pending is task:
            self._handle = handle
            self._pending = None
        logger.info("Successfully connected to database")
        return handle

    async def release(self) -> None:
        """Close the cached handle and forget any in-flight attempt."""
        pending, handle = self._pending, self._handle
        self._pending = None
        self._handle = None

        if pending is not None and not pending.done():
            pending.cancel()

        if handle is not None:
            await handle.close()
            logger.info("Disconnected from database")

    def connection_info(self) -> Dict[str, Any]:
        """Connection state for health checks and debugging."""
        info: Dict[str, Any] = {
            'isConnected': self.is_ready(),
            'state': self.state,
            'connectAttempts': self.connect_attempts,
        }
        if self._handle is not None:
            info.update(self._handle.info())
        return info
