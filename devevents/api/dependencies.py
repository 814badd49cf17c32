"""FastAPI dependencies giving routes access to the database."""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import ConnectionCache, DatabaseError

logger = logging.getLogger(__name__)

def get_connection_cache(request: Request) -> ConnectionCache:
    """The connection cache created at startup and shared by all requests."""
    return request.app.state.db_cache

async def get_session(
    cache: ConnectionCache = Depends(get_connection_cache)
) -> AsyncGenerator[AsyncSession, None]:
    """Acquire the cached connection and open a transactional session on it."""
    try:
        handle = await cache.acquire()
    except DatabaseError as e:
        logger.error(f"Database connection failed: {e}")
        raise HTTPException(status_code=503, detail="Database connection failed")

    async with handle.session() as session:
        yield session
