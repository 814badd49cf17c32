"""Health check routes for the FastAPI application."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...config.environment import ENVIRONMENT_NAME
from ...db import ConnectionCache
from ..dependencies import get_connection_cache

router = APIRouter(tags=["health"])

@router.get("/")
async def health_check(cache: ConnectionCache = Depends(get_connection_cache)):
    """Health check endpoint. Reports the connection state without connecting."""
    return {
        "status": "healthy",
        "environment": ENVIRONMENT_NAME,
        "version": __version__,
        "database": cache.connection_info()
    }
