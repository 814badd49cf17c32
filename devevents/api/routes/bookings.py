"""Bookings router module."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...db import operations
from .. import responses
from ..dependencies import get_session

router = APIRouter(prefix="/bookings", tags=["bookings"])

@router.post("", status_code=201)
async def create_booking(
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session)
):
    """Book an event by id: {"eventId": ..., "email": ...}."""
    booking = await operations.create_booking(session, payload)
    return responses.success("Booking created successfully", booking.to_dict())
