"""Events router module: event cards, details pages and event bookings."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...db import operations
from ...models import Event
from .. import responses
from ..dependencies import get_session

router = APIRouter(prefix="/events", tags=["events"])

async def _require_event(session: AsyncSession, slug: str) -> Event:
    event = await operations.get_event(session, slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event

@router.get("")
async def get_events(
    page: int = Query(1, ge=1),
    limit: int = Query(operations.DEFAULT_PAGE_SIZE, ge=1, le=operations.MAX_PAGE_SIZE),
    tag: Optional[str] = None,
    mode: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """List events for the event cards, soonest first."""
    events, total = await operations.list_events(session, page=page, limit=limit, tag=tag, mode=mode)
    return responses.success(
        "Events fetched successfully",
        [event.to_dict() for event in events],
        responses.pagination(page, limit, total)
    )

@router.get("/{slug}")
async def get_event(slug: str, session: AsyncSession = Depends(get_session)):
    """Details page data: the event, its booking count and similar events."""
    event = await _require_event(session, slug)
    details = event.to_dict()
    details['bookings'] = await operations.count_bookings(session, event.id)
    details['similarEvents'] = [
        other.to_dict() for other in await operations.similar_events(session, event)
    ]
    return responses.success("Event fetched successfully", details)

@router.post("", status_code=201)
async def create_event(
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session)
):
    event = await operations.create_event(session, payload)
    return responses.success("Event created successfully", event.to_dict())

@router.patch("/{slug}")
async def update_event(
    slug: str,
    changes: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session)
):
    event = await operations.update_event(session, slug, changes)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return responses.success("Event updated successfully", event.to_dict())

@router.delete("/{slug}")
async def delete_event(slug: str, session: AsyncSession = Depends(get_session)):
    """Delete an event. Its bookings are deleted with it."""
    if not await operations.delete_event(session, slug):
        raise HTTPException(status_code=404, detail="Event not found")
    return responses.success("Event deleted successfully")

@router.post("/{slug}/bookings", status_code=201)
async def book_event(
    slug: str,
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_session)
):
    """Book the event for the email in the request body."""
    event = await _require_event(session, slug)
    booking = await operations.create_booking(
        session, {'eventId': event.id, 'email': payload.get('email')}
    )
    return responses.success("Booking created successfully", booking.to_dict())

@router.get("/{slug}/bookings")
async def get_event_bookings(slug: str, session: AsyncSession = Depends(get_session)):
    event = await _require_event(session, slug)
    bookings = await operations.list_bookings(session, event.id)
    return responses.success(
        "Bookings fetched successfully",
        [booking.to_dict() for booking in bookings]
    )
