"""Database operations for events and bookings.

Every write goes through the matching validator immediately before it is
flushed, so the stored record is always the normalized one. Uniqueness
violations surface as ConflictError. Nothing here retries; a failed call
is retried by the caller, typically on the next request.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Booking, Event
from ..validation import prepare_booking, prepare_event
from ..validation.booking_validator import EventLookup
from .db_core import ConflictError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

def _writable(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only client-writable event fields."""
    return {field: payload[field] for field in Event.WRITABLE_FIELDS if field in payload}

def _has_tag(tag: str):
    # tags are stored as a JSON array of strings
    return cast(Event.tags, String).contains(f'"{tag}"', autoescape=True)

async def _flush(session: AsyncSession, conflict_message: str) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        logger.info(f"Write rejected by unique index: {conflict_message}")
        raise ConflictError(conflict_message) from e

async def get_event(session: AsyncSession, slug: str) -> Optional[Event]:
    result = await session.execute(select(Event).where(Event.slug == slug))
    return result.scalar_one_or_none()

async def list_events(
    session: AsyncSession,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    tag: Optional[str] = None,
    mode: Optional[str] = None
) -> Tuple[List[Event], int]:
    """
    List events ordered by date and time, one page at a time.

    Args:
        session: Active database session
        page: 1-based page number
        limit: Page size, capped at MAX_PAGE_SIZE
        tag: Only events carrying this tag (case-insensitive)
        mode: Only events with this mode

    Returns:
        The events on the requested page and the total number of matches
    """
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    filters = []
    if mode:
        filters.append(Event.mode == mode.strip().lower())
    if tag and tag.strip():
        filters.append(_has_tag(tag.strip().lower()))

    total = await session.scalar(select(func.count(Event.id)).where(*filters))
    result = await session.execute(
        select(Event)
        .where(*filters)
        .order_by(Event.date, Event.time, Event.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0

async def similar_events(session: AsyncSession, event: Event, limit: int = 3) -> List[Event]:
    """Other events sharing at least one tag with the given event, soonest first."""
    if not event.tags:
        return []

    result = await session.execute(
        select(Event)
        .where(Event.id != event.id, or_(*[_has_tag(tag) for tag in event.tags]))
        .order_by(Event.date, Event.time, Event.id)
        .limit(limit)
    )
    return list(result.scalars().all())

async def create_event(session: AsyncSession, payload: Dict[str, Any]) -> Event:
    """
    Validate, normalize and insert a new event.

    Raises:
        ValidationError: If any field is invalid
        ConflictError: If an event with the same slug already exists
    """
    record = prepare_event(_writable(payload))
    event = Event(**record)
    session.add(event)
    await _flush(session, f"An event with slug '{record['slug']}' already exists")
    logger.info(f"Created event {event.slug}")
    return event

async def update_event(session: AsyncSession, slug: str, changes: Dict[str, Any]) -> Optional[Event]:
    """
    Apply changes to an event, renormalizing only the fields that changed.

    Returns:
        The updated event, or None if no event has the slug

    Raises:
        ValidationError: If the merged record is invalid
        ConflictError: If a title change collides with another event's slug
    """
    event = await get_event(session, slug)
    if event is None:
        return None

    previous = event.to_record()
    candidate = {**previous, **_writable(changes)}
    prepare_event(candidate, previous)

    for field, value in candidate.items():
        setattr(event, field, value)

    await _flush(session, f"An event with slug '{candidate['slug']}' already exists")
    logger.info(f"Updated event {slug} -> {event.slug}")
    return event

async def delete_event(session: AsyncSession, slug: str) -> bool:
    """Delete an event together with its bookings. Returns False if not found."""
    event = await get_event(session, slug)
    if event is None:
        return False

    result = await session.execute(delete(Booking).where(Booking.event_id == event.id))
    await session.delete(event)
    await session.flush()
    logger.info(f"Deleted event {slug} and {result.rowcount} booking(s)")
    return True

def event_lookup(session: AsyncSession) -> EventLookup:
    """Build the referential check lookup used by the booking validator."""
    async def event_exists(event_id: Any) -> bool:
        return await session.get(Event, event_id) is not None
    return event_exists

async def create_booking(session: AsyncSession, payload: Dict[str, Any]) -> Booking:
    """
    Validate and insert a booking.

    Raises:
        ValidationError: If the email is malformed
        EventReferenceError: If the event does not exist or could not be checked
        ConflictError: If this email already booked this event
    """
    record = {'eventId': payload.get('eventId'), 'email': payload.get('email')}
    await prepare_booking(record, event_lookup(session))

    booking = Booking(event_id=record['eventId'], email=record['email'])
    session.add(booking)
    await _flush(session, "A booking for this email already exists for this event")
    logger.info(f"Created booking for event {booking.event_id}")
    return booking

async def list_bookings(session: AsyncSession, event_id: int) -> List[Booking]:
    result = await session.execute(
        select(Booking).where(Booking.event_id == event_id).order_by(Booking.created_at, Booking.id)
    )
    return list(result.scalars().all())

async def count_bookings(session: AsyncSession, event_id: int) -> int:
    total = await session.scalar(select(func.count(Booking.id)).where(Booking.event_id == event_id))
    return total or 0
