"""Validation of booking records before they are persisted."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from .errors import EventReferenceError, ValidationError
from .fields import changed_fields, clean_booking_fields

logger = logging.getLogger(__name__)

BOOKING_FIELDS = ('eventId', 'email')

# Async lookup answering whether an event id refers to a stored event
EventLookup = Callable[[Any], Awaitable[bool]]

def normalize_email(email: str) -> str:
    email = email.lower().strip()
    if not email:
        raise ValidationError("email cannot be empty")
    return email

async def check_event_reference(event_id: Any, event_exists: EventLookup) -> None:
    """Verify that a booking's event id points to an existing event.

    Raises:
        EventReferenceError: If the event is missing or the lookup failed
    """
    try:
        exists = await event_exists(event_id)
    except Exception as e:
        logger.warning(f"Event lookup failed for event {event_id}: {e}")
        raise EventReferenceError("error validating event reference") from e

    if not exists:
        raise EventReferenceError("event does not exist")

async def prepare_booking(
    record: Dict[str, Any],
    event_exists: EventLookup,
    previous: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Validate and normalize a booking record in place.

    Field shapes are checked first, so malformed input never reaches the
    event lookup. Uniqueness of (eventId, email) is left to the storage.

    Args:
        record: Candidate booking with eventId and email
        event_exists: Lookup used for the referential check
        previous: The booking as currently stored, or None for a new booking
    """
    clean_booking_fields(record)
    changed = changed_fields(record, previous, BOOKING_FIELDS)

    if 'eventId' in changed:
        await check_event_reference(record['eventId'], event_exists)

    if 'email' in changed:
        record['email'] = normalize_email(record['email'])

    return record
