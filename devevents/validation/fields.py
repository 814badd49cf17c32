"""Field-level validation rules for event and booking records.

These run before any normalization step. Every failed rule adds one
message and all of them are raised together as a single ValidationError.
Scalar strings are trimmed in place, the same way they would be stored.
"""

import re
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set
from urllib.parse import urlparse

from ..models.event import EventMode
from .errors import ValidationError

TIME_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):[0-5][0-9]$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
EMAIL_MAX_LENGTH = 254

# field -> (label used in messages, max length or None)
EVENT_TEXT_FIELDS = {
    'title': ('Title', 200),
    'description': ('Description', 2000),
    'overview': ('Overview', 1000),
    'image': ('Image URL', None),
    'venue': ('Venue', 200),
    'location': ('Location', 200),
    'audience': ('Audience', 100),
    'organizer': ('Organizer', 100),
}

EVENT_LIST_FIELDS = {
    'agenda': 'Agenda',
    'tags': 'Tags',
}

def changed_fields(
    record: Dict[str, Any],
    previous: Optional[Dict[str, Any]],
    fields: Iterable[str]
) -> Set[str]:
    """Return the fields that are new or differ from the previous record.

    A previous record of None means the record is being created, so every
    field counts as changed.
    """
    if previous is None:
        return set(fields)
    return {field for field in fields if record.get(field) != previous.get(field)}

def _is_image_reference(value: str) -> bool:
    if value.startswith('/') and not value.startswith('//'):
        return True
    parsed = urlparse(value)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

def clean_event_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    """Trim and validate the shape of every event field.

    Raises:
        ValidationError: With one message per failed rule
    """
    errors: List[str] = []

    for field, (label, max_length) in EVENT_TEXT_FIELDS.items():
        value = record.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(f"{label} is required")
            continue
        if not isinstance(value, str):
            errors.append(f"{label} must be a string")
            continue
        value = value.strip()
        record[field] = value
        if max_length is not None and len(value) > max_length:
            errors.append(f"{label} cannot exceed {max_length} characters")

    image = record.get('image')
    if isinstance(image, str) and image and not _is_image_reference(image):
        errors.append("Image URL must be an http(s) URL or an absolute path")

    mode = record.get('mode')
    if mode is None or (isinstance(mode, str) and not mode.strip()):
        errors.append("Event mode is required")
    elif not isinstance(mode, str) or mode.strip().lower() not in EventMode.values():
        errors.append("Mode must be either online, offline, or hybrid")
    else:
        record['mode'] = mode.strip().lower()

    event_date = record.get('date')
    if event_date is None or (isinstance(event_date, str) and not event_date.strip()):
        errors.append("Date is required")
    elif not isinstance(event_date, (str, date)):
        errors.append("Date must be in ISO format (YYYY-MM-DD)")

    event_time = record.get('time')
    if event_time is None or (isinstance(event_time, str) and not event_time.strip()):
        errors.append("Time is required")
    elif not isinstance(event_time, str) or not TIME_PATTERN.match(event_time.strip()):
        errors.append("Time must be in 24-hour format (HH:MM)")
    else:
        record['time'] = event_time.strip()

    for field, label in EVENT_LIST_FIELDS.items():
        items = record.get(field)
        if items is None:
            errors.append(f"{label} are required" if field == 'tags' else f"{label} is required")
        elif not isinstance(items, (list, tuple)) or not all(isinstance(item, str) for item in items):
            errors.append(f"{label} must be a list of strings")

    if errors:
        raise ValidationError(errors)
    return record

def clean_booking_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    """Validate the shape of a booking's event reference and email.

    Raises:
        ValidationError: With one message per failed rule
    """
    errors: List[str] = []

    event_id = record.get('eventId')
    if event_id is None or event_id == '':
        errors.append("Event ID is required")
    elif isinstance(event_id, bool):
        errors.append("Event ID must be a valid identifier")
    elif isinstance(event_id, int):
        pass
    elif isinstance(event_id, str) and event_id.strip().isascii() and event_id.strip().isdigit():
        record['eventId'] = int(event_id.strip())
    else:
        errors.append("Event ID must be a valid identifier")

    email = record.get('email')
    if email is None or (isinstance(email, str) and not email.strip()):
        errors.append("Email is required")
    elif not isinstance(email, str):
        errors.append("Please provide a valid email address")
    else:
        email = email.strip().lower()
        if len(email) > EMAIL_MAX_LENGTH:
            errors.append(f"Email cannot exceed {EMAIL_MAX_LENGTH} characters")
        elif not EMAIL_PATTERN.match(email):
            errors.append("Please provide a valid email address")

    if errors:
        raise ValidationError(errors)
    return record
