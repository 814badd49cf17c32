"""Record validation and normalization applied before every write."""

from .errors import ValidationError, EventReferenceError
from .event_normalizer import (
    normalize_event,
    prepare_event,
    slugify,
    normalize_date,
    normalize_time,
    normalize_agenda,
    normalize_tags,
)
from .booking_validator import (
    check_event_reference,
    normalize_email,
    prepare_booking,
)

__all__ = [
    'ValidationError',
    'EventReferenceError',
    'normalize_event',
    'prepare_event',
    'slugify',
    'normalize_date',
    'normalize_time',
    'normalize_agenda',
    'normalize_tags',
    'check_event_reference',
    'normalize_email',
    'prepare_booking',
]
