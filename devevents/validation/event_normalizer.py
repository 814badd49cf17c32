"""Normalization of event records before they are persisted.

Call prepare_event() immediately before writing an event. It validates
field shapes, then rewrites the fields that are new or changed compared to
the previous stored record into their canonical form:

    title  -> slug (lowercase, hyphen separated, URL safe)
    date   -> YYYY-MM-DD
    time   -> zero-padded HH:MM
    agenda -> trimmed items, empties dropped
    tags   -> lowercase trimmed tags, empties and repeats dropped

Slug uniqueness is not checked here; the unique index on events.slug
rejects duplicates at write time.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .errors import ValidationError
from .fields import changed_fields, clean_event_fields

NORMALIZED_FIELDS = ('title', 'date', 'time', 'agenda', 'tags')

_SLUG_INVALID_CHARS = re.compile(r'[^a-z0-9\s-]')
_WHITESPACE = re.compile(r'\s+')
_REPEATED_HYPHENS = re.compile(r'-+')
_LENIENT_TIME = re.compile(r'^(\d{1,2}):(\d{2})$')

def slugify(title: str) -> str:
    """Derive the URL-safe slug for a title.

    Example:
        >>> slugify("  Node+JS Interactive!! ")
        'nodejs-interactive'

    Raises:
        ValidationError: If the title has no alphanumeric characters
    """
    slug = title.lower().strip()
    slug = _SLUG_INVALID_CHARS.sub('', slug)
    slug = _WHITESPACE.sub('-', slug)
    slug = _REPEATED_HYPHENS.sub('-', slug)
    slug = slug.strip('-')
    if not slug:
        raise ValidationError("slug generation failed")
    return slug

def normalize_date(value: Any) -> str:
    """Parse a calendar date and return it as YYYY-MM-DD.

    Accepts ISO dates, ISO datetimes (converted to UTC first when they carry
    an offset) and date/datetime objects.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError("invalid date") from None
    else:
        raise ValidationError("invalid date")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()

def normalize_time(value: str) -> str:
    """Zero-pad the hour of an H:MM / HH:MM time.

    Values of any other shape are returned unchanged; field validation
    is what rejects them.
    """
    match = _LENIENT_TIME.match(value)
    if not match:
        return value
    hours, minutes = match.groups()
    return f"{hours.zfill(2)}:{minutes}"

def normalize_agenda(items: Sequence[str]) -> List[str]:
    agenda = [item.strip() for item in items]
    agenda = [item for item in agenda if item]
    if not agenda:
        raise ValidationError("agenda empty")
    return agenda

def normalize_tags(tags: Sequence[str]) -> List[str]:
    """Lowercase and trim tags, dropping empties and repeats (first one wins)."""
    normalized: List[str] = []
    for tag in tags:
        tag = tag.lower().strip()
        if tag and tag not in normalized:
            normalized.append(tag)
    if not normalized:
        raise ValidationError("tags empty")
    return normalized

def normalize_event(
    record: Dict[str, Any],
    previous: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Rewrite new or changed fields of an event record in place.

    Args:
        record: Candidate record about to be written
        previous: The record as currently stored, or None for a new event

    Returns:
        The same record, normalized
    """
    changed = changed_fields(record, previous, NORMALIZED_FIELDS)

    if 'title' in changed:
        record['slug'] = slugify(record['title'])
    elif previous is not None and not record.get('slug'):
        record['slug'] = previous.get('slug')

    if 'date' in changed:
        record['date'] = normalize_date(record['date'])

    if 'time' in changed:
        record['time'] = normalize_time(record['time'])

    if 'agenda' in changed:
        record['agenda'] = normalize_agenda(record['agenda'])

    if 'tags' in changed:
        record['tags'] = normalize_tags(record['tags'])

    return record

def prepare_event(
    record: Dict[str, Any],
    previous: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Validate field shapes, then normalize. Mutates and returns the record."""
    clean_event_fields(record)
    return normalize_event(record, previous)
