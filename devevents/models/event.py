"""Event model definition."""

from enum import Enum
from typing import Any, Dict

from sqlalchemy import Column, Index, Integer, JSON, String, Text

from .base import Base, TimestampMixin, isoformat

class EventMode(str, Enum):
    """How an event is attended."""

    ONLINE = 'online'
    OFFLINE = 'offline'
    HYBRID = 'hybrid'

    @classmethod
    def values(cls):
        return [mode.value for mode in cls]

class Event(TimestampMixin, Base):
    """
    Event listing shown as a card and on its own details page.

    Fields:
        id: Unique identifier (auto-generated)
        title: Event title (1-200 chars)
        slug: URL-safe identifier derived from the title, unique across events
        description: Long description (1-2000 chars)
        overview: Short overview for the card (1-1000 chars)
        image: URL or absolute path of the cover image
        venue: Venue name
        location: City / address of the venue
        date: Calendar date in canonical YYYY-MM-DD form
        time: 24-hour HH:MM start time
        mode: One of online, offline, hybrid
        audience: Target audience
        agenda: Ordered list of agenda items
        organizer: Who runs the event
        tags: Lowercase tags
        created_at / updated_at: System-assigned timestamps
    """
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String, nullable=False)
    venue = Column(String(200), nullable=False)
    location = Column(String(200), nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String(5), nullable=False)
    mode = Column(String(16), nullable=False)
    audience = Column(String(100), nullable=False)
    agenda = Column(JSON, nullable=False)
    organizer = Column(String(100), nullable=False)
    tags = Column(JSON, nullable=False)

    __table_args__ = (
        Index('ix_events_slug', 'slug', unique=True),
        Index('ix_events_date_time', 'date', 'time'),
        Index('ix_events_mode', 'mode'),
    )

    # Fields a client may submit; everything else is system-assigned
    WRITABLE_FIELDS = (
        'title', 'description', 'overview', 'image', 'venue', 'location',
        'date', 'time', 'mode', 'audience', 'agenda', 'organizer', 'tags',
    )

    def to_record(self) -> Dict[str, Any]:
        """Writable fields plus slug, as plain values for the normalizer."""
        record = {field: getattr(self, field) for field in self.WRITABLE_FIELDS}
        record['agenda'] = list(self.agenda or [])
        record['tags'] = list(self.tags or [])
        record['slug'] = self.slug
        return record

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'description': self.description,
            'overview': self.overview,
            'image': self.image,
            'venue': self.venue,
            'location': self.location,
            'date': self.date,
            'time': self.time,
            'mode': self.mode,
            'audience': self.audience,
            'agenda': list(self.agenda or []),
            'organizer': self.organizer,
            'tags': list(self.tags or []),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, slug={self.slug}, date={self.date})"
