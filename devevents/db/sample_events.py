"""Sample event listings used to seed a fresh database."""

import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from ..validation import slugify
from . import operations

logger = logging.getLogger(__name__)

SAMPLE_EVENTS: List[Dict[str, Any]] = [
    {
        'title': 'React Summit',
        'image': '/images/event1.png',
        'date': '2026-03-18',
        'time': '09:30',
        'venue': 'Kromhouthal',
        'location': 'Amsterdam, NL',
        'mode': 'hybrid',
        'audience': 'Frontend and full-stack developers',
        'organizer': 'GitNation',
        'overview': 'The biggest React conference worldwide.',
        'description': (
            'A large community-driven React conference featuring talks, workshops, '
            'and networking focused on the React ecosystem.'
        ),
        'agenda': ['Registration and coffee', 'Keynote', 'Talks', 'Workshops', 'Afterparty'],
        'tags': ['React', 'Frontend', 'Conference'],
    },
    {
        'title': 'JSConf EU',
        'image': '/images/event2.png',
        'date': '2026-05-07',
        'time': '10:00',
        'venue': 'Arena Berlin',
        'location': 'Berlin, DE',
        'mode': 'offline',
        'audience': 'JavaScript developers',
        'organizer': 'JSConf EU team',
        'overview': 'Independent JavaScript conference.',
        'description': (
            'Independent JavaScript conference with community talks from library '
            'authors and platform teams.'
        ),
        'agenda': ['Opening', 'Community talks', 'Lightning talks', 'Closing'],
        'tags': ['JavaScript', 'Conference'],
    },
    {
        'title': 'Node+JS Interactive',
        'image': '/images/event3.png',
        'date': '2026-06-12',
        'time': '13:30',
        'venue': 'Austin Convention Center',
        'location': 'Austin, TX, USA',
        'mode': 'hybrid',
        'audience': 'Backend and Node.js developers',
        'organizer': 'OpenJS Foundation',
        'overview': 'Keynotes and hands-on sessions about Node.js.',
        'description': (
            'Keynotes and hands-on sessions about Node.js, server-side JavaScript '
            'and the runtime ecosystem.'
        ),
        'agenda': ['Keynotes', 'Hands-on sessions', 'Panel'],
        'tags': ['Node.js', 'JavaScript', 'Backend'],
    },
    {
        'title': 'HackMIT',
        'image': '/images/event4.png',
        'date': '2026-01-24',
        'time': '18:00',
        'venue': 'MIT Campus',
        'location': 'Cambridge, MA, USA',
        'mode': 'offline',
        'audience': 'Students',
        'organizer': 'HackMIT',
        'overview': '48-hour student hackathon.',
        'description': (
            '48-hour student hackathon welcoming teams from around the world to '
            'build and ship projects.'
        ),
        'agenda': ['Team formation', 'Hacking', 'Demos', 'Awards'],
        'tags': ['Hackathon', 'Students'],
    },
    {
        'title': 'DevOpsDays',
        'image': '/images/event5.png',
        'date': '2026-04-20',
        'time': '08:30',
        'venue': 'Convene Willis Tower',
        'location': 'Chicago, IL, USA',
        'mode': 'offline',
        'audience': 'Operations and platform engineers',
        'organizer': 'DevOpsDays Chicago',
        'overview': 'Community conference covering DevOps practices.',
        'description': (
            'Community conference covering DevOps practices, tooling, and culture '
            'with talks and open spaces.'
        ),
        'agenda': ['Talks', 'Ignites', 'Open spaces'],
        'tags': ['DevOps', 'Conference'],
    },
    {
        'title': 'CityTech Meetup',
        'image': '/images/event6.png',
        'date': '2025-12-10',
        'time': '19:00',
        'venue': 'Rotating venues',
        'location': 'Local',
        'mode': 'online',
        'audience': 'Local developers',
        'organizer': 'CityTech',
        'overview': 'Monthly meetup for local developers.',
        'description': (
            'Monthly meetup for local developers to demo projects, share tips, and '
            'meet other engineers.'
        ),
        'agenda': ['Demos', 'Networking'],
        'tags': ['Meetup'],
    },
]

async def seed_events(session: AsyncSession) -> int:
    """Insert sample events whose slugs are not taken yet. Returns how many were added."""
    added = 0
    for payload in SAMPLE_EVENTS:
        existing = await operations.get_event(session, slugify(payload['title']))
        if existing is not None:
            logger.info(f"Skipping existing event {existing.slug}")
            continue
        await operations.create_event(session, dict(payload))
        added += 1
    return added
