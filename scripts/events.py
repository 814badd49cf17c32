#!/usr/bin/env python3

"""
Command-line interface for managing event listings in the DevEvents database.

Every command goes through the same validation and normalization as the API,
so seeded or edited events are stored in canonical form.

For usage information, run:
    python scripts/events.py --help

Common use cases:
    # Insert the sample listings (existing slugs are skipped)
    python scripts/events.py seed

    # Show stored events, optionally filtered
    python scripts/events.py list --tag conference --mode offline

    # Show the bookings of one event
    python scripts/events.py bookings react-summit

    # Remove every event and booking
    python scripts/events.py clear --yes
"""

import argparse
import asyncio
import logging
import sys
from functools import partial
from pathlib import Path

from sqlalchemy import delete

# Add project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from devevents.config.environment import IS_PRODUCTION_ENVIRONMENT  # noqa: E402
from devevents.db import ConnectionCache, DatabaseConfig, connect_database  # noqa: E402
from devevents.db import operations  # noqa: E402
from devevents.db.sample_events import seed_events  # noqa: E402
from devevents.models import Booking, Event  # noqa: E402
from devevents.utils.logging_config import setup_logging  # noqa: E402

logger = logging.getLogger(__name__)

async def cmd_seed(handle, args) -> int:
    async with handle.session() as session:
        added = await seed_events(session)
    logger.info(f"Seeded {added} event(s)")
    return 0

async def cmd_list(handle, args) -> int:
    async with handle.session() as session:
        events, total = await operations.list_events(
            session, page=args.page, limit=args.limit, tag=args.tag, mode=args.mode
        )
    for event in events:
        print(f"{event.date} {event.time}  {event.slug:<40} {event.mode:<8} {', '.join(event.tags)}")
    print(f"\n{len(events)} of {total} event(s)")
    return 0

async def cmd_bookings(handle, args) -> int:
    async with handle.session() as session:
        event = await operations.get_event(session, args.slug)
        if event is None:
            logger.error(f"No event with slug '{args.slug}'")
            return 1
        bookings = await operations.list_bookings(session, event.id)
    for booking in bookings:
        print(f"{booking.created_at:%Y-%m-%d %H:%M}  {booking.email}")
    print(f"\n{len(bookings)} booking(s) for {event.title}")
    return 0

async def cmd_clear(handle, args) -> int:
    if IS_PRODUCTION_ENVIRONMENT and not args.yes:
        logger.error("Refusing to clear a production database without --yes")
        return 1
    async with handle.session() as session:
        bookings = await session.execute(delete(Booking))
        events = await session.execute(delete(Event))
    logger.info(f"Cleared {events.rowcount} event(s) and {bookings.rowcount} booking(s)")
    return 0

COMMANDS = {
    'seed': cmd_seed,
    'list': cmd_list,
    'bookings': cmd_bookings,
    'clear': cmd_clear,
}

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage DevEvents event listings")
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('seed', help="Insert the sample event listings")

    list_parser = subparsers.add_parser('list', help="List stored events")
    list_parser.add_argument('--tag', help="Only events with this tag")
    list_parser.add_argument('--mode', choices=['online', 'offline', 'hybrid'])
    list_parser.add_argument('--page', type=int, default=1)
    list_parser.add_argument('--limit', type=int, default=operations.MAX_PAGE_SIZE)

    bookings_parser = subparsers.add_parser('bookings', help="List bookings of an event")
    bookings_parser.add_argument('slug')

    clear_parser = subparsers.add_parser('clear', help="Delete all events and bookings")
    clear_parser.add_argument('--yes', action='store_true', help="Confirm clearing production")

    return parser.parse_args(argv)

async def run(args: argparse.Namespace) -> int:
    cache = ConnectionCache(partial(connect_database, DatabaseConfig.from_env()))
    try:
        handle = await cache.acquire()
        return await COMMANDS[args.command](handle, args)
    finally:
        await cache.release()

if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(run(parse_args())))
