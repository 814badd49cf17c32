"""Shared fixtures: sample records and a throwaway SQLite database per test."""

import copy

import pytest
import pytest_asyncio

from devevents.db import DatabaseConfig, connect_database

VALID_EVENT = {
    'title': 'React Summit',
    'description': 'A large community-driven React conference.',
    'overview': 'The biggest React conference worldwide.',
    'image': 'https://example.com/images/react-summit.png',
    'venue': 'Kromhouthal',
    'location': 'Amsterdam, NL',
    'date': '2026-03-18',
    'time': '9:30',
    'mode': 'Hybrid',
    'audience': 'Frontend developers',
    'agenda': ['  Keynote ', 'Talks', ''],
    'organizer': 'GitNation',
    'tags': ['React', ' react ', 'Frontend'],
}

@pytest.fixture
def event_payload():
    """Factory for a valid event payload, with optional overrides."""
    def make(**overrides):
        payload = copy.deepcopy(VALID_EVENT)
        payload.update(overrides)
        return payload
    return make

@pytest.fixture
def sqlite_config(tmp_path):
    return DatabaseConfig(database_url=f"sqlite:///{tmp_path / 'events.db'}")

@pytest_asyncio.fixture
async def handle(sqlite_config):
    db_handle = await connect_database(sqlite_config)
    yield db_handle
    await db_handle.close()
