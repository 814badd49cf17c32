"""API tests against a temporary SQLite database."""

from functools import partial
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from devevents.api.app import create_application
from devevents.db import ConnectionCache, ConnectionError, connect_database

@pytest.fixture
def client(sqlite_config):
    cache = ConnectionCache(partial(connect_database, sqlite_config))
    with TestClient(create_application(cache=cache)) as test_client:
        yield test_client

@pytest.fixture
def created_event(client, event_payload):
    response = client.post('/api/events', json=event_payload())
    assert response.status_code == 201
    return response.json()['data']

def test_health_reports_connection(client):
    response = client.get('/')
    body = response.json()

    assert response.status_code == 200
    assert body['status'] == 'healthy'
    assert body['database']['isConnected'] is True
    assert body['database']['state'] == 'ready'

def test_create_event_returns_normalized_record(created_event):
    assert created_event['slug'] == 'react-summit'
    assert created_event['time'] == '09:30'
    assert created_event['tags'] == ['react', 'frontend']
    assert created_event['agenda'] == ['Keynote', 'Talks']
    assert created_event['createdAt'] is not None

def test_duplicate_event_conflicts(client, created_event, event_payload):
    response = client.post('/api/events', json=event_payload(title='React Summit!!'))
    body = response.json()

    assert response.status_code == 409
    assert body['success'] is False
    assert body['message'] == 'Resource already exists'

def test_invalid_event_lists_every_problem(client, event_payload):
    response = client.post('/api/events', json=event_payload(mode='virtual', time='24:00'))
    body = response.json()

    assert response.status_code == 400
    assert body['success'] is False
    assert body['errors'] == [
        'Mode must be either online, offline, or hybrid',
        'Time must be in 24-hour format (HH:MM)',
    ]

def test_list_events_is_paginated(client, event_payload):
    for title in ('Alpha Conf', 'Beta Conf', 'Gamma Conf'):
        assert client.post('/api/events', json=event_payload(title=title)).status_code == 201

    response = client.get('/api/events', params={'page': 2, 'limit': 2})
    body = response.json()

    assert response.status_code == 200
    assert [event['slug'] for event in body['data']] == ['gamma-conf']
    assert body['pagination'] == {'page': 2, 'limit': 2, 'total': 3, 'totalPages': 2}

def test_event_details_include_bookings_and_similar_events(client, created_event, event_payload):
    client.post('/api/events', json=event_payload(title='Vue Day', tags=['Frontend']))
    client.post('/api/events', json=event_payload(title='Rust Nation', tags=['Rust']))
    client.post('/api/events/react-summit/bookings', json={'email': 'ada@example.com'})

    response = client.get('/api/events/react-summit')
    details = response.json()['data']

    assert response.status_code == 200
    assert details['bookings'] == 1
    assert [event['slug'] for event in details['similarEvents']] == ['vue-day']

def test_missing_event_is_404(client):
    response = client.get('/api/events/no-such-event')
    body = response.json()

    assert response.status_code == 404
    assert body == {'success': False, 'message': 'Event not found', 'error': 'Event not found'}

def test_update_event_changes_slug(client, created_event):
    response = client.patch('/api/events/react-summit', json={'title': 'React Summit Online', 'mode': 'online'})

    assert response.status_code == 200
    assert response.json()['data']['slug'] == 'react-summit-online'
    assert client.get('/api/events/react-summit').status_code == 404
    assert client.get('/api/events/react-summit-online').status_code == 200

def test_booking_flow(client, created_event):
    first = client.post('/api/events/react-summit/bookings', json={'email': ' Ada@Example.com '})
    duplicate = client.post('/api/events/react-summit/bookings', json={'email': 'ADA@example.com'})
    listing = client.get('/api/events/react-summit/bookings')

    assert first.status_code == 201
    assert first.json()['data']['email'] == 'ada@example.com'
    assert first.json()['data']['eventId'] == created_event['id']
    assert duplicate.status_code == 409
    assert [booking['email'] for booking in listing.json()['data']] == ['ada@example.com']

def test_booking_with_bad_email_is_rejected(client, created_event):
    response = client.post('/api/events/react-summit/bookings', json={'email': 'ada'})

    assert response.status_code == 400
    assert response.json()['errors'] == ['Please provide a valid email address']

def test_booking_unknown_event_id_is_a_validation_error(client):
    response = client.post('/api/bookings', json={'eventId': 12345, 'email': 'ada@example.com'})

    assert response.status_code == 400
    assert response.json()['error'] == 'event does not exist'

def test_booking_with_superscript_event_id_is_a_validation_error(client):
    response = client.post('/api/bookings', json={'eventId': '²', 'email': 'ada@example.com'})

    assert response.status_code == 400
    assert response.json()['errors'] == ['Event ID must be a valid identifier']

def test_delete_event_removes_bookings(client, created_event):
    client.post('/api/events/react-summit/bookings', json={'email': 'ada@example.com'})

    assert client.delete('/api/events/react-summit').status_code == 200
    assert client.delete('/api/events/react-summit').status_code == 404

    # the same slug can be used again and starts without bookings
    client.post('/api/events', json={**created_event, 'tags': ['react']})
    assert client.get('/api/events/react-summit').json()['data']['bookings'] == 0

def test_unreachable_database_returns_503():
    connect = AsyncMock(side_effect=ConnectionError("connection refused"))
    cache = ConnectionCache(connect)

    with TestClient(create_application(cache=cache)) as client:
        health = client.get('/')
        response = client.get('/api/events')

    assert health.json()['database']['isConnected'] is False
    assert response.status_code == 503
    assert response.json()['message'] == 'Database connection failed'
    # startup attempt plus the request's own retry
    assert connect.await_count == 2
