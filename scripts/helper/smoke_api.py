#!/usr/bin/env python3
"""Smoke test a running API instance.

Usage:
    python scripts/helper/smoke_api.py [base_url]
"""

import json
import sys
import uuid

import requests

def smoke_api(base_url: str = "http://localhost:8000") -> None:
    # Test root endpoint
    print("\nTesting health endpoint...")
    response = requests.get(f"{base_url}/", timeout=10)
    print(f"Status: {response.status_code}")
    print(f"Response: {response.json()}")

    # Test events endpoint
    print("\nTesting events endpoint...")
    response = requests.get(f"{base_url}/api/events", timeout=10)
    print(f"Status: {response.status_code}")
    body = response.json()
    events = body.get('data', [])
    print(f"Number of events on first page: {len(events)} (total {body.get('pagination', {}).get('total')})")

    # Test single event endpoint (if we have events)
    if events:
        slug = events[0]['slug']
        print(f"\nTesting event details endpoint for {slug}...")
        response = requests.get(f"{base_url}/api/events/{slug}", timeout=10)
        print(f"Status: {response.status_code}")
        print(f"Response: {json.dumps(response.json(), indent=2)}")

        print("\nTesting booking endpoint...")
        email = f"smoke-{uuid.uuid4().hex[:8]}@example.com"
        response = requests.post(f"{base_url}/api/events/{slug}/bookings", json={'email': email}, timeout=10)
        print(f"Status: {response.status_code}")
        response = requests.post(f"{base_url}/api/events/{slug}/bookings", json={'email': email.upper()}, timeout=10)
        print(f"Duplicate booking status (expect 409): {response.status_code}")

    # Test non-existent event
    print("\nTesting non-existent event...")
    response = requests.get(f"{base_url}/api/events/no-such-event", timeout=10)
    print(f"Status: {response.status_code}")
    print(f"Response: {response.json()}")

if __name__ == "__main__":
    smoke_api(*sys.argv[1:2])
