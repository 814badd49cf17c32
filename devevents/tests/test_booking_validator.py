import pytest
from unittest.mock import AsyncMock

from devevents.validation import (
    EventReferenceError,
    ValidationError,
    check_event_reference,
    normalize_email,
    prepare_booking,
)

@pytest.mark.asyncio
async def test_valid_booking_is_normalized():
    event_exists = AsyncMock(return_value=True)
    record = {'eventId': 7, 'email': '  Ada@Example.COM '}

    result = await prepare_booking(record, event_exists)

    assert result is record
    assert record['email'] == 'ada@example.com'
    event_exists.assert_awaited_once_with(7)

@pytest.mark.asyncio
async def test_numeric_string_event_id_is_coerced():
    event_exists = AsyncMock(return_value=True)
    record = {'eventId': ' 12 ', 'email': 'ada@example.com'}

    await prepare_booking(record, event_exists)

    assert record['eventId'] == 12
    event_exists.assert_awaited_once_with(12)

@pytest.mark.asyncio
@pytest.mark.parametrize("event_id", ['²', '5³', '١٢', '12a', '-3'])
async def test_malformed_string_event_id_is_rejected(event_id):
    event_exists = AsyncMock(return_value=True)
    record = {'eventId': event_id, 'email': 'ada@example.com'}

    with pytest.raises(ValidationError) as exc_info:
        await prepare_booking(record, event_exists)

    assert exc_info.value.messages == ["Event ID must be a valid identifier"]
    event_exists.assert_not_awaited()

@pytest.mark.asyncio
async def test_missing_event_is_rejected():
    event_exists = AsyncMock(return_value=False)

    with pytest.raises(EventReferenceError) as exc:
        await prepare_booking({'eventId': 404, 'email': 'ada@example.com'}, event_exists)

    assert str(exc.value) == "event does not exist"
    assert isinstance(exc.value, ValidationError)

@pytest.mark.asyncio
async def test_failed_lookup_is_a_validation_failure():
    event_exists = AsyncMock(side_effect=RuntimeError("storage unavailable"))

    with pytest.raises(EventReferenceError) as exc:
        await check_event_reference(1, event_exists)

    assert str(exc.value) == "error validating event reference"
    assert isinstance(exc.value.__cause__, RuntimeError)

@pytest.mark.asyncio
@pytest.mark.parametrize("email, message", [
    ("not-an-email", "Please provide a valid email address"),
    ("two@@example.com", "Please provide a valid email address"),
    ("spaces in@example.com", "Please provide a valid email address"),
    ("", "Email is required"),
    (None, "Email is required"),
    ("a" * 250 + "@example.com", "Email cannot exceed 254 characters"),
])
async def test_malformed_email_fails_before_event_lookup(email, message):
    event_exists = AsyncMock(return_value=True)

    with pytest.raises(ValidationError) as exc:
        await prepare_booking({'eventId': 1, 'email': email}, event_exists)

    assert exc.value.messages == [message]
    event_exists.assert_not_awaited()

@pytest.mark.asyncio
async def test_field_errors_are_collected():
    event_exists = AsyncMock(return_value=True)

    with pytest.raises(ValidationError) as exc:
        await prepare_booking({'eventId': 'abc', 'email': 'nope'}, event_exists)

    assert exc.value.messages == [
        "Event ID must be a valid identifier",
        "Please provide a valid email address",
    ]

@pytest.mark.asyncio
async def test_unchanged_event_id_is_not_looked_up_again():
    event_exists = AsyncMock(return_value=False)
    previous = {'eventId': 3, 'email': 'ada@example.com'}
    record = {'eventId': 3, 'email': 'Grace@Example.com'}

    await prepare_booking(record, event_exists, previous=previous)

    event_exists.assert_not_awaited()
    assert record['email'] == 'grace@example.com'

def test_normalize_email_rejects_blank():
    with pytest.raises(ValidationError) as exc:
        normalize_email("   ")
    assert str(exc.value) == "email cannot be empty"
