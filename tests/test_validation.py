from __future__ import annotations

import pytest

from messagemedia.exceptions import ValidationError
from messagemedia.models import Message
from messagemedia.validation import (
    is_valid_phone_number,
    validate_message_id,
    validate_messages,
)


def test_empty_batch_reports_single_top_level_error() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_messages([])

    assert exc_info.value.errors == [
        {"field": "messages", "message": "At least one message is required"}
    ]
    assert exc_info.value.status_code is None


def test_valid_batch_passes_and_is_not_mutated() -> None:
    message = Message(content="Hi", destination_number="+61491570156")
    before = message.model_dump()

    validate_messages([message])

    assert message.model_dump() == before


def test_missing_content_is_reported_with_index() -> None:
    messages = [
        Message(content="ok", destination_number="+61491570156"),
        Message(content="", destination_number="+61491570157"),
    ]

    with pytest.raises(ValidationError) as exc_info:
        validate_messages(messages)

    assert exc_info.value.fields == ["messages.1.content"]


def test_all_violations_are_collected() -> None:
    """Validation is not fail-fast: every message and field is checked."""
    messages = [
        Message(destination_number="12345"),
        Message(content="Hello"),
    ]

    with pytest.raises(ValidationError) as exc_info:
        validate_messages(messages)

    assert exc_info.value.errors == [
        {"field": "messages.0.content", "message": "Message content is required"},
        {"field": "messages.0.destination_number", "message": "Invalid phone number format"},
        {"field": "messages.1.destination_number", "message": "Destination number is required"},
        {"field": "messages.1.destination_number", "message": "Invalid phone number format"},
    ]


@pytest.mark.parametrize(
    "number",
    ["+61491570156", "0491570156", "61491570156", "+123456789012345"],
)
def test_phone_numbers_matching_pattern_pass(number: str) -> None:
    assert is_valid_phone_number(number)
    validate_messages([Message(content="Hi", destination_number=number)])


@pytest.mark.parametrize(
    "number",
    ["", "+6149157", "123456789", "+61 491 570 156", "++61491570156", "abc0491570156", "+61491570156\n"],
)
def test_phone_numbers_not_matching_pattern_fail(number: str) -> None:
    assert not is_valid_phone_number(number)
    with pytest.raises(ValidationError) as exc_info:
        validate_messages([Message(content="Hi", destination_number=number)])
    assert "messages.0.destination_number" in exc_info.value.fields
    assert "messages.0.content" not in exc_info.value.fields


@pytest.mark.parametrize("message_id", ["", None])
def test_message_id_is_required(message_id: str | None) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_message_id(message_id)
    assert exc_info.value.errors == [{"field": "message_id", "message": "Message ID is required"}]
    assert exc_info.value.status_code is None


def test_message_id_present_passes() -> None:
    validate_message_id("04fe9a97-a579-43c5-bb1a-58ed29bf0a6a")
