from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from .exceptions import ValidationError
from .models import Message

PHONE_RE = re.compile(r"^\+?[0-9]{10,}$")


def is_valid_phone_number(value: str | None) -> bool:
    # fullmatch: "$" alone would accept a trailing newline
    return value is not None and PHONE_RE.fullmatch(value) is not None


def message_errors(message: Message, index: int) -> list[dict[str, Any]]:
    """
    Return every problem with one outbound message.

    An empty destination number is reported twice: once as missing and once
    as badly formatted.
    """
    prefix = f"messages.{index}"
    errors: list[dict[str, Any]] = []

    if not message.content:
        errors.append({"field": f"{prefix}.content", "message": "Message content is required"})

    if not message.destination_number:
        errors.append(
            {"field": f"{prefix}.destination_number", "message": "Destination number is required"}
        )

    if not is_valid_phone_number(message.destination_number):
        errors.append(
            {"field": f"{prefix}.destination_number", "message": "Invalid phone number format"}
        )

    return errors


def validate_messages(messages: Sequence[Message]) -> None:
    """Raise ValidationError listing all problems in the batch."""
    if not messages:
        raise ValidationError(
            [{"field": "messages", "message": "At least one message is required"}],
            status_code=None,
        )

    errors: list[dict[str, Any]] = []
    for index, message in enumerate(messages):
        errors.extend(message_errors(message, index))

    if errors:
        raise ValidationError(errors, status_code=None)


def validate_message_id(message_id: str | None) -> None:
    if not message_id:
        raise ValidationError(
            [{"field": "message_id", "message": "Message ID is required"}],
            status_code=None,
        )
