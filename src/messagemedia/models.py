from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Keys sent with every outbound message, even when empty, so the
# server reports a missing value instead of the client hiding it.
REQUIRED_WIRE_FIELDS: tuple[str, ...] = ("content", "destination_number")

# Optional keys sent only when they carry a value. Order is the wire order.
OPTIONAL_WIRE_FIELDS: tuple[str, ...] = (
    "source_number",
    "callback_url",
    "scheduled_datetime",
    "metadata",
    "delivery_report_url",
    "message_expiry_timestamp",
    "delivery_report",
)


def _is_empty(value: Any) -> bool:
    # None, "", {}, [], 0 and False are all left off the wire
    return not value


def _require_object(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")


class _WireModel(BaseModel):
    """
    Base for records parsed from API responses.

    Python attribute names match the snake_case wire keys. Parsing keeps only
    declared fields: unknown keys the server adds are dropped, missing keys
    default to None, and values of the wrong type raise pydantic's error.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]):
        _require_object(data)
        known = {key: value for key, value in data.items() if key in cls.model_fields}
        return cls.model_validate(known)


class Message(_WireModel):
    """
    An outbound SMS, or its server-side state when read back.

    Every field is optional at construction so that validation can report all
    missing values at once; content and destination_number are required before
    sending. message_id and status are assigned by the server.
    """

    model_config = ConfigDict(extra="forbid", frozen=False)

    content: str | None = None
    destination_number: str | None = None
    source_number: str | None = None
    callback_url: str | None = None
    scheduled_datetime: str | None = None
    metadata: dict[str, Any] | None = None
    delivery_report_url: str | None = None
    message_expiry_timestamp: int | None = None
    delivery_report: bool | None = None

    # server-assigned
    message_id: str | None = None
    status: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Outbound payload for one message, with empty optional fields omitted."""
        data: dict[str, Any] = {name: getattr(self, name) for name in REQUIRED_WIRE_FIELDS}
        for name in OPTIONAL_WIRE_FIELDS:
            value = getattr(self, name)
            if not _is_empty(value):
                data[name] = value
        return data


class Reply(_WireModel):
    reply_id: str | None = None
    message_id: str | None = None
    content: str | None = None
    source_number: str | None = None
    destination_number: str | None = None
    date_received: str | None = None
    metadata: dict[str, Any] | None = None


class DeliveryReport(_WireModel):
    delivery_report_id: str | None = None
    message_id: str | None = None
    status: str | None = None
    status_code: str | None = None
    date_received: str | None = None
    source_number: str | None = None
    destination_number: str | None = None
    metadata: dict[str, Any] | None = None


class Credits(_WireModel):
    credits: int | None = None
    expiry_date: str | None = None


# --- Response envelopes ---


def _items(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    _require_object(data)
    items = data.get(key) or []
    if not isinstance(items, list):
        raise TypeError(f"expected a JSON array for {key!r}, got {type(items).__name__}")
    return items


class SendMessagesResponse(_WireModel):
    messages: list[Message] = Field(default_factory=list)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> SendMessagesResponse:
        return cls(messages=[Message.from_wire(m) for m in _items(data, "messages")])


class CheckRepliesResponse(_WireModel):
    replies: list[Reply] = Field(default_factory=list)
    page_size: int | None = None
    page_number: int | None = None

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> CheckRepliesResponse:
        return cls(
            replies=[Reply.from_wire(r) for r in _items(data, "replies")],
            page_size=data.get("page_size"),
            page_number=data.get("page_number"),
        )


class CheckDeliveryReportsResponse(_WireModel):
    delivery_reports: list[DeliveryReport] = Field(default_factory=list)
    page_size: int | None = None
    page_number: int | None = None

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> CheckDeliveryReportsResponse:
        return cls(
            delivery_reports=[DeliveryReport.from_wire(r) for r in _items(data, "delivery_reports")],
            page_size=data.get("page_size"),
            page_number=data.get("page_number"),
        )


# --- Request parameter bags ---


class SendMessagesRequest(BaseModel):
    messages: list[Message] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return {"messages": [m.to_wire() for m in self.messages]}


class _PageRequest(BaseModel):
    limit: int | None = None
    offset: int | None = None

    def to_query(self) -> dict[str, int]:
        query: dict[str, int] = {}
        if self.limit is not None:
            query["limit"] = self.limit
        if self.offset is not None:
            query["offset"] = self.offset
        return query


class CheckRepliesRequest(_PageRequest):
    pass


class CheckDeliveryReportsRequest(_PageRequest):
    pass


class ConfirmRepliesRequest(BaseModel):
    reply_ids: list[str]

    def to_wire(self) -> dict[str, Any]:
        return {"reply_ids": list(self.reply_ids)}


class ConfirmDeliveryReportsRequest(BaseModel):
    delivery_report_ids: list[str]

    def to_wire(self) -> dict[str, Any]:
        return {"delivery_report_ids": list(self.delivery_report_ids)}
