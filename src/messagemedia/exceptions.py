from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


class MessageMediaError(Exception):
    """Base class for every error raised by the client."""

    default_message = "MessageMedia error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class AuthenticationError(MessageMediaError):
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None, status_code: int = 401) -> None:
        super().__init__(message, status_code)


class NotFoundError(MessageMediaError):
    default_message = "Resource not found"

    def __init__(self, message: str | None = None, status_code: int = 404) -> None:
        super().__init__(message, status_code)


class ValidationError(MessageMediaError):
    """
    Client-side or server-side input problem.

    `errors` is a list of dicts, normally shaped like
    {"field": "messages.0.content", "message": "Message content is required"}.
    Server-reported errors are passed through as received. Errors raised
    before any request is sent have status_code None.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]] | None = None,
        message: str | None = None,
        status_code: int | None = 422,
    ) -> None:
        self.errors = list(errors or [])
        if not message:
            message = "Validation failed: " + json.dumps(self.errors)
        super().__init__(message, status_code)

    @property
    def fields(self) -> list[str]:
        return [str(e.get("field", "")) for e in self.errors if isinstance(e, Mapping)]


class ApiError(MessageMediaError):
    """Any other failure, including transport errors (status_code is None then)."""

    default_message = "Unknown error"

    def __init__(self, message: str | None = None, status_code: int | None = 500) -> None:
        super().__init__(message, status_code)


def _body_message(data: Mapping[str, Any] | None) -> str | None:
    if not data:
        return None
    message = data.get("message")
    return str(message) if message else None


def error_from_response(status_code: int, data: Any = None) -> MessageMediaError | None:
    """
    Map an HTTP status code and decoded body to the exception to raise.

    Returns None for 2xx responses.
    """
    if 200 <= status_code <= 299:
        return None

    body: Mapping[str, Any] | None = data if isinstance(data, Mapping) else None
    message = _body_message(body)

    if status_code in (401, 403):
        return AuthenticationError(message, status_code)
    if status_code == 404:
        return NotFoundError(message, status_code)
    if status_code in (400, 422):
        errors = body.get("errors") if body else None
        if not isinstance(errors, list):
            errors = []
        return ValidationError(errors, status_code=status_code)
    return ApiError(message, status_code)


def error_from_transport(exc: BaseException) -> ApiError:
    return ApiError(f"Transport error: {exc}", status_code=None)
