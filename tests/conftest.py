from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import pytest

from messagemedia.client import MessageMediaClient
from messagemedia.http_client import TransportResponse

BASE_URL = "https://api.example.test/v1"


class FakeTransport:
    """Records every request and replies with queued responses."""

    def __init__(self) -> None:
        self.proxy: str | None = None
        self.requests: list[dict[str, Any]] = []
        self.responses: list[TransportResponse | Exception] = []

    def queue(self, status_code: int, body: Any = None) -> None:
        if body is None:
            raw = ""
        elif isinstance(body, str):
            raw = body
        else:
            raw = json.dumps(body)
        self.responses.append(TransportResponse(status_code=status_code, body=raw))

    def queue_error(self, exc: Exception) -> None:
        self.responses.append(exc)

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> TransportResponse:
        self.requests.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        response = self.responses.pop(0) if self.responses else TransportResponse(200, "")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> MessageMediaClient:
    return MessageMediaClient(
        api_key="test_key",
        api_secret="test_secret",
        base_url=BASE_URL,
        transport=transport,
    )
