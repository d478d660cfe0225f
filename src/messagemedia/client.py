from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError as SchemaError

from .config import DEFAULT_BASE_URL, Settings, get_settings, mask_secret
from .exceptions import ApiError, ValidationError, error_from_response, error_from_transport
from .http_client import HttpxTransport, Transport, TransportError, build_headers, build_url
from .models import (
    CheckDeliveryReportsRequest,
    CheckDeliveryReportsResponse,
    CheckRepliesRequest,
    CheckRepliesResponse,
    ConfirmDeliveryReportsRequest,
    ConfirmRepliesRequest,
    Credits,
    Message,
    SendMessagesRequest,
    SendMessagesResponse,
)
from .validation import validate_message_id, validate_messages

logger = logging.getLogger(__name__)


def _coerce_messages(messages: Sequence[Message | Mapping[str, Any]]) -> list[Message]:
    """Accept Message objects or plain dicts; unknown dict keys are rejected."""
    batch: list[Message] = []
    errors: list[dict[str, Any]] = []
    for index, item in enumerate(messages):
        if isinstance(item, Message):
            batch.append(item)
            continue
        try:
            batch.append(Message.model_validate(item))
        except SchemaError as e:
            for err in e.errors():
                path = ".".join(str(part) for part in (f"messages.{index}", *err["loc"]))
                errors.append({"field": path, "message": err["msg"]})
    if errors:
        raise ValidationError(errors, status_code=None)
    return batch


class MessageMediaClient:
    """
    Synchronous client for the MessageMedia REST API.

    Every public method performs at most one HTTP round trip and never
    retries. Errors are raised as the exceptions in messagemedia.exceptions;
    callers own any retry policy.

    The proxy setting is the only mutable state. Calls racing a set_proxy()
    may use either the old or the new proxy.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        use_hmac: bool = False,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        proxy: str | None = None,
        debug: bool = False,
        transport: Transport | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.use_hmac = use_hmac
        self.debug = debug
        self._proxy = proxy
        self.transport = transport or HttpxTransport(
            timeout=timeout, verify_ssl=verify_ssl, proxy=proxy
        )
        if proxy is not None:
            # an injected transport follows the client's proxy too
            self.transport.proxy = proxy

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MessageMediaClient:
        settings = settings or get_settings()

        if not settings.api_key or not settings.api_secret:
            raise RuntimeError(
                "MessageMedia credentials are not configured "
                "(MESSAGEMEDIA_API_KEY / MESSAGEMEDIA_API_SECRET)"
            )

        return cls(
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            base_url=settings.base_url,
            use_hmac=settings.use_hmac,
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl,
            proxy=settings.proxy_url,
            debug=settings.debug,
        )

    def __repr__(self) -> str:
        return (
            f"MessageMediaClient(api_key={mask_secret(self.api_key)!r}, "
            f"base_url={self.base_url!r}, use_hmac={self.use_hmac})"
        )

    # --- Proxy ---

    def set_proxy(self, proxy_url: str | None) -> None:
        """Use `proxy_url` for subsequent requests; None disables the proxy."""
        self._proxy = proxy_url
        self.transport.proxy = proxy_url

    def get_proxy(self) -> str | None:
        return self._proxy

    # --- Request plumbing ---

    def _request(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> tuple[int, Any]:
        """Send one request; return (status_code, decoded JSON or {})."""
        url = build_url(self.base_url, path, query)
        body = json.dumps(payload, separators=(",", ":")) if payload is not None else None
        headers = build_headers(self.api_key, self.api_secret, body, self.use_hmac)

        logger.debug(f"{method} {url}")
        if self.debug and body is not None:
            logger.debug(f"Request body: {body}")

        try:
            response = self.transport.request(method, url, headers, body)
        except TransportError as e:
            raise error_from_transport(e) from e

        if self.debug:
            logger.debug(f"Response {response.status_code}: {response.body}")

        data: Any = {}
        decode_error: json.JSONDecodeError | None = None
        if response.body.strip():
            try:
                data = json.loads(response.body)
            except json.JSONDecodeError as e:
                decode_error = e
                data = None

        error = error_from_response(response.status_code, data)
        if error is not None:
            logger.warning(
                f"MessageMedia {method} {path} failed with {response.status_code}: "
                f"{type(error).__name__}: {error.message}"
            )
            raise error

        if decode_error is not None:
            raise ApiError(
                f"Invalid JSON in response: {decode_error}", response.status_code
            ) from decode_error

        return response.status_code, data

    @staticmethod
    def _parse(parser: Any, data: Any, status_code: int) -> Any:
        try:
            return parser(data)
        except (SchemaError, TypeError) as e:
            raise ApiError(f"Malformed response: {e}", status_code) from e

    # --- API operations ---

    def send_messages(self, messages: Sequence[Message | Mapping[str, Any]]) -> list[Message]:
        """
        Validate and send a batch of messages.

        Returns the messages as accepted by the server, including the
        server-assigned message_id of each one.
        """
        batch = _coerce_messages(messages)
        validate_messages(batch)

        request = SendMessagesRequest(messages=batch)
        logger.info(f"Sending {len(batch)} message(s)")
        status_code, data = self._request("POST", "/messages", payload=request.to_wire())

        response = self._parse(SendMessagesResponse.from_wire, data, status_code)
        logger.info(f"Successfully sent {len(response.messages)} message(s).")
        return response.messages

    def check_replies(self, limit: int | None = None, offset: int | None = None) -> CheckRepliesResponse:
        request = CheckRepliesRequest(limit=limit, offset=offset)
        status_code, data = self._request("GET", "/replies", query=request.to_query())
        return self._parse(CheckRepliesResponse.from_wire, data, status_code)

    def confirm_replies(self, reply_ids: Sequence[str]) -> None:
        """Mark replies as processed so they are not returned again."""
        request = ConfirmRepliesRequest(reply_ids=list(reply_ids))
        logger.info(f"Confirming {len(request.reply_ids)} reply(ies)")
        self._request("POST", "/replies/confirmed", payload=request.to_wire())

    def check_delivery_reports(
        self, limit: int | None = None, offset: int | None = None
    ) -> CheckDeliveryReportsResponse:
        request = CheckDeliveryReportsRequest(limit=limit, offset=offset)
        status_code, data = self._request("GET", "/delivery_reports", query=request.to_query())
        return self._parse(CheckDeliveryReportsResponse.from_wire, data, status_code)

    def confirm_delivery_reports(self, delivery_report_ids: Sequence[str]) -> None:
        request = ConfirmDeliveryReportsRequest(delivery_report_ids=list(delivery_report_ids))
        logger.info(f"Confirming {len(request.delivery_report_ids)} delivery report(s)")
        self._request("POST", "/delivery_reports/confirmed", payload=request.to_wire())

    def get_message_status(self, message_id: str) -> Message:
        validate_message_id(message_id)
        status_code, data = self._request("GET", f"/messages/{quote(message_id, safe='')}")
        return self._parse(Message.from_wire, data, status_code)

    def cancel_message(self, message_id: str) -> bool:
        """Cancel a scheduled message that has not been sent yet."""
        validate_message_id(message_id)
        logger.info(f"Cancelling message {message_id}")
        self._request("POST", f"/messages/{quote(message_id, safe='')}/cancel")
        return True

    def get_credits(self) -> Credits:
        """Remaining credits for prepaid accounts."""
        status_code, data = self._request("GET", "/credits")
        return self._parse(Credits.from_wire, data, status_code)
