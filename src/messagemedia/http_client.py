from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, Protocol
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: Final[float] = 10.0
SIGNATURE_HEADER: Final[str] = "X-MessageMedia-Signature"


# --- Request building ---


def build_url(base: str, path: str, query: Mapping[str, Any] | None = None) -> str:
    """
    Join base URL and endpoint path, then append the encoded query string.

    Query parameters whose value is None are left out.
    """
    url = base.rstrip("/") + "/" + path.lstrip("/")
    params = {k: v for k, v in (query or {}).items() if v is not None}
    if params:
        url += "?" + urlencode(params)
    return url


def sign_body(body: str, secret: str) -> str:
    """Hex HMAC-SHA256 of the request body keyed with the API secret."""
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


def build_headers(
    api_key: str,
    api_secret: str,
    body: str | None = None,
    use_hmac: bool = False,
) -> dict[str, str]:
    credentials = base64.b64encode(f"{api_key}:{api_secret}".encode()).decode("ascii")
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Authorization": f"Basic {credentials}",
    }
    if use_hmac and body:
        headers[SIGNATURE_HEADER] = sign_body(body, api_secret)
    return headers


# --- Transport ---


def normalise_proxy(proxy: str) -> str:
    """Default a scheme-less proxy such as "proxy.example.com:8080" to http://."""
    if "://" not in proxy:
        return f"http://{proxy}"
    return proxy


class TransportError(Exception):
    """The request failed before any HTTP status was received."""


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str


class Transport(Protocol):
    proxy: str | None

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> TransportResponse: ...


class HttpxTransport:
    """
    Blocking transport backed by httpx.

    A fresh httpx.Client is opened per request, so changes to `proxy` apply to
    the next request and never to one already in flight.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        proxy: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.proxy = proxy
        # injected by tests (httpx.MockTransport)
        self._transport = transport

    def client_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "timeout": httpx.Timeout(self.timeout, connect=CONNECT_TIMEOUT),
            "verify": self.verify_ssl,
            # proxy comes from configuration only, never HTTP(S)_PROXY
            "trust_env": False,
        }
        if self.proxy:
            options["proxy"] = normalise_proxy(self.proxy)
        if self._transport is not None:
            options["transport"] = self._transport
        return options

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> TransportResponse:
        content = body.encode("utf-8") if body is not None else None
        try:
            with httpx.Client(**self.client_options()) as client:
                response = client.request(method, url, headers=dict(headers), content=content)
        # ValueError: httpx rejects an unusable proxy URL while building the client
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"Request error occurred: {e} for URL: {url}")
            raise TransportError(str(e) or type(e).__name__) from e
        return TransportResponse(status_code=response.status_code, body=response.text)
