from __future__ import annotations

import os
from functools import lru_cache
from typing import Final

from pydantic import BaseModel

DEFAULT_BASE_URL: Final[str] = "https://api.messagemedia.com/v1"

# Settings field -> environment variable
ENV_VARS: Final[dict[str, str]] = {
    "api_key": "MESSAGEMEDIA_API_KEY",
    "api_secret": "MESSAGEMEDIA_API_SECRET",
    "use_hmac": "MESSAGEMEDIA_USE_HMAC",
    "base_url": "MESSAGEMEDIA_BASE_URL",
    "timeout": "MESSAGEMEDIA_TIMEOUT",
    "verify_ssl": "MESSAGEMEDIA_VERIFY_SSL",
    "proxy_url": "MESSAGEMEDIA_PROXY_URL",
    "debug": "MESSAGEMEDIA_DEBUG",
}


class Settings(BaseModel):
    # --- Credentials ---
    api_key: str | None = None
    api_secret: str | None = None

    # Sign request bodies with X-MessageMedia-Signature
    use_hmac: bool = False

    base_url: str = DEFAULT_BASE_URL

    # --- Transport ---
    timeout: float = 30.0
    verify_ssl: bool = True
    proxy_url: str | None = None

    # Log request/response bodies at DEBUG level
    debug: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """
        Build settings from MESSAGEMEDIA_* environment variables.

        Unset or empty variables fall back to the field defaults. Strings such
        as "true", "0" or "12.5" are coerced by pydantic.
        """
        values = {field: os.environ[var] for field, var in ENV_VARS.items() if os.environ.get(var)}
        return cls.model_validate(values)


def mask_secret(value: str | None, show_chars: int = 4) -> str:
    """Mask a credential, keeping only the last few characters."""
    if not value:
        return "<unset>"
    if len(value) <= show_chars:
        return "*" * len(value)
    return "*" * (len(value) - show_chars) + value[-show_chars:]


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
