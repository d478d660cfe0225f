from __future__ import annotations

from collections.abc import Iterator

import pytest

from messagemedia.config import DEFAULT_BASE_URL, ENV_VARS, get_settings, mask_secret


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test without MESSAGEMEDIA_* variables and with a fresh cache."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = get_settings()

    assert settings.api_key is None
    assert settings.api_secret is None
    assert settings.use_hmac is False
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout == 30.0
    assert settings.verify_ssl is True
    assert settings.proxy_url is None
    assert settings.debug is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MESSAGEMEDIA_API_KEY", "key")
    monkeypatch.setenv("MESSAGEMEDIA_API_SECRET", "secret")
    monkeypatch.setenv("MESSAGEMEDIA_USE_HMAC", "true")
    monkeypatch.setenv("MESSAGEMEDIA_BASE_URL", "https://api.test/v1")
    monkeypatch.setenv("MESSAGEMEDIA_TIMEOUT", "12.5")
    monkeypatch.setenv("MESSAGEMEDIA_VERIFY_SSL", "0")
    monkeypatch.setenv("MESSAGEMEDIA_PROXY_URL", "http://proxy.test:8080")
    monkeypatch.setenv("MESSAGEMEDIA_DEBUG", "1")

    settings = get_settings()

    assert settings.api_key == "key"
    assert settings.api_secret == "secret"
    assert settings.use_hmac is True
    assert settings.base_url == "https://api.test/v1"
    assert settings.timeout == 12.5
    assert settings.verify_ssl is False
    assert settings.proxy_url == "http://proxy.test:8080"
    assert settings.debug is True


def test_empty_variables_use_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MESSAGEMEDIA_BASE_URL", "")
    monkeypatch.setenv("MESSAGEMEDIA_PROXY_URL", "")

    settings = get_settings()

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.proxy_url is None


def test_settings_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("MESSAGEMEDIA_API_KEY", "changed")

    assert get_settings() is first

    get_settings.cache_clear()
    assert get_settings().api_key == "changed"


def test_mask_secret() -> None:
    assert mask_secret("abcdefgh1234") == "********1234"
    assert mask_secret("abc") == "***"
    assert mask_secret(None) == "<unset>"
    assert mask_secret("") == "<unset>"
