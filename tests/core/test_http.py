"""Tests for core/http.py (shared client and request defaults)."""

from unittest.mock import patch

import httpx
import pytest

from cascadefetch.config.settings import Config, FetchConfig
from cascadefetch.core import http as http_module
from cascadefetch.core.http import (
    build_headers,
    cleanup,
    get_http_client,
    get_timeout_config,
)


@pytest.fixture(autouse=True)
def reset_client():
    with patch.object(http_module, "_client", None):
        yield


class TestGetTimeoutConfig:
    def test_from_milliseconds(self):
        timeout = get_timeout_config(2500)

        assert isinstance(timeout, httpx.Timeout)
        assert timeout.connect == 2.5
        assert timeout.read == 2.5

    def test_defaults_to_config(self):
        assert get_timeout_config().read == 8.0

    def test_config_override(self):
        config = Config(fetch=FetchConfig(timeout_ms=1200))
        with patch("cascadefetch.config.settings._config", config):
            assert get_timeout_config().read == 1.2


class TestBuildHeaders:
    def test_defaults(self):
        headers = build_headers()

        assert headers["User-Agent"].startswith("cascadefetch/")
        assert headers["Accept"] == "application/json, text/plain, */*"

    def test_later_overrides_win(self):
        headers = build_headers(
            {"Accept": "text/plain", "X-A": "1"},
            None,
            {"X-A": "2"},
        )

        assert headers["Accept"] == "text/plain"
        assert headers["X-A"] == "2"

    def test_configured_user_agent(self):
        config = Config(fetch=FetchConfig(user_agent="probe/1.0"))
        with patch("cascadefetch.config.settings._config", config):
            assert build_headers()["User-Agent"] == "probe/1.0"


class TestSharedClient:
    @pytest.mark.asyncio
    async def test_client_reused(self):
        async with get_http_client() as first:
            pass
        async with get_http_client() as second:
            pass

        assert first is second
        assert not first.is_closed
        await cleanup()

    @pytest.mark.asyncio
    async def test_cleanup_closes_and_recreates(self):
        async with get_http_client() as first:
            pass

        await cleanup()

        assert first.is_closed
        assert http_module._client is None

        async with get_http_client() as second:
            pass

        assert second is not first
        await cleanup()

    @pytest.mark.asyncio
    async def test_cleanup_without_client(self):
        await cleanup()

        assert http_module._client is None
