"""HTTP client with connection pooling for cascadefetch."""

from contextlib import asynccontextmanager

import httpx

from cascadefetch.config.settings import get_config

# Global HTTP client
_client: httpx.AsyncClient | None = None


def get_timeout_config(timeout_ms: int | None = None) -> httpx.Timeout:
    """Get an httpx timeout from a millisecond deadline or from settings."""
    if timeout_ms is None:
        timeout_ms = get_config().fetch.timeout_ms
    return httpx.Timeout(timeout_ms / 1000)


def build_headers(*overrides: dict[str, str] | None) -> dict[str, str]:
    """Merge the identification and Accept defaults with caller headers.

    Later mappings win over earlier ones.
    """
    fetch = get_config().fetch
    headers = {
        "User-Agent": fetch.user_agent,
        "Accept": fetch.accept,
    }
    for extra in overrides:
        if extra:
            headers.update(extra)
    return headers


@asynccontextmanager
async def get_http_client():
    """Get or create the shared HTTP client.

    Usage:
        async with get_http_client() as client:
            response = await client.get(...)
    """
    global _client

    if _client is None or _client.is_closed:
        limits = httpx.Limits(
            max_connections=20,
            max_keepalive_connections=5,
        )
        _client = httpx.AsyncClient(
            timeout=get_timeout_config(),
            limits=limits,
            follow_redirects=True,
        )

    try:
        yield _client
    finally:
        # Don't close - keep for reuse
        pass


async def cleanup() -> None:
    """Close the HTTP client.

    Should be called on application shutdown.
    """
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
