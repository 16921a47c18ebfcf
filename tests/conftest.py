"""Pytest configuration and shared fixtures for cascadefetch tests."""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio

from cascadefetch.config.settings import Config
from cascadefetch.core.retry import RetryPolicy
from cascadefetch.core.telemetry import TelemetryRecorder
from cascadefetch.models import AttemptMetric

Route = Callable[[httpx.Request], Any] | BaseException


class FakeUpstream:
    """Scripted HTTP upstreams keyed by host.

    Each host gets a list of routes consumed one per request; the last route
    repeats once the list is exhausted. A route is a callable returning an
    httpx.Response (sync or async) or an exception instance to raise.
    """

    def __init__(self) -> None:
        self.routes: dict[str, list[Route]] = {}
        self.calls: Counter[str] = Counter()
        self.requests: list[httpx.Request] = []

    def add(self, host: str, *routes: Route) -> None:
        self.routes[host] = list(routes)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.calls[host] += 1
        self.requests.append(request)

        routes = self.routes.get(host)
        if not routes:
            raise httpx.ConnectError(f"No route to {host}", request=request)

        route = routes.pop(0) if len(routes) > 1 else routes[0]
        if isinstance(route, BaseException):
            raise route
        response = route(request)
        if asyncio.iscoroutine(response):
            response = await response
        return response

    @staticmethod
    def json(data: Any, status_code: int = 200, **kwargs: Any) -> Route:
        return lambda request: httpx.Response(status_code, json=data, **kwargs)

    @staticmethod
    def text(text: str, status_code: int = 200, **kwargs: Any) -> Route:
        return lambda request: httpx.Response(status_code, text=text, **kwargs)

    @staticmethod
    def status(status_code: int, **kwargs: Any) -> Route:
        return lambda request: httpx.Response(status_code, **kwargs)

    @staticmethod
    def slow(delay: float, data: Any = None) -> Route:
        async def route(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(delay)
            return httpx.Response(200, json=data if data is not None else {"late": True})

        return route


@pytest.fixture(autouse=True)
def default_config():
    """Isolate tests from the user's config file and the global recorder."""
    with patch("cascadefetch.config.settings._config", Config()), patch(
        "cascadefetch.core.telemetry._recorder", None
    ):
        yield


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def client(upstream: FakeUpstream):
    """AsyncClient routed through the fake upstreams."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(upstream.handler)
    ) as client:
        yield client


@pytest.fixture
def recorder() -> TelemetryRecorder:
    return TelemetryRecorder()


@pytest.fixture
def no_backoff() -> RetryPolicy:
    """Retry policy without delays so retry ladders run instantly."""
    return RetryPolicy(base_delay=0.0, jitter=0.0)


@pytest.fixture
def utc_now() -> datetime:
    """Fixed UTC datetime for consistent testing."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_metric(utc_now: datetime) -> Callable[..., AttemptMetric]:
    """Factory for AttemptMetrics offset from utc_now."""

    def factory(
        n: int = 0,
        *,
        seconds: float = 0,
        latency_ms: int = 100,
        status_code: int = 200,
        is_fallback: bool = False,
        host: str = "api.example.com",
    ) -> AttemptMetric:
        return AttemptMetric(
            id=f"m-{n}",
            timestamp=utc_now + timedelta(seconds=seconds),
            endpoint_host=host,
            latency_ms=latency_ms,
            status_code=status_code,
            is_fallback=is_fallback,
            method="GET",
        )

    return factory
