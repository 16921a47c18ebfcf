"""Aggregation over recorded attempt telemetry."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

import httpx
import msgspec

from cascadefetch.core.cascade import resolve
from cascadefetch.core.retry import RetryPolicy
from cascadefetch.core.telemetry import TelemetryRecorder
from cascadefetch.models import AttemptMetric
from cascadefetch.models import EndpointDescriptor
from cascadefetch.models import FetchOptions
from cascadefetch.models import NO_SOURCE
from cascadefetch.validators import truthy

BASELINE_TIMEOUT_MS = 3000


class MetricsSummary(msgspec.Struct, frozen=True):
    """Request statistics over a window of attempt metrics."""

    total_requests: int = 0
    avg_latency_ms: int = 0
    requests_per_second: float = 0.0
    fallback_usage_percent: float = 0.0


class BaselineLatency(msgspec.Struct, frozen=True):
    """Round-trip latency to the first reachable telemetry endpoint."""

    latency_ms: int
    source: str

    @property
    def measured(self) -> bool:
        return self.source != NO_SOURCE


def summarize_metrics(
    metrics: Sequence[AttemptMetric],
    start: datetime | None = None,
    end: datetime | None = None,
) -> MetricsSummary:
    """Compute request statistics for metrics within [start, end].

    Without bounds the window spans the first to the last metric.
    requests_per_second is 0 when the window has no duration.
    """
    window = [
        m
        for m in metrics
        if (start is None or m.timestamp >= start)
        and (end is None or m.timestamp <= end)
    ]
    if not window:
        return MetricsSummary()

    total = len(window)
    avg_latency = round(sum(m.latency_ms for m in window) / total)
    fallback_count = sum(1 for m in window if m.is_fallback)

    window_start = start or min(m.timestamp for m in window)
    window_end = end or max(m.timestamp for m in window)
    duration = (window_end - window_start).total_seconds()
    rps = round(total / duration, 2) if duration > 0 else 0.0

    return MetricsSummary(
        total_requests=total,
        avg_latency_ms=avg_latency,
        requests_per_second=rps,
        fallback_usage_percent=round(fallback_count / total * 100, 1),
    )


async def measure_baseline_latency(
    endpoints: Iterable[EndpointDescriptor | str],
    *,
    timeout_ms: int = BASELINE_TIMEOUT_MS,
    client: httpx.AsyncClient | None = None,
    policy: RetryPolicy | None = None,
    recorder: TelemetryRecorder | None = None,
) -> BaselineLatency:
    """Measure network latency against the first endpoint that answers.

    Any non-empty successful response counts. Returns source "none" and
    zero latency when every endpoint fails.
    """
    result = await resolve(
        endpoints,
        truthy,
        FetchOptions.from_config(timeout=timeout_ms),
        client=client,
        policy=policy,
        recorder=recorder,
    )
    return BaselineLatency(latency_ms=result.latency_ms, source=result.source)
