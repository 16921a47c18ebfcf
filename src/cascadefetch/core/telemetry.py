"""Process-wide bounded log of endpoint attempts."""

from __future__ import annotations

import threading
import time
import uuid
from collections import deque
from datetime import UTC
from datetime import datetime

import httpx

from cascadefetch.config.settings import DEFAULT_MAX_METRICS
from cascadefetch.models import AttemptMetric


class TelemetryRecorder:
    """Append-only, size-capped sequence of AttemptMetrics.

    Once more than max_entries metrics have been recorded the oldest are
    evicted first. Every operation holds the same lock, so cascades running
    on different threads may record concurrently.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_METRICS) -> None:
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._metrics: deque[AttemptMetric] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def record(self, metric: AttemptMetric) -> None:
        """Append a metric, evicting the oldest beyond the cap."""
        with self._lock:
            self._metrics.append(metric)

    def list(self) -> list[AttemptMetric]:
        """Return a snapshot of the retained metrics, oldest first."""
        with self._lock:
            return list(self._metrics)

    def reset(self) -> None:
        """Start a fresh measurement window."""
        with self._lock:
            self._metrics.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)


def endpoint_host(address: str) -> str | None:
    """Derive the host identifier for an endpoint address.

    Returns None when the address is malformed or has no host.
    """
    try:
        host = httpx.URL(address).host
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    return host or None


def new_metric_id() -> str:
    return f"m-{int(time.time() * 1000)}-{uuid.uuid4().hex[:4]}"


def build_metric(
    address: str,
    latency_ms: int,
    status_code: int,
    is_fallback: bool,
    method: str,
) -> AttemptMetric | None:
    """Build a metric for an attempt, or None if the host cannot be derived."""
    host = endpoint_host(address)
    if host is None:
        return None
    return AttemptMetric(
        id=new_metric_id(),
        timestamp=datetime.now(UTC),
        endpoint_host=host,
        latency_ms=latency_ms,
        status_code=status_code,
        is_fallback=is_fallback,
        method=method,
    )


# Global recorder
_recorder: TelemetryRecorder | None = None
_recorder_lock = threading.Lock()


def get_recorder() -> TelemetryRecorder:
    """Get or create the process-wide recorder."""
    global _recorder
    with _recorder_lock:
        if _recorder is None:
            from cascadefetch.config.settings import get_config

            _recorder = TelemetryRecorder(get_config().telemetry.max_entries)
        return _recorder


def record_metric(metric: AttemptMetric) -> None:
    get_recorder().record(metric)


def list_metrics() -> list[AttemptMetric]:
    """Snapshot of the process-wide telemetry."""
    return get_recorder().list()


def reset_metrics() -> None:
    """Clear the process-wide telemetry."""
    get_recorder().reset()
