"""Core fetch engine for cascadefetch."""

from cascadefetch.core.attempt import (
    AttemptOutcome,
    HttpError,
    RateLimited,
    Success,
    TransportFailure,
    ValidationFailure,
    decode_payload,
    execute_attempt,
)
from cascadefetch.core.benchmark import (
    BaselineLatency,
    MetricsSummary,
    measure_baseline_latency,
    summarize_metrics,
)
from cascadefetch.core.cascade import resolve, resolve_sync
from cascadefetch.core.http import build_headers, cleanup, get_http_client, get_timeout_config
from cascadefetch.core.retry import (
    RetryDecision,
    RetryPolicy,
    calculate_retry_delay,
    decide,
)
from cascadefetch.core.telemetry import (
    TelemetryRecorder,
    build_metric,
    endpoint_host,
    get_recorder,
    list_metrics,
    record_metric,
    reset_metrics,
)

__all__ = [
    # http
    "get_http_client",
    "cleanup",
    "build_headers",
    "get_timeout_config",
    # attempt
    "AttemptOutcome",
    "Success",
    "RateLimited",
    "HttpError",
    "TransportFailure",
    "ValidationFailure",
    "decode_payload",
    "execute_attempt",
    # retry
    "RetryDecision",
    "RetryPolicy",
    "calculate_retry_delay",
    "decide",
    # telemetry
    "TelemetryRecorder",
    "build_metric",
    "endpoint_host",
    "get_recorder",
    "record_metric",
    "list_metrics",
    "reset_metrics",
    # cascade
    "resolve",
    "resolve_sync",
    # benchmark
    "MetricsSummary",
    "BaselineLatency",
    "summarize_metrics",
    "measure_baseline_latency",
]
