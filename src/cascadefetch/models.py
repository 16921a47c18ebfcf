"""Data models for cascadefetch.

Defines the immutable structures passed into and returned from a cascade:
endpoint descriptors, per-call fetch options, per-attempt telemetry metrics,
and the final cascade result.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import msgspec

from cascadefetch.config.settings import DEFAULT_RETRIES
from cascadefetch.config.settings import DEFAULT_TIMEOUT_MS

NO_SOURCE = "none"
ALL_FALLBACKS_FAILED = "All fallbacks failed"

ValidationPredicate = Callable[[Any], bool]


class EndpointDescriptor(msgspec.Struct, frozen=True):
    """One alternative remote source with optional request overrides."""

    address: str
    method: str | None = None
    headers: dict[str, str] | None = None
    body: Any = None

    @classmethod
    def coerce(cls, endpoint: EndpointDescriptor | str) -> EndpointDescriptor:
        """Accept a bare address string wherever a descriptor is expected."""
        if isinstance(endpoint, EndpointDescriptor):
            return endpoint
        if isinstance(endpoint, str):
            return cls(address=endpoint)
        raise TypeError(
            f"Endpoint must be a str or EndpointDescriptor, got {type(endpoint).__name__}"
        )


class FetchOptions(msgspec.Struct, frozen=True):
    """Per-call configuration for a cascade.

    timeout is the per-attempt deadline in milliseconds. retries is the
    number of additional attempts per endpoint after the first.
    """

    timeout: int = DEFAULT_TIMEOUT_MS
    retries: int = DEFAULT_RETRIES
    method: str | None = None
    headers: dict[str, str] | None = None
    body: Any = None

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")

    @property
    def max_attempts(self) -> int:
        """Total attempts allowed per endpoint."""
        return self.retries + 1

    @classmethod
    def from_config(cls, **overrides: Any) -> FetchOptions:
        """Build options using configured defaults, then apply overrides."""
        from cascadefetch.config.settings import get_config

        fetch = get_config().fetch
        values: dict[str, Any] = {
            "timeout": fetch.timeout_ms,
            "retries": fetch.retries,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class AttemptMetric(msgspec.Struct, frozen=True):
    """Telemetry for one terminal attempt against an endpoint."""

    id: str
    timestamp: datetime
    endpoint_host: str
    latency_ms: int
    status_code: int  # 0 = no usable response
    is_fallback: bool
    method: str


class CascadeResult(msgspec.Struct, frozen=True):
    """Outcome of one resolve call."""

    data: Any = None
    source: str = NO_SOURCE
    endpoint_used: str = ""
    fallback_index: int = -1
    latency_ms: int = 0
    status_code: int = 0
    error: str | None = None
    attempts: list[AttemptMetric] = msgspec.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether some endpoint produced validated data."""
        return self.fallback_index >= 0

    @property
    def used_fallback(self) -> bool:
        return self.fallback_index > 0

    @classmethod
    def exhausted(cls, attempts: list[AttemptMetric] | None = None) -> CascadeResult:
        """Terminal result when every endpoint failed."""
        return cls(error=ALL_FALLBACKS_FAILED, attempts=list(attempts or []))


def validate_result(result: CascadeResult) -> list[str]:
    """Check a CascadeResult against its invariants.

    Returns:
        List of violation messages (empty if valid)
    """
    errors = []

    has_data = result.data is not None
    has_index = result.fallback_index >= 0
    has_source = result.source != NO_SOURCE

    if has_index != has_source:
        errors.append(
            f"fallback_index {result.fallback_index} disagrees with source {result.source!r}"
        )
    if has_data and not has_index:
        errors.append("data present without a fallback_index")
    if has_index and not has_data:
        errors.append(f"fallback_index {result.fallback_index} without data")
    if result.fallback_index < -1:
        errors.append(f"fallback_index {result.fallback_index} below -1")
    if not has_index and result.error is None:
        errors.append("failed result has no error message")

    return errors
