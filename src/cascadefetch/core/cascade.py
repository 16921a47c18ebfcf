"""Cascade controller: ordered fallback across endpoints."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from typing import Any

import httpx

from cascadefetch.core.attempt import AttemptOutcome
from cascadefetch.core.attempt import RateLimited
from cascadefetch.core.attempt import Success
from cascadefetch.core.attempt import ValidationFailure
from cascadefetch.core.attempt import execute_attempt
from cascadefetch.core.http import get_http_client
from cascadefetch.core.retry import RetryDecision
from cascadefetch.core.retry import RetryPolicy
from cascadefetch.core.retry import calculate_retry_delay
from cascadefetch.core.retry import decide
from cascadefetch.core.telemetry import TelemetryRecorder
from cascadefetch.core.telemetry import build_metric
from cascadefetch.core.telemetry import endpoint_host
from cascadefetch.core.telemetry import get_recorder
from cascadefetch.models import AttemptMetric
from cascadefetch.models import CascadeResult
from cascadefetch.models import EndpointDescriptor
from cascadefetch.models import FetchOptions
from cascadefetch.models import ValidationPredicate

logger = logging.getLogger(__name__)


async def resolve(
    endpoints: Iterable[EndpointDescriptor | str],
    validate: ValidationPredicate,
    options: FetchOptions | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    policy: RetryPolicy | None = None,
    recorder: TelemetryRecorder | None = None,
) -> CascadeResult:
    """Fetch one logical value from the first endpoint that yields valid data.

    Endpoints are tried strictly in order. Each gets up to
    options.retries + 1 attempts; a 429 or a timeout moves on immediately.
    Failures never raise: if nothing validates, the result carries
    error="All fallbacks failed" and fallback_index=-1.

    Args:
        endpoints: Priority-ordered endpoints (index 0 is the primary source)
        validate: Predicate deciding whether a received payload is usable
        options: Per-call timeout/retries/request overrides
            (defaults come from configuration)
        client: HTTP client to use (defaults to the shared pooled client)
        policy: Backoff between retries of the same endpoint
        recorder: Telemetry sink (defaults to the process-wide recorder)

    Returns:
        CascadeResult describing the winning endpoint or exhaustion
    """
    if not callable(validate):
        raise TypeError("validate must be callable")

    descriptors = [EndpointDescriptor.coerce(e) for e in endpoints]
    if options is None:
        options = FetchOptions.from_config()
    if recorder is None:
        recorder = get_recorder()

    if client is None:
        async with get_http_client() as shared:
            return await _run_cascade(
                shared, descriptors, validate, options, policy, recorder
            )
    return await _run_cascade(client, descriptors, validate, options, policy, recorder)


def resolve_sync(
    endpoints: Iterable[EndpointDescriptor | str],
    validate: ValidationPredicate,
    options: FetchOptions | None = None,
    **kwargs: Any,
) -> CascadeResult:
    """Run resolve() to completion from synchronous code.

    Uses a dedicated client unless one is passed, since the shared client
    is bound to the event loop that created it.
    """

    async def _run() -> CascadeResult:
        if kwargs.get("client") is not None:
            return await resolve(endpoints, validate, options, **kwargs)
        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await resolve(endpoints, validate, options, client=client, **kwargs)

    return asyncio.run(_run())


async def _run_cascade(
    client: httpx.AsyncClient,
    endpoints: list[EndpointDescriptor],
    validate: ValidationPredicate,
    options: FetchOptions,
    policy: RetryPolicy | None,
    recorder: TelemetryRecorder,
) -> CascadeResult:
    trace: list[AttemptMetric] = []

    for index, endpoint in enumerate(endpoints):
        host = endpoint_host(endpoint.address)
        if host is None:
            logger.warning("Skipping malformed endpoint address %r", endpoint.address)
            continue

        method = (endpoint.method or options.method or "GET").upper()
        outcome = await _drive_endpoint(
            client, endpoint, method, validate, options, policy
        )

        metric = build_metric(
            endpoint.address,
            latency_ms=outcome.latency_ms,
            status_code=_metric_status(outcome),
            is_fallback=index > 0,
            method=method,
        )
        if metric is not None:
            recorder.record(metric)
            trace.append(metric)

        if isinstance(outcome, Success):
            if index > 0:
                logger.info(
                    "Resolved via fallback #%d (%s) in %dms",
                    index,
                    host,
                    outcome.latency_ms,
                )
            return CascadeResult(
                data=outcome.payload,
                source=host,
                endpoint_used=endpoint.address,
                fallback_index=index,
                latency_ms=outcome.latency_ms,
                status_code=outcome.status_code,
                attempts=trace,
            )

    logger.warning("All %d endpoints failed", len(endpoints))
    return CascadeResult.exhausted(trace)


async def _drive_endpoint(
    client: httpx.AsyncClient,
    endpoint: EndpointDescriptor,
    method: str,
    validate: ValidationPredicate,
    options: FetchOptions,
    policy: RetryPolicy | None,
) -> AttemptOutcome:
    """Run the retry ladder against one endpoint and return its final outcome."""
    headers = {**(options.headers or {}), **(endpoint.headers or {})}
    body = endpoint.body if endpoint.body is not None else options.body
    start = time.monotonic()

    attempt = 0
    while True:
        outcome = await execute_attempt(
            client,
            endpoint,
            method=method,
            headers=headers,
            body=body,
            timeout_ms=options.timeout,
            started_at=start,
        )
        if isinstance(outcome, Success):
            outcome = _apply_validator(outcome, validate)

        decision = decide(outcome, attempt, options.retries)
        if decision is RetryDecision.RETRY:
            delay = calculate_retry_delay(policy)
            logger.debug(
                "Attempt %d failed for %s (%s), retrying in %.2fs",
                attempt + 1,
                endpoint.address,
                _describe(outcome),
                delay,
            )
            await asyncio.sleep(delay)
            attempt += 1
            continue

        if decision is RetryDecision.ADVANCE:
            logger.warning(
                "Attempt %d failed for %s: %s",
                attempt + 1,
                endpoint.address,
                _describe(outcome),
            )
        return outcome


def _apply_validator(
    outcome: Success, validate: ValidationPredicate
) -> Success | ValidationFailure:
    # A JSON null body carries no data and can never be a result
    if outcome.payload is None:
        return ValidationFailure(
            status_code=outcome.status_code,
            latency_ms=outcome.latency_ms,
            reason="Empty payload",
        )

    try:
        accepted = bool(validate(outcome.payload))
    except Exception:
        logger.debug("Validator raised for payload", exc_info=True)
        accepted = False

    if accepted:
        return outcome
    return ValidationFailure(
        status_code=outcome.status_code,
        latency_ms=outcome.latency_ms,
    )


def _metric_status(outcome: AttemptOutcome) -> int:
    # A rejected payload is recorded like a transport failure: no usable response.
    if isinstance(outcome, ValidationFailure):
        return 0
    return outcome.status_code


def _describe(outcome: AttemptOutcome) -> str:
    reason = getattr(outcome, "reason", None)
    if reason:
        return reason
    if isinstance(outcome, RateLimited):
        if outcome.retry_after is not None:
            return (
                f"rate limited (Retry-After {outcome.retry_after:g}s), "
                "skipping to next fallback"
            )
        return "rate limited, skipping to next fallback"
    return f"HTTP {outcome.status_code}"
