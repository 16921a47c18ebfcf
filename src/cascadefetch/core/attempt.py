"""Single bounded-time request attempt against one endpoint."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
import msgspec

from cascadefetch.core.http import build_headers
from cascadefetch.core.http import get_timeout_config
from cascadefetch.errors.http import get_retry_after
from cascadefetch.errors.http import http_status_error
from cascadefetch.errors.network import classify_network_error
from cascadefetch.errors.types import ErrorCategory
from cascadefetch.models import EndpointDescriptor

logger = logging.getLogger(__name__)


class Success(msgspec.Struct, frozen=True, tag="success"):
    """2xx response with a decoded payload (not yet validated)."""

    payload: Any
    status_code: int
    latency_ms: int


class RateLimited(msgspec.Struct, frozen=True, tag="rate_limited"):
    """Endpoint answered 429."""

    latency_ms: int
    status_code: int = 429
    retry_after: float | None = None


class HttpError(msgspec.Struct, frozen=True, tag="http_error"):
    """Response received with a non-2xx status other than 429."""

    status_code: int
    latency_ms: int
    reason: str = ""


class TransportFailure(msgspec.Struct, frozen=True, tag="transport_failure"):
    """No response: connection error, malformed address, or deadline expiry."""

    reason: str
    latency_ms: int
    timed_out: bool = False
    status_code: int = 0


class ValidationFailure(msgspec.Struct, frozen=True, tag="validation_failure"):
    """2xx response whose payload was rejected or could not be decoded."""

    status_code: int
    latency_ms: int
    reason: str = "Validation failed"


AttemptOutcome = Success | RateLimited | HttpError | TransportFailure | ValidationFailure


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def is_json_content_type(content_type: str) -> bool:
    """Whether a Content-Type header declares a JSON body."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def decode_payload(response: httpx.Response) -> Any:
    """Decode a response body according to its declared content type.

    JSON bodies become dicts/lists/scalars, everything else is text.

    Raises:
        msgspec.DecodeError: If a body declared as JSON is malformed
    """
    content_type = response.headers.get("content-type", "")
    if is_json_content_type(content_type):
        return msgspec.json.decode(response.content)
    return response.text


def _request_kwargs(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, (bytes, str)):
        return {"content": body}
    return {"json": body}


async def _send(
    client: httpx.AsyncClient,
    endpoint: EndpointDescriptor,
    method: str,
    headers: dict[str, str],
    body: Any,
    timeout_ms: int,
) -> httpx.Response:
    response = await client.request(
        method,
        endpoint.address,
        headers=headers,
        timeout=get_timeout_config(timeout_ms),
        **_request_kwargs(body),
    )
    # Body is read inside the deadline so nothing from an abandoned attempt
    # is ever observed.
    await response.aread()
    return response


async def execute_attempt(
    client: httpx.AsyncClient,
    endpoint: EndpointDescriptor,
    *,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: Any = None,
    timeout_ms: int,
    started_at: float | None = None,
) -> AttemptOutcome:
    """Perform exactly one request against an endpoint.

    Args:
        client: HTTP client to send the request with
        endpoint: Target endpoint
        method: HTTP method
        headers: Caller headers, merged over the identification defaults
        body: Request body; mappings and lists are sent as JSON
        timeout_ms: Hard deadline for the whole attempt
        started_at: monotonic clock reading that latency is measured from
            (defaults to the start of this attempt)

    Returns:
        A tagged outcome. This function never raises for network or HTTP
        failures.
    """
    start = started_at if started_at is not None else time.monotonic()
    request_headers = build_headers(headers)

    try:
        response = await asyncio.wait_for(
            _send(client, endpoint, method, request_headers, body, timeout_ms),
            timeout=timeout_ms / 1000,
        )
    except (httpx.HTTPError, httpx.InvalidURL, OSError, asyncio.TimeoutError) as e:
        error = classify_network_error(e)
        logger.debug("%s %s failed: %s", method, endpoint.address, error)
        return TransportFailure(
            reason=error.message,
            latency_ms=_elapsed_ms(start),
            timed_out=error.is_timeout,
        )

    latency_ms = _elapsed_ms(start)

    error = http_status_error(response)
    if error is not None:
        if error.category is ErrorCategory.RATE_LIMITED:
            return RateLimited(
                latency_ms=latency_ms,
                retry_after=get_retry_after(response),
            )
        return HttpError(
            status_code=response.status_code,
            latency_ms=latency_ms,
            reason=error.message,
        )

    try:
        payload = decode_payload(response)
    except msgspec.DecodeError as e:
        return ValidationFailure(
            status_code=response.status_code,
            latency_ms=latency_ms,
            reason=f"Malformed JSON body: {e}",
        )

    return Success(
        payload=payload,
        status_code=response.status_code,
        latency_ms=latency_ms,
    )
