"""Network error classification utilities.

This module turns exceptions raised while performing an attempt into
structured AttemptError values so nothing escapes the attempt executor.
"""

from __future__ import annotations

import asyncio

import httpx

from cascadefetch.errors.types import AttemptError, ErrorCategory


def classify_network_error(error: BaseException) -> AttemptError:
    """Classify a transport-level exception.

    Args:
        error: Exception raised while sending the request or reading the body

    Returns:
        AttemptError with TIMEOUT or TRANSPORT category
    """
    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return AttemptError(
            message="Attempt exceeded its deadline",
            category=ErrorCategory.TIMEOUT,
        )

    if isinstance(error, httpx.ConnectTimeout):
        return AttemptError(
            message="Connection timed out",
            category=ErrorCategory.TIMEOUT,
        )

    if isinstance(error, httpx.ReadTimeout):
        return AttemptError(
            message="Request timed out waiting for response",
            category=ErrorCategory.TIMEOUT,
        )

    if isinstance(error, httpx.TimeoutException):
        return AttemptError(
            message="Request timed out",
            category=ErrorCategory.TIMEOUT,
        )

    if isinstance(error, httpx.ConnectError):
        message = str(error)
        lowered = message.lower()
        if "connection refused" in lowered:
            text = "Connection refused by server"
        elif "name or service" in lowered or "nodename" in lowered or "dns" in lowered:
            text = "Could not resolve server address"
        else:
            text = "Failed to connect to server"
        return AttemptError(message=text, category=ErrorCategory.TRANSPORT)

    if isinstance(error, httpx.InvalidURL):
        return AttemptError(
            message=f"Invalid endpoint address: {error}",
            category=ErrorCategory.TRANSPORT,
        )

    if isinstance(error, httpx.HTTPError):
        return AttemptError(
            message=f"Network error: {error}",
            category=ErrorCategory.TRANSPORT,
        )

    return AttemptError(
        message=f"{type(error).__name__}: {error}",
        category=ErrorCategory.TRANSPORT,
    )

