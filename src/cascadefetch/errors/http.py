"""HTTP response error helpers.

Builds AttemptError values for non-2xx responses on top of the base
classification in errors/types.py.
"""

from __future__ import annotations

import httpx

from cascadefetch.errors.types import AttemptError, ErrorCategory, classify_status


def extract_error_message(response: httpx.Response) -> str:
    """Extract a meaningful error message from an HTTP response.

    Args:
        response: HTTP response with error status

    Returns:
        Extracted error message
    """
    status = response.status_code

    # Try JSON response first
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        # Common error field names
        for key in ("error", "message", "detail", "error_description"):
            if key in body:
                value = body[key]
                if isinstance(value, str):
                    return value
                elif isinstance(value, dict):
                    # Some APIs nest the message
                    for nested_key in ("message", "description"):
                        if nested_key in value:
                            return str(value[nested_key])

    # Fall back to text content
    text = response.text.strip()
    if text and len(text) < 200:
        return text

    return f"HTTP {status}"


def http_status_error(response: httpx.Response) -> AttemptError | None:
    """Build an AttemptError for a non-2xx response, or None for 2xx."""
    category = classify_status(response.status_code)
    if category is None:
        return None

    if category is ErrorCategory.RATE_LIMITED:
        message = "Rate limited"
    else:
        message = f"HTTP {response.status_code}: {extract_error_message(response)}"

    return AttemptError(
        message=message,
        category=category,
        status_code=response.status_code,
    )


def get_retry_after(response: httpx.Response) -> float | None:
    """Get the delay in seconds requested by a Retry-After header.

    Only the delta-seconds form is understood; HTTP-date values return None.
    """
    retry_after = response.headers.get("Retry-After")
    if not retry_after:
        return None

    try:
        return float(retry_after)
    except ValueError:
        return None
