"""Error types and classifications."""

from __future__ import annotations

from enum import StrEnum

import msgspec


class ErrorCategory(StrEnum):
    """Why a single endpoint attempt did not produce usable data."""

    TRANSPORT = "transport"  # DNS/connect/protocol failure, no response
    TIMEOUT = "timeout"  # attempt exceeded its deadline and was abandoned
    HTTP = "http"  # response received, status not 2xx and not 429
    RATE_LIMITED = "rate_limited"  # status 429
    VALIDATION = "validation"  # 2xx response rejected by the caller's predicate


class AttemptError(msgspec.Struct, frozen=True):
    """Structured description of a failed attempt."""

    message: str
    category: ErrorCategory
    status_code: int = 0

    @property
    def is_timeout(self) -> bool:
        return self.category is ErrorCategory.TIMEOUT

    def __str__(self) -> str:
        return self.message


def classify_status(status_code: int) -> ErrorCategory | None:
    """Classify a response status code.

    Returns None for 2xx responses, which are not errors at the transport
    level (the caller's predicate still has to accept the payload).
    """
    if 200 <= status_code < 300:
        return None
    if status_code == 429:
        return ErrorCategory.RATE_LIMITED
    return ErrorCategory.HTTP
