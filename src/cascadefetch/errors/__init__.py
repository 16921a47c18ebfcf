"""Error handling for cascadefetch."""

from cascadefetch.errors.http import (
    extract_error_message,
    get_retry_after,
    http_status_error,
)
from cascadefetch.errors.network import (
    classify_network_error,
)
from cascadefetch.errors.types import (
    AttemptError,
    ErrorCategory,
    classify_status,
)

__all__ = [
    # Core types
    "AttemptError",
    "ErrorCategory",
    # Classification functions
    "classify_status",
    "classify_network_error",
    # HTTP utilities
    "extract_error_message",
    "http_status_error",
    "get_retry_after",
]
