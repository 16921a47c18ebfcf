"""JSON output utilities for cascadefetch."""

from __future__ import annotations

import json
import sys
from datetime import datetime

import msgspec

__all__ = [
    "ErrorData",
    "ErrorResponse",
    "output_json_pretty",
    "output_json_error",
]


class ErrorData(msgspec.Struct, frozen=True, omit_defaults=True):
    """Error data with category and optional details."""

    message: str
    category: str
    details: dict | None = None
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.now().astimezone().isoformat()
    )


class ErrorResponse(msgspec.Struct, frozen=True):
    """Structured error response for JSON output."""

    error: ErrorData


def output_json_pretty(data: object, indent: int = 2) -> None:
    """Output data as pretty-printed JSON to stdout.

    Args:
        data: Any msgspec-serializable object
        indent: Number of spaces for indentation
    """
    # msgspec handles Structs and datetimes; json handles the indentation
    python_obj = msgspec.json.decode(msgspec.json.encode(data))
    sys.stdout.write(json.dumps(python_obj, indent=indent))
    sys.stdout.write("\n")


def output_json_error(
    message: str,
    category: str = "unknown",
    details: dict | None = None,
    indent: int = 2,
) -> None:
    """Output an error in standardized JSON format."""
    response = ErrorResponse(
        error=ErrorData(message=message, category=category, details=details)
    )
    output_json_pretty(response, indent=indent)
