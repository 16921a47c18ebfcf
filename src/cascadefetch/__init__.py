"""cascadefetch: Fetch one logical value from an ordered cascade of fallback sources."""

from __future__ import annotations

__version__ = "0.1.0"

from cascadefetch.core.cascade import resolve
from cascadefetch.core.cascade import resolve_sync
from cascadefetch.core.telemetry import list_metrics
from cascadefetch.core.telemetry import reset_metrics
from cascadefetch.models import AttemptMetric
from cascadefetch.models import CascadeResult
from cascadefetch.models import EndpointDescriptor
from cascadefetch.models import FetchOptions
from cascadefetch.models import ValidationPredicate
from cascadefetch.models import validate_result

__all__ = [
    "__version__",
    "EndpointDescriptor",
    "FetchOptions",
    "ValidationPredicate",
    "CascadeResult",
    "AttemptMetric",
    "validate_result",
    "resolve",
    "resolve_sync",
    "list_metrics",
    "reset_metrics",
]


def main() -> None:
    """Entry point for the cascadefetch CLI."""
    from cascadefetch.cli.app import run_app

    run_app()
