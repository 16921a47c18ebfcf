"""Display utilities for cascadefetch.

This module provides rendering and output utilities for both terminal
(Rich-based) and JSON output modes.
"""
from __future__ import annotations

from cascadefetch.display.json import output_json_error
from cascadefetch.display.json import output_json_pretty
from cascadefetch.display.rich import render_metrics
from cascadefetch.display.rich import render_result
from cascadefetch.display.rich import render_summary

__all__ = [
    # Rich rendering
    "render_result",
    "render_metrics",
    "render_summary",
    # JSON output
    "output_json_pretty",
    "output_json_error",
]
