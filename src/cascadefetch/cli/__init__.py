"""CLI framework for cascadefetch."""
from __future__ import annotations

from cascadefetch.cli.app import ExitCode
from cascadefetch.cli.app import app
from cascadefetch.cli.app import run_app

__all__ = ["app", "run_app", "ExitCode"]
