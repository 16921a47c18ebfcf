"""Main CLI application for cascadefetch."""

from __future__ import annotations

import logging
from enum import IntEnum

import typer

app = typer.Typer(
    name="cascadefetch",
    help="Fetch one value from an ordered cascade of fallback endpoints",
    add_completion=True,
    no_args_is_help=False,
    invoke_without_command=True,
)


class ExitCode(IntEnum):
    """Exit codes for cascadefetch."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    ALL_FAILED = 3
    CONFIG_ERROR = 4


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route library logging to stderr at a level matching the CLI flags."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


@app.callback()
def main(
    ctx: typer.Context,
    json: bool = typer.Option(False, "--json", "-j", help="Enable JSON output mode"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """cascadefetch - resolve a value from the first endpoint that answers well."""
    if version:
        from cascadefetch import __version__

        typer.echo(f"cascadefetch {__version__}")
        raise typer.Exit()

    # verbose and quiet are mutually exclusive, quiet takes precedence
    if verbose and quiet:
        verbose = False

    ctx.meta["json"] = json
    ctx.meta["verbose"] = verbose
    ctx.meta["quiet"] = quiet

    configure_logging(verbose=verbose, quiet=quiet)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def run_app() -> None:
    """Run the CLI app."""
    app()


# Command modules register themselves via @app.command() decorators
# and must be imported after app is defined
from cascadefetch.cli.commands import baseline  # noqa: E402, F401
from cascadefetch.cli.commands import resolve  # noqa: E402, F401
from cascadefetch.cli.commands import config as config_cmd  # noqa: E402

app.add_typer(config_cmd.config_app, name="config")
