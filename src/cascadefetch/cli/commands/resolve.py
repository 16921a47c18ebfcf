"""Resolve command: run one cascade from the command line."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from cascadefetch.cli.app import ExitCode
from cascadefetch.cli.app import app
from cascadefetch.core.benchmark import summarize_metrics
from cascadefetch.core.cascade import resolve
from cascadefetch.core.http import cleanup
from cascadefetch.display.json import output_json_error
from cascadefetch.display.json import output_json_pretty
from cascadefetch.display.rich import render_metrics
from cascadefetch.display.rich import render_result
from cascadefetch.display.rich import render_summary
from cascadefetch.models import CascadeResult
from cascadefetch.models import FetchOptions
from cascadefetch.models import ValidationPredicate
from cascadefetch.validators import all_of
from cascadefetch.validators import any_of
from cascadefetch.validators import has_keys
from cascadefetch.validators import is_json_object
from cascadefetch.validators import is_non_empty_list
from cascadefetch.validators import truthy


def parse_headers(raw_headers: list[str] | None) -> dict[str, str]:
    """Parse repeated 'Name: value' options into a header mapping.

    Raises:
        ValueError: If an entry has no colon or an empty name
    """
    headers: dict[str, str] = {}
    for raw in raw_headers or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def build_validator(
    require_json: bool = False,
    require_keys: list[str] | None = None,
) -> ValidationPredicate:
    """Combine the CLI validation flags into one predicate."""
    predicates: list[ValidationPredicate] = [truthy]
    if require_json:
        predicates.append(any_of(is_json_object, is_non_empty_list))
    if require_keys:
        predicates.append(has_keys(*require_keys))
    return all_of(*predicates)


async def run_resolve(
    urls: list[str],
    validate: ValidationPredicate,
    options: FetchOptions,
) -> CascadeResult:
    try:
        return await resolve(urls, validate, options)
    finally:
        await cleanup()


@app.command("resolve")
def resolve_command(
    ctx: typer.Context,
    urls: list[str] = typer.Argument(
        ..., help="Endpoints in priority order (first is the primary source)"
    ),
    timeout: int | None = typer.Option(
        None, "--timeout", "-t", help="Per-attempt timeout in milliseconds"
    ),
    retries: int | None = typer.Option(
        None, "--retries", "-r", help="Additional attempts per endpoint"
    ),
    method: str | None = typer.Option(None, "--method", "-X", help="HTTP method"),
    header: list[str] | None = typer.Option(
        None, "--header", "-H", help="Extra request header, 'Name: value'"
    ),
    data: str | None = typer.Option(None, "--data", "-d", help="Request body"),
    require_json: bool = typer.Option(
        False, "--require-json", help="Only accept JSON object or non-empty array payloads"
    ),
    require_key: list[str] | None = typer.Option(
        None, "--require-key", "-k", help="Only accept JSON objects with this key"
    ),
    show_metrics: bool = typer.Option(
        False, "--show-metrics", "-m", help="Show every attempt made"
    ),
) -> None:
    """Fetch from the first endpoint whose response passes validation."""
    console = Console()
    json_mode = ctx.meta.get("json", False)
    verbose = ctx.meta.get("verbose", False)
    quiet = ctx.meta.get("quiet", False)

    try:
        options = FetchOptions.from_config(
            timeout=timeout,
            retries=retries,
            method=method,
            headers=parse_headers(header) or None,
            body=data,
        )
    except ValueError as e:
        if json_mode:
            output_json_error(str(e), category="configuration")
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    validate = build_validator(require_json, require_key)
    result = asyncio.run(run_resolve(urls, validate, options))

    if json_mode:
        output_json_pretty(result)
    elif quiet:
        console.print(result.source if result.ok else result.error)
    else:
        render_result(console, result, verbose=verbose)
        if show_metrics and result.attempts:
            console.print()
            render_metrics(console, result.attempts)
            render_summary(console, summarize_metrics(result.attempts))

    if not result.ok:
        raise typer.Exit(ExitCode.ALL_FAILED)
