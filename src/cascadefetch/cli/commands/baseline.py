"""Baseline command: measure raw network latency."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from cascadefetch.cli.app import ExitCode
from cascadefetch.cli.app import app
from cascadefetch.core.benchmark import BASELINE_TIMEOUT_MS
from cascadefetch.core.benchmark import BaselineLatency
from cascadefetch.core.benchmark import measure_baseline_latency
from cascadefetch.core.benchmark import summarize_metrics
from cascadefetch.core.http import cleanup
from cascadefetch.core.telemetry import list_metrics
from cascadefetch.display.json import output_json_error
from cascadefetch.display.json import output_json_pretty
from cascadefetch.display.rich import render_metrics
from cascadefetch.display.rich import render_summary


async def run_baseline(urls: list[str], timeout_ms: int) -> BaselineLatency:
    try:
        return await measure_baseline_latency(urls, timeout_ms=timeout_ms)
    finally:
        await cleanup()


@app.command("baseline")
def baseline_command(
    ctx: typer.Context,
    urls: list[str] = typer.Argument(..., help="Telemetry endpoints in priority order"),
    timeout: int = typer.Option(
        BASELINE_TIMEOUT_MS, "--timeout", "-t", help="Per-attempt timeout in milliseconds"
    ),
) -> None:
    """Measure round-trip latency to the first reachable endpoint."""
    console = Console()
    json_mode = ctx.meta.get("json", False)
    verbose = ctx.meta.get("verbose", False)
    quiet = ctx.meta.get("quiet", False)

    if timeout <= 0:
        message = f"timeout must be positive, got {timeout}"
        if json_mode:
            output_json_error(message, category="configuration")
        else:
            console.print(f"[red]Error:[/red] {message}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    baseline = asyncio.run(run_baseline(urls, timeout))
    metrics = list_metrics()
    summary = summarize_metrics(metrics)

    if json_mode:
        output_json_pretty(
            {
                "latency_ms": baseline.latency_ms,
                "source": baseline.source,
                "summary": summary,
            }
        )
    elif quiet:
        console.print(f"{baseline.latency_ms}")
    elif baseline.measured:
        console.print(
            f"Baseline latency [bold]{baseline.latency_ms}ms[/bold] "
            f"via [cyan]{baseline.source}[/cyan]"
        )
        render_summary(console, summary)
        if verbose:
            render_metrics(console, metrics)
    else:
        console.print("[red]✗[/red] Measurement failed: no endpoint answered")

    if not baseline.measured:
        raise typer.Exit(ExitCode.ALL_FAILED)
