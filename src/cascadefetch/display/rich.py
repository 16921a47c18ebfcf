"""Rich-based rendering for cascade results and telemetry."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from cascadefetch.core.benchmark import MetricsSummary
from cascadefetch.models import AttemptMetric
from cascadefetch.models import CascadeResult

MAX_PREVIEW_CHARS = 2000


def status_style(status_code: int) -> str:
    """Color for a recorded status code."""
    if status_code == 0:
        return "red"
    if status_code == 429:
        return "magenta"
    if 200 <= status_code < 300:
        return "green"
    return "yellow"


def format_status(status_code: int) -> Text:
    label = "—" if status_code == 0 else str(status_code)
    return Text(label, style=status_style(status_code))


def format_fallback_index(index: int) -> str:
    if index < 0:
        return "—"
    if index == 0:
        return "primary"
    return f"fallback #{index}"


def render_result(console: Console, result: CascadeResult, verbose: bool = False) -> None:
    """Print a summary panel for a cascade result, plus the payload."""
    if not result.ok:
        console.print(f"[red]✗[/red] {result.error}")
        return

    summary = Table.grid(padding=(0, 2))
    summary.add_column(style="dim")
    summary.add_column()
    summary.add_row("Source", Text(result.source, style="cyan"))
    summary.add_row("Endpoint", result.endpoint_used)
    summary.add_row("Used", format_fallback_index(result.fallback_index))
    summary.add_row("Status", format_status(result.status_code))
    summary.add_row("Latency", f"{result.latency_ms}ms")
    console.print(Panel(summary, title="[green]✓[/green] Resolved", border_style="green"))

    if isinstance(result.data, str):
        text = result.data
        if not verbose and len(text) > MAX_PREVIEW_CHARS:
            text = text[:MAX_PREVIEW_CHARS] + "…"
        console.print(text, markup=False, highlight=False)
    else:
        console.print(Pretty(result.data, max_length=None if verbose else 50))


def render_metrics(console: Console, metrics: Sequence[AttemptMetric]) -> None:
    """Print a table of attempt metrics, oldest first."""
    table = Table(title="Attempts", show_header=True, header_style="bold")
    table.add_column("Time", style="dim")
    table.add_column("Host", style="cyan")
    table.add_column("Method")
    table.add_column("Status")
    table.add_column("Latency", justify="right")
    table.add_column("Fallback")

    for metric in metrics:
        table.add_row(
            metric.timestamp.strftime("%H:%M:%S"),
            metric.endpoint_host,
            metric.method,
            format_status(metric.status_code),
            f"{metric.latency_ms}ms",
            "yes" if metric.is_fallback else "",
        )

    console.print(table)


def render_summary(console: Console, summary: MetricsSummary) -> None:
    console.print(
        f"[bold]{summary.total_requests}[/bold] requests, "
        f"avg [bold]{summary.avg_latency_ms}ms[/bold], "
        f"{summary.requests_per_second} req/s, "
        f"{summary.fallback_usage_percent}% via fallback"
    )
