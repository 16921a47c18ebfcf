"""Config management commands for cascadefetch."""

from __future__ import annotations

import msgspec
import msgspec.toml
import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from cascadefetch.config.paths import config_dir
from cascadefetch.config.paths import config_file
from cascadefetch.config.settings import get_config
from cascadefetch.display.json import output_json_pretty

config_app = typer.Typer(help="Inspect configuration settings.")


@config_app.command("show")
def config_show_command(
    ctx: typer.Context,
) -> None:
    """Display current settings."""
    console = Console()

    config = get_config()
    config_path = config_file()
    json_mode = ctx.meta.get("json", False)
    verbose = ctx.meta.get("verbose", False)
    quiet = ctx.meta.get("quiet", False)

    if json_mode:
        # Config omits defaults when encoded, so report the effective values
        data = {
            "fetch": msgspec.structs.asdict(config.fetch),
            "telemetry": msgspec.structs.asdict(config.telemetry),
            "path": str(config_path),
        }
        output_json_pretty(data)
        return

    if quiet:
        console.print(str(config_path))
        return

    toml_data = msgspec.toml.encode(
        {
            "fetch": msgspec.structs.asdict(config.fetch),
            "telemetry": msgspec.structs.asdict(config.telemetry),
        }
    )
    console.print(
        Panel(Syntax(toml_data.decode(), "toml"), title=f"Config: {config_path}")
    )

    if verbose:
        if config_path.exists():
            console.print(f"[dim]File size: {config_path.stat().st_size} bytes[/dim]")
        else:
            console.print(
                "[dim]Using default configuration (file not created yet)[/dim]"
            )


@config_app.command("path")
def config_path_command(
    ctx: typer.Context,
) -> None:
    """Show directory paths used by cascadefetch."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    if json_mode:
        output_json_pretty(
            {
                "config_dir": str(config_dir()),
                "config_file": str(config_file()),
            }
        )
        return

    console.print(f"Config directory: {config_dir()}")
    console.print(f"Config file:      {config_file()}")
