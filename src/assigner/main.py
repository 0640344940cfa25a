"""Main CLI entry point for Assigner.

Usage:
    assigner serve
    assigner --config assigner.toml serve
    assigner config
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from assigner.config import AssignerConfig, load_config
from assigner.logging import setup_logging

app = typer.Typer(
    name="assigner",
    help="Assigner: automatic pull request reviewer assignment",
    no_args_is_help=True,
)

console = Console()

_SECRET_FIELDS = {"password"}


def _get_config(ctx: typer.Context) -> AssignerConfig:
    return ctx.obj  # type: ignore[no-any-return]


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Load configuration and set up logging for all commands."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1) from e

    if verbose:
        config.logging.level = "DEBUG"

    setup_logging(config.logging)
    ctx.obj = config

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


@app.command()
def serve(ctx: typer.Context) -> None:
    """Start the Assigner HTTP server.

    Listens on ``server.addr``. Idle keep-alive connections are closed
    after ``server.idle_timeout_seconds``; on shutdown, in-flight requests
    get ``server.shutdown_timeout_seconds`` to finish.
    """
    import uvicorn

    from assigner.web.app import create_app

    config = _get_config(ctx)
    server = config.server

    console.print("[bold cyan]Starting Assigner[/bold cyan]")
    console.print(f"[dim]Listening on:[/dim] {server.host}:{server.port}")
    console.print(f"[dim]Database:[/dim] {config.database.host}:{config.database.port}")
    console.print()

    uvicorn.run(
        create_app(config),
        host=server.host,
        port=server.port,
        timeout_keep_alive=server.idle_timeout_seconds,
        timeout_graceful_shutdown=server.shutdown_timeout_seconds,
        log_config=None,
    )


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Print the resolved configuration."""
    config = _get_config(ctx)

    table = Table(title="Assigner configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for section, values in config.model_dump().items():
        for key, value in values.items():
            shown = "****" if key in _SECRET_FIELDS and value else str(value)
            table.add_row(f"{section}.{key}", shown)

    console.print(table)


if __name__ == "__main__":
    app()
