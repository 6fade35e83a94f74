"""Command-line interface for GeoLink."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from geolink import __version__
from geolink.config import Config, load_config
from geolink.container import DependencyContainer
from geolink.observability import configure_logging
from geolink.resolver import ResolutionError, ResolutionResult

console = Console()
logger = structlog.get_logger(__name__)


def _load(ctx: click.Context, default_log_level: Optional[str] = None) -> Config:
    """Load the configuration; ``--log-level`` wins over the configured level."""
    config = load_config(ctx.obj["config_path"])
    monitoring = config.monitoring
    if ctx.obj["log_level"]:
        monitoring.log_level = ctx.obj["log_level"]
    elif default_log_level and "log_level" not in monitoring.model_fields_set:
        monitoring.log_level = default_log_level
    return config


def _render_result(result: ResolutionResult) -> None:
    table = Table(title="Resolution", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")

    assert result.coordinates is not None
    table.add_row("Latitude", str(result.coordinates.latitude))
    table.add_row("Longitude", str(result.coordinates.longitude))
    table.add_row("Address", result.address or "-")
    table.add_row("Strategy", result.strategy or "-")
    table.add_row("Resolved URL", result.resolved_url)
    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """GeoLink - coordinates and addresses from Google Maps links."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("url")
@click.option("--api-key", envvar="GOOGLE_MAPS_API_KEY", help="Google Maps API key (overrides configuration)")
@click.option("--json", "as_json", is_flag=True, help="Print the API response body as JSON")
@click.pass_context
def resolve(ctx: click.Context, url: str, api_key: Optional[str], as_json: bool) -> None:
    """Resolve a Google Maps URL to coordinates and an address."""
    config = _load(ctx, default_log_level="WARNING")
    configure_logging(config.monitoring, stream=sys.stderr)

    async def run_resolve() -> ResolutionResult:
        container = DependencyContainer(config, api_key=api_key)
        async with container.lifecycle():
            return await container.get_resolver().resolve(url)

    try:
        result = asyncio.run(run_resolve())
    except ResolutionError as e:
        if as_json:
            click.echo(json.dumps({"success": False, "message": e.message}))
        else:
            console.print(f"[red]{e.message}[/red]")
        sys.exit(1)
    except Exception:
        logger.exception("Resolve failed", url=url)
        console.print("[red]Failed to process URL[/red]")
        sys.exit(2)

    if as_json:
        click.echo(json.dumps({"success": True, "data": result.to_dict()}))
    else:
        _render_result(result)


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API server."""
    from geolink.web.main import run_web_server

    config = _load(ctx)
    configure_logging(config.monitoring)

    web_ui = config.monitoring.web_ui
    host = host or web_ui.host
    port = port or web_ui.port
    console.print(f"[bold green]Starting GeoLink API at http://{host}:{port}[/bold green]")
    run_web_server(host=host, port=port, config=config)


@cli.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration (API key masked)."""
    config = _load(ctx)
    console.print(Panel(json.dumps(config.redacted(), indent=2), title="Configuration", border_style="green"))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
