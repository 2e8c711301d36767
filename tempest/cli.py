"""Command line interface for the tempest listener."""

import asyncio
from typing import Optional

import structlog
import typer

from tempest.core import db
from tempest.core.config import settings
from tempest.core.exceptions import ListenerStartupError, StorageError
from tempest.core.init_db import init_db
from tempest.core.logging import setup_logging
from tempest.repositories.observation_repository import ObservationRepository
from tempest.schemas.weather import Weather
from tempest.services.display import format_weather

logger = structlog.get_logger(__name__)
app = typer.Typer(help="Receive, store and show weather station observations.")


@app.command()
def listen(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Interface to listen on. Defaults to LISTEN_HOST.",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="UDP port to listen on. Defaults to LISTEN_PORT.",
        min=1,
        max=65535,
    ),
) -> None:
    """Listen for hub broadcasts and store every observation."""
    from tempest.services.ingestion_service import run_listener

    setup_logging(settings.log_level)

    overrides = {}
    if host is not None:
        overrides["listen_host"] = host
    if port is not None:
        overrides["listen_port"] = port
    listener_settings = settings.model_copy(update=overrides)

    try:
        asyncio.run(run_listener(listener_settings))
    except ListenerStartupError as e:
        logger.critical("listener.startup_failed", error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("listener.stopped")


async def _load_latest() -> Optional[Weather]:
    await init_db()
    async with db.AsyncSessionLocal() as session:
        return await ObservationRepository(session).get_latest()


@app.command()
def latest(
    as_json: bool = typer.Option(
        True,
        "--json/--no-json",
        help="Also print the observation as JSON.",
    ),
) -> None:
    """Print the most recently stored observation."""
    try:
        weather = asyncio.run(_load_latest())
    except StorageError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if weather is None:
        typer.echo("No weather observations found.", err=True)
        raise typer.Exit(1)

    typer.echo("FORMATTED WEATHER OBSERVATION:")
    typer.echo(format_weather(weather))

    if as_json:
        typer.echo("JSON WEATHER OBSERVATION:")
        typer.echo(weather.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
