from __future__ import annotations

import sys
from typing import Optional

import typer
import uvicorn

from app import create_app
from log_config import configure_logging
from settings import get_settings
from source_loader import SourceError, load_records

app = typer.Typer(help="Suggest server CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"source={settings.source} interval={settings.refresh_interval_seconds}s | "
        f"listen={settings.host}:{settings.port} endpoint={settings.endpoint}"
    )


@app.command("check-source")
def check_source(
    source: Optional[str] = typer.Argument(
        None,
        help="File path or http(s) URL of the catalog (default from settings).",
    ),
) -> None:
    """
    Load and parse the catalog once, without serving it.
    """
    settings = get_settings()
    location = source or settings.source
    try:
        records = load_records(location, timeout=settings.source_timeout_seconds)
    except SourceError as e:
        typer.echo(f"Invalid source: {e}", err=True)
        raise typer.Exit(code=1)
    ids = {rec.id for rec in records}
    typer.echo(f"{location}: {len(records)} records, {len(ids)} distinct ids")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Address to bind."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind."),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="Request target to serve."),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Catalog file path or URL."),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", min=0.001, help="Refresh interval in seconds."
    ),
) -> None:
    """
    Serve suggestions over HTTP, refreshing the catalog in the background.
    """
    overrides = {
        "host": host,
        "port": port,
        "endpoint": endpoint,
        "source": source,
        "refresh_interval_seconds": interval,
    }
    settings = get_settings().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
