"""Command line interface for granola-cache."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from granolacache.api import MeetingLibrary
from granolacache.config import AppConfig
from granolacache.models import Failure
from granolacache.web.app import app as web_app
from granolacache.web.app import configure as configure_web


console = Console()
app = typer.Typer(help="granola-cache - browse Granola meetings from the local cache")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(data_dir: Optional[Path], *, undated_last: bool = False) -> AppConfig:
    return AppConfig(app_data_dir=data_dir, undated_policy="last" if undated_last else "now")


def _report_failure(result: Failure) -> None:
    console.print(f"[red]{result.kind.message}[/red] ({result.kind.value})")
    raise typer.Exit(code=1)


def _format_timestamp(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


@app.command()
def documents(
    limit: int = typer.Option(50, "--limit", "-n", help="Number of meetings to display"),
    data_dir: Path = typer.Option(None, "--data-dir", help="Application data directory"),
    undated_last: bool = typer.Option(
        False, "--undated-last", help="Sort meetings without a valid date last"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List recent meetings, newest first."""
    _setup_logging(verbose)
    library = MeetingLibrary(_build_config(data_dir, undated_last=undated_last))
    result = asyncio.run(library.get_documents(limit))
    if isinstance(result, Failure):
        _report_failure(result)

    if as_json:
        typer.echo(json.dumps([doc.to_dict() for doc in result.data], indent=2))
        return

    if not result.data:
        console.print("[yellow]No meetings found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Created (UTC)")
    table.add_column("Title")
    table.add_column("Participants")
    table.add_column("Transcript")
    table.add_column("ID")

    for doc in result.data:
        table.add_row(
            _format_timestamp(doc.created_at),
            doc.title,
            ", ".join(doc.participants),
            "yes" if doc.has_transcript else "no",
            doc.id,
        )

    console.print(table)
    if result.cache_age_ms is not None:
        console.print(f"Cache last written {result.cache_age_ms // 1000}s ago")


@app.command()
def transcript(
    document_id: str = typer.Argument(..., help="Meeting document ID"),
    data_dir: Path = typer.Option(None, "--data-dir", help="Application data directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the plain-text transcript of a meeting."""
    _setup_logging(verbose)
    library = MeetingLibrary(_build_config(data_dir))
    result = asyncio.run(library.get_transcript(document_id))
    if isinstance(result, Failure):
        _report_failure(result)
    typer.echo(result.data.plain_text)


@app.command()
def info(
    data_dir: Path = typer.Option(None, "--data-dir", help="Application data directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show where the cache lives and whether it can be loaded."""
    _setup_logging(verbose)
    library = MeetingLibrary(_build_config(data_dir))
    result = asyncio.run(library.loader.ensure_fresh())
    details = library.loader.cache_info()

    console.print(f"Cache file: [bold]{details['path']}[/bold]")
    console.print(f"State: {details['state']}")
    if isinstance(result, Failure):
        console.print(f"[yellow]{result.kind.message}[/yellow]")
    else:
        console.print(f"Documents: {details['document_count']}")
        console.print(f"Cache age: {result.cache_age_ms} ms")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    data_dir: Path = typer.Option(None, "--data-dir", help="Application data directory"),
) -> None:
    """Serve the query API over HTTP."""
    import uvicorn

    config = _build_config(data_dir)
    if not config.vendor_path().exists():
        console.print("[yellow]Warning: Granola data directory not found, requests will fail.[/yellow]")

    configure_web(MeetingLibrary(config))
    console.print(f"Starting web interface on http://{host}:{port} (cache: {config.cache_path()})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
