"""
MovieVault Typer CLI Application

Resolve single movies against TMDB, fetch artwork and manage the response
cache from the command line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.table import Table

from movievault.cli.common.context import CliContext, LogLevel, get_cli_context, set_cli_context
from movievault.cli.common.error_handler import handle_cli_error
from movievault.config.loader import load_settings
from movievault.config.models.settings import Settings
from movievault.services.image_downloader import copy_local_image
from movievault.services.sqlite_cache_db import SQLiteCacheDB, open_cache
from movievault.services.tmdb.tmdb_client import TMDBClient
from movievault.shared.constants import CLIHelp, ImageKind
from movievault.shared.errors import CacheStorageError
from movievault.shared.logging import log_operation_error, setup_structured_logger
from movievault.shared.models.movie import MovieRecord

if TYPE_CHECKING:
    from movievault.services.cache import ResponseCache

logger = logging.getLogger(__name__)

app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CLIHelp.CONFIG_HELP),
    log_level: Optional[LogLevel] = typer.Option(None, "--log-level", help=CLIHelp.LOG_LEVEL_HELP),
) -> None:
    """Store the common options for the selected command."""
    set_cli_context(CliContext(config_path=config, log_level=log_level))


def _prepare() -> Settings:
    """Load settings and configure logging for the running command.

    ``--log-level`` wins over the ``[logging] level`` setting.
    """
    context = get_cli_context()
    settings = load_settings(context.config_path)
    level = context.log_level.value if context.log_level else settings.logging.level
    setup_structured_logger(level=level, log_file=settings.logging.file)
    return settings


def _log_session_stats(cache: ResponseCache) -> None:
    try:
        stats = cache.stats()
    except CacheStorageError as e:
        log_operation_error(logger, e, operation="cache_statistics", level=logging.WARNING)
        return
    logger.info(
        "Cache statistics: %d hits, %d misses (%.1f%%), %d entries",
        stats.hits,
        stats.misses,
        stats.hit_rate,
        stats.entry_count,
        extra={
            "operation": "cache_statistics",
            "result_info": {
                "hits": stats.hits,
                "misses": stats.misses,
                "hit_rate": round(stats.hit_rate, 1),
                "entry_count": stats.entry_count,
            },
        },
    )


def _render_record(console: Console, record: MovieRecord) -> None:
    table = Table(title=f"{record.title} ({record.release_year or '?'})", show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("TMDB ID", str(record.tmdb_id))
    if record.imdb_id:
        table.add_row("IMDb ID", record.imdb_id)
    table.add_row("Release date", record.release_date or "-")
    table.add_row("Runtime", f"{record.runtime} min" if record.runtime else "-")
    table.add_row("Rating", f"{record.rating:.1f}")
    table.add_row("Genres", ", ".join(record.genres) or "-")
    table.add_row("Director", record.director or "-")
    table.add_row("Cast", ", ".join(record.cast) or "-")
    table.add_row("Overview", record.description or "-")
    console.print(table)


@app.command("lookup", help=CLIHelp.LOOKUP_HELP)
def lookup_command(
    title: str = typer.Argument(..., help="Movie title"),
    year: int = typer.Option(0, "--year", "-y", help=CLIHelp.YEAR_HELP, min=0),
    tmdb_id: Optional[int] = typer.Option(None, "--tmdb-id", help=CLIHelp.TMDB_ID_HELP, min=1),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
) -> None:
    try:
        settings = _prepare()
        cache = open_cache(settings.cache)
        try:
            with TMDBClient.from_settings(settings, cache=cache) as client:
                record = client.resolve_movie(title, year, tmdb_id)
        finally:
            if cache is not None:
                _log_session_stats(cache)
                cache.close()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, "lookup", json_output=json_output)) from e

    if json_output:
        typer.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    else:
        _render_record(Console(), record)


@app.command("cache-stats", help=CLIHelp.CACHE_STATS_HELP)
def cache_stats_command() -> None:
    try:
        settings = _prepare()
        if not settings.cache.enabled:
            typer.echo(CLIHelp.CACHE_DISABLED)
            return
        with SQLiteCacheDB(Path(settings.cache.path).expanduser()) as cache:
            entry_count = cache.count()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, "cache-stats")) from e

    table = Table(title="Cache statistics", show_header=False)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value", justify="right")
    table.add_row("Path", settings.cache.path)
    table.add_row("TTL", f"{settings.cache.ttl_days} days")
    table.add_row("Entries", str(entry_count))
    console = Console()
    console.print(table)
    console.print(CLIHelp.SESSION_STATS_NOTE)


@app.command("clear-cache", help=CLIHelp.CLEAR_CACHE_HELP)
def clear_cache_command() -> None:
    try:
        settings = _prepare()
        if not settings.cache.enabled:
            typer.echo(CLIHelp.CACHE_DISABLED)
            return
        with SQLiteCacheDB(Path(settings.cache.path).expanduser()) as cache:
            removed = cache.clear()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, "clear-cache")) from e

    typer.echo(f"Cache cleared successfully. {removed} entries removed.")


@app.command("fetch-image", help=CLIHelp.FETCH_IMAGE_HELP)
def fetch_image_command(
    source: str = typer.Argument(..., help="TMDB path (/abc.jpg), http(s) URL or local file"),
    destination: Path = typer.Argument(..., help="Output file"),
    kind: str = typer.Option(ImageKind.POSTER, "--kind", "-k", help=CLIHelp.KIND_HELP),
) -> None:
    try:
        settings = _prepare()
        is_url = source.startswith(("http://", "https://"))
        if not is_url and Path(source).is_file():
            copy_local_image(source, destination)
        else:
            with TMDBClient.from_settings(settings) as client:
                if is_url:
                    client.download_image_from_url(source, destination)
                else:
                    client.download_image(source, destination, kind=kind)
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, "fetch-image")) from e

    typer.echo(f"Saved {destination}")


__all__ = ["app"]
