"""
Command-line interface for album-sync.

This module implements the CLI using Click, providing a single command
that scans a source collection, shows it against a sync target and
optionally adds/removes a selection of albums.
rich-click is used for the help output, rich for tables and progress.

Commands:
    album-sync --source <dir> [--target <dir>]   Scan and show a library
    album-sync --search <text>                    Filter by artist/album/folder
    album-sync --sort artist|album|date [--desc]  Sort the view
    album-sync --all-formats                      Include albums without MP3s
    album-sync --on-target                        Only albums already on target
    album-sync --select <path> ... | --select-all Build a selection
    album-sync --sync                             Sync/unsync the selection
    album-sync --drives                           List available drives
    album-sync --browse <dir>                     List a directory

Usage:
    # Scan the last used source and target
    album-sync

    # Scan a collection against a player
    album-sync --source ~/Music --target /media/player/Music

    # Copy everything by one artist that isn't on the player yet
    album-sync --search "Beatles" --select-all --sync

Configuration:
    The CLI reads config.yaml from the current directory (or --config)
    with the album service URL and, optionally, timeout, concurrency and
    log directory. ALBUM_SYNC_SERVER_URL (also read from .env) overrides
    the service URL.

Directories:
    --source and --target default to the directories used last, as stored
    by the album service. Directories given explicitly are stored again.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import rich_click as click
from rich.console import Console
from rich.table import Table

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "cli": [
        {
            "name": "Directories",
            "options": ["--source", "--target"],
        },
        {
            "name": "View Options",
            "options": ["--search", "--sort", "--desc", "--all-formats", "--on-target"],
        },
        {
            "name": "Selection & Sync",
            "options": ["--select", "--select-all", "--sync"],
        },
        {
            "name": "Browsing",
            "options": ["--drives", "--browse"],
        },
        {
            "name": "Info",
            "options": ["--config", "--version", "--help"],
        },
    ],
}

from album_sync import __version__
from album_sync.core import (
    AlbumSyncError,
    Config,
    ConfigError,
    PreconditionError,
    TransportError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from album_sync.core.progress import StatusProgressBar, SyncProgressBar
from album_sync.library import (
    AlbumRecord,
    SortDirection,
    SortKey,
    ViewFilters,
)
from album_sync.service import AlbumService, AlbumServiceClient, AppSettings
from album_sync.sync import LibrarySession

logger = get_logger(__name__)

console = Console()


@click.command(context_settings={"help_option_names": ["--help"]})
@click.option(
    "--source",
    type=str,
    default=None,
    metavar="<dir>",
    help="Source music directory to scan"
)
@click.option(
    "--target",
    type=str,
    default=None,
    metavar="<dir>",
    help="Target directory to sync to"
)
@click.option(
    "--search",
    type=str,
    default="",
    metavar="<text>",
    help="Only albums whose artist, album or folder contains the text"
)
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([key.value for key in SortKey]),
    default=SortKey.ARTIST.value,
    show_default=True,
    help="Sort the albums by this field"
)
@click.option(
    "--desc",
    is_flag=True,
    help="Sort in descending order"
)
@click.option(
    "--all-formats",
    is_flag=True,
    help="Include albums without MP3 files"
)
@click.option(
    "--on-target",
    is_flag=True,
    help="Only albums already on the target"
)
@click.option(
    "--select",
    multiple=True,
    metavar="<album-path>",
    help="Select an album by source path (repeatable)"
)
@click.option(
    "--select-all",
    is_flag=True,
    help="Select every album in the current view"
)
@click.option(
    "--sync",
    is_flag=True,
    help="Sync the selection: copy new albums, remove albums already on target"
)
@click.option(
    "--drives",
    is_flag=True,
    help="List available drives and exit"
)
@click.option(
    "--browse",
    type=str,
    default=None,
    metavar="<dir>",
    help="List the contents of a directory and exit"
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    source: Optional[str],
    target: Optional[str],
    search: str,
    sort_key: str,
    desc: bool,
    all_formats: bool,
    on_target: bool,
    select: tuple[str, ...],
    select_all: bool,
    sync: bool,
    drives: bool,
    browse: Optional[str],
    config_path: Optional[Path],
    version: bool
) -> None:
    """
    album-sync: Keep a music player in sync with your album collection.

    Scans a source collection of album folders, shows which albums are
    already on the target and adds or removes a selection of albums.

    \b
    BASIC USAGE:
        album-sync --source ~/Music --target /media/player/Music
        album-sync                                  # last used directories

    \b
    VIEWING:
        album-sync --search beatles --sort album --desc
        album-sync --on-target                      # what's on the player
        album-sync --all-formats                    # include non-MP3 albums

    \b
    SYNCING:
        album-sync --select "/music/Beatles/Abbey Road" --sync
        album-sync --search "Pink Floyd" --select-all --sync

        Selected albums already on the target are REMOVED from it,
        all others are copied to it.

    \b
    BROWSING:
        album-sync --drives
        album-sync --browse /media
    """
    if version:
        click.echo(f"album-sync {__version__}")
        ctx.exit(0)

    if drives and browse:
        raise click.UsageError("Cannot use both --drives and --browse")

    if sync and not select and not select_all:
        raise click.UsageError("--sync requires --select or --select-all")

    options = {
        "source": source,
        "target": target,
        "filters": ViewFilters(
            search_term=search,
            sort_key=SortKey(sort_key),
            sort_direction=SortDirection.DESC if desc else SortDirection.ASC,
            mp3_only=not all_formats,
            synced_only=on_target,
        ),
        "select": list(select),
        "select_all": select_all,
        "sync": sync,
        "drives": drives,
        "browse": browse,
        "config_path": config_path,
    }

    _run(options)


def _run(options: dict) -> None:
    """
    Execute the CLI workflow and map errors to exit codes.

    Args:
        options: Dictionary with the parsed CLI options.

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    try:
        config = _load_configuration(options["config_path"])

        setup_logging(config.logging.directory)
        logger.debug("album-sync starting")

        asyncio.run(_run_async(config, options))

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except TransportError as e:
        click.echo(f"Service error: {e.message}", err=True)
        logger.error(f"Service error: {e.message}", exc_info=True)
        if "url" in e.details:
            click.echo(f"Is the album service running at {e.details['url']}?", err=True)
        sys.exit(2)

    except PreconditionError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(3)

    except AlbumSyncError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _load_configuration(config_path: Path | None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Raises:
        ConfigError: If configuration is invalid or missing.
    """
    return load_config(config_path)


def _create_service(config: Config) -> AlbumService:
    """Build the album service client from the configuration."""
    return AlbumServiceClient(config.server.url, timeout=config.server.timeout)


async def _run_async(config: Config, options: dict) -> None:
    service = _create_service(config)
    try:
        if options["drives"]:
            _print_drives(await service.list_drives())
            return

        if options["browse"]:
            _print_directory(options["browse"], await service.browse(options["browse"]))
            return

        await _run_library(service, config, options)
    finally:
        await service.close()


async def _run_library(service: AlbumService, config: Config, options: dict) -> None:
    """
    Scan, resolve, show, select and optionally sync.

    Raises:
        PreconditionError: No source directory given or stored.
        ScanError: The scan failed.
    """
    settings = await service.load_settings()
    source = options["source"] or settings.last_source_directory
    target = options["target"] or settings.last_target_directory

    if not source:
        raise PreconditionError(
            "No source directory: pass --source",
            details={"stored": settings.last_source_directory}
        )

    if options["source"] or options["target"]:
        await service.save_settings(
            AppSettings(last_source_directory=source, last_target_directory=target)
        )

    session = LibrarySession(service, config.sync.concurrency)

    logger.info(f"Scanning {source}")
    await session.scan(source)

    if target:
        with StatusProgressBar(total=len(session.catalog)) as progress:
            await session.set_target(
                target, on_checked=lambda album, synced: progress.update(synced)
            )

    visible = session.view(options["filters"])
    _print_albums(visible, len(session.catalog), bool(target))

    if options["select_all"]:
        session.select([album.path for album in visible])
    if options["select"]:
        session.select(options["select"])

    orphans = session.selection.orphans(session.catalog)
    for path in orphans:
        logger.warning(f"Not in the scanned library, ignored: {path}")

    if not session.selection:
        return

    selection_stats = session.stats()
    label = "Sync/Unsync" if session.removes_albums else "Sync"
    click.echo(
        f"{selection_stats.count} albums selected ({selection_stats.display_size}) "
        f"- {label}"
    )

    if not options["sync"]:
        return

    runnable = session.selection.resolve(session.catalog)
    with SyncProgressBar(total=len(runnable)) as progress:
        summary = await session.run_sync(
            on_result=lambda message: progress.update(message.action, message.ok)
        )

    click.echo("")
    click.echo(summary.render())

    if summary.refresh_error:
        logger.warning(f"Could not refresh the library after syncing: {summary.refresh_error}")


def _print_albums(albums: list[AlbumRecord], total: int, has_target: bool) -> None:
    """
    Print the albums as a table followed by the "N of M albums" line.

    Args:
        albums: Albums of the view, in display order.
        total: Size of the whole catalog.
        has_target: Whether the "On target" column is meaningful.
    """
    if albums:
        table = Table(show_header=True, header_style="bold", box=None)
        table.add_column("Artist")
        table.add_column("Album")
        table.add_column("Tracks", justify="right")
        table.add_column("Size", justify="right")
        if has_target:
            table.add_column("On target", justify="center")
        table.add_column("Path", style="dim", overflow="fold")

        for album in albums:
            row = [
                album.artist,
                album.album,
                str(album.track_count),
                f"{album.size_mb:.1f} MB",
            ]
            if has_target:
                row.append("[green]✓[/green]" if album.is_synced else "")
            row.append(album.path)
            table.add_row(*row)

        console.print(table)

    click.echo(f"{len(albums)} of {total} albums")


def _print_drives(drives: list[str]) -> None:
    if not drives:
        click.echo("No drives found")
        return
    for drive in drives:
        click.echo(drive)


def _print_directory(path: str, items: list) -> None:
    click.echo(path)
    for item in items:
        marker = "/" if item.is_directory else ""
        click.echo(f"  {item.name}{marker}")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `album-sync` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
