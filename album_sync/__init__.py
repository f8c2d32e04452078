"""
album-sync: Reconcile a music collection with a sync target.

This package compares a source collection of album folders with a target
directory (a music player, an SD card, a NAS share), shows which albums
are already on the target, and adds or removes a selection of albums in
one run. All filesystem work is done by a remote album service; this
package is the reconciliation engine and its command-line front end.

Workflow:
    1. Scan (service): list the album folders of the source directory
    2. Resolve (library/status.py): ask the service, in chunks of five
       concurrent checks, which albums already exist on the target
    3. View (library/catalog.py): filter by format/search/target and sort
    4. Select (library/selection.py): build an ordered selection of albums
    5. Sync (sync/orchestrator.py): remove selected albums that are on the
       target, copy the others, one at a time; then rescan

Modules:
    core/       - Configuration, logging, exceptions, concurrency, progress
    library/    - Album models, catalog views, selection, status resolution
    service/    - Album service interface and its aiohttp client
    sync/       - Sync orchestrator and the library session state
    cli.py      - Command-line interface

Usage:
    Command Line:
        album-sync --source ~/Music --target /media/player/Music
        album-sync --search beatles --sort album --desc
        album-sync --select "/music/Beatles/Abbey Road" --sync

    Python API:
        from album_sync.service import AlbumServiceClient
        from album_sync.sync import LibrarySession

        async with AlbumServiceClient("http://localhost:8080") as service:
            session = LibrarySession(service)
            await session.scan("/music")
            await session.set_target("/media/player/Music")
            session.toggle("/music/Beatles/Abbey Road")
            summary = await session.run_sync()
"""

__version__ = "0.1.0"
__author__ = "album-sync contributors"

from album_sync.library import AlbumRecord, Selection, ViewFilters
from album_sync.sync import LibrarySession, SyncOrchestrator, SyncSummary

__all__ = [
    "__version__",
    "AlbumRecord",
    "LibrarySession",
    "Selection",
    "SyncOrchestrator",
    "SyncSummary",
    "ViewFilters",
]
