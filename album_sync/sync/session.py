"""
Caller-side state of one library view.

LibrarySession holds what a user interface needs between operations:
the source and target directories, the current catalog, the selection
and the progress of a running sync. It is the only place that state
lives; the library functions and the orchestrator are pure with
respect to it.

Usage:
    session = LibrarySession(service)
    await session.scan("/music")
    await session.set_target("/mnt/player/Music")
    session.toggle("/music/Beatles/Abbey Road")
    summary = await session.run_sync()
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

from album_sync.core.concurrency import DEFAULT_CONCURRENCY
from album_sync.core.exceptions import OperationInProgressError
from album_sync.core.logger import get_logger
from album_sync.library.catalog import has_synced_selected, stats, view
from album_sync.library.models import AlbumRecord, SelectionStats, ViewFilters
from album_sync.library.selection import Selection
from album_sync.library.status import invalidate_status, resolve_status
from album_sync.sync.orchestrator import Progress, SyncMessage, SyncOrchestrator, SyncSummary

if TYPE_CHECKING:
    from album_sync.service.base import AlbumService


logger = get_logger(__name__)


class LibrarySession:
    """
    State of one scan/select/sync workflow.

    Attributes:
        service: Album service used for every remote call.
        concurrency: Chunk size for status resolution.
        source: Source directory of the current catalog ("" if none).
        target: Current target directory ("" if none).
        catalog: Albums from the latest scan, annotated with status.
        selection: Selected album paths.
        progress: Progress of the running sync, Progress() when idle.
        busy: True while a scan, status refresh or sync is running.
    """

    def __init__(self, service: "AlbumService", concurrency: int = DEFAULT_CONCURRENCY) -> None:
        self.service = service
        self.concurrency = concurrency
        self.source = ""
        self.target = ""
        self.catalog: list[AlbumRecord] = []
        self.selection = Selection()
        self.progress = Progress()
        self.busy = False

    def _begin(self, operation: str) -> None:
        if self.busy:
            raise OperationInProgressError(
                f"Cannot {operation} while another operation is running",
                details={"operation": operation}
            )
        self.busy = True

    async def scan(
        self,
        source: str,
        on_checked: Callable[[AlbumRecord, bool | None], None] | None = None
    ) -> list[AlbumRecord]:
        """
        Scan the source directory and resolve status against the target.

        The catalog is replaced wholesale. The selection is kept.

        Raises:
            OperationInProgressError: Another operation is running.
            ScanError: The scan failed. The previous catalog is kept.
        """
        self._begin("scan")
        try:
            scanned = await self.service.scan(source)
            self.source = source
            logger.info(f"Found {len(scanned)} albums in {source}")
            self.catalog = await resolve_status(
                self.service, scanned, self.target, self.concurrency, on_checked
            )
        finally:
            self.busy = False
        return self.catalog

    async def set_target(
        self,
        target: str,
        on_checked: Callable[[AlbumRecord, bool | None], None] | None = None
    ) -> list[AlbumRecord]:
        """
        Switch to another target directory.

        Flags computed against the previous target are cleared before the
        new ones are resolved. The selection is kept.

        Raises:
            OperationInProgressError: Another operation is running.
        """
        self._begin("change target")
        try:
            self.target = target
            self.catalog = invalidate_status(self.catalog)
            self.catalog = await resolve_status(
                self.service, self.catalog, target, self.concurrency, on_checked
            )
        finally:
            self.busy = False
        return self.catalog

    async def refresh(self) -> list[AlbumRecord]:
        """Rescan the current source. No-op without a source."""
        if not self.source:
            return self.catalog
        return await self.scan(self.source)

    def toggle(self, path: str) -> Selection:
        self.selection = self.selection.toggle(path)
        return self.selection

    def select(self, paths: list[str]) -> Selection:
        """Add every path not already selected, keeping order."""
        self.selection = Selection.of([*self.selection, *paths])
        return self.selection

    def clear_selection(self) -> Selection:
        self.selection = self.selection.clear()
        return self.selection

    def view(self, filters: ViewFilters | None = None) -> list[AlbumRecord]:
        return view(self.catalog, filters)

    def stats(self) -> SelectionStats:
        return stats(self.catalog, self.selection)

    @property
    def removes_albums(self) -> bool:
        """True if running the selection would remove something."""
        return has_synced_selected(self.catalog, self.selection)

    async def run_sync(
        self,
        on_progress: Callable[[Progress], None] | None = None,
        on_result: Callable[[SyncMessage], None] | None = None
    ) -> SyncSummary:
        """
        Add/remove the selected albums, then rescan.

        Raises:
            OperationInProgressError: Another operation is running.
            TargetMissingError: No target directory set.
        """
        self._begin("sync")

        def track(progress: Progress) -> None:
            self.progress = progress
            if on_progress:
                on_progress(progress)

        try:
            orchestrator = SyncOrchestrator(self.service, self.concurrency)
            summary = await orchestrator.run(
                self.catalog,
                self.selection,
                self.target,
                source=self.source or None,
                on_progress=track,
                on_result=on_result,
            )
        finally:
            self.busy = False

        self.selection = summary.selection
        self.catalog = list(summary.catalog)
        return summary
