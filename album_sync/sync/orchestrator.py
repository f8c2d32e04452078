"""
Bulk sync/unsync of a selection of albums.

The orchestrator walks the selection strictly one album at a time.
Albums already on the target are removed from it, all others are copied
to it; the branch is decided from the catalog snapshot taken when the
run starts. A failing album is recorded in the run's messages and logged
to sync_failures_<ts>.log, and the run carries on with the next one.

After the loop the selection is cleared and, when the source directory
is known, the catalog is rescanned and its status resolved again so the
summary reflects what is actually on the target.

Usage:
    from album_sync.sync.orchestrator import SyncOrchestrator

    summary = await SyncOrchestrator(service).run(
        catalog, selection, target="/mnt/player/Music", source="/music"
    )
    print(summary.render())
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from album_sync.core.concurrency import DEFAULT_CONCURRENCY
from album_sync.core.exceptions import (
    AlbumSyncError,
    ItemOperationFailed,
    TargetMissingError,
)
from album_sync.core.logger import get_logger, log_sync_failure
from album_sync.library.catalog import index_by_path
from album_sync.library.models import AlbumRecord
from album_sync.library.selection import Selection
from album_sync.library.status import resolve_status

if TYPE_CHECKING:
    from album_sync.service.base import AlbumService


logger = get_logger(__name__)


ACTION_ADD = "add"
ACTION_REMOVE = "remove"


@dataclass(frozen=True)
class Progress:
    """
    Position of a run. Progress() is the idle state.

    Attributes:
        completed: Albums dispatched so far (counted before each call).
        total: Size of the selection at run start.
    """
    completed: int = 0
    total: int = 0

    @property
    def is_idle(self) -> bool:
        return self.total == 0


@dataclass(frozen=True)
class SyncMessage:
    """
    One line of the run's detail log.

    Attributes:
        ok: True if the album was added/removed.
        action: ACTION_ADD or ACTION_REMOVE.
        path: Source path of the album.
        text: Human-readable line, e.g. "✅ Synced: Beatles - Abbey Road".
    """
    ok: bool
    action: str
    path: str
    text: str


@dataclass(frozen=True)
class SyncSummary:
    """
    Result of a completed run.

    Attributes:
        added_count: Albums copied to the target.
        removed_count: Albums removed from the target.
        messages: One message per album processed, in processing order.
        selection: The selection after the run (always empty).
        catalog: The refreshed catalog, or the run-start catalog when no
                 rescan happened or the rescan failed.
        refresh_error: Why the post-run rescan failed, "" otherwise.
    """
    added_count: int
    removed_count: int
    messages: tuple[SyncMessage, ...]
    selection: Selection
    catalog: tuple[AlbumRecord, ...]
    refresh_error: str = ""

    @property
    def failures(self) -> tuple[SyncMessage, ...]:
        return tuple(m for m in self.messages if not m.ok)

    def render(self) -> str:
        """Summary text shown to the user after a run."""
        details = "\n".join(m.text for m in self.messages)
        return (
            f"Sync Complete!\n\n"
            f"{self.added_count} albums added to target\n"
            f"{self.removed_count} albums removed from target\n\n"
            f"Details:\n{details}"
        )


class SyncOrchestrator:
    """
    Sequential add/remove run over a selection.

    Attributes:
        service: Album service performing the mutations.
        concurrency: Chunk size for the post-run status resolution.
    """

    def __init__(self, service: "AlbumService", concurrency: int = DEFAULT_CONCURRENCY) -> None:
        self.service = service
        self.concurrency = concurrency

    async def run(
        self,
        catalog: Sequence[AlbumRecord],
        selection: Selection,
        target: str,
        source: str | None = None,
        on_progress: Callable[[Progress], None] | None = None,
        on_result: Callable[[SyncMessage], None] | None = None
    ) -> SyncSummary:
        """
        Add or remove every selected album.

        Args:
            catalog: Catalog snapshot the selection refers to.
            selection: Albums to process, in order.
            target: Target directory.
            source: Source directory to rescan afterwards. No rescan if None
                    or empty.
            on_progress: Called with the new Progress at start, before each
                         album and with Progress() at the end.
            on_result: Called with each album's SyncMessage.

        Returns:
            SyncSummary of the run.

        Raises:
            TargetMissingError: No target given. Raised before any service
                                call and before any progress is reported.
        """
        if not target:
            raise TargetMissingError(
                "Please select a target directory first",
                details={"selected": len(selection)}
            )

        def report(progress: Progress) -> None:
            if on_progress:
                on_progress(progress)

        total = len(selection)
        by_path = index_by_path(catalog)
        messages: list[SyncMessage] = []
        added_count = 0
        removed_count = 0

        logger.info(f"Syncing {total} selected albums to {target}")
        report(Progress(0, total))

        for completed, path in enumerate(selection, start=1):
            report(Progress(completed, total))

            album = by_path.get(path)
            if album is None:
                logger.debug(f"Selected album no longer in catalog: {path}")
                continue

            message = await self._process(album, target)
            messages.append(message)

            if message.ok and message.action == ACTION_REMOVE:
                removed_count += 1
            elif message.ok:
                added_count += 1

            if on_result:
                on_result(message)

        logger.info(
            f"Sync finished: {added_count} added, {removed_count} removed, "
            f"{sum(1 for m in messages if not m.ok)} failed"
        )

        refreshed, refresh_error = await self._refresh(catalog, target, source)
        report(Progress())

        return SyncSummary(
            added_count=added_count,
            removed_count=removed_count,
            messages=tuple(messages),
            selection=selection.clear(),
            catalog=tuple(refreshed),
            refresh_error=refresh_error,
        )

    async def _process(self, album: AlbumRecord, target: str) -> SyncMessage:
        """Add or remove one album. Never raises."""
        action = ACTION_REMOVE if album.is_synced else ACTION_ADD

        try:
            if action == ACTION_REMOVE:
                result = await self.service.unsync_album(target, album.name)
            else:
                result = await self.service.sync_album(album.path, target)

            if not result.success:
                verb = "removing" if action == ACTION_REMOVE else "syncing"
                raise ItemOperationFailed(
                    f"❌ Error {verb} {album.name}: {result.detail}",
                    details={"detail": result.detail},
                    path=album.path,
                    action=action,
                )
        except ItemOperationFailed as e:
            self._log_failure(album, action, e.details.get("detail", ""))
            return SyncMessage(ok=False, action=action, path=album.path, text=e.message)
        except Exception as e:
            self._log_failure(album, action, str(e))
            return SyncMessage(
                ok=False,
                action=action,
                path=album.path,
                text=f"❌ Error: {album.name} - {e}",
            )

        if action == ACTION_REMOVE:
            text = f"🗑️ Removed: {album.artist} - {album.album}"
        else:
            text = f"✅ Synced: {album.artist} - {album.album}"

        logger.debug(text)
        return SyncMessage(ok=True, action=action, path=album.path, text=text)

    def _log_failure(self, album: AlbumRecord, action: str, error: str) -> None:
        log_sync_failure(
            logger,
            album_name=album.album or album.name,
            artist=album.artist,
            path=album.path,
            action=action,
            error_message=error,
        )

    async def _refresh(
        self,
        catalog: Sequence[AlbumRecord],
        target: str,
        source: str | None
    ) -> tuple[list[AlbumRecord], str]:
        """
        Rescan the source and resolve status again.

        Returns:
            (catalog, error). On failure the run-start catalog is returned
            together with the error text.
        """
        if not source:
            return list(catalog), ""

        try:
            scanned = await self.service.scan(source)
        except AlbumSyncError as e:
            logger.error(f"Rescan after sync failed: {e.message}")
            return list(catalog), e.message
        except Exception as e:
            logger.exception("Rescan after sync failed")
            return list(catalog), str(e)

        resolved = await resolve_status(self.service, scanned, target, self.concurrency)
        return resolved, ""
