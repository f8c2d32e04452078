"""
Sync-status resolution against a target directory.

For every album in the catalog the album service is asked whether the
album already exists on the target. Checks run in chunks of at most
`limit` concurrent requests. A failed check never aborts the batch: the
album keeps its previous state and a warning is logged.

Usage:
    from album_sync.library.status import resolve_status

    catalog = await resolve_status(service, catalog, "/mnt/player/Music")
"""

from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING

from album_sync.core.concurrency import DEFAULT_CONCURRENCY, map_bounded
from album_sync.core.logger import get_logger
from album_sync.library.models import AlbumRecord

if TYPE_CHECKING:
    from album_sync.service.base import AlbumService


logger = get_logger(__name__)


def invalidate_status(catalog: Sequence[AlbumRecord]) -> list[AlbumRecord]:
    """
    Clear every is_synced flag.

    Used when the target changes: flags computed against the old target
    must not be visible while the new ones are being resolved.
    """
    return [
        replace(album, is_synced=False) if album.is_synced else album
        for album in catalog
    ]


async def resolve_status(
    service: "AlbumService",
    catalog: Sequence[AlbumRecord],
    target: str,
    limit: int = DEFAULT_CONCURRENCY,
    on_checked: Callable[[AlbumRecord, bool | None], None] | None = None
) -> list[AlbumRecord]:
    """
    Annotate each album with whether it is present on the target.

    Args:
        service: Album service used for the per-album checks.
        catalog: Albums from the latest scan.
        target: Target directory. Empty means no target: the catalog is
                returned unchanged and no call is made.
        limit: Maximum number of checks in flight at once.
        on_checked: Optional callback invoked after each check with the
                    album and the result (None if the check failed).

    Returns:
        A new list in catalog order. Albums whose check failed are
        returned unchanged.
    """
    if not target:
        return list(catalog)

    async def check(album: AlbumRecord) -> AlbumRecord:
        try:
            synced = await service.check_synced(album.path, target)
        except Exception as e:
            logger.warning(f"Failed to check sync status for {album.name}: {e}")
            if on_checked:
                on_checked(album, None)
            return album

        if on_checked:
            on_checked(album, synced)
        return replace(album, is_synced=synced)

    logger.debug(f"Checking sync status of {len(catalog)} albums against {target}")
    resolved = await map_bounded(list(catalog), check, limit)

    synced_count = sum(1 for album in resolved if album.is_synced)
    logger.debug(f"{synced_count}/{len(resolved)} albums present on {target}")
    return resolved
