"""
Album library module for album-sync.

This module holds the catalog side of the engine:
    - models: AlbumRecord, view filters and selection statistics
    - catalog: Filtered/sorted views and selection statistics
    - selection: Insertion-ordered selection of album paths
    - status: Bulk sync-status resolution against a target

Usage:
    from album_sync.library import view, stats, Selection, resolve_status

    catalog = await resolve_status(service, await service.scan(source), target)
    visible = view(catalog, ViewFilters(search_term="beatles"))
"""

from album_sync.library.catalog import (
    find_album,
    has_synced_selected,
    locale_compare,
    sort_albums,
    stats,
    view,
)
from album_sync.library.models import (
    UNKNOWN_ARTIST,
    AlbumRecord,
    SelectionStats,
    SortDirection,
    SortKey,
    ViewFilters,
)
from album_sync.library.selection import (
    Selection,
    clear_selection,
    toggle_selection,
)
from album_sync.library.status import invalidate_status, resolve_status

__all__ = [
    # Models
    "UNKNOWN_ARTIST",
    "AlbumRecord",
    "SelectionStats",
    "SortDirection",
    "SortKey",
    "ViewFilters",
    # Catalog
    "find_album",
    "has_synced_selected",
    "locale_compare",
    "sort_albums",
    "stats",
    "view",
    # Selection
    "Selection",
    "clear_selection",
    "toggle_selection",
    # Status
    "invalidate_status",
    "resolve_status",
]
