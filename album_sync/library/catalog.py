"""
Filtered, sorted views and selection statistics over an album catalog.

A catalog is simply a sequence of AlbumRecord objects as returned by a
scan (and annotated by the status resolver). Everything here is a pure
function of its inputs: nothing mutates the catalog passed in.

Filter order in view():
    1. mp3_only     keep albums with track_count > 0
    2. search_term  case-insensitive substring of artist, album or name
    3. synced_only  keep albums present on the target

Sorting:
    - artist: artist, then album as tie-break
    - album:  album only
    - date:   folder name (no timestamp is tracked, the name stands in)
    Descending order negates the ascending comparison, so equal items
    keep their catalog order in both directions.

Usage:
    from album_sync.library.catalog import view, stats

    visible = view(catalog, ViewFilters(search_term="abbey"))
    summary = stats(catalog, selection)
"""

import unicodedata
from collections.abc import Callable, Collection, Iterable, Sequence
from functools import cmp_to_key

from album_sync.library.models import (
    AlbumRecord,
    SelectionStats,
    SortDirection,
    SortKey,
    ViewFilters,
)


def _collation_keys(text: str) -> tuple[str, str, str]:
    """
    Locale-style collation keys: base letters, then accents, then case.

    Comparing the tuples orders "abbey" == "Abbey" at the first level,
    and lowercase before uppercase only when everything else is equal.
    """
    folded = unicodedata.normalize("NFKD", text.casefold())
    base = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return base, folded, text.swapcase()


def locale_compare(a: str, b: str) -> int:
    """
    Compare two strings the way a UI list would: case-insensitive first.

    Returns:
        -1, 0 or 1.
    """
    ka, kb = _collation_keys(a), _collation_keys(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def _compare_artist(a: AlbumRecord, b: AlbumRecord) -> int:
    return locale_compare(a.artist, b.artist) or locale_compare(a.album, b.album)


def _compare_album(a: AlbumRecord, b: AlbumRecord) -> int:
    return locale_compare(a.album, b.album)


def _compare_date(a: AlbumRecord, b: AlbumRecord) -> int:
    return locale_compare(a.name, b.name)


COMPARATORS: dict[SortKey, Callable[[AlbumRecord, AlbumRecord], int]] = {
    SortKey.ARTIST: _compare_artist,
    SortKey.ALBUM: _compare_album,
    SortKey.DATE: _compare_date,
}


def matches_search(album: AlbumRecord, search_term: str) -> bool:
    """
    True if the term is a case-insensitive substring of artist, album or name.

    A blank term matches everything.
    """
    if not search_term.strip():
        return True

    term = search_term.lower()
    return (
        term in album.artist.lower()
        or term in album.album.lower()
        or term in album.name.lower()
    )


def sort_albums(
    albums: Iterable[AlbumRecord],
    sort_key: SortKey = SortKey.ARTIST,
    sort_direction: SortDirection = SortDirection.ASC
) -> list[AlbumRecord]:
    """
    Return a new, stably sorted list. The input is left untouched.
    """
    compare = COMPARATORS[SortKey(sort_key)]

    if SortDirection(sort_direction) is SortDirection.DESC:
        return sorted(albums, key=cmp_to_key(lambda a, b: -compare(a, b)))
    return sorted(albums, key=cmp_to_key(compare))


def view(
    catalog: Iterable[AlbumRecord],
    filters: ViewFilters | None = None
) -> list[AlbumRecord]:
    """
    Filter and sort the catalog for display.

    Args:
        catalog: Albums from the latest scan.
        filters: View options; defaults to ViewFilters().

    Returns:
        A new list of the albums passing every enabled filter, sorted.
    """
    filters = filters or ViewFilters()
    albums = list(catalog)

    if filters.mp3_only:
        albums = [a for a in albums if a.track_count > 0]

    if filters.search_term.strip():
        albums = [a for a in albums if matches_search(a, filters.search_term)]

    if filters.synced_only:
        albums = [a for a in albums if a.is_synced]

    return sort_albums(albums, filters.sort_key, filters.sort_direction)


def find_album(catalog: Iterable[AlbumRecord], path: str) -> AlbumRecord | None:
    """Look up an album by path. None if it isn't in this catalog."""
    for album in catalog:
        if album.path == path:
            return album
    return None


def index_by_path(catalog: Iterable[AlbumRecord]) -> dict[str, AlbumRecord]:
    return {album.path: album for album in catalog}


def stats(
    catalog: Iterable[AlbumRecord],
    selection: Collection[str]
) -> SelectionStats:
    """
    Count and total size of the selected albums.

    Selected paths with no album in the catalog contribute nothing.

    Args:
        catalog: Albums from the latest scan.
        selection: Selected album paths (a Selection or any collection).

    Returns:
        SelectionStats with count, total_size_mb and total_size_gb.
    """
    selected = [album for album in catalog if album.path in selection]
    total_size = sum(album.size_mb for album in selected)

    return SelectionStats(
        count=len(selected),
        total_size_mb=total_size,
        total_size_gb=total_size / 1024,
    )


def has_synced_selected(
    catalog: Sequence[AlbumRecord],
    selection: Iterable[str]
) -> bool:
    """
    True if running the selection would remove at least one album.

    The CLI uses it to label the action "Sync/Unsync" rather than "Sync".
    """
    by_path = index_by_path(catalog)
    return any(
        by_path[path].is_synced
        for path in selection
        if path in by_path
    )
