"""
Album selection for bulk sync runs.

A Selection is an immutable, insertion-ordered set of album paths. It is
independent of any catalog: paths stay selected across a
status refresh, and a path that is missing from the current catalog
(an orphaned selection) is simply ignored when the selection is used.

Usage:
    from album_sync.library.selection import Selection, toggle_selection

    selection = Selection()
    selection = toggle_selection(selection, "/music/Beatles/Abbey Road")
    albums = selection.resolve(catalog)
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from album_sync.library.models import AlbumRecord


@dataclass(frozen=True)
class Selection:
    """
    Selected album paths, in the order they were selected.

    Supports len(), iteration and `in` like a set. Every update returns
    a new Selection.
    """
    paths: tuple[str, ...] = ()

    @classmethod
    def of(cls, paths: Iterable[str]) -> "Selection":
        """Build a selection from paths, dropping duplicates but keeping order."""
        return cls(tuple(dict.fromkeys(paths)))

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def toggle(self, path: str) -> "Selection":
        if path in self.paths:
            return Selection(tuple(p for p in self.paths if p != path))
        return Selection(self.paths + (path,))

    def clear(self) -> "Selection":
        return Selection()

    def resolve(self, catalog: Iterable[AlbumRecord]) -> list[AlbumRecord]:
        """
        Albums of the catalog that are selected, in selection order.

        Orphaned paths are skipped silently.
        """
        by_path = {album.path: album for album in catalog}
        return [by_path[path] for path in self.paths if path in by_path]

    def orphans(self, catalog: Iterable[AlbumRecord]) -> list[str]:
        """Selected paths that have no album in the catalog."""
        known = {album.path for album in catalog}
        return [path for path in self.paths if path not in known]


def toggle_selection(selection: Selection, path: str) -> Selection:
    """
    Add the path if absent, remove it if present.

    No check is made that the path exists in any catalog.
    """
    return selection.toggle(path)


def clear_selection(selection: Selection) -> Selection:
    """Return an empty selection."""
    return selection.clear()
