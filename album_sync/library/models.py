"""
Data models for the album library.

This module defines the immutable records passed between the scanner,
the status resolver, the catalog views and the sync orchestrator.

Design Decisions:
    - All dataclasses are frozen; status updates produce a new record via
      dataclasses.replace() instead of mutating the scanned one
    - Field names are snake_case Python names; from_api_dict()/to_api_dict()
      map them to the album service's JSON keys
    - The fingerprint is opaque here and is passed through untouched

Usage:
    from album_sync.library.models import AlbumRecord, ViewFilters, SortKey

    album = AlbumRecord.from_api_dict(payload)
    filters = ViewFilters(search_term="beatles", sort_key=SortKey.ALBUM)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


UNKNOWN_ARTIST = "Unknown Artist"


@dataclass(frozen=True)
class AlbumRecord:
    """
    Immutable representation of one scanned album folder.

    Attributes:
        path: Absolute source path of the album folder. Unique within a
              catalog snapshot; used as the album's identity everywhere.
              Example: "/music/Beatles/Abbey Road"

        name: Folder name. Used as the album's name on the target and
              as the sort key for "date".
              Example: "Abbey Road"

        artist: Artist parsed from the folder layout by the scanner.
                Example: "Beatles"

        album: Album title parsed from the folder layout.
               Example: "Abbey Road"

        track_count: Number of MP3 files in the folder (JSON key "mp3_count").
                     Albums with only other audio formats have 0.

        size_mb: Total folder size in megabytes.

        has_cover: Whether a cover.jpg exists for the album.

        is_synced: Whether the album is present on the current target.
                   Always False straight out of a scan; only the status
                   resolver sets it.

        fingerprint: Identity used by the service to match a source album
                     with its copy on the target. Opaque to this package.
    """
    path: str
    name: str
    artist: str = UNKNOWN_ARTIST
    album: str = ""
    track_count: int = 0
    size_mb: float = 0.0
    has_cover: bool = False
    is_synced: bool = False
    fingerprint: str = ""

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> "AlbumRecord":
        """
        Build a record from one element of the service's scan response.

        Args:
            data: Dictionary with the service's JSON keys
                  (path, name, artist, album, mp3_count, has_cover,
                  size_mb, is_synced, fingerprint).

        Returns:
            AlbumRecord with defaults applied for missing optional keys.
            is_synced is always False: only the status resolver sets it.

        Raises:
            KeyError: If 'path' is missing.
            ValueError: If a numeric field cannot be converted.
        """
        path = data["path"]
        name = data.get("name") or path.rstrip("/\\").rsplit("/", 1)[-1]

        return cls(
            path=path,
            name=name,
            artist=data.get("artist") or UNKNOWN_ARTIST,
            album=data.get("album") or name,
            track_count=int(data.get("mp3_count") or 0),
            size_mb=float(data.get("size_mb") or 0.0),
            has_cover=bool(data.get("has_cover", False)),
            fingerprint=data.get("fingerprint") or "",
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Convert back to the service's JSON shape."""
        return {
            "path": self.path,
            "name": self.name,
            "artist": self.artist,
            "album": self.album,
            "mp3_count": self.track_count,
            "has_cover": self.has_cover,
            "size_mb": self.size_mb,
            "is_synced": self.is_synced,
            "fingerprint": self.fingerprint,
        }

    @property
    def display_name(self) -> str:
        """
        "Artist - Album", as used in sync messages.

        Example:
            album.display_name  # "Beatles - Abbey Road"
        """
        return f"{self.artist} - {self.album}"


class SortKey(str, Enum):
    """Sort keys offered by the catalog view."""
    ARTIST = "artist"
    ALBUM = "album"
    DATE = "date"  # no timestamp is tracked; sorts by folder name


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ViewFilters:
    """
    Filter and sort options for catalog.view().

    Attributes:
        search_term: Case-insensitive substring matched against artist,
                     album and folder name. Blank means no filtering.
        sort_key: Which field to sort by.
        sort_direction: Ascending or descending.
        mp3_only: Keep only albums with at least one MP3 file.
                  On by default.
        synced_only: Keep only albums present on the target.
    """
    search_term: str = ""
    sort_key: SortKey = SortKey.ARTIST
    sort_direction: SortDirection = SortDirection.ASC
    mp3_only: bool = True
    synced_only: bool = False


@dataclass(frozen=True)
class SelectionStats:
    """
    Aggregate numbers for the albums currently selected.

    Attributes:
        count: Number of selected albums present in the catalog.
        total_size_mb: Summed size in MB.
        total_size_gb: total_size_mb / 1024.
    """
    count: int = 0
    total_size_mb: float = 0.0
    total_size_gb: float = 0.0

    @property
    def display_size(self) -> str:
        """
        Human-readable total: GB with two decimals from 1 GB up, whole MB below.

        Example:
            SelectionStats(2, 215.0, 0.21).display_size  # "215 MB"
        """
        if self.total_size_gb >= 1:
            return f"{self.total_size_gb:.2f} GB"
        return f"{self.total_size_mb:.0f} MB"
