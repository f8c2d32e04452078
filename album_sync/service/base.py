"""
Abstract interface to the album service.

The album service owns everything that touches the filesystem: scanning
source folders, computing fingerprints, copying albums to the target,
deleting them, reading covers, browsing directories and persisting the
last used directories. The sync engine only ever talks to it through the
AlbumService interface below, so it can be backed by the HTTP client
(album_sync.service.client) or by a fake in tests.

Usage:
    class InMemoryService(AlbumService):
        async def scan(self, directory): ...
        ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from album_sync.library.models import AlbumRecord


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a sync or unsync call.

    Attributes:
        success: True if the service reported success.
        detail: The service's result text on success, or the error/status
                text on failure.
                Example: "Successfully synced Abbey Road to /mnt/player/Abbey Road"
    """
    success: bool
    detail: str = ""


@dataclass(frozen=True)
class DirectoryItem:
    """One entry of a directory listing (hidden entries are never returned)."""
    name: str
    path: str
    is_directory: bool

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> "DirectoryItem":
        return cls(
            name=data["name"],
            path=data["path"],
            is_directory=bool(data.get("isDirectory", False)),
        )


@dataclass(frozen=True)
class AppSettings:
    """
    Directories remembered between sessions.

    Attributes:
        last_source_directory: Music collection that was scanned last.
        last_target_directory: Sync target that was selected last.
    """
    last_source_directory: str = ""
    last_target_directory: str = ""

    @classmethod
    def from_api_dict(cls, data: dict[str, Any]) -> "AppSettings":
        return cls(
            last_source_directory=data.get("lastSourceDirectory") or "",
            last_target_directory=data.get("lastTargetDirectory") or "",
        )

    def to_api_dict(self) -> dict[str, str]:
        return {
            "lastSourceDirectory": self.last_source_directory,
            "lastTargetDirectory": self.last_target_directory,
        }


class AlbumService(ABC):
    """
    Operations the sync engine needs from the album service.

    Error contract:
        - scan() raises ScanError when the scan cannot be performed.
        - check_synced() raises TransportError on any failure.
        - sync_album()/unsync_album() return OperationResult(success=False)
          when the service refuses, and raise TransportError when it
          cannot be reached.
    """

    @abstractmethod
    async def scan(self, directory: str) -> list[AlbumRecord]:
        """Scan a source directory for album folders."""
        pass

    @abstractmethod
    async def check_synced(self, source_path: str, target_directory: str) -> bool:
        """Whether the album at source_path already exists on the target."""
        pass

    @abstractmethod
    async def sync_album(self, source_path: str, target_directory: str) -> OperationResult:
        """Copy one album folder to the target directory."""
        pass

    @abstractmethod
    async def unsync_album(self, target_directory: str, album_name: str) -> OperationResult:
        """Delete the album folder named album_name from the target directory."""
        pass

    async def cover_image(self, source_path: str) -> bytes | None:
        """Cover art for the album, or None. Presentation only."""
        return None

    async def list_drives(self) -> list[str]:
        return []

    async def browse(self, path: str) -> list[DirectoryItem]:
        return []

    async def load_settings(self) -> AppSettings:
        return AppSettings()

    async def save_settings(self, settings: AppSettings) -> bool:
        return False

    async def close(self) -> None:
        """Release any connection resources held by the service."""
        pass
