"""
Album service access for album-sync.

Components:
    - AlbumService: abstract interface the sync engine depends on
    - AlbumServiceClient: aiohttp implementation against the HTTP API
    - OperationResult, DirectoryItem, AppSettings: service data models

Usage:
    from album_sync.service import AlbumServiceClient

    async with AlbumServiceClient(config.server.url, config.server.timeout) as service:
        albums = await service.scan("/music")
"""

from album_sync.service.base import (
    AlbumService,
    AppSettings,
    DirectoryItem,
    OperationResult,
)
from album_sync.service.client import AlbumServiceClient

__all__ = [
    "AlbumService",
    "AlbumServiceClient",
    "AppSettings",
    "DirectoryItem",
    "OperationResult",
]
