"""
Sync module for album-sync.

Components:
    - SyncOrchestrator: sequential add/remove run over a selection
    - LibrarySession: explicit caller-side state (source, target,
      catalog, selection, progress)

Usage:
    from album_sync.sync import LibrarySession

    session = LibrarySession(service)
    await session.scan("/music")
    summary = await session.run_sync()
"""

from album_sync.sync.orchestrator import (
    ACTION_ADD,
    ACTION_REMOVE,
    Progress,
    SyncMessage,
    SyncOrchestrator,
    SyncSummary,
)
from album_sync.sync.session import LibrarySession

__all__ = [
    "ACTION_ADD",
    "ACTION_REMOVE",
    "LibrarySession",
    "Progress",
    "SyncMessage",
    "SyncOrchestrator",
    "SyncSummary",
]
