# tests/test_models.py
"""Test album and service data models"""

import pytest

from album_sync.core.exceptions import AlbumSyncError, ItemOperationFailed, ScanError, TransportError
from album_sync.library.models import UNKNOWN_ARTIST, AlbumRecord
from album_sync.service.base import AppSettings, DirectoryItem


class TestAlbumRecord:
    """Test AlbumRecord conversion"""

    def test_from_api_dict(self):
        """All service keys are mapped"""
        album = AlbumRecord.from_api_dict({
            "path": "/music/Beatles/Abbey Road",
            "name": "Abbey Road",
            "artist": "Beatles",
            "album": "Abbey Road",
            "mp3_count": 17,
            "has_cover": True,
            "size_mb": 120.5,
            "is_synced": False,
            "fingerprint": "Beatles|Abbey Road|17",
        })

        assert album.track_count == 17
        assert album.size_mb == 120.5
        assert album.has_cover is True
        assert album.fingerprint == "Beatles|Abbey Road|17"
        assert album.display_name == "Beatles - Abbey Road"

    def test_defaults_for_missing_keys(self):
        """Only the path is required"""
        album = AlbumRecord.from_api_dict({"path": "/music/Unsorted/Demo Tapes"})

        assert album.name == "Demo Tapes"
        assert album.album == "Demo Tapes"
        assert album.artist == UNKNOWN_ARTIST
        assert album.track_count == 0
        assert album.is_synced is False

    def test_wire_is_synced_ignored(self):
        """A scanned album is never on target until its status is resolved"""
        album = AlbumRecord.from_api_dict({
            "path": "/music/Beatles/Abbey Road",
            "is_synced": True,
        })
        assert album.is_synced is False

    def test_missing_path(self):
        """No path, no album"""
        with pytest.raises(KeyError):
            AlbumRecord.from_api_dict({"name": "x"})

    def test_to_api_dict(self):
        """Converting back uses the service keys"""
        data = AlbumRecord(path="/p", name="n", track_count=3).to_api_dict()
        assert data["mp3_count"] == 3
        assert data["path"] == "/p"
        assert AlbumRecord.from_api_dict(data) == AlbumRecord(
            path="/p", name="n", album="n", track_count=3
        )


class TestServiceModels:
    """Test settings and directory entries"""

    def test_settings_keys(self):
        """Settings use camelCase on the wire"""
        settings = AppSettings.from_api_dict({
            "lastSourceDirectory": "/music",
            "lastTargetDirectory": None,
        })
        assert settings == AppSettings("/music", "")
        assert settings.to_api_dict() == {
            "lastSourceDirectory": "/music",
            "lastTargetDirectory": "",
        }

    def test_directory_item(self):
        """Directory flag is read from isDirectory"""
        item = DirectoryItem.from_api_dict({"name": "Music", "path": "/Music", "isDirectory": True})
        assert item.is_directory is True


class TestExceptions:
    """Test exception hierarchy"""

    def test_hierarchy(self):
        """Scan errors are transport errors"""
        assert issubclass(ScanError, TransportError)
        assert issubclass(TransportError, AlbumSyncError)

    def test_item_failure_fields(self):
        """Per-album failures carry the path and action"""
        error = ItemOperationFailed("failed", path="/p", action="add")
        assert str(error) == "failed"
        assert error.details == {}
        assert (error.path, error.action) == ("/p", "add")
