"""Test configuration and fixtures"""

import asyncio

import pytest

from album_sync.core.exceptions import ScanError, TransportError
from album_sync.library.models import AlbumRecord
from album_sync.service.base import AlbumService, AppSettings, OperationResult


class FakeAlbumService(AlbumService):
    """
    In-memory album service.

    Albums on the target are tracked by path. Every call is recorded in
    `calls` as (method, *args) so tests can assert on ordering and count.
    """

    def __init__(self, albums=None, on_target=(), settings=None):
        self.albums = list(albums or [])
        self.on_target = set(on_target)
        self.settings = settings or AppSettings()
        self.calls = []
        self.fail_check = set()
        self.fail_sync = {}
        self.raise_sync = {}
        self.scan_error = None
        self.scan_exception = None
        self.check_delay = {}
        self.closed = False

    async def scan(self, directory):
        self.calls.append(("scan", directory))
        if self.scan_exception:
            raise self.scan_exception
        if self.scan_error:
            raise ScanError(self.scan_error, details={"directory": directory})
        return list(self.albums)

    async def check_synced(self, source_path, target_directory):
        self.calls.append(("check_synced", source_path, target_directory))
        if source_path in self.check_delay:
            await asyncio.sleep(self.check_delay[source_path])
        if source_path in self.fail_check:
            raise TransportError("connection refused", details={"path": source_path})
        return source_path in self.on_target

    async def sync_album(self, source_path, target_directory):
        self.calls.append(("sync_album", source_path, target_directory))
        if source_path in self.raise_sync:
            raise TransportError(self.raise_sync[source_path])
        if source_path in self.fail_sync:
            return OperationResult(success=False, detail=self.fail_sync[source_path])
        self.on_target.add(source_path)
        return OperationResult(success=True, detail=f"Successfully synced to {target_directory}")

    async def unsync_album(self, target_directory, album_name):
        self.calls.append(("unsync_album", target_directory, album_name))
        for album in self.albums:
            if album.name == album_name:
                if album.path in self.fail_sync:
                    return OperationResult(success=False, detail=self.fail_sync[album.path])
                self.on_target.discard(album.path)
        return OperationResult(success=True, detail=f"Successfully removed {album_name}")

    async def list_drives(self):
        self.calls.append(("list_drives",))
        return ["/", "/media/player"]

    async def load_settings(self):
        self.calls.append(("load_settings",))
        return self.settings

    async def save_settings(self, settings):
        self.calls.append(("save_settings", settings))
        self.settings = settings
        return True

    async def close(self):
        self.closed = True

    def count(self, method):
        return sum(1 for call in self.calls if call[0] == method)


@pytest.fixture
def sample_albums():
    """Small library with one album that has no MP3 files"""
    return [
        AlbumRecord(
            path="/music/Beatles/Abbey Road",
            name="Abbey Road",
            artist="Beatles",
            album="Abbey Road",
            track_count=17,
            size_mb=120.0,
            has_cover=True,
        ),
        AlbumRecord(
            path="/music/Pink Floyd/Animals",
            name="Animals",
            artist="Pink Floyd",
            album="Animals",
            track_count=5,
            size_mb=95.0,
        ),
        AlbumRecord(
            path="/music/Beatles/Let It Be",
            name="Let It Be",
            artist="Beatles",
            album="Let It Be",
            track_count=12,
            size_mb=80.0,
        ),
        AlbumRecord(
            path="/music/Miles Davis/Kind of Blue (FLAC)",
            name="Kind of Blue (FLAC)",
            artist="Miles Davis",
            album="Kind of Blue",
            track_count=0,
            size_mb=300.0,
        ),
    ]


@pytest.fixture
def fake_service(sample_albums):
    """Fake service with the sample library, nothing on target yet"""
    return FakeAlbumService(albums=sample_albums)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Write a minimal config.yaml and return its path"""
    monkeypatch.delenv("ALBUM_SYNC_SERVER_URL", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n"
        "  url: \"http://localhost:8080/\"\n"
        "logging:\n"
        f"  directory: \"{(tmp_path / 'logs').as_posix()}\"\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def service_factory():
    """Build FakeAlbumService instances with custom state"""
    return FakeAlbumService
