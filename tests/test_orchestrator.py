# tests/test_orchestrator.py
"""Test the sequential sync/unsync run"""

import logging
from dataclasses import replace

import pytest

from album_sync.core.exceptions import TargetMissingError
from album_sync.library.selection import Selection
from album_sync.sync.orchestrator import (
    ACTION_ADD,
    ACTION_REMOVE,
    Progress,
    SyncOrchestrator,
)


class TestPreconditions:
    """Test checks made before any work"""

    @pytest.mark.asyncio
    async def test_missing_target_makes_no_calls(self, fake_service, sample_albums):
        """No target: error, zero service calls, no progress reported"""
        reported = []
        selection = Selection.of([sample_albums[0].path])

        with pytest.raises(TargetMissingError):
            await SyncOrchestrator(fake_service).run(
                sample_albums, selection, "", source="/music",
                on_progress=reported.append,
            )

        assert fake_service.calls == []
        assert reported == []


class TestRun:
    """Test a full run"""

    @pytest.mark.asyncio
    async def test_three_albums_one_failure(self, sample_albums, service_factory):
        """Failures are recorded and the run continues"""
        catalog = sample_albums[:3]
        service = service_factory(albums=catalog)
        service.fail_sync = {catalog[1].path: "Internal Server Error"}
        selection = Selection.of(a.path for a in catalog)

        summary = await SyncOrchestrator(service).run(catalog, selection, "/target")

        assert summary.added_count == 2
        assert summary.removed_count == 0
        assert len(summary.messages) == 3
        assert len(summary.failures) == 1
        assert summary.failures[0].path == catalog[1].path
        assert summary.failures[0].text == "❌ Error syncing Animals: Internal Server Error"
        assert len(summary.selection) == 0
        assert service.count("sync_album") == 3

    @pytest.mark.asyncio
    async def test_branch_uses_snapshot_state(self, sample_albums, service_factory):
        """On-target albums are removed by name, others copied by path"""
        catalog = [replace(sample_albums[0], is_synced=True), sample_albums[1]]
        service = service_factory(albums=catalog, on_target={catalog[0].path})
        selection = Selection.of([catalog[0].path, catalog[1].path])

        summary = await SyncOrchestrator(service).run(catalog, selection, "/target")

        assert service.calls == [
            ("unsync_album", "/target", "Abbey Road"),
            ("sync_album", "/music/Pink Floyd/Animals", "/target"),
        ]
        assert [m.action for m in summary.messages] == [ACTION_REMOVE, ACTION_ADD]
        assert [m.text for m in summary.messages] == [
            "🗑️ Removed: Beatles - Abbey Road",
            "✅ Synced: Pink Floyd - Animals",
        ]
        assert (summary.added_count, summary.removed_count) == (1, 1)

    @pytest.mark.asyncio
    async def test_raised_error_becomes_message(self, sample_albums, service_factory):
        """A transport error is recorded, never raised"""
        service = service_factory(albums=sample_albums)
        service.raise_sync = {sample_albums[0].path: "connection reset"}
        selection = Selection.of([sample_albums[0].path, sample_albums[1].path])

        summary = await SyncOrchestrator(service).run(sample_albums, selection, "/target")

        assert summary.messages[0].ok is False
        assert summary.messages[0].text == "❌ Error: Abbey Road - connection reset"
        assert summary.messages[1].ok is True

    @pytest.mark.asyncio
    async def test_orphans_skipped_silently(self, fake_service, sample_albums):
        """Selected paths missing from the catalog produce nothing"""
        selection = Selection.of(["/gone", sample_albums[0].path])
        progress = []

        summary = await SyncOrchestrator(fake_service).run(
            sample_albums, selection, "/target", on_progress=progress.append
        )

        assert len(summary.messages) == 1
        assert fake_service.count("sync_album") == 1
        assert progress == [
            Progress(0, 2),
            Progress(1, 2),
            Progress(2, 2),
            Progress(0, 0),
        ]

    @pytest.mark.asyncio
    async def test_failure_logged_for_report(self, sample_albums, service_factory, caplog):
        """Failures carry the sync-failure log fields"""
        service = service_factory(albums=sample_albums)
        service.fail_sync = {sample_albums[0].path: "Not Found"}

        with caplog.at_level(logging.ERROR):
            await SyncOrchestrator(service).run(
                sample_albums, Selection.of([sample_albums[0].path]), "/target"
            )

        records = [r for r in caplog.records if hasattr(r, "sync_failed_action")]
        assert len(records) == 1
        assert records[0].sync_failed_action == ACTION_ADD
        assert records[0].sync_failed_album_path == sample_albums[0].path


class TestRefresh:
    """Test the rescan after a run"""

    @pytest.mark.asyncio
    async def test_rescan_reflects_target(self, fake_service, sample_albums):
        """With a source the catalog is rescanned and resolved"""
        selection = Selection.of([sample_albums[0].path])

        summary = await SyncOrchestrator(fake_service).run(
            sample_albums, selection, "/target", source="/music"
        )

        assert fake_service.count("scan") == 1
        refreshed = {a.path: a.is_synced for a in summary.catalog}
        assert refreshed[sample_albums[0].path] is True
        assert refreshed[sample_albums[1].path] is False
        assert summary.refresh_error == ""

    @pytest.mark.asyncio
    async def test_no_source_no_rescan(self, fake_service, sample_albums):
        """Without a source the run-start catalog is returned"""
        summary = await SyncOrchestrator(fake_service).run(
            sample_albums, Selection.of([sample_albums[0].path]), "/target"
        )
        assert fake_service.count("scan") == 0
        assert list(summary.catalog) == sample_albums

    @pytest.mark.asyncio
    async def test_rescan_failure_is_reported(self, fake_service, sample_albums):
        """A failing rescan doesn't raise"""
        fake_service.scan_error = "Directory does not exist"

        summary = await SyncOrchestrator(fake_service).run(
            sample_albums, Selection.of([sample_albums[0].path]), "/target", source="/music"
        )

        assert summary.refresh_error == "Directory does not exist"
        assert summary.added_count == 1
        assert len(summary.selection) == 0

    @pytest.mark.asyncio
    async def test_unexpected_rescan_error_is_reported(self, fake_service, sample_albums):
        """Any exception from the rescan ends up in refresh_error"""
        fake_service.scan_exception = OSError("disk gone")

        summary = await SyncOrchestrator(fake_service).run(
            sample_albums, Selection.of([sample_albums[0].path]), "/target", source="/music"
        )

        assert summary.refresh_error == "disk gone"
        assert summary.added_count == 1
        assert len(summary.selection) == 0
        assert list(summary.catalog) == sample_albums


class TestSummary:
    """Test the summary text"""

    @pytest.mark.asyncio
    async def test_render(self, fake_service, sample_albums):
        """Rendered summary lists counts and details"""
        summary = await SyncOrchestrator(fake_service).run(
            sample_albums, Selection.of([sample_albums[1].path]), "/target"
        )

        assert summary.render() == (
            "Sync Complete!\n\n"
            "1 albums added to target\n"
            "0 albums removed from target\n\n"
            "Details:\n"
            "✅ Synced: Pink Floyd - Animals"
        )
