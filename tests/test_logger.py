# tests/test_logger.py
"""Test logging setup and the sync failures report"""

import logging

from album_sync.core.logger import (
    get_logger,
    log_sync_failure,
    setup_logging,
    shutdown_logging,
)


class TestLogging:
    """Test log files written by setup_logging"""

    def test_log_files_created(self, tmp_path):
        """Full, error and failure logs are created per run"""
        log_dir = tmp_path / "logs"
        try:
            setup_logging(log_dir)
            logger = get_logger("album_sync.test")
            logger.debug("debug line")
            logger.error("error line")
        finally:
            shutdown_logging()

        full = next(log_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        errors = next(log_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")

        assert "debug line" in full and "error line" in full
        assert "error line" in errors
        assert "debug line" not in errors
        assert len(list(log_dir.glob("sync_failures_*.log"))) == 1

    def test_sync_failure_report(self, tmp_path):
        """Failed albums are written to the failures report"""
        log_dir = tmp_path / "logs"
        try:
            setup_logging(log_dir)
            log_sync_failure(
                get_logger("album_sync.test"),
                album_name="Abbey Road",
                artist="Beatles",
                path="/music/Beatles/Abbey Road",
                action="add",
                error_message="Internal Server Error",
            )
            get_logger("album_sync.test").error("unrelated error")
        finally:
            shutdown_logging()

        report = next(log_dir.glob("sync_failures_*.log")).read_text(encoding="utf-8")
        assert report == (
            "[add] Beatles - Abbey Road\n"
            "/music/Beatles/Abbey Road\n"
            "Internal Server Error\n\n"
        )

    def test_shutdown_removes_handlers(self, tmp_path):
        """No handlers remain after shutdown"""
        setup_logging(tmp_path)
        shutdown_logging()
        assert logging.getLogger().handlers == []
