"""
Logging configuration for album-sync.

This module sets up the logging system with multiple outputs:
    - Console: Colored, tqdm/rich-compatible messages (INFO and above)
    - log_full_<ts>.log: Complete log of all events (DEBUG and above)
    - log_errors_<ts>.log: Only ERROR and CRITICAL level messages
    - sync_failures_<ts>.log: Albums whose add/remove failed, one block per album

Everything shown on screen is also saved to file, then filtered into
specialized files.

Usage:
    from album_sync.core.logger import setup_logging, get_logger

    setup_logging(config.logging.directory)  # Call once at startup
    logger = get_logger(__name__)            # Get logger for each module

    logger.info("Scanning source directory")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name for console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking progress bars.

    Uses tqdm.write(), which prints above any active bar instead of
    interleaving with its carriage-return updates.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class SyncFailedAlbumHandler(logging.Handler):
    """
    Handler that captures failed album operations for the failures report.

    Listens for log records carrying sync failure information and writes
    them to sync_failures_<ts>.log in a simple, human-readable format:

        [add] Beatles - Abbey Road
        /music/Beatles/Abbey Road
        HTTP 500: Internal Server Error

    The handler looks for these extra fields in log records:
        - 'sync_failed_album_name': Album title
        - 'sync_failed_album_artist': Artist name
        - 'sync_failed_album_path': Source path of the album
        - 'sync_failed_action': "add" or "remove"
        - 'sync_failed_error': Error detail

    Only records containing 'sync_failed_album_name' are written.
    Use log_sync_failure() rather than building the extras by hand.
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing (overwrites existing content).

        Called by setup_logging() after the handler is created.
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "sync_failed_album_name"):
            return

        if self.report_file is None:
            return

        try:
            album = getattr(record, "sync_failed_album_name", "Unknown")
            artist = getattr(record, "sync_failed_album_artist", "Unknown Artist")
            path = getattr(record, "sync_failed_album_path", "")
            action = getattr(record, "sync_failed_action", "?")
            error = getattr(record, "sync_failed_error", "")

            self.report_file.write(f"[{action}] {artist} - {album}\n")
            self.report_file.write(f"{path}\n")
            self.report_file.write(f"{error}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle. Safe to call multiple times.
        """
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Example:
        handler.addFilter(ErrorOnlyFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path, console_level: int = logging.INFO) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created.
                 Created if it doesn't exist.
        console_level: Minimum level shown on the console.

    Behavior:
        1. Create log_dir if it doesn't exist
        2. Generate timestamp for this run's log files
        3. Configure root logger level to DEBUG
        4. Console handler (TqdmLoggingHandler), colored, console_level and above
        5. Full log file handler (DEBUG and above)
        6. Error log file handler (ERROR and above via ErrorOnlyFilter)
        7. Sync failures handler (SyncFailedAlbumHandler)

    Note:
        aiohttp's own loggers are capped at WARNING so request chatter
        doesn't flood log_full.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_handler = logging.FileHandler(
        log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = SyncFailedAlbumHandler(log_dir / f"sync_failures_{timestamp}.log")
    failures_handler.open()
    root_logger.addHandler(failures_handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'album_sync.sync.orchestrator'.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own; records propagate to whatever the root logger has.
    """
    return logging.getLogger(name)


def log_sync_failure(
    logger: logging.Logger,
    album_name: str,
    artist: str,
    path: str,
    action: str,
    error_message: str
) -> None:
    """
    Log an album whose add/remove operation failed.

    Logs an ERROR level message and attaches the extra fields that
    SyncFailedAlbumHandler uses to write to sync_failures_<ts>.log.

    Args:
        logger: The logger to use for the message.
        album_name: Album title.
        artist: Artist name.
        path: Source path of the album.
        action: "add" or "remove".
        error_message: Description of why the operation failed.

    Example:
        log_sync_failure(
            logger,
            album_name="Abbey Road",
            artist="Beatles",
            path="/music/Beatles/Abbey Road",
            action="add",
            error_message="HTTP 500: Internal Server Error"
        )
    """
    verb = "Removing" if action == "remove" else "Syncing"
    logger.error(
        f"{verb} failed: {artist} - {album_name} ({error_message})",
        extra={
            "sync_failed_album_name": album_name,
            "sync_failed_album_artist": artist,
            "sync_failed_album_path": path,
            "sync_failed_action": action,
            "sync_failed_error": error_message,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and remove all handlers on the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
