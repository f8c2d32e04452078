"""
Exception classes for album-sync.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, so callers can distinguish failure modes and log context.

Exception Hierarchy:
    AlbumSyncError (base)
        ConfigError - Configuration file issues
        TransportError - A call to the album service failed
            ScanError - Scanning the source directory failed
        PreconditionError - Operation rejected before any work started
            TargetMissingError - No sync target directory selected
            OperationInProgressError - A scan or sync is already running
        ItemOperationFailed - Adding/removing a single album failed
"""


class AlbumSyncError(Exception):
    """
    Base exception for all album-sync errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all album-sync errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., paths, status codes).

    Example:
        try:
            albums = await service.scan(directory)
        except AlbumSyncError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'path': Album or directory path involved in the error
                     - 'url': Service URL that was called
                     - 'status': HTTP status code returned by the service
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(AlbumSyncError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Required fields missing (server.url)
        - Invalid field values (e.g., non-positive concurrency)
    """
    pass


class TransportError(AlbumSyncError):
    """
    Raised when a call to the album service fails.

    Covers network failures, non-success HTTP responses on read calls
    and unparseable JSON bodies.

    Inside a batch this is a NON-CRITICAL error: status checks keep the
    album's previous state and sync operations record a failure message.
    It is never allowed to stop the rest of the batch.

    Example:
        raise TransportError(
            "Sync check failed: HTTP 500",
            details={'url': url, 'status': 500}
        )
    """
    pass


class ScanError(TransportError):
    """
    Raised when the album service cannot scan a source directory.

    Surfaced to the caller as-is; scans are never retried automatically.
    """
    pass


class PreconditionError(AlbumSyncError):
    """
    Raised when an operation is rejected before any work begins.

    No service call has been made and no state has changed when this
    is raised, so the caller can simply notify the user.
    """
    pass


class TargetMissingError(PreconditionError):
    """
    Raised when a sync run is requested without a target directory.

    Example:
        raise TargetMissingError(
            "Please select a target directory first",
            details={'selected': len(selection)}
        )
    """
    pass


class OperationInProgressError(PreconditionError):
    """
    Raised when a scan or sync is requested while one is already running.
    """
    pass


class ItemOperationFailed(AlbumSyncError):
    """
    Raised when adding or removing a single album fails.

    This is a NON-CRITICAL error - the orchestrator records it in the
    run's message log and continues with the next selected album.

    Attributes:
        path: Source path of the album that failed.
        action: "add" or "remove".
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        path: str = "",
        action: str = ""
    ) -> None:
        """
        Initialize the per-album failure.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            path: Source path of the album that failed.
            action: Which operation was attempted ("add" or "remove").
        """
        super().__init__(message, details)
        self.path = path
        self.action = action
