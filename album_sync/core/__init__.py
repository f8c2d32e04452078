"""
Core module for album-sync.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs
    - concurrency: Bounded-concurrency mapping over async operations

Usage:
    from album_sync.core import (
        Config, load_config,
        setup_logging, get_logger,
        AlbumSyncError, ConfigError, TargetMissingError
    )
"""

from album_sync.core.concurrency import DEFAULT_CONCURRENCY, map_bounded
from album_sync.core.config import (
    Config,
    LoggingConfig,
    ServerConfig,
    SyncConfig,
    load_config,
)
from album_sync.core.exceptions import (
    AlbumSyncError,
    ConfigError,
    ItemOperationFailed,
    OperationInProgressError,
    PreconditionError,
    ScanError,
    TargetMissingError,
    TransportError,
)
from album_sync.core.logger import (
    get_logger,
    log_sync_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Concurrency
    "DEFAULT_CONCURRENCY",
    "map_bounded",
    # Config
    "Config",
    "ServerConfig",
    "SyncConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "AlbumSyncError",
    "ConfigError",
    "TransportError",
    "ScanError",
    "PreconditionError",
    "TargetMissingError",
    "OperationInProgressError",
    "ItemOperationFailed",
    # Logger
    "setup_logging",
    "get_logger",
    "log_sync_failure",
    "shutdown_logging",
]
