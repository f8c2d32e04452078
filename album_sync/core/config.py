"""
Configuration management for album-sync.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Base URL and request timeout of the album service
    - Number of concurrent sync-status checks
    - Directory where log files are written

Configuration File Location:
    The config.yaml file is looked up in the current working directory
    unless an explicit path is given. A .env file in the working directory
    is loaded as well; ALBUM_SYNC_SERVER_URL overrides server.url.

Example config.yaml:
    server:
      url: "http://localhost:8080"
      timeout: 30

    sync:
      concurrency: 5

    logging:
      directory: "~/.album-sync/logs"
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from album_sync.core.exceptions import ConfigError


# Default configuration file name (always in current working directory)
CONFIG_FILENAME = "config.yaml"

# Environment variable that overrides server.url
SERVER_URL_ENV = "ALBUM_SYNC_SERVER_URL"

DEFAULT_TIMEOUT = 30.0
DEFAULT_CONCURRENCY = 5
DEFAULT_LOG_DIRECTORY = "~/.album-sync/logs"


@dataclass(frozen=True)
class ServerConfig:
    """
    Album service connection settings.

    Attributes:
        url: Base URL of the album service, without trailing slash.
             Example: "http://localhost:8080"
        timeout: Total timeout in seconds for a single request.
                 Copying a large album can take a while, so keep this generous.
    """
    url: str
    timeout: float


@dataclass(frozen=True)
class SyncConfig:
    """
    Sync behavior configuration.

    Attributes:
        concurrency: How many sync-status checks may be in flight at once.
                     Default: 5.
    """
    concurrency: int


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        directory: Absolute path where log files are written.
                   Created by setup_logging() if it doesn't exist.
    """
    directory: Path


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable (frozen dataclass).

    Example:
        config = load_config()
        print(f"Album service: {config.server.url}")
        print(f"Checking {config.sync.concurrency} albums at a time")
    """
    server: ServerConfig
    sync: SyncConfig
    logging: LoggingConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     is missing required fields, or contains invalid values.

    Behavior:
        1. Load .env (if present) so environment overrides are visible
        2. Locate config file (explicit path or CWD/config.yaml)
        3. Read and parse YAML content
        4. Validate structure (required sections exist)
        5. Parse each section, applying defaults and overrides
        6. Create and return frozen Config object
    """
    load_dotenv()

    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    return Config(
        server=_parse_server_config(raw_config["server"]),
        sync=_parse_sync_config(raw_config.get("sync")),
        logging=_parse_logging_config(raw_config.get("logging"))
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Check that required sections exist and optional ones are dictionaries.

    Raises:
        ConfigError: If a section is missing or has the wrong type.
    """
    if "server" not in raw_config:
        raise ConfigError(
            "Missing required section: 'server'",
            details={"missing_section": "server"}
        )

    for section in ("server", "sync", "logging"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    if raw_config["server"] is None:
        raise ConfigError(
            "Section 'server' must be a dictionary",
            details={"section": "server"}
        )


def _parse_server_config(server_section: dict[str, Any]) -> ServerConfig:
    """
    Parse and validate the server configuration section.

    The URL from the environment (ALBUM_SYNC_SERVER_URL) wins over the file.

    Raises:
        ConfigError: If url is missing/empty or timeout is not a positive number.
    """
    url = os.environ.get(SERVER_URL_ENV) or server_section.get("url", "")

    if not isinstance(url, str) or not url.strip():
        raise ConfigError(
            "'server.url' must be a non-empty string",
            details={"field": "server.url"}
        )

    url = url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigError(
            "'server.url' must start with http:// or https://",
            details={"field": "server.url", "value": url}
        )

    timeout = server_section.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'server.timeout' must be a positive number",
            details={"field": "server.timeout", "value": timeout}
        )

    return ServerConfig(url=url, timeout=float(timeout))


def _parse_sync_config(sync_section: dict[str, Any] | None) -> SyncConfig:
    """
    Parse the sync section, applying defaults if it is missing.

    Raises:
        ConfigError: If concurrency is not a positive integer.
    """
    concurrency = DEFAULT_CONCURRENCY

    if sync_section is not None:
        raw_concurrency = sync_section.get("concurrency")
        if raw_concurrency is not None:
            if (
                isinstance(raw_concurrency, bool)
                or not isinstance(raw_concurrency, int)
                or raw_concurrency < 1
            ):
                raise ConfigError(
                    "'sync.concurrency' must be a positive integer",
                    details={"field": "sync.concurrency", "value": raw_concurrency}
                )
            concurrency = raw_concurrency

    return SyncConfig(concurrency=concurrency)


def _parse_logging_config(logging_section: dict[str, Any] | None) -> LoggingConfig:
    """
    Parse the logging section. Expands ~ and makes the path absolute.

    Raises:
        ConfigError: If directory is given but is not a non-empty string.
    """
    directory = DEFAULT_LOG_DIRECTORY

    if logging_section is not None and logging_section.get("directory") is not None:
        directory = logging_section["directory"]
        if not isinstance(directory, str) or not directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string",
                details={"field": "logging.directory"}
            )

    return LoggingConfig(directory=Path(directory.strip()).expanduser().resolve())
