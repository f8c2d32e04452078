"""
HTTP client for the album service.

AlbumServiceClient implements AlbumService on top of an aiohttp
ClientSession. The service exposes a small JSON API:

    POST /api/scan        {directory}                     -> [album, ...]
    POST /api/check-sync  {sourcePath, targetDirectory}   -> {synced}
    POST /api/sync        {sourcePath, targetDirectory}   -> {result}
    POST /api/unsync      {targetDirectory, albumName}    -> {result}
    GET  /api/cover/<url-encoded source path>             -> image bytes / 404
    GET  /api/drives                                      -> [path, ...]
    POST /api/browse      {path}                          -> [{name, path, isDirectory}]
    GET  /api/settings                                    -> {lastSourceDirectory, lastTargetDirectory}
    POST /api/settings    {lastSourceDirectory, lastTargetDirectory}

Errors on the service side come back as plain-text bodies with a 4xx/5xx
status. Timeouts are configured on the session (ServerConfig.timeout);
the sync engine itself never times anything out.

Usage:
    async with AlbumServiceClient("http://localhost:8080") as service:
        albums = await service.scan("/music")
"""

import asyncio
from typing import Any
from urllib.parse import quote

import aiohttp

from album_sync.core.exceptions import ScanError, TransportError
from album_sync.core.logger import get_logger
from album_sync.library.models import AlbumRecord
from album_sync.service.base import (
    AlbumService,
    AppSettings,
    DirectoryItem,
    OperationResult,
)

logger = get_logger(__name__)


DEFAULT_TIMEOUT = 30.0


class AlbumServiceClient(AlbumService):
    """
    aiohttp-based AlbumService.

    The session is created lazily on first use (or on __aenter__) and
    closed by close()/__aexit__. One client should be used per event loop.

    Attributes:
        base_url: Service root without trailing slash.
        timeout: Total per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: aiohttp.ClientSession | None = None
    ) -> None:
        """
        Args:
            base_url: Service root, e.g. "http://localhost:8080".
            timeout: Total per-request timeout in seconds.
            session: Optional externally managed session. It is not closed
                     by close() when given.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AlbumServiceClient":
        self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        expect_json: bool = True
    ) -> tuple[int, str, Any]:
        """
        Perform one request and decode the body.

        Args:
            expect_json: Whether a 2xx body must be JSON. When False a
                         non-JSON body is returned as text.

        Returns:
            (status, reason, body) where body is the decoded JSON for a
            successful JSON response and the text body otherwise.
            Undecodable bytes in text bodies are replaced.

        Raises:
            TransportError: Connection failure, timeout, or a 2xx response
                            whose JSON body cannot be decoded while
                            expect_json is set.
        """
        url = self._url(endpoint)
        session = self._get_session()

        try:
            async with session.request(method, url, json=payload) as response:
                if 200 <= response.status < 300:
                    try:
                        body = await response.json(content_type=None)
                    except ValueError as e:
                        if expect_json:
                            raise TransportError(
                                f"Invalid JSON response from {endpoint}",
                                details={"url": url, "original_error": str(e)}
                            ) from e
                        body = (await response.text(errors="replace")).strip()
                else:
                    body = (await response.text(errors="replace")).strip()
                return response.status, response.reason or "", body
        except aiohttp.ClientError as e:
            raise TransportError(
                f"Request to {endpoint} failed: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Request to {endpoint} timed out after {self.timeout:.0f}s",
                details={"url": url}
            ) from e

    # =========================================================================
    # Core operations
    # =========================================================================

    async def scan(self, directory: str) -> list[AlbumRecord]:
        """
        Scan a source directory for album folders.

        Raises:
            ScanError: On transport failure, error status or malformed albums.
        """
        logger.debug(f"Scanning {directory}")

        try:
            status, reason, body = await self._request(
                "POST", "/api/scan", {"directory": directory}
            )
        except TransportError as e:
            raise ScanError(
                f"Scan of {directory} failed: {e.message}",
                details={**e.details, "directory": directory}
            ) from e

        if status != 200:
            raise ScanError(
                f"Scan of {directory} failed: HTTP {status} {reason}".rstrip(),
                details={"directory": directory, "status": status, "body": body}
            )

        # The service encodes an empty result as null
        if body is None:
            return []

        if not isinstance(body, list):
            raise ScanError(
                "Scan response must be a JSON list",
                details={"directory": directory}
            )

        try:
            albums = [AlbumRecord.from_api_dict(item) for item in body]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ScanError(
                f"Malformed album in scan response: {e}",
                details={"directory": directory, "original_error": str(e)}
            ) from e

        logger.debug(f"Scan of {directory} returned {len(albums)} albums")
        return albums

    async def check_synced(self, source_path: str, target_directory: str) -> bool:
        """
        Raises:
            TransportError: On transport failure, error status or a bad body.
        """
        status, reason, body = await self._request(
            "POST",
            "/api/check-sync",
            {"sourcePath": source_path, "targetDirectory": target_directory},
        )

        if status != 200:
            raise TransportError(
                f"Sync check failed: HTTP {status} {reason}".rstrip(),
                details={"path": source_path, "status": status, "body": body}
            )

        if not isinstance(body, dict) or "synced" not in body:
            raise TransportError(
                "Sync check response has no 'synced' field",
                details={"path": source_path}
            )

        return bool(body["synced"])

    async def sync_album(self, source_path: str, target_directory: str) -> OperationResult:
        status, reason, body = await self._request(
            "POST",
            "/api/sync",
            {"sourcePath": source_path, "targetDirectory": target_directory},
            expect_json=False,
        )
        return self._operation_result(status, reason, body)

    async def unsync_album(self, target_directory: str, album_name: str) -> OperationResult:
        status, reason, body = await self._request(
            "POST",
            "/api/unsync",
            {"targetDirectory": target_directory, "albumName": album_name},
            expect_json=False,
        )
        return self._operation_result(status, reason, body)

    @staticmethod
    def _operation_result(status: int, reason: str, body: Any) -> OperationResult:
        if 200 <= status < 300:
            if isinstance(body, dict):
                detail = str(body.get("result", ""))
            else:
                detail = str(body or "")
            return OperationResult(success=True, detail=detail)

        detail = reason or f"HTTP {status}"
        if body:
            detail = f"{detail}: {body}"
        return OperationResult(success=False, detail=detail)

    # =========================================================================
    # Presentation helpers
    # =========================================================================

    async def cover_image(self, source_path: str) -> bytes | None:
        """
        Fetch the album's cover.jpg. None if the album has no cover.

        Raises:
            TransportError: On transport failure or an unexpected status.
        """
        url = self._url(f"/api/cover/{quote(source_path, safe='')}")
        session = self._get_session()

        try:
            async with session.get(url) as response:
                if response.status == 404:
                    return None
                if response.status != 200:
                    raise TransportError(
                        f"Cover request failed: HTTP {response.status}",
                        details={"path": source_path, "status": response.status}
                    )
                return await response.read()
        except aiohttp.ClientError as e:
            raise TransportError(
                f"Cover request failed: {e}",
                details={"path": source_path, "original_error": str(e)}
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                "Cover request timed out",
                details={"path": source_path}
            ) from e

    async def list_drives(self) -> list[str]:
        status, reason, body = await self._request("GET", "/api/drives")
        if status != 200:
            raise TransportError(
                f"Listing drives failed: HTTP {status} {reason}".rstrip(),
                details={"status": status}
            )
        return [str(drive) for drive in body or []]

    async def browse(self, path: str) -> list[DirectoryItem]:
        status, reason, body = await self._request("POST", "/api/browse", {"path": path})
        if status != 200:
            raise TransportError(
                f"Browsing {path} failed: {body or reason}",
                details={"path": path, "status": status}
            )
        return [DirectoryItem.from_api_dict(item) for item in body or []]

    # =========================================================================
    # Settings
    # =========================================================================

    async def load_settings(self) -> AppSettings:
        """
        Load the remembered directories. Falls back to empty settings.
        """
        try:
            status, reason, body = await self._request("GET", "/api/settings")
        except TransportError as e:
            logger.warning(f"Failed to load settings: {e.message}")
            return AppSettings()

        if status != 200 or not isinstance(body, dict):
            logger.warning(f"Failed to load settings: HTTP {status} {reason}".rstrip())
            return AppSettings()

        return AppSettings.from_api_dict(body)

    async def save_settings(self, settings: AppSettings) -> bool:
        """
        Store the remembered directories.

        Returns:
            True if the service stored them. Failures are logged.
        """
        try:
            status, reason, _ = await self._request(
                "POST", "/api/settings", settings.to_api_dict(), expect_json=False
            )
        except TransportError as e:
            logger.warning(f"Failed to save settings: {e.message}")
            return False

        if status != 200:
            logger.warning(f"Failed to save settings: HTTP {status} {reason}".rstrip())
            return False

        return True
