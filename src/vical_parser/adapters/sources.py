"""
Byte source adapters — where the raw VICAL comes from.

Adapter layer — implements the VicalSource port:
  - FileVicalSource: a local .cbor file
  - HttpVicalDownloader: a provider URL, fetched with httpx

Retry/backoff via tenacity on transient network errors (timeouts,
connection failures). HTTP status errors are not retried. All errors
are captured into Result failures.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import structlog
from railway import ErrorCode
from railway.result import Result
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger()


class FileVicalSource:
    """Read a signed VICAL from the local filesystem."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def fetch(self) -> Result[bytes]:
        """
        Returns Result[bytes] with the file contents.
        Returns NOT_FOUND when the file is missing, TECHNICAL_ERROR on other OS errors.
        """
        if not self._path.is_file():
            return Result.failure(ErrorCode.NOT_FOUND, f"VICAL file not found: {self._path}")
        return Result.from_computation(
            self._read,
            ErrorCode.TECHNICAL_ERROR,
            f"Failed to read VICAL file: {self._path}",
        )

    def _read(self) -> bytes:
        data = self._path.resolve().read_bytes()
        log.info("source.file_read", path=str(self._path.resolve()), size_bytes=len(data))
        return data


class HttpVicalDownloader:
    """
    Download a signed VICAL via HTTP GET.

    Implements the VicalSource port.
    Uses tenacity retry on transient network errors only.
    """

    def __init__(self, url: str, timeout: int = 60) -> None:
        self._url = url
        self._timeout = timeout

    def fetch(self) -> Result[bytes]:
        """
        Returns Result[bytes] with the response body on success,
        or Result.failure(EXTERNAL_SERVICE_ERROR, ...) on failure.
        """
        return Result.from_computation(
            self._do_download,
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            f"VICAL download failed: {self._url}",
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=0.1, max=30),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    def _do_download(self) -> bytes:
        """HTTP GET with retry — exceptions caught by from_computation."""
        with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
            response = client.get(
                self._url,
                headers={"Accept": "application/cbor, application/octet-stream"},
            )
            response.raise_for_status()
            data = response.content
            log.info("download.complete", url=self._url, size_bytes=len(data))
            return data
