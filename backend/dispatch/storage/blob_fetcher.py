"""
Blob fetcher — downloads uploaded dispatch files from object storage.

Upload URLs have the fixed public shape

    https://<project>/storage/v1/object/public/<bucket>/<path/to/file>

The fetcher extracts bucket and path from that shape and downloads the
object through the storage REST API using the service-role key, so
private buckets work as well.

Failures never raise: they are logged and reported as None, and the
caller turns that into a soft "Could not download file" result.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from urllib.parse import quote, unquote

import httpx

from dispatch.core.config import settings
from dispatch.core.logging import get_logger
from dispatch.pipeline.errors import StorageError

logger = get_logger(__name__)

PUBLIC_OBJECT_MARKER = "/storage/v1/object/public/"


@dataclass(frozen=True)
class StorageLocation:
    base_url: str
    bucket: str
    path: str

    @property
    def object_url(self) -> str:
        """Authenticated object endpoint for this location."""
        return f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(self.path)}"


def parse_storage_url(file_url: str) -> StorageLocation | None:
    """Split a public storage URL into base URL, bucket and object path."""
    if PUBLIC_OBJECT_MARKER not in file_url:
        return None
    base_url, _, remainder = file_url.partition(PUBLIC_OBJECT_MARKER)
    remainder = remainder.split("?", 1)[0]
    bucket, _, path = remainder.partition("/")
    if not bucket or not path:
        return None
    return StorageLocation(base_url=base_url.rstrip("/"), bucket=bucket, path=unquote(path))


class BlobFetcher:
    """Downloads object bytes given a public storage URL."""

    def __init__(
        self,
        service_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str | None = None,
    ) -> None:
        self._service_key = service_key if service_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        # When set, downloads go to this project regardless of the URL's host.
        self._base_url = (base_url if base_url is not None else settings.SUPABASE_URL).rstrip("/")
        self._timeout = timeout or settings.STORAGE_TIMEOUT_SECONDS
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self._service_key:
            return {}
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }

    async def fetch(self, file_url: str) -> bytes:
        """Download the object; raises StorageError on any failure."""
        location = parse_storage_url(file_url)
        if location is None:
            raise StorageError(f"Invalid storage URL format: {file_url}")
        if self._base_url:
            location = replace(location, base_url=self._base_url)

        logger.info("Downloading from storage", bucket=location.bucket, path=location.path)

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(location.object_url, headers=self._headers())
            except httpx.HTTPError as exc:
                raise StorageError(f"Storage request failed: {exc}") from exc

        if response.status_code != 200:
            raise StorageError(
                f"Storage returned {response.status_code}",
                status_code=response.status_code,
                details={"bucket": location.bucket, "path": location.path},
            )
        return response.content

    async def download(self, file_url: str) -> bytes | None:
        """Download the object, or log and return None on failure."""
        try:
            return await self.fetch(file_url)
        except StorageError as exc:
            logger.error(
                "Error downloading file",
                file_url=file_url,
                status_code=exc.status_code,
                error=str(exc),
            )
            return None


class LocalBlobFetcher:
    """Serves file bytes from local paths; used by the local runner."""

    def __init__(self, paths: dict[str, str]) -> None:
        self._paths = paths

    async def download(self, file_url: str) -> bytes | None:
        path = self._paths.get(file_url)
        if path is None:
            logger.error("No local file registered for URL", file_url=file_url)
            return None
        try:
            with open(path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            logger.error("Error reading local file", path=path, error=str(exc))
            return None
