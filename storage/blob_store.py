"""
Blob store adapters for video and image binaries.

The core only needs two operations from a blob store:
- upload(file) -> StoredBlob(url, duration)
- delete(url)

Backends:
- LocalBlobStore: writes files under a media directory served at /media
  (development and tests; durations are not probed and report 0.0)
- HttpBlobStore: remote object store speaking a small JSON API over httpx
"""

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

import httpx

from api.errors import InternalError
from config import StorageConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredBlob:
    """Location and derived metadata of an uploaded binary."""

    url: str
    duration: float = 0.0


class BlobStore(Protocol):
    def upload(
        self,
        data: BinaryIO,
        filename: str,
        folder: str,
        content_type: Optional[str] = None,
    ) -> StoredBlob:
        ...

    def delete(self, url: str) -> None:
        ...


class LocalBlobStore:
    """
    Filesystem-backed blob store.

    Files land in `<root>/<folder>/<uuid><suffix>` and are addressed as
    `<base_url>/<folder>/<name>`.
    """

    def __init__(self, root: Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def upload(
        self,
        data: BinaryIO,
        filename: str,
        folder: str,
        content_type: Optional[str] = None,
    ) -> StoredBlob:
        target_dir = self.root / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        name = f"{uuid.uuid4().hex}{Path(filename or '').suffix.lower()}"
        try:
            with open(target_dir / name, "wb") as handle:
                shutil.copyfileobj(data, handle)
        except OSError as e:
            logger.error(f"Local blob write failed: {e}")
            raise InternalError("Failed to store uploaded file")

        url = f"{self.base_url}/{folder}/{name}"
        logger.debug(f"Stored blob {url}")
        return StoredBlob(url=url)

    def _path_for(self, url: str) -> Optional[Path]:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        candidate = (self.root / url[len(prefix):]).resolve()
        if self.root.resolve() not in candidate.parents:
            return None
        return candidate

    def delete(self, url: str) -> None:
        path = self._path_for(url)
        if path is None:
            logger.warning(f"Ignoring delete of foreign blob url: {url}")
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Local blob delete failed: {e}")
            raise InternalError("Failed to delete stored file")
        logger.debug(f"Deleted blob {url}")


class HttpBlobStore:
    """
    Remote blob store client.

    Protocol:
        POST   {base}/blobs          multipart `file`, form `folder`
                                     -> {"url": str, "duration": float?}
        DELETE {base}/blobs?url=...  -> 2xx
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 60,
        client: Optional[httpx.Client] = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout
        )
        logger.info("HttpBlobStore initialized")

    def upload(
        self,
        data: BinaryIO,
        filename: str,
        folder: str,
        content_type: Optional[str] = None,
    ) -> StoredBlob:
        try:
            response = self._client.post(
                "/blobs",
                files={"file": (filename, data, content_type or "application/octet-stream")},
                data={"folder": folder},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Blob upload failed: {e}")
            raise InternalError("Error uploading file to blob store")

        if not payload.get("url"):
            raise InternalError("Blob store returned no url")
        return StoredBlob(url=payload["url"], duration=float(payload.get("duration") or 0.0))

    def delete(self, url: str) -> None:
        try:
            response = self._client.delete("/blobs", params={"url": url})
            if response.status_code != 404:
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Blob delete failed: {e}")
            raise InternalError("Error deleting file from blob store")


def build_blob_store(storage: StorageConfig) -> BlobStore:
    """Pick the configured backend."""
    if storage.backend == "http":
        if not storage.blob_store_url:
            raise RuntimeError("BLOB_STORE_URL is required for STORAGE_BACKEND=http")
        return HttpBlobStore(
            base_url=storage.blob_store_url,
            api_key=storage.blob_store_api_key,
            timeout=storage.timeout,
        )
    return LocalBlobStore(Path(storage.media_dir), storage.media_base_url)
