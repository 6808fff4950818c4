# ABOUTME: Blob storage for covers and exports, and the cover mirroring step.
# ABOUTME: Re-hosts external cover images in owned storage; failures keep the original URL.

import logging
import mimetypes
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from shelfkeeper.metadata.http import HttpClient, MetadataFetchError
from shelfkeeper.metadata.types import ResolvedMetadata

logger = logging.getLogger(__name__)

COVERS_PREFIX = "covers"
_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp", "gif")


class MirrorError(Exception):
    """Raised when a cover cannot be fetched or re-uploaded."""


@runtime_checkable
class BlobStorage(Protocol):
    """Protocol for the object store holding covers and exports."""

    def owns(self, url: str) -> bool: ...

    def fetch_bytes(self, url: str) -> bytes | None: ...

    def upload(self, data: bytes, suggested_key: str, content_type: str | None = None) -> str | None: ...


class LocalBlobStorage:
    """Directory-backed bucket published under a base URL.

    A key like "covers/9780306406157.jpg" is stored at root/covers/... and
    served as {public_url}/covers/9780306406157.jpg.
    """

    def __init__(self, root: Path, public_url: str, http_client: HttpClient) -> None:
        self._root = root
        self._public_url = public_url.rstrip("/")
        self._http = http_client

    @property
    def root(self) -> Path:
        return self._root

    def owns(self, url: str) -> bool:
        return url.startswith(self._public_url + "/")

    def public_url_for(self, key: str) -> str:
        return f"{self._public_url}/{key}"

    def path_for(self, key: str) -> Path:
        """Filesystem path for a key.

        Raises:
            ValueError: If the key would escape the storage root.
        """
        root = self._root.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            raise ValueError(f"Storage key escapes the bucket: {key!r}")
        return path

    def fetch_bytes(self, url: str) -> bytes | None:
        """Download an image. Returns None on failure or a non-image response."""
        try:
            data, content_type = self._http.get_bytes(url)
        except MetadataFetchError as exc:
            logger.warning("Could not download %s: %s", url, exc)
            return None
        if content_type and not content_type.startswith("image/"):
            logger.warning("Refusing to store %s: content type %s", url, content_type)
            return None
        return data or None

    def upload(self, data: bytes, suggested_key: str, content_type: str | None = None) -> str | None:
        """Write data under suggested_key, overwriting, and return its public URL."""
        try:
            path = self.path_for(suggested_key)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (OSError, ValueError) as exc:
            logger.warning("Upload of %s failed: %s", suggested_key, exc)
            return None
        return self.public_url_for(suggested_key)


def guess_extension(url: str) -> str:
    """Image extension from a URL path, defaulting to jpg."""
    path = urlparse(url).path
    if "." in path:
        ext = path.rsplit(".", 1)[-1].lower()
        if ext in _IMAGE_EXTENSIONS:
            return ext
    return "jpg"


def cover_key(isbn13: str, url: str) -> str:
    return f"{COVERS_PREFIX}/{isbn13}.{guess_extension(url)}"


def _copy_cover(url: str, isbn13: str, storage: BlobStorage) -> str:
    data = storage.fetch_bytes(url)
    if not data:
        raise MirrorError(f"no image data at {url}")
    key = cover_key(isbn13, url)
    content_type = mimetypes.guess_type(key)[0]
    public_url = storage.upload(data, key, content_type)
    if not public_url:
        raise MirrorError(f"upload of {key} failed")
    return public_url


def mirror_cover(resolved: ResolvedMetadata, storage: BlobStorage) -> ResolvedMetadata:
    """Point cover_url at owned storage, copying the image if needed.

    A missing or already-owned cover is left alone. If the copy fails the
    external URL is kept.
    """
    url = resolved.cover_url
    if not url or storage.owns(url):
        return resolved

    try:
        public_url = _copy_cover(url, resolved.isbn13, storage)
    except MirrorError as exc:
        logger.warning("Keeping external cover for %s: %s", resolved.isbn13, exc)
        return resolved

    logger.info("Mirrored cover for %s to %s", resolved.isbn13, public_url)
    return resolved.with_changes(cover_url=public_url)
