"""
Adapter: Local filesystem blob store.

Implements BlobStorePort. Screenshots are written under a root directory
and served by the application's static mount at ``public_base_url``.
"""

import logging
from pathlib import Path

from app.domain.settlement.errors import ServiceUnavailableError
from app.domain.settlement.ports import BlobStorePort

logger = logging.getLogger(__name__)


class LocalBlobStoreAdapter(BlobStorePort):
    """Stores uploads on disk and returns their public URL."""

    def __init__(self, root: str, public_base_url: str) -> None:
        self._root = Path(root).resolve()
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def upload(self, data: bytes, path: str, content_type: str) -> str:
        """Write ``data`` at ``path`` below the root and return its URL.

        Raises:
            ValueError: If ``path`` escapes the root directory.
            ServiceUnavailableError: If the file could not be written.
        """
        target = (self._root / path).resolve()
        if self._root not in target.parents:
            raise ValueError(f"Blob path escapes storage root: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.error("Blob upload failed for %s: %s", path, exc)
            raise ServiceUnavailableError("blob store", "upload failed") from exc
        logger.info("Stored blob %s (%d bytes, %s)", path, len(data), content_type)
        return f"{self._public_base_url}/{path}"
