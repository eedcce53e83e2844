"""Thumbnail orchestration: resolve, hash, look up, transform, persist.

:class:`ThumbnailService` ties together the content hasher, the cache store
and the transformer.  Each call is independent: there is no per-digest lock,
so concurrent misses for the same image may transform redundantly.  The cache
store's atomic writes make the duplicate work harmless.

Failure Policy
--------------
- Missing or unreadable sources raise :class:`NotFoundError`.
- Invalid JPEG data raises :class:`DecodeError`; encoder failures raise
  :class:`EncodeError`.
- Cache read failures are treated as a miss and cache write failures are
  logged; in both cases the request is still served.
- Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from imgview.core.cache_store import ThumbnailCacheStore
from imgview.core.config import ImgviewConfig
from imgview.core.errors import NotFoundError, StorageError
from imgview.core.hasher import digest
from imgview.core.sniff import JPEG_MIME
from imgview.core.transformer import ThumbnailTransformer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thumbnail:
    """A thumbnail ready to be written to an HTTP response.

    Attributes:
        data: Encoded JPEG bytes.
        content_type: Always ``image/jpeg``.
        digest: Hex digest of the source content (the cache key).
        cache_hit: Whether the bytes came from the cache.
    """

    data: bytes
    content_type: str
    digest: str
    cache_hit: bool


class ThumbnailService:
    """Serve content-addressed thumbnails for images in a directory.

    Args:
        config: Server configuration (serve directory, cache directory,
            bounding box and JPEG quality).
        store: Cache store override.  Defaults to a store rooted at
            ``config.cache_dir``.
        transformer: Transformer override.  Defaults to one built from the
            configured bounding box and quality.
    """

    def __init__(
        self,
        config: ImgviewConfig,
        store: ThumbnailCacheStore | None = None,
        transformer: ThumbnailTransformer | None = None,
    ):
        self.config = config
        self.serve_dir = Path(config.serve_dir)
        self.store = store or ThumbnailCacheStore(config.cache_dir)
        self.transformer = transformer or ThumbnailTransformer(
            max_width=config.thumb_max_width,
            max_height=config.thumb_max_height,
            quality=config.jpeg_quality,
        )

    def resolve_source(self, source_key: str) -> Path:
        """Map a request key to a file inside the serve directory.

        Only the final path component of the key is used, so keys cannot
        escape the serve directory.  Hidden names are rejected, which also
        keeps the default cache directory out of reach.

        Raises:
            NotFoundError: If the key is empty, hidden, or not a regular file.
        """
        name = PurePosixPath(source_key.replace("\\", "/")).name
        if not name or name in (".", "..") or name.startswith("."):
            raise NotFoundError(f"Invalid image name: {source_key!r}")

        path = self.serve_dir / name
        if not path.is_file():
            raise NotFoundError(f"Image not found: {name}")
        return path

    def read_source(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise NotFoundError(f"Cannot read image {path.name}: {e}") from e

    def get_thumbnail(self, source_key: str) -> Thumbnail:
        """Return the thumbnail for a source image, generating it on a miss.

        Args:
            source_key: Image file name (a URL path is accepted; only its last
                component is used).

        Returns:
            The thumbnail bytes and metadata.

        Raises:
            NotFoundError: Source missing or unreadable.
            DecodeError: Source is not a valid JPEG.
            EncodeError: Thumbnail could not be encoded.
        """
        path = self.resolve_source(source_key)
        source_bytes = self.read_source(path)
        content_digest = digest(source_bytes)
        key = content_digest.hex()

        try:
            cached = self.store.get(content_digest)
        except StorageError as e:
            logger.warning(f"Cache read failed for {path.name}, regenerating: {e}")
            cached = None

        if cached is not None:
            return Thumbnail(cached, JPEG_MIME, key, cache_hit=True)

        logger.debug(f"No cache for {path.name} ({key})")
        blob = self.transformer.transform(source_bytes)

        try:
            self.store.put(content_digest, blob)
        except StorageError as e:
            # Serve the fresh thumbnail without caching it.
            logger.warning(f"Cache write failed for {path.name}: {e}")

        return Thumbnail(blob, JPEG_MIME, key, cache_hit=False)
