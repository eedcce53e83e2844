"""Content-addressed thumbnail cache backed by a flat directory.

Each entry is a single file named after the lowercase hex SHA-256 digest of
the source image; its content is the encoded thumbnail.  There is no index,
no hierarchy, no expiry and no size bound.

Writes go to a temporary file in the cache directory which is then renamed
onto the final key with :func:`os.replace`.  The rename is atomic on a single
filesystem, so a concurrent :meth:`ThumbnailCacheStore.get` observes either
no entry or a complete blob, never a partial write.  Two requests that miss on
the same digest may both write; the last rename wins and, because the content
is derived from identical bytes, the result is the same entry.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from imgview.core.errors import StorageError
from imgview.core.hasher import ContentDigest

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".put-"
_TMP_SUFFIX = ".tmp"


class ThumbnailCacheStore:
    """Map content digests to previously generated thumbnail blobs.

    Args:
        root: Cache directory.  Created on the first :meth:`put` if missing.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, digest: ContentDigest) -> Path:
        """Return the file that holds (or would hold) the entry for *digest*."""
        return self.root / digest.hex()

    def get(self, digest: ContentDigest) -> bytes | None:
        """Look up the thumbnail stored for *digest*.

        Returns:
            The stored blob, or ``None`` if there is no entry.

        Raises:
            StorageError: If the entry exists but cannot be read, or the cache
                location is unusable.
        """
        path = self.path_for(digest)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Cannot read cache entry {path}: {e}") from e

    def contains(self, digest: ContentDigest) -> bool:
        return self.path_for(digest).is_file()

    def put(self, digest: ContentDigest, blob: bytes) -> None:
        """Persist *blob* under *digest* with an all-or-nothing write.

        Raises:
            StorageError: If the cache directory cannot be created or the
                entry cannot be written.  No partial entry is left behind.
        """
        target = self.path_for(digest)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create cache directory {self.root}: {e}") from e

        tmp_path = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=_TMP_PREFIX, suffix=_TMP_SUFFIX, dir=self.root)
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as handle:
                handle.write(blob)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as e:
            raise StorageError(f"Cannot write cache entry {target}: {e}") from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        logger.debug(f"Cached {len(blob)} bytes at {target}")
