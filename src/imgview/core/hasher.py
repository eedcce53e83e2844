"""Content hashing for the thumbnail cache.

Digests are SHA-256 over the *entire* byte content of a source image.  Type
detection only ever looks at a short prefix (see :mod:`imgview.core.sniff`);
the two operations are kept apart so a prefix is never used as hash input.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import BinaryIO

DIGEST_SIZE = 32
_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class ContentDigest:
    """SHA-256 digest of a source image's bytes.

    Two images with identical bytes share a digest regardless of file name,
    so the cache de-duplicates across renames and copies.

    Attributes:
        value: The raw 32-byte digest.
    """

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != DIGEST_SIZE:
            raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(self.value)}")

    def hex(self) -> str:
        """Return the lowercase hex encoding used as the cache key."""
        return self.value.hex()

    def __str__(self) -> str:
        return self.hex()


def digest(data: bytes) -> ContentDigest:
    """Compute the digest of a complete byte string."""
    return ContentDigest(hashlib.sha256(data).digest())


def digest_stream(stream: BinaryIO) -> ContentDigest:
    """Compute the digest of a binary stream, reading until EOF.

    ``read`` may return fewer bytes than requested, so the stream is consumed
    in a loop until it returns an empty chunk.

    Args:
        stream: Binary file-like object positioned at the start of the content.

    Returns:
        Digest of every remaining byte in the stream.
    """
    h = hashlib.sha256()
    while True:
        chunk = stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        h.update(chunk)
    return ContentDigest(h.digest())
