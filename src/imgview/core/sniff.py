"""MIME type detection from a file's leading bytes.

Only the first :data:`SNIFF_LENGTH` bytes are inspected.  This is a cheap
pre-filter used by the gallery listing; it is never used as hash input and it
does not guarantee the file decodes.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SNIFF_LENGTH = 512
JPEG_MIME = "image/jpeg"
DEFAULT_MIME = "application/octet-stream"

# (magic prefix, mime type), checked in order.
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\xff\xd8\xff", JPEG_MIME),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"%PDF-", "application/pdf"),
]


def sniff_type(prefix: bytes) -> str:
    """Return the MIME type suggested by the magic bytes in *prefix*.

    Args:
        prefix: Leading bytes of a file.  Anything past ``SNIFF_LENGTH`` is
            ignored.

    Returns:
        A MIME type string, ``application/octet-stream`` when unrecognised.
    """
    head = prefix[:SNIFF_LENGTH]
    for magic, mime in _SIGNATURES:
        if head.startswith(magic):
            return mime
    # RIFF container: bytes 8-14 identify the payload.
    if head[:4] == b"RIFF" and head[8:14] == b"WEBPVP":
        return "image/webp"
    return DEFAULT_MIME


def sniff_file(path: Path) -> str | None:
    """Sniff the MIME type of a file on disk.

    Returns:
        The detected MIME type, or ``None`` if the file could not be read.
    """
    try:
        with open(path, "rb") as handle:
            prefix = handle.read(SNIFF_LENGTH)
    except OSError as e:
        logger.debug(f"Cannot sniff {path}: {e}")
        return None
    return sniff_type(prefix)


def is_jpeg(path: Path) -> bool:
    """Return ``True`` when the file's leading bytes look like a JPEG."""
    return sniff_file(path) == JPEG_MIME
