"""Gallery enumeration for the imgview API.

This module isolates the directory scan from ``imgview.api.main`` so route
handlers only deal with HTTP concerns.

The rules are deliberately simple:

- only regular files directly inside the serve directory are considered
  (no recursion)
- hidden files are skipped, which also hides the default cache directory
- a file is listed when its leading bytes sniff as JPEG; the extension is
  irrelevant
- entries are sorted by file name
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import quote

from imgview.api.models import GalleryImage
from imgview.core.sniff import is_jpeg

logger = logging.getLogger(__name__)

_ANCHOR_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def _make_anchor(stem: str, index: int) -> str:
    # CSS class and id names must stay valid for any file name.
    return f"img{index}-{_ANCHOR_UNSAFE.sub('-', stem)}"


def list_gallery_images(serve_dir: Path) -> list[GalleryImage]:
    """List the JPEG images that can be shown in the gallery.

    Args:
        serve_dir: Directory to scan.

    Returns:
        Gallery entries in file name order.  An unreadable directory yields an
        empty list.
    """
    try:
        candidates = sorted(serve_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.error(f"Cannot list {serve_dir}: {e}")
        return []

    images: list[GalleryImage] = []
    for path in candidates:
        if path.name.startswith("."):
            continue
        if not path.is_file():
            continue
        if not is_jpeg(path):
            continue

        quoted = quote(path.name)
        images.append(
            GalleryImage(
                name=path.stem,
                filename=path.name,
                anchor=_make_anchor(path.stem, len(images)),
                thumb=f"thumb/{quoted}",
                url=f"images/{quoted}",
            )
        )

    return images
