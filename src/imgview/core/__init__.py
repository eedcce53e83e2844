"""Core thumbnail pipeline for imgview.

This package holds everything that does not depend on HTTP:

- **Content Hasher** (hasher.py): SHA-256 digests over full file content
- **Type Sniffer** (sniff.py): MIME detection from the first 512 bytes
- **Cache Store** (cache_store.py): flat, content-addressed thumbnail cache
  with atomic writes
- **Thumbnail Transformer** (transformer.py): JPEG decode, Lanczos resize into
  a bounding box, JPEG encode
- **Thumbnail Service** (thumbnail_service.py): hit/miss orchestration
- **ImgviewConfig** (config.py): Pydantic Settings configuration
- **Errors** (errors.py): NotFoundError, DecodeError, EncodeError, StorageError

Usage Example
-------------
    from imgview.core import ImgviewConfig, ThumbnailService

    service = ThumbnailService(ImgviewConfig(serve_dir="/srv/photos"))
    thumb = service.get_thumbnail("holiday.jpg")
    print(thumb.content_type, len(thumb.data), thumb.cache_hit)
"""

from imgview.core.cache_store import ThumbnailCacheStore
from imgview.core.config import ImgviewConfig
from imgview.core.errors import (
    DecodeError,
    EncodeError,
    ImgviewError,
    NotFoundError,
    StorageError,
)
from imgview.core.hasher import ContentDigest, digest
from imgview.core.sniff import is_jpeg, sniff_file, sniff_type
from imgview.core.thumbnail_service import Thumbnail, ThumbnailService
from imgview.core.transformer import ThumbnailTransformer, fit_within

__all__ = [
    "ContentDigest",
    "DecodeError",
    "EncodeError",
    "ImgviewConfig",
    "ImgviewError",
    "NotFoundError",
    "StorageError",
    "Thumbnail",
    "ThumbnailCacheStore",
    "ThumbnailService",
    "ThumbnailTransformer",
    "digest",
    "fit_within",
    "is_jpeg",
    "sniff_file",
    "sniff_type",
]
