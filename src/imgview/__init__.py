"""imgview - serve a directory of JPEG images with cached thumbnails."""

__version__ = "0.1.0"

from imgview.core.config import ImgviewConfig
from imgview.core.thumbnail_service import Thumbnail, ThumbnailService

__all__ = [
    "ImgviewConfig",
    "Thumbnail",
    "ThumbnailService",
]
