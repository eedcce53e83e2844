"""JPEG thumbnail transform: decode, resize into a bounding box, re-encode.

The transform is a pure bytes-to-bytes function with no filesystem access,
which keeps it easy to run from worker threads and easy to test.

Sizing Rules
------------
- The output fits within ``max_width`` x ``max_height``.
- The aspect ratio is preserved (within integer rounding).
- Images that already fit are never upscaled; their size is kept as is.

Example: a 1200x800 source in a 300x240 box becomes 300x200.
"""

from __future__ import annotations

import io
import logging

from PIL import Image, JpegImagePlugin, UnidentifiedImageError

from imgview.core.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_WIDTH = 300
DEFAULT_MAX_HEIGHT = 240
DEFAULT_QUALITY = 75

# JPEG decoder may downscale by DCT while decoding as long as the result stays
# at least this many times larger than the target.
_DRAFT_GAP = 2

_JPEG_MODES = ("L", "RGB", "CMYK")


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Compute the size of an image scaled down to fit a bounding box.

    The width is constrained first, then the height, using integer
    arithmetic.  Neither side drops below 1 pixel.

    Args:
        width: Source width in pixels.
        height: Source height in pixels.
        max_width: Bounding box width.
        max_height: Bounding box height.

    Returns:
        ``(new_width, new_height)``.  Equal to the source size when the source
        already fits.
    """
    if width <= max_width and height <= max_height:
        return width, height

    new_width, new_height = width, height
    if new_width > max_width:
        new_height = max(1, height * max_width // width)
        new_width = max_width
    if new_height > max_height:
        new_width = max(1, new_width * max_height // new_height)
        new_height = max_height
    return new_width, new_height


class ThumbnailTransformer:
    """Turn JPEG bytes into a bounded-size JPEG thumbnail.

    Args:
        max_width: Bounding box width (default 300).
        max_height: Bounding box height (default 240).
        quality: JPEG quality for the re-encoded thumbnail (1-95).
    """

    def __init__(
        self,
        max_width: int = DEFAULT_MAX_WIDTH,
        max_height: int = DEFAULT_MAX_HEIGHT,
        quality: int = DEFAULT_QUALITY,
    ):
        if max_width < 1 or max_height < 1:
            raise ValueError(f"Bounding box must be positive, got {max_width}x{max_height}")
        if not 1 <= quality <= 95:
            raise ValueError(f"JPEG quality must be 1-95, got {quality}")
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality

    def transform(self, source_bytes: bytes) -> bytes:
        """Produce a thumbnail from JPEG source bytes.

        Args:
            source_bytes: Full content of a JPEG file.

        Returns:
            Encoded JPEG thumbnail bytes.

        Raises:
            DecodeError: If the bytes are not a decodable JPEG.
            EncodeError: If the thumbnail cannot be encoded.
        """
        image, target = self._decode(source_bytes)

        if image.size != target:
            logger.debug(f"Resizing {image.width}x{image.height} to {target[0]}x{target[1]}")
            image = image.resize(target, Image.Resampling.LANCZOS)

        if image.mode not in _JPEG_MODES:
            image = image.convert("RGB")

        return self.encode(image)

    def _decode(self, source_bytes: bytes) -> tuple[Image.Image, tuple[int, int]]:
        """Decode JPEG bytes and size the thumbnail from the original dimensions."""
        try:
            image = Image.open(io.BytesIO(source_bytes))
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise DecodeError(f"Cannot identify image: {e}") from e

        # Camera MPO files are baseline JPEGs with extra frames; Pillow's MPO
        # reader subclasses the JPEG one and decodes the primary frame.
        if not isinstance(image, JpegImagePlugin.JpegImageFile):
            raise DecodeError(f"Expected JPEG data, got {image.format}")

        # Let libjpeg do a cheap power-of-two reduction before the Lanczos pass.
        target = fit_within(image.width, image.height, self.max_width, self.max_height)
        if target != image.size:
            image.draft(None, (target[0] * _DRAFT_GAP, target[1] * _DRAFT_GAP))

        try:
            image.load()
        except (Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
            raise DecodeError(f"Cannot decode JPEG data: {e}") from e
        return image, target

    def encode(self, image: Image.Image) -> bytes:
        """Encode a Pillow image as JPEG bytes.

        Raises:
            EncodeError: For zero-sized images or any encoder failure.
        """
        if image.width == 0 or image.height == 0:
            raise EncodeError(f"Cannot encode a {image.width}x{image.height} image")

        buffer = io.BytesIO()
        save_kwargs = {"format": "JPEG", "quality": self.quality}
        icc_profile = image.info.get("icc_profile")
        if icc_profile:
            save_kwargs["icc_profile"] = icc_profile
        try:
            image.save(buffer, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"JPEG encoding failed: {e}") from e
        return buffer.getvalue()
