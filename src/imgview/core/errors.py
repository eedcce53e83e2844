"""Error taxonomy for the thumbnail pipeline.

``NotFoundError``, ``DecodeError`` and ``EncodeError`` are fatal to a single
request and are mapped to HTTP statuses by :mod:`imgview.api.main`.
``StorageError`` is recovered inside
:class:`~imgview.core.thumbnail_service.ThumbnailService` and never reaches the
HTTP layer.
"""


class ImgviewError(Exception):
    """Base class for all imgview errors."""

    pass


class NotFoundError(ImgviewError):
    """The requested source image is missing or unreadable."""

    pass


class DecodeError(ImgviewError):
    """The source bytes are not a decodable JPEG image."""

    pass


class EncodeError(ImgviewError):
    """The thumbnail could not be encoded as JPEG."""

    pass


class StorageError(ImgviewError):
    """The thumbnail cache could not be read or written."""

    pass
