"""Pydantic response models for the imgview API.

Models
------
GalleryImage
    One displayable image: its display name and the relative URLs of its
    thumbnail and full-size file.
GalleryListing
    Response body of ``GET /api/images``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class GalleryImage(BaseModel):
    """A JPEG image in the serve directory.

    Attributes:
        name: File name without its extension, used as the caption.
        filename: File name on disk.
        anchor: HTML id used by the gallery page's lightbox.
        thumb: Relative URL of the thumbnail (``thumb/<file>``).
        url: Relative URL of the full image (``images/<file>``).
    """

    name: str = Field(..., description="File name without extension.")
    filename: str = Field(..., description="File name on disk.")
    anchor: str = Field(..., description="HTML element id for the lightbox.")
    thumb: str = Field(..., description="Relative thumbnail URL.")
    url: str = Field(..., description="Relative full-size image URL.")


class GalleryListing(BaseModel):
    """Response body for ``GET /api/images``."""

    title: str = Field(..., description="Gallery page title.")
    images: list[GalleryImage] = Field(default_factory=list)
