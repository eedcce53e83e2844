"""Configuration management for imgview.

This module provides configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the IMGVIEW_
prefix, allowing the server to be tuned without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Keyword arguments passed to ``ImgviewConfig(...)`` (the CLI uses these)
2. Environment variables (IMGVIEW_* prefix)
3. .env file in the working directory
4. Default values defined in ImgviewConfig

Example .env file:
    IMGVIEW_SERVE_DIR=/srv/photos
    IMGVIEW_CACHE_DIR=/var/cache/imgview
    IMGVIEW_THUMB_MAX_WIDTH=300
    IMGVIEW_THUMB_MAX_HEIGHT=240
    IMGVIEW_JPEG_QUALITY=75

No Global Instance
------------------
Unlike a typical settings module there is no module-level ``config`` object.
A configuration is built explicitly (by the CLI, or by a test) and passed to
:func:`imgview.api.main.create_app` and
:class:`imgview.core.thumbnail_service.ThumbnailService`.  Two servers with
different serve directories can therefore live in one process.

Directory Management
--------------------
``serve_dir`` is resolved to an absolute path on initialisation.  When
``cache_dir`` is not set it defaults to a hidden directory inside
``serve_dir`` whose name encodes the thumbnail settings, e.g.
``.imgview-300x240-q75``.  Changing the bounding box or quality therefore
starts a fresh cache instead of serving thumbnails built with the old
settings.  The cache directory is *not* created here; the cache store
creates it lazily on the first write.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CACHE_DIR_PREFIX = ".imgview"


class ImgviewConfig(BaseSettings):
    """Main configuration for the imgview server.

    Attributes
    ----------
    Paths:
        serve_dir : Path
            Directory whose JPEG images are served (resolved to absolute)
        cache_dir : Path | None
            Flat thumbnail cache directory (defaults to
            serve_dir/.imgview-<width>x<height>-q<quality>)

    Thumbnail Settings:
        thumb_max_width : int
            Bounding box width for generated thumbnails
        thumb_max_height : int
            Bounding box height for generated thumbnails
        jpeg_quality : int
            JPEG quality used when re-encoding thumbnails (1-95)

    Gallery Settings:
        page_title : str
            Title of the generated gallery page

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1-65535)
        log_level : str
            Root logging level used by the CLI

    Examples
    --------
        >>> cfg = ImgviewConfig(serve_dir="/srv/photos", _env_file=None)
        >>> cfg.cache_dir
        PosixPath('/srv/photos/.imgview-300x240-q75')
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMGVIEW_",
        case_sensitive=False,
        extra="ignore",
    )

    # Paths
    serve_dir: Path = Field(
        default=Path("."),
        description="Directory containing the images to serve",
    )
    cache_dir: Path | None = Field(
        default=None,
        description="Thumbnail cache directory (defaults to <serve_dir>/.imgview-WxH-qQ)",
    )

    # Thumbnail settings
    thumb_max_width: int = Field(default=300, ge=1, description="Thumbnail bounding box width")
    thumb_max_height: int = Field(default=240, ge=1, description="Thumbnail bounding box height")
    jpeg_quality: int = Field(
        default=75,
        ge=1,
        le=95,
        description="JPEG quality for encoded thumbnails",
    )

    # Gallery settings
    page_title: str = Field(default="Images", description="Gallery page title")

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(default=8080, ge=1, le=65535, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level for the CLI")

    def __init__(self, **kwargs):
        """Initialize configuration and resolve directory paths.

        Args:
            **kwargs: Configuration overrides (typically from the CLI)
        """
        super().__init__(**kwargs)

        self.serve_dir = self.serve_dir.expanduser().resolve()
        if self.cache_dir is None:
            self.cache_dir = self.serve_dir / self.default_cache_dirname()
        else:
            self.cache_dir = self.cache_dir.expanduser().resolve()

    def default_cache_dirname(self) -> str:
        """Name of the default cache directory for the current thumbnail settings.

        Entries are keyed only by source digest, so each combination of
        bounding box and quality gets its own directory.
        """
        return (
            f"{CACHE_DIR_PREFIX}-{self.thumb_max_width}x{self.thumb_max_height}"
            f"-q{self.jpeg_quality}"
        )
