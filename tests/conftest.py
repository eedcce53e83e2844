"""Shared pytest fixtures for imgview tests."""

import io
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from imgview.api.main import create_app
from imgview.core.config import ImgviewConfig


def make_jpeg_bytes(
    width: int,
    height: int,
    color: tuple[int, int, int] = (200, 40, 40),
    mode: str = "RGB",
) -> bytes:
    """Encode a solid-colour JPEG of the given size.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        color: RGB fill colour
        mode: Pillow mode of the image (RGB or L)

    Returns:
        JPEG file content
    """
    fill = color if mode == "RGB" else color[0]
    image = Image.new(mode, (width, height), fill)
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=90)
    return buffer.getvalue()


def make_png_bytes(width: int = 32, height: int = 32) -> bytes:
    """Encode a small PNG (a valid image that is not a JPEG)."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (0, 128, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


def image_size(data: bytes) -> tuple[int, int]:
    """Decode image bytes and return ``(width, height)``."""
    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "JPEG"
        return image.size


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def serve_dir(temp_dir: Path) -> Path:
    """Create an empty directory to serve images from."""
    path = temp_dir / "photos"
    path.mkdir()
    return path


@pytest.fixture
def test_config(serve_dir: Path) -> ImgviewConfig:
    """Create a test configuration rooted at the temporary serve directory.

    Args:
        serve_dir: Serve directory from fixture

    Returns:
        ImgviewConfig instance for testing
    """
    return ImgviewConfig(serve_dir=str(serve_dir), _env_file=None)


@pytest.fixture
def write_jpeg(serve_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes a JPEG into the serve directory."""

    def _write(name: str, width: int = 1200, height: int = 800, **kwargs) -> Path:
        path = serve_dir / name
        path.write_bytes(make_jpeg_bytes(width, height, **kwargs))
        return path

    return _write


@pytest.fixture
def test_client(test_config: ImgviewConfig) -> Generator[TestClient, None, None]:
    """Create a FastAPI TestClient for an app serving the temporary directory."""
    app = create_app(test_config)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def jpeg_factory() -> Callable[..., bytes]:
    """Expose :func:`make_jpeg_bytes` to tests."""
    return make_jpeg_bytes


@pytest.fixture
def png_bytes() -> bytes:
    """A valid PNG image."""
    return make_png_bytes()


@pytest.fixture
def decode_size() -> Callable[[bytes], tuple[int, int]]:
    """Expose :func:`image_size` to tests."""
    return image_size
