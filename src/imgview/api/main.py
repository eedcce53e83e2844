"""imgview - FastAPI Application.

This module builds the web application and provides the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
- **Configuration** is an explicit :class:`~imgview.core.config.ImgviewConfig`
  passed to :func:`create_app`; the application keeps it on ``app.state``.
- **Thumbnails** are produced by
  :class:`~imgview.core.thumbnail_service.ThumbnailService`.  Its blocking
  file and image work runs in Starlette's thread pool, so concurrent requests
  proceed in parallel.  A client that goes away does not interrupt a running
  transform; it finishes and its cache write completes.
- **Full-size images** are served by FastAPI's ``StaticFiles`` mounted on the
  serve directory.
- **The gallery page** is rendered with Jinja2 from ``templates/index.html``.
- **Request logging** is an HTTP middleware that logs one line per request.

Endpoints
---------
========  ==================  ==========================================
Method    Path                Purpose
========  ==================  ==========================================
GET       ``/``               Gallery HTML page
GET       ``/status``         Liveness check (plain ``OK``)
GET       ``/thumb/{name}``   JPEG thumbnail for an image
GET       ``/images/{name}``  Full-size image file
GET       ``/api/images``     JSON gallery listing
========  ==================  ==========================================

Usage
-----
CLI (installed entry point)::

    imgview [address:port] [directory]

Direct invocation::

    python -m imgview.api.main :8080 ~/Pictures
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, PackageLoader, select_autoescape
from starlette.concurrency import run_in_threadpool

from imgview import __version__
from imgview.api.gallery import list_gallery_images
from imgview.api.models import GalleryListing
from imgview.core.config import ImgviewConfig
from imgview.core.errors import DecodeError, EncodeError, NotFoundError
from imgview.core.thumbnail_service import ThumbnailService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

jinja_env = Environment(
    loader=PackageLoader("imgview", "templates"),
    autoescape=select_autoescape(["html"]),
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Middleware.
# ---------------------------------------------------------------------------


async def log_requests(request: Request, call_next) -> Response:
    """Log ``<status> <method> <client> <url>`` for every request."""
    response = await call_next(request)
    client = request.client.host if request.client else "-"
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    logger.info(f"{response.status_code} {request.method} {client} {target}")
    return response


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/status", response_class=PlainTextResponse)
async def status() -> str:
    """Liveness check."""
    return "OK"


@router.get("/thumb/{name}")
async def get_thumbnail(name: str, request: Request) -> Response:
    """Return the JPEG thumbnail for an image in the serve directory.

    Args:
        name: File name of the source image.
        request: Incoming request (used to reach the thumbnail service).

    Returns:
        The thumbnail bytes with ``Content-Type: image/jpeg``.  The
        ``X-Imgview-Cache`` header reports ``hit`` or ``miss`` and the
        ``ETag`` is the source content digest.

    Raises:
        HTTPException: 404 for a missing image, 415 for a file that is not a
            valid JPEG, 500 if the thumbnail cannot be encoded.
    """
    service: ThumbnailService = request.app.state.thumbnail_service
    try:
        thumb = await run_in_threadpool(service.get_thumbnail, name)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except DecodeError as e:
        logger.warning(f"Cannot decode {name}: {e}")
        raise HTTPException(status_code=415, detail=str(e)) from e
    except EncodeError as e:
        logger.error(f"Cannot encode thumbnail for {name}: {e}")
        raise HTTPException(status_code=500, detail="Unable to encode thumbnail") from e

    return Response(
        content=thumb.data,
        media_type=thumb.content_type,
        headers={
            "ETag": f'"{thumb.digest}"',
            "X-Imgview-Cache": "hit" if thumb.cache_hit else "miss",
        },
    )


@router.get("/api/images", response_model=GalleryListing)
async def get_images(request: Request) -> GalleryListing:
    """Return the gallery listing as JSON."""
    config: ImgviewConfig = request.app.state.config
    images = await run_in_threadpool(list_gallery_images, config.serve_dir)
    return GalleryListing(title=config.page_title, images=images)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Render the gallery page for the serve directory."""
    config: ImgviewConfig = request.app.state.config
    images = await run_in_threadpool(list_gallery_images, config.serve_dir)
    template = jinja_env.get_template("index.html")
    return HTMLResponse(content=template.render(title=config.page_title, images=images))


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(config: ImgviewConfig | None = None) -> FastAPI:
    """Build the FastAPI application for one serve directory.

    Args:
        config: Server configuration.  When omitted it is loaded from the
            environment (``IMGVIEW_*`` variables and ``.env``).

    Returns:
        A configured FastAPI application.
    """
    config = config or ImgviewConfig()

    app = FastAPI(
        title="imgview",
        description="JPEG gallery with content-addressed thumbnail cache.",
        version=__version__,
    )
    app.state.config = config
    app.state.thumbnail_service = ThumbnailService(config)

    app.middleware("http")(log_requests)
    app.include_router(router)
    # Checked on the first /images request instead of at startup.
    app.mount(
        "/images",
        StaticFiles(directory=str(config.serve_dir), check_dir=False),
        name="images",
    )

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def parse_listen(value: str) -> tuple[str | None, int]:
    """Parse a listen address of the form ``host:port``, ``:port`` or ``port``.

    IPv6 hosts are written in brackets, e.g. ``[::1]:8080``; the brackets
    are stripped from the returned host.

    Returns:
        ``(host, port)`` where ``host`` is ``None`` when omitted.

    Raises:
        argparse.ArgumentTypeError: If the port is not a valid number.
    """
    host, sep, port_text = value.rpartition(":")
    if not sep:
        host, port_text = "", value
    try:
        port = int(port_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid listen address: {value!r}") from None
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return (host or None), port


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="imgview",
        description="Serve a directory of JPEG images with a thumbnail gallery.",
    )
    p.add_argument(
        "listen",
        nargs="?",
        type=parse_listen,
        default=None,
        help="Listen address, [host]:port (default :8080)",
    )
    p.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to serve (default: current directory)",
    )
    return p


def config_from_args(args: argparse.Namespace) -> ImgviewConfig:
    """Merge command line arguments over the environment configuration."""
    overrides: dict = {}
    if args.listen is not None:
        host, port = args.listen
        if host is not None:
            overrides["server_host"] = host
        overrides["server_port"] = port
    if args.directory is not None:
        overrides["serve_dir"] = Path(args.directory)
    return ImgviewConfig(**overrides)


def main(argv: list[str] | None = None) -> None:
    """Launch the uvicorn ASGI server.

    Registered as the ``imgview`` console script in ``pyproject.toml``.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config_from_args(args)
    if not config.serve_dir.is_dir():
        parser.error(f"not a directory: {config.serve_dir}")

    import uvicorn

    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)
    logger.info(f"Usage: {Path(sys.argv[0]).name} [address:port] [directory]")
    logger.info(f"Listening on: {config.server_host}:{config.server_port}")
    logger.info(f"Serving from: {config.serve_dir}")
    logger.info(f"Thumbnail cache: {config.cache_dir}")

    uvicorn.run(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
