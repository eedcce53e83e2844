"""Integration tests for imgview.api.main — FastAPI routes.

All tests use the FastAPI TestClient against an application built from a
temporary serve directory.  Tests cover every endpoint:

- ``GET /status`` — liveness check.
- ``GET /thumb/{name}`` — thumbnails, cache headers and error statuses.
- ``GET /images/{name}`` — static file serving.
- ``GET /api/images`` — JSON gallery listing.
- ``GET /`` — gallery HTML page.
"""

from __future__ import annotations

import logging

# ---------------------------------------------------------------------------
# Status endpoint tests.
# ---------------------------------------------------------------------------


class TestStatus:
    """Test GET /status."""

    def test_status_ok(self, test_client):
        resp = test_client.get("/status")
        assert resp.status_code == 200
        assert resp.text == "OK"

    def test_requests_are_logged(self, test_client, caplog):
        """The middleware logs status, method, client and path."""
        with caplog.at_level(logging.INFO, logger="imgview.api.main"):
            test_client.get("/status?check=1")
        assert "200 GET testclient /status?check=1" in caplog.text


# ---------------------------------------------------------------------------
# Thumbnail endpoint tests.
# ---------------------------------------------------------------------------


class TestThumbnail:
    """Test GET /thumb/{name}."""

    def test_thumbnail_success(self, test_client, write_jpeg, decode_size):
        write_jpeg("beach.jpg", 1200, 800)
        resp = test_client.get("/thumb/beach.jpg")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/jpeg"
        assert int(resp.headers["content-length"]) == len(resp.content)
        assert decode_size(resp.content) == (300, 200)

    def test_miss_then_hit_headers(self, test_client, write_jpeg):
        write_jpeg("beach.jpg")
        first = test_client.get("/thumb/beach.jpg")
        second = test_client.get("/thumb/beach.jpg")
        assert first.headers["x-imgview-cache"] == "miss"
        assert second.headers["x-imgview-cache"] == "hit"
        assert first.headers["etag"] == second.headers["etag"]
        assert first.content == second.content

    def test_cache_written_to_disk(self, test_client, test_config, write_jpeg):
        write_jpeg("beach.jpg")
        resp = test_client.get("/thumb/beach.jpg")
        key = resp.headers["etag"].strip('"')
        assert (test_config.cache_dir / key).read_bytes() == resp.content

    def test_missing_image_404(self, test_client):
        resp = test_client.get("/thumb/missing.jpg")
        assert resp.status_code == 404

    def test_hidden_name_404(self, test_client):
        resp = test_client.get("/thumb/.imgview")
        assert resp.status_code == 404

    def test_invalid_jpeg_415(self, test_client, serve_dir, png_bytes):
        (serve_dir / "fake.jpg").write_bytes(png_bytes)
        resp = test_client.get("/thumb/fake.jpg")
        assert resp.status_code == 415


# ---------------------------------------------------------------------------
# Static image tests.
# ---------------------------------------------------------------------------


class TestImages:
    """Test GET /images/{name}."""

    def test_serves_original_bytes(self, test_client, write_jpeg):
        path = write_jpeg("beach.jpg", 64, 48)
        resp = test_client.get("/images/beach.jpg")
        assert resp.status_code == 200
        assert resp.content == path.read_bytes()

    def test_missing_image_404(self, test_client):
        assert test_client.get("/images/missing.jpg").status_code == 404


# ---------------------------------------------------------------------------
# Gallery listing tests.
# ---------------------------------------------------------------------------


class TestGalleryListing:
    """Test GET /api/images."""

    def test_empty_directory(self, test_client):
        resp = test_client.get("/api/images")
        assert resp.status_code == 200
        assert resp.json() == {"title": "Images", "images": []}

    def test_lists_only_jpegs(self, test_client, write_jpeg, serve_dir):
        write_jpeg("one.jpg", 10, 10)
        write_jpeg("two.jpg", 10, 10)
        (serve_dir / "readme.txt").write_text("not an image")
        data = test_client.get("/api/images").json()
        assert [img["filename"] for img in data["images"]] == ["one.jpg", "two.jpg"]
        assert data["images"][0]["thumb"] == "thumb/one.jpg"

    def test_cache_directory_not_listed(self, test_client, write_jpeg):
        """Thumbnails in the hidden cache directory never show up."""
        write_jpeg("one.jpg")
        test_client.get("/thumb/one.jpg")
        data = test_client.get("/api/images").json()
        assert len(data["images"]) == 1


# ---------------------------------------------------------------------------
# Gallery page tests.
# ---------------------------------------------------------------------------


class TestIndexPage:
    """Test GET /."""

    def test_index_returns_html(self, test_client):
        resp = test_client.get("/")
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "<title>Images</title>" in resp.text

    def test_index_links_images(self, test_client, write_jpeg):
        write_jpeg("sunset.jpg", 10, 10)
        html = test_client.get("/").text
        assert 'src="thumb/sunset.jpg"' in html
        assert "images/sunset.jpg" in html
        assert ">sunset<" in html

    def test_index_escapes_names(self, test_client, write_jpeg):
        write_jpeg("a&b.jpg", 10, 10)
        html = test_client.get("/").text
        assert "a&amp;b" in html
