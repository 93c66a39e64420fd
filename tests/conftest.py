"""
Pytest fixtures for artwork preflight tests.

Builds artwork in memory: raster images with Pillow, PDFs with ReportLab
(rotated or cropped through PyMuPDF) and PSD headers with struct, so no
binary fixtures live in the repo.
"""
import io
import os
import struct

import fitz  # PyMuPDF
import pytest

# Set test environment before importing app
os.environ['FLASK_ENV'] = 'testing'
os.environ['APP_STAGE'] = 'test'
os.environ['SECRET_KEY'] = 'test-secret-key'

from PIL import Image  # noqa: E402
from reportlab.pdfgen import canvas  # noqa: E402


@pytest.fixture
def make_image():
    """Factory: encoded raster bytes with an optional DPI tag."""
    def _make(width=400, height=300, fmt="PNG", dpi=None, mode="RGB", color=(255, 0, 0)):
        if mode == "RGBA" and len(color) == 3:
            color = color + (128,)
        img = Image.new(mode, (width, height), color)
        buf = io.BytesIO()
        params = {}
        if dpi is not None:
            params["dpi"] = (dpi, dpi)
        img.save(buf, format=fmt, **params)
        return buf.getvalue()
    return _make


@pytest.fixture
def make_pdf():
    """Factory: PDF bytes with the given page size in points, optionally rotated or cropped."""
    def _make(width_pts=864, height_pts=756, pages=1, rotation=0, cropbox=None):
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(width_pts, height_pts))
        for i in range(pages):
            c.drawString(36, 36, f"Deck artwork page {i + 1}")
            c.showPage()
        c.save()
        if not rotation and cropbox is None:
            return buf.getvalue()

        with fitz.open(stream=buf.getvalue(), filetype="pdf") as doc:
            page = doc.load_page(0)
            if rotation:
                page.set_rotation(rotation)
            if cropbox is not None:
                page.set_cropbox(fitz.Rect(*cropbox))
            return doc.tobytes()
    return _make


@pytest.fixture
def make_psd():
    """Factory: minimal PSD header, color mode section and ResolutionInfo resource."""
    def _make(width=1600, height=1400, resolution=300, channels=3, depth=8, version=1):
        header = (
            b"8BPS"
            + struct.pack(">H", version)
            + b"\x00" * 6
            + struct.pack(">HIIHH", channels, height, width, depth, 3)
        )
        color_mode = struct.pack(">I", 0)

        resources = b""
        if resolution is not None:
            fixed = int(round(resolution * 65536))
            data = struct.pack(">IHHIHH", fixed, 1, 1, fixed, 1, 1)
            resources = b"8BIM" + struct.pack(">H", 0x03ED) + b"\x00\x00" + struct.pack(">I", len(data)) + data

        layers = struct.pack(">I", 0)
        image_data = struct.pack(">H", 0)
        return header + color_mode + struct.pack(">I", len(resources)) + resources + layers + image_data
    return _make


@pytest.fixture
def app():
    """Create application for testing (rate limiting off)."""
    from app import create_app
    return create_app({
        "TESTING": True,
        "RATELIMIT_ENABLED": False,
    })


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()
