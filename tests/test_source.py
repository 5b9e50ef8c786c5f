"""Tests for document validation and scaled capture."""

import asyncio

import pytest
from PIL import Image

from dither_studio.core.source import (
    CaptureFailure,
    DocumentError,
    ImageDocumentSource,
    NoActiveDocument,
    UnsupportedColorMode,
    validate_document_mode,
)


@pytest.fixture
def rgb_png(tmp_path):
    path = tmp_path / "photo.png"
    Image.new("RGB", (20, 10), (200, 100, 50)).save(path)
    return path


class TestValidateDocumentMode:
    def test_rgb_is_valid(self):
        info = validate_document_mode(Image.new("RGB", (4, 3)))
        assert info.is_valid
        assert info.error_message is None
        assert info.bits_per_channel == 8
        assert info.size == (4, 3)

    def test_rgba_is_valid(self):
        assert validate_document_mode(Image.new("RGBA", (2, 2))).is_valid

    def test_grayscale_rejected(self):
        info = validate_document_mode(Image.new("L", (2, 2)))
        assert not info.is_valid
        assert "RGB mode" in info.error_message

    def test_cmyk_rejected(self):
        info = validate_document_mode(Image.new("CMYK", (2, 2)))
        assert not info.is_valid
        assert "RGB mode" in info.error_message

    def test_sixteen_bit_reports_depth(self):
        info = validate_document_mode(Image.new("I;16", (2, 2)))
        assert not info.is_valid
        assert info.bits_per_channel == 16


class TestImageDocumentSource:
    def test_capture_scales(self, rgb_png):
        source = ImageDocumentSource(rgb_png)
        buf = asyncio.run(source.capture(50))
        assert buf.size == (10, 5)
        assert buf.pixel(0, 0)[3] == 255

    def test_capture_full_size_keeps_pixels(self, rgb_png):
        source = ImageDocumentSource(rgb_png)
        buf = asyncio.run(source.capture(100))
        assert buf.size == (20, 10)
        assert buf.pixel(3, 4) == (200, 100, 50, 255)

    def test_capture_keeps_alpha(self, tmp_path):
        path = tmp_path / "alpha.png"
        Image.new("RGBA", (10, 10), (10, 20, 30, 40)).save(path)
        buf = asyncio.run(ImageDocumentSource(path).capture(100))
        assert buf.pixel(5, 5)[3] == 40

    def test_no_document(self):
        with pytest.raises(NoActiveDocument):
            asyncio.run(ImageDocumentSource().capture(10))

    def test_unsupported_mode(self, tmp_path):
        path = tmp_path / "gray.png"
        Image.new("L", (10, 10), 128).save(path)
        with pytest.raises(UnsupportedColorMode, match="RGB mode"):
            asyncio.run(ImageDocumentSource(path).capture(50))

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(CaptureFailure):
            asyncio.run(ImageDocumentSource(path).capture(10))

    def test_missing_file(self, tmp_path):
        with pytest.raises(CaptureFailure, match="File not found"):
            asyncio.run(ImageDocumentSource(tmp_path / "gone.png").capture(10))

    def test_scale_leaves_no_pixels(self, tmp_path):
        path = tmp_path / "tiny.png"
        Image.new("RGB", (5, 5)).save(path)
        with pytest.raises(CaptureFailure, match="no pixels"):
            asyncio.run(ImageDocumentSource(path).capture(5))

    def test_errors_share_base_class(self):
        for exc in (NoActiveDocument, UnsupportedColorMode, CaptureFailure):
            assert issubclass(exc, DocumentError)


class TestOpen:
    def test_open_sets_document(self, rgb_png):
        source = ImageDocumentSource()
        info = source.open(rgb_png)
        assert source.has_document
        assert info.size == (20, 10)
        assert info.mode == "RGB"

    def test_open_missing_keeps_previous(self, rgb_png, tmp_path):
        source = ImageDocumentSource(rgb_png)
        with pytest.raises(CaptureFailure):
            source.open(tmp_path / "gone.png")
        assert source.path == rgb_png

    def test_open_reports_invalid_mode(self, tmp_path):
        path = tmp_path / "gray.png"
        Image.new("L", (3, 3)).save(path)
        info = ImageDocumentSource().open(path)
        assert not info.is_valid

    def test_close(self, rgb_png):
        source = ImageDocumentSource(rgb_png)
        source.close()
        assert not source.has_document
        with pytest.raises(NoActiveDocument):
            source.info()
