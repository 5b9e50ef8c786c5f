"""Source documents: validation and scaled pixel capture.

A document is an image file on disk. Capturing reads it, resizes it to the
processing scale and hands back an RGBA PixelBuffer.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from dither_studio.core.buffer import PixelBuffer
from dither_studio.core.geometry import Size, processed_size

logger = logging.getLogger(__name__)

RGB_MODES = ("RGB", "RGBA", "RGBX")

# Bits per channel for Pillow modes that are not 8-bit.
_MODE_BITS = {
    "1": 1,
    "I": 32,
    "F": 32,
    "I;16": 16,
    "I;16B": 16,
    "I;16L": 16,
    "I;16N": 16,
}


class DocumentError(Exception):
    """Base class for failures at the document boundary."""


class NoActiveDocument(DocumentError):
    pass


class UnsupportedColorMode(DocumentError):
    pass


class CaptureFailure(DocumentError):
    pass


@dataclass
class DocumentInfo:
    """Result of checking whether a document can be processed."""

    width: int
    height: int
    mode: str
    bits_per_channel: int
    is_valid: bool = True
    error_message: str | None = None

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


def validate_document_mode(img: Image.Image) -> DocumentInfo:
    """Check that an image is 8-bit RGB."""
    info = DocumentInfo(
        width=img.width,
        height=img.height,
        mode=img.mode,
        bits_per_channel=_MODE_BITS.get(img.mode, 8),
    )

    if img.mode not in RGB_MODES:
        info.is_valid = False
        info.error_message = (
            "Document must be in RGB mode. Convert the image to RGB color first."
        )
        return info

    if info.bits_per_channel != 8:
        info.is_valid = False
        info.error_message = (
            "Document must be 8-bit. Convert the image to 8 bits per channel first."
        )

    return info


class DocumentSource(Protocol):
    async def capture(self, scale_percent: int) -> PixelBuffer: ...


class ImageDocumentSource:
    """Reads pixels from an image file at a given processing scale."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path: Path | None = Path(path) if path is not None else None

    def open(self, path: str | Path) -> DocumentInfo:
        """Make ``path`` the active document and return its info.

        The active document only changes if the file can be read.
        """
        path = Path(path)
        with self._open_image(path) as img:
            info = validate_document_mode(img)
        self.path = path
        return info

    def close(self) -> None:
        self.path = None

    @property
    def has_document(self) -> bool:
        return self.path is not None

    def info(self) -> DocumentInfo:
        path = self._require_path()
        with self._open_image(path) as img:
            return validate_document_mode(img)

    async def capture(self, scale_percent: int) -> PixelBuffer:
        """Capture the document resized to ``scale_percent``.

        Raises:
            NoActiveDocument: no document is open.
            UnsupportedColorMode: the document is not 8-bit RGB.
            CaptureFailure: the file could not be read or resized.
        """
        path = self._require_path()
        return await asyncio.to_thread(self._read_pixels, path, scale_percent)

    def _require_path(self) -> Path:
        if self.path is None:
            raise NoActiveDocument("No active document - open an image first")
        return self.path

    @staticmethod
    def _open_image(path: Path) -> Image.Image:
        try:
            return Image.open(path)
        except FileNotFoundError as e:
            raise CaptureFailure(f"File not found: {path}") from e
        except (UnidentifiedImageError, OSError) as e:
            raise CaptureFailure(f"Cannot read {path}: {e}") from e

    def _read_pixels(self, path: Path, scale_percent: int) -> PixelBuffer:
        t0 = time.perf_counter()
        with self._open_image(path) as img:
            info = validate_document_mode(img)
            if not info.is_valid:
                raise UnsupportedColorMode(info.error_message)

            target = processed_size(info.size, scale_percent)
            if target.width < 1 or target.height < 1:
                raise CaptureFailure(
                    f"{info.size} at {scale_percent}% leaves no pixels to process"
                )

            try:
                scaled = img
                if target != info.size:
                    scaled = img.resize(target, Image.Resampling.BICUBIC)
                # Images without alpha are read as RGB and padded to RGBA.
                mode = "RGBA" if "A" in scaled.mode else "RGB"
                raw = scaled.convert(mode).tobytes()
            except (OSError, ValueError) as e:
                raise CaptureFailure(f"Cannot capture {path}: {e}") from e

        buffer = PixelBuffer.from_raw(target.width, target.height, raw)
        logger.info(
            "Captured %s at %d%% -> %s in %dms",
            path.name,
            scale_percent,
            target,
            round((time.perf_counter() - t0) * 1000),
        )
        return buffer
