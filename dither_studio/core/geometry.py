"""Preview sizing: processing scale, display zoom and zoom feedback.

Processing scale decides how many pixels get processed; display zoom only
decides how big the processed result is drawn. The two are independent.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import NamedTuple

import numpy as np

from dither_studio.config import DISPLAY_ZOOM_RANGE, PROCESSING_SCALE_RANGE
from dither_studio.core.buffer import PixelBuffer


class Size(NamedTuple):
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}×{self.height}"


class Feedback(str, Enum):
    PIXEL_PERFECT = "pixel-perfect"
    DOWNSCALED = "downscaled"
    UPSCALED = "upscaled"


FEEDBACK_COLORS: dict[Feedback, str] = {
    Feedback.PIXEL_PERFECT: "#00ff00",
    Feedback.DOWNSCALED: "#ff0000",
    Feedback.UPSCALED: "#0088ff",
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_processing_scale(value: int) -> int:
    low, high = PROCESSING_SCALE_RANGE
    return max(low, min(high, int(value)))


def clamp_display_zoom(value: int) -> int:
    low, high = DISPLAY_ZOOM_RANGE
    return max(low, min(high, int(value)))


def processed_size(source: Size, processing_scale: int) -> Size:
    """Size of the source after capture at ``processing_scale`` percent."""
    scale = processing_scale / 100
    return Size(round_half_up(source.width * scale), round_half_up(source.height * scale))


def canvas_size(processed: Size, display_zoom: int) -> Size:
    """On-screen size of the processed image at ``display_zoom`` percent."""
    zoom = display_zoom / 100
    return Size(round_half_up(processed.width * zoom), round_half_up(processed.height * zoom))


def feedback(display_zoom: int) -> Feedback:
    if display_zoom == 100:
        return Feedback.PIXEL_PERFECT
    if display_zoom < 100:
        return Feedback.DOWNSCALED
    return Feedback.UPSCALED


def feedback_message(display_zoom: int, processed: Size) -> str:
    kind = feedback(display_zoom)
    if kind is Feedback.PIXEL_PERFECT:
        return f"✓ Pixel-perfect preview ({processed})"
    if kind is Feedback.DOWNSCALED:
        return f"⚠ Downscaled to {display_zoom}% - not showing all pixels"
    return f"⚠ Upscaled to {display_zoom}% - may appear blurry"


def pixel_block_size(display_zoom: int) -> int:
    """Edge length of the square each processed pixel is drawn as."""
    return max(1, round_half_up(display_zoom / 100))


def magnify(buffer: PixelBuffer, display_zoom: int) -> PixelBuffer:
    """Nearest-neighbor magnification by whole pixel blocks, never smoothed."""
    block = pixel_block_size(display_zoom)
    if block == 1:
        return buffer.copy()
    data = np.repeat(np.repeat(buffer.data, block, axis=0), block, axis=1)
    return PixelBuffer(buffer.width * block, buffer.height * block, data)
