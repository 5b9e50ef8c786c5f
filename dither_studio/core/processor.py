"""Pixel processing pipeline.

Raw capture → levels → dither.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, fields

from dither_studio.config import CONFIG
from dither_studio.core.buffer import PixelBuffer
from dither_studio.core.dither import Algorithm, get_ditherer
from dither_studio.core.geometry import Size
from dither_studio.core.levels import DEFAULT_LEVELS, LevelsSettings, apply_levels_to_buffer
from dither_studio.core.palette import Palette

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Parameters for one processing run."""

    algorithm: Algorithm = Algorithm.FLOYD_STEINBERG
    levels: LevelsSettings = DEFAULT_LEVELS
    palette: tuple[str, ...] = CONFIG.palette
    processing_scale: int = CONFIG.processing_scale  # 5 to 50
    display_zoom: int = CONFIG.display_zoom  # 50 to 200
    live_preview: bool = True

    def diff(self, other: Settings) -> set[str]:
        """Names of the fields that differ between two settings."""
        return {
            f.name for f in fields(self) if getattr(self, f.name) != getattr(other, f.name)
        }


@dataclass
class ProcessedImage:
    """Result of a processing run."""

    buffer: PixelBuffer
    processing_scale: int
    levels_ms: float
    dither_ms: float
    from_cache: bool = False
    generation: int = 0

    @property
    def size(self) -> Size:
        return Size(self.buffer.width, self.buffer.height)

    @property
    def total_ms(self) -> float:
        return self.levels_ms + self.dither_ms


def process_buffer(raw: PixelBuffer, settings: Settings) -> ProcessedImage:
    """Run levels and dithering over a copy of ``raw``.

    ``raw`` itself is never modified, so a cached capture can be processed
    again with different settings.
    """
    palette = Palette.from_hex(settings.palette)
    ditherer = get_ditherer(settings.algorithm)
    algorithm = Algorithm(settings.algorithm)
    if settings.levels.is_degenerate:
        logger.warning(
            "Black point %d >= white point %d; levels act as a threshold",
            settings.levels.black_point,
            settings.levels.white_point,
        )

    working = raw.copy()

    t0 = time.perf_counter()
    apply_levels_to_buffer(working, settings.levels)
    t1 = time.perf_counter()
    dithered = ditherer(working, palette)
    t2 = time.perf_counter()

    levels_ms = (t1 - t0) * 1000
    dither_ms = (t2 - t1) * 1000
    logger.debug("Levels took %.1fms, %s took %.1fms", levels_ms, algorithm.value, dither_ms)

    return ProcessedImage(
        buffer=dithered,
        processing_scale=settings.processing_scale,
        levels_ms=levels_ms,
        dither_ms=dither_ms,
    )
