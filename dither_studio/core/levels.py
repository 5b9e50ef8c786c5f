"""Levels (black point / gamma / white point) tone adjustment."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from dither_studio.core.buffer import PixelBuffer


@dataclass(frozen=True)
class LevelsSettings:
    """Tone curve parameters.

    black_point / white_point: 0 to 255
    mid_point: 0.1 to 10.0, used as an inverse gamma exponent
    """

    black_point: int = 0
    mid_point: float = 1.0
    white_point: int = 255

    @property
    def is_degenerate(self) -> bool:
        """True when the input range is empty and the curve is a hard threshold."""
        return self.black_point >= self.white_point


DEFAULT_LEVELS = LevelsSettings()


def apply_levels(value: int, black: int, mid: float, white: int) -> int:
    """Map a single channel value through the levels curve.

    The black clamp is checked before the white clamp. With black >= white
    every value falls into one of the two, so a degenerate range behaves
    as a threshold at ``black`` instead of dividing by zero.
    """
    if value <= black:
        return 0
    if value >= white:
        return 255
    normalized = (value - black) / (white - black)
    adjusted = normalized ** (1.0 / mid)
    return int(math.floor(adjusted * 255 + 0.5))


def levels_lut(levels: LevelsSettings) -> np.ndarray:
    """Return the 256-entry lookup table for ``levels``."""
    return np.array(
        [
            apply_levels(v, levels.black_point, levels.mid_point, levels.white_point)
            for v in range(256)
        ],
        dtype=np.uint8,
    )


def apply_levels_to_buffer(buffer: PixelBuffer, levels: LevelsSettings) -> PixelBuffer:
    """Apply levels to R, G and B of every pixel in place.

    Alpha is left untouched. The same buffer is returned; copy it first if
    the original values are still needed.
    """
    lut = levels_lut(levels)
    buffer.data[..., :3] = lut[buffer.data[..., :3]]
    return buffer
