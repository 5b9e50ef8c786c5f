"""Floyd-Steinberg error diffusion dithering."""

from __future__ import annotations

from enum import Enum
from typing import Callable

import numpy as np

from dither_studio.core.buffer import PixelBuffer
from dither_studio.core.palette import PaletteLike, as_palette


class Algorithm(str, Enum):
    FLOYD_STEINBERG = "floyd-steinberg"


ALGORITHM_NAMES: dict[Algorithm, str] = {
    Algorithm.FLOYD_STEINBERG: "Floyd-Steinberg",
}

# (dx, dy, weight / 16)
#         X   7
#     3   5   1
FLOYD_STEINBERG_KERNEL = (
    (1, 0, 7),
    (-1, 1, 3),
    (0, 1, 5),
    (1, 1, 1),
)


def floyd_steinberg(buffer: PixelBuffer, palette: PaletteLike) -> PixelBuffer:
    """Dither an RGBA buffer to ``palette`` with Floyd-Steinberg diffusion.

    Args:
        buffer: source pixels. Not modified.
        palette: a Palette or a sequence of ``#RRGGBB`` strings.

    Returns:
        A new buffer of the same size whose RGB values are all palette
        colors. Alpha is copied from the input.

    Pixels are visited in a plain left-to-right, top-to-bottom raster.
    The working copy holds 8-bit values, so every diffused write is
    clamped to [0, 255] and rounded half-to-even before the next pixel
    reads it.
    """
    pal = as_palette(palette)
    colors = pal.colors
    width, height = buffer.width, buffer.height

    out = buffer.copy()
    # Scalar math on nested int lists, one list per pixel.
    img = out.data[..., :3].tolist()

    for y in range(height):
        row = img[y]
        below = img[y + 1] if y + 1 < height else None
        for x in range(width):
            r, g, b = row[x]

            best = colors[0]
            best_dist = (r - best[0]) ** 2 + (g - best[1]) ** 2 + (b - best[2]) ** 2
            for color in colors[1:]:
                dist = (r - color[0]) ** 2 + (g - color[1]) ** 2 + (b - color[2]) ** 2
                if dist < best_dist:
                    best, best_dist = color, dist

            row[x] = list(best)
            er, eg, eb = r - best[0], g - best[1], b - best[2]

            for dx, dy, weight in FLOYD_STEINBERG_KERNEL:
                nx = x + dx
                if not 0 <= nx < width:
                    continue
                if dy:
                    if below is None:
                        continue
                    target = below[nx]
                else:
                    target = row[nx]
                # round() is half-to-even, like an 8-bit clamped store
                target[0] = round(max(0.0, min(255.0, target[0] + er * weight / 16)))
                target[1] = round(max(0.0, min(255.0, target[1] + eg * weight / 16)))
                target[2] = round(max(0.0, min(255.0, target[2] + eb * weight / 16)))

    out.data[..., :3] = np.array(img, dtype=np.uint8).reshape(height, width, 3)
    return out


Ditherer = Callable[[PixelBuffer, PaletteLike], PixelBuffer]

DITHERERS: dict[Algorithm, Ditherer] = {
    Algorithm.FLOYD_STEINBERG: floyd_steinberg,
}


def get_ditherer(algorithm: Algorithm | str) -> Ditherer:
    """Look up the dithering function registered for ``algorithm``."""
    try:
        key = Algorithm(algorithm)
    except ValueError:
        raise ValueError(f"Unknown algorithm: {algorithm}") from None
    return DITHERERS[key]
