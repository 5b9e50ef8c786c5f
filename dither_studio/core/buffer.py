"""RGBA pixel buffers shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

CHANNELS = 4


@dataclass(eq=False)
class PixelBuffer:
    """A width x height grid of 8-bit RGBA pixels in row-major order.

    ``data`` has shape ``(height, width, 4)``; flattened, channel ``c`` of
    pixel ``(x, y)`` sits at ``(y * width + x) * 4 + c``.
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if self.data.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {self.data.dtype}")
        expected = (self.height, self.width, CHANNELS)
        if self.data.shape != expected:
            raise ValueError(f"Pixel data shape {self.data.shape} != {expected}")

    @classmethod
    def blank(cls, width: int, height: int) -> PixelBuffer:
        return cls(width, height, np.zeros((height, width, CHANNELS), dtype=np.uint8))

    @classmethod
    def filled(
        cls, width: int, height: int, rgba: tuple[int, int, int, int]
    ) -> PixelBuffer:
        data = np.empty((height, width, CHANNELS), dtype=np.uint8)
        data[...] = rgba
        return cls(width, height, data)

    @classmethod
    def from_raw(cls, width: int, height: int, raw: bytes | bytearray) -> PixelBuffer:
        """Build a buffer from interleaved RGBA or RGB bytes.

        RGB input gets an opaque alpha channel so everything downstream
        can assume four channels.
        """
        pixels = width * height
        flat = np.frombuffer(bytes(raw), dtype=np.uint8)
        if flat.size == pixels * CHANNELS:
            data = flat.reshape(height, width, CHANNELS).copy()
        elif flat.size == pixels * 3:
            data = np.full((height, width, CHANNELS), 255, dtype=np.uint8)
            data[..., :3] = flat.reshape(height, width, 3)
        else:
            raise ValueError(
                f"Invalid pixel data: expected {pixels * CHANNELS} bytes (RGBA) "
                f"or {pixels * 3} bytes (RGB), got {flat.size}"
            )
        return cls(width, height, data)

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        rgba = np.array(img.convert("RGBA"), dtype=np.uint8)
        return cls(img.width, img.height, rgba)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data)

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, self.data.copy())

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = (int(v) for v in self.data[y, x])
        return r, g, b, a

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def __len__(self) -> int:
        return self.width * self.height * CHANNELS
