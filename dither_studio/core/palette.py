"""Output palettes and nearest-color matching."""

from __future__ import annotations

import re
from typing import Iterable, Sequence, Union

import numpy as np

RGB = tuple[int, int, int]

HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

DEFAULT_PALETTE: tuple[str, ...] = ("#000000", "#FFFFFF")


class InvalidPalette(ValueError):
    """Raised for an empty palette or a malformed color entry."""


def parse_hex_color(text: str) -> RGB:
    """Parse ``#RRGGBB`` into an (r, g, b) tuple."""
    match = HEX_COLOR.match(text.strip())
    if match is None:
        raise InvalidPalette(f"Invalid color {text!r}: expected #RRGGBB")
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def to_hex(rgb: RGB) -> str:
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def parse_palette_arg(text: str) -> tuple[str, ...]:
    """Split a comma/whitespace separated palette string into hex entries."""
    return tuple(part for part in re.split(r"[,\s]+", text) if part)


class Palette:
    """Ordered, non-empty set of output colors."""

    def __init__(self, colors: Iterable[RGB]) -> None:
        self.colors: tuple[RGB, ...] = tuple(
            (int(r), int(g), int(b)) for r, g, b in colors
        )
        if not self.colors:
            raise InvalidPalette("Palette must contain at least one color")
        self._array = np.array(self.colors, dtype=np.float64)

    @classmethod
    def from_hex(cls, values: Sequence[str]) -> Palette:
        return cls(parse_hex_color(value) for value in values)

    @property
    def array(self) -> np.ndarray:
        """Colors as an (n, 3) float array."""
        return self._array

    @property
    def hex(self) -> tuple[str, ...]:
        return tuple(to_hex(color) for color in self.colors)

    def nearest_index(self, rgb: Sequence[float]) -> int:
        """Index of the closest color by unweighted Euclidean RGB distance.

        Squared distances give the same ordering. ``argmin`` returns the
        first minimum, so earlier entries win ties.
        """
        distances = ((self._array - np.asarray(rgb, dtype=np.float64)) ** 2).sum(axis=1)
        return int(np.argmin(distances))

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self):
        return iter(self.colors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self.colors == other.colors

    def __repr__(self) -> str:
        return f"Palette({list(self.hex)!r})"


PaletteLike = Union[Palette, Sequence[str]]


def as_palette(value: PaletteLike) -> Palette:
    if isinstance(value, Palette):
        return value
    if isinstance(value, str):
        value = parse_palette_arg(value)
    return Palette.from_hex(value)


def closest_color(r: int, g: int, b: int, palette: PaletteLike) -> RGB:
    """Return the palette entry nearest to (r, g, b)."""
    pal = as_palette(palette)
    return pal.colors[pal.nearest_index((r, g, b))]
