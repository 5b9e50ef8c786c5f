"""Single-slot cache for the most recent raw capture."""

from __future__ import annotations

import logging
from enum import Enum

from dither_studio.core.buffer import PixelBuffer

logger = logging.getLogger(__name__)


class CacheState(str, Enum):
    NO_CACHE = "no-cache"
    CACHED = "cached"


class CaptureCache:
    """Holds at most one raw capture together with the scale it was taken at.

    Two states: NO_CACHE and CACHED. The entry is stored as one tuple so a
    reader never sees a buffer paired with the wrong scale.
    """

    def __init__(self) -> None:
        self._entry: tuple[int, PixelBuffer] | None = None

    @property
    def state(self) -> CacheState:
        return CacheState.NO_CACHE if self._entry is None else CacheState.CACHED

    @property
    def is_cached(self) -> bool:
        return self._entry is not None

    @property
    def scale(self) -> int | None:
        return None if self._entry is None else self._entry[0]

    def get(self, scale: int) -> PixelBuffer | None:
        """Return the cached buffer if it was captured at ``scale``."""
        entry = self._entry
        if entry is None or entry[0] != scale:
            return None
        return entry[1]

    def put(self, buffer: PixelBuffer, scale: int) -> None:
        self._entry = (scale, buffer)
        logger.debug("Cached %dx%d capture at %d%%", buffer.width, buffer.height, scale)

    def invalidate(self) -> None:
        if self._entry is not None:
            logger.debug("Invalidated capture cached at %d%%", self._entry[0])
        self._entry = None
