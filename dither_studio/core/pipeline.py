"""Preview orchestration: when to capture, when to reuse the cached capture."""

from __future__ import annotations

import asyncio
import logging
import time

from dither_studio.core.processor import ProcessedImage, Settings, process_buffer
from dither_studio.core.source import DocumentSource
from dither_studio.utils.cache import CaptureCache

logger = logging.getLogger(__name__)

# Settings whose change makes the cached capture stale.
CAPTURE_FIELDS = frozenset({"processing_scale"})


class PreviewPipeline:
    """Runs capture → levels → dither with a single-slot capture cache.

    Only the processing scale decides whether a capture can be reused.
    Levels, palette and algorithm changes rerun the cheap stages against
    the cached raw buffer.

    Each ``reprocess`` call gets a generation number. A result whose
    generation is older than the latest request is stale and callers
    should drop it (newer requests supersede older ones).
    """

    def __init__(self, source: DocumentSource, cache: CaptureCache | None = None) -> None:
        self.source = source
        self.cache = cache or CaptureCache()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, result: ProcessedImage) -> bool:
        return result.generation == self._generation

    def apply_settings_change(self, old: Settings, new: Settings) -> set[str]:
        """Record a settings change and invalidate the cache if needed.

        Returns the names of the changed fields.
        """
        changed = old.diff(new)
        if changed & CAPTURE_FIELDS:
            self.cache.invalidate()
        return changed

    async def reprocess(self, settings: Settings, use_cache: bool = False) -> ProcessedImage:
        """Produce a dithered image for ``settings``.

        With ``use_cache`` the cached capture is used when it was taken at
        the requested scale. Otherwise the source is captured again and the
        cache replaced once the capture succeeds, unless a newer request
        started meanwhile. Capture errors propagate and leave the cache as
        it was. Levels and dithering run in a worker thread.
        """
        self._generation += 1
        generation = self._generation
        scale = settings.processing_scale

        raw = self.cache.get(scale) if use_cache else None
        from_cache = raw is not None
        if raw is None:
            t0 = time.perf_counter()
            raw = await self.source.capture(scale)
            if generation == self._generation:
                self.cache.put(raw, scale)
            else:
                logger.debug("Capture at %d%% superseded; cache left as is", scale)
            logger.info(
                "Capture at %d%% took %dms", scale, round((time.perf_counter() - t0) * 1000)
            )
        else:
            logger.debug("Reusing capture cached at %d%%", scale)

        result = await asyncio.to_thread(process_buffer, raw, settings)
        result.from_cache = from_cache
        result.generation = generation
        return result
