"""Runtime configuration and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

PROCESSING_SCALE_RANGE = (5, 50)
DISPLAY_ZOOM_RANGE = (50, 200)


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class StudioConfig:
    processing_scale: int
    display_zoom: int
    palette: tuple[str, ...]
    tone_debounce: float
    scale_debounce: float
    log_level: str

    @classmethod
    def from_env(cls) -> "StudioConfig":
        palette = os.getenv("DITHER_PALETTE", "#000000,#FFFFFF")
        return cls(
            processing_scale=_clamp(
                int(os.getenv("DITHER_SCALE", "10")), PROCESSING_SCALE_RANGE
            ),
            display_zoom=_clamp(int(os.getenv("DITHER_ZOOM", "100")), DISPLAY_ZOOM_RANGE),
            palette=tuple(p.strip() for p in palette.split(",") if p.strip()),
            tone_debounce=float(os.getenv("DITHER_TONE_DEBOUNCE", "0.3")),
            scale_debounce=float(os.getenv("DITHER_SCALE_DEBOUNCE", "0.5")),
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        )


CONFIG = StudioConfig.from_env()


def configure_logging(level: str | None = None, tui: bool = False) -> logging.Logger:
    """Configure root logging.

    Inside the TUI, records go through Textual's handler so they end up in
    the devtools console instead of being written over the screen.
    """
    handlers: list[logging.Handler] | None = None
    if tui:
        from textual.logging import TextualHandler

        handlers = [TextualHandler()]
    logging.basicConfig(level=(level or CONFIG.log_level).upper(), handlers=handlers)
    return logging.getLogger("dither_studio")
