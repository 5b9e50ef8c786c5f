"""Dithered image preview widget for the TUI."""

from __future__ import annotations

from rich.color import Color
from rich.style import Style
from rich.text import Text
from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Static

from dither_studio.core.buffer import PixelBuffer
from dither_studio.core.geometry import (
    FEEDBACK_COLORS,
    canvas_size,
    feedback,
    feedback_message,
    magnify,
)
from dither_studio.core.processor import ProcessedImage

UPPER_HALF_BLOCK = "▀"
PLACEHOLDER = "No image loaded. Press 'o' to open a file."


def buffer_to_text(buffer: PixelBuffer) -> Text:
    """Render a buffer as half-block cells, two pixel rows per text line.

    The upper pixel is the foreground color, the lower one the background.
    An odd last row is drawn over the default background.
    """
    data = buffer.data
    text = Text()
    for y in range(0, buffer.height, 2):
        if y > 0:
            text.append("\n")
        for x in range(buffer.width):
            r, g, b = (int(v) for v in data[y, x, :3])
            bgcolor = None
            if y + 1 < buffer.height:
                br, bg, bb = (int(v) for v in data[y + 1, x, :3])
                bgcolor = Color.from_rgb(br, bg, bb)
            text.append(
                UPPER_HALF_BLOCK,
                style=Style(color=Color.from_rgb(r, g, b), bgcolor=bgcolor),
            )
    return text


class DitherPreview(Widget):
    """Shows the processed image at the current display zoom.

    The border color tells whether the preview is pixel-perfect (green),
    downscaled (red) or upscaled (blue).
    """

    DEFAULT_CSS = """
    DitherPreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
        border: heavy $panel;
    }

    DitherPreview #preview-content {
        width: auto;
        height: auto;
    }

    DitherPreview #preview-info {
        height: 1;
        color: $text-muted;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._result: ProcessedImage | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="preview-info")
        yield Static(PLACEHOLDER, id="preview-content")

    def update_image(self, result: ProcessedImage, display_zoom: int) -> None:
        self._result = result
        self.set_zoom(display_zoom)

    def set_zoom(self, display_zoom: int) -> None:
        if self._result is None:
            return

        processed = self._result.size
        kind = feedback(display_zoom)
        self.styles.border = ("heavy", FEEDBACK_COLORS[kind])
        self.query_one("#preview-info", Static).update(
            f"{feedback_message(display_zoom, processed)}  "
            f"canvas {canvas_size(processed, display_zoom)}"
        )
        shown = magnify(self._result.buffer, display_zoom)
        self.query_one("#preview-content", Static).update(buffer_to_text(shown))

    def clear(self) -> None:
        self._result = None
        self.query_one("#preview-info", Static).update("")
        self.query_one("#preview-content", Static).update(PLACEHOLDER)

    @property
    def current_result(self) -> ProcessedImage | None:
        return self._result
