"""Tests for half-block preview rendering."""

from rich.color import Color

from dither_studio.core.buffer import PixelBuffer
from dither_studio.tui.preview import UPPER_HALF_BLOCK, buffer_to_text


class TestBufferToText:
    def test_two_rows_per_line(self):
        text = buffer_to_text(PixelBuffer.filled(3, 4, (0, 0, 0, 255)))
        assert text.plain == "\n".join([UPPER_HALF_BLOCK * 3] * 2)

    def test_odd_height(self):
        text = buffer_to_text(PixelBuffer.filled(2, 3, (0, 0, 0, 255)))
        assert text.plain.count("\n") == 1

    def test_colors(self):
        buf = PixelBuffer.filled(1, 2, (255, 255, 255, 255))
        buf.data[1, 0] = (0, 0, 0, 255)
        style = buffer_to_text(buf).spans[0].style
        assert style.color == Color.from_rgb(255, 255, 255)
        assert style.bgcolor == Color.from_rgb(0, 0, 0)

    def test_last_odd_row_has_no_background(self):
        style = buffer_to_text(PixelBuffer.filled(1, 1, (10, 20, 30, 255))).spans[0].style
        assert style.color == Color.from_rgb(10, 20, 30)
        assert style.bgcolor is None
