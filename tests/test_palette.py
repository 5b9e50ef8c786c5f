"""Tests for palette parsing and nearest-color matching."""

import pytest

from dither_studio.core.palette import (
    DEFAULT_PALETTE,
    InvalidPalette,
    Palette,
    as_palette,
    closest_color,
    parse_hex_color,
    parse_palette_arg,
    to_hex,
)

BW = ["#000000", "#FFFFFF"]


class TestParsing:
    def test_parse_hex(self):
        assert parse_hex_color("#FF8000") == (255, 128, 0)

    def test_parse_hex_lowercase(self):
        assert parse_hex_color("#ff8000") == (255, 128, 0)

    @pytest.mark.parametrize("text", ["FF8000", "#FFF", "#GG0000", "#FF80001", ""])
    def test_parse_hex_rejects(self, text):
        with pytest.raises(InvalidPalette):
            parse_hex_color(text)

    def test_to_hex(self):
        assert to_hex((255, 128, 0)) == "#FF8000"

    def test_parse_palette_arg(self):
        assert parse_palette_arg("#000000, #FFFFFF  #FF0000") == (
            "#000000",
            "#FFFFFF",
            "#FF0000",
        )

    def test_default_palette(self):
        assert Palette.from_hex(DEFAULT_PALETTE).colors == ((0, 0, 0), (255, 255, 255))


class TestPalette:
    def test_empty_raises(self):
        with pytest.raises(InvalidPalette):
            Palette([])

    def test_empty_hex_raises(self):
        with pytest.raises(InvalidPalette):
            Palette.from_hex([])

    def test_invalid_palette_is_value_error(self):
        assert issubclass(InvalidPalette, ValueError)

    def test_hex_roundtrip(self):
        assert Palette.from_hex(["#abcdef"]).hex == ("#ABCDEF",)

    def test_as_palette_accepts_string(self):
        assert as_palette("#000000,#FFFFFF") == Palette.from_hex(BW)

    def test_as_palette_passthrough(self):
        pal = Palette.from_hex(BW)
        assert as_palette(pal) is pal


class TestClosestColor:
    def test_dark_goes_black(self):
        assert closest_color(10, 10, 10, BW) == (0, 0, 0)

    def test_light_goes_white(self):
        assert closest_color(250, 250, 250, BW) == (255, 255, 255)

    def test_127_goes_black(self):
        # 127^2 < 128^2
        assert closest_color(127, 127, 127, BW) == (0, 0, 0)

    def test_128_goes_white(self):
        assert closest_color(128, 128, 128, BW) == (255, 255, 255)

    def test_tie_first_entry_wins(self):
        # (8, 0, 8) is equally far from both entries
        assert closest_color(8, 0, 8, ["#100000", "#000010"]) == (16, 0, 0)
        assert closest_color(8, 0, 8, ["#000010", "#100000"]) == (0, 0, 16)

    def test_color_palette(self):
        palette = ["#000000", "#FFFFFF", "#FF0000", "#00FF00", "#0000FF"]
        assert closest_color(200, 30, 20, palette) == (255, 0, 0)
        assert closest_color(20, 40, 210, palette) == (0, 0, 255)

    def test_unweighted_distance(self):
        # Perceptual weighting would prefer green; plain RGB distance is a tie
        # broken by order, so the first entry wins.
        assert closest_color(128, 128, 0, ["#FF0000", "#00FF00"]) == (255, 0, 0)

    def test_single_color(self):
        assert closest_color(1, 2, 3, ["#123456"]) == (0x12, 0x34, 0x56)

    def test_empty_palette_raises(self):
        with pytest.raises(InvalidPalette):
            closest_color(0, 0, 0, [])
