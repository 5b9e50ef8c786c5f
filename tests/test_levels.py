"""Tests for the levels tone adjustment."""

import numpy as np
import pytest

from dither_studio.core.buffer import PixelBuffer
from dither_studio.core.levels import (
    DEFAULT_LEVELS,
    LevelsSettings,
    apply_levels,
    apply_levels_to_buffer,
    levels_lut,
)


class TestApplyLevels:
    def test_identity(self):
        for v in range(256):
            assert apply_levels(v, 0, 1.0, 255) == v

    @pytest.mark.parametrize("black, mid, white", [(30, 1.0, 220), (100, 2.5, 180), (5, 0.3, 250)])
    def test_clamps(self, black, mid, white):
        for v in range(0, black + 1):
            assert apply_levels(v, black, mid, white) == 0
        for v in range(white, 256):
            assert apply_levels(v, black, mid, white) == 255

    def test_range_stretch_rounds_half_up(self):
        # (100 - 50) / 100 * 255 = 127.5
        assert apply_levels(100, 50, 1.0, 150) == 128

    def test_gamma_brightens_midtones(self):
        assert apply_levels(64, 0, 2.0, 255) == 128
        assert apply_levels(64, 0, 0.5, 255) < 64

    def test_output_in_byte_range(self):
        for mid in (0.1, 1.0, 10.0):
            for v in range(256):
                assert 0 <= apply_levels(v, 10, mid, 240) <= 255


class TestDegenerateRange:
    def test_equal_points_threshold(self):
        assert apply_levels(0, 128, 1.0, 128) == 0
        assert apply_levels(128, 128, 1.0, 128) == 0
        assert apply_levels(129, 128, 1.0, 128) == 255

    def test_inverted_points_threshold(self):
        assert apply_levels(150, 200, 1.0, 100) == 0
        assert apply_levels(201, 200, 1.0, 100) == 255

    def test_is_degenerate(self):
        assert LevelsSettings(128, 1.0, 128).is_degenerate
        assert LevelsSettings(200, 1.0, 100).is_degenerate
        assert not DEFAULT_LEVELS.is_degenerate


class TestApplyLevelsToBuffer:
    def test_defaults(self):
        assert DEFAULT_LEVELS == LevelsSettings(0, 1.0, 255)

    def test_lut_identity(self):
        assert np.array_equal(levels_lut(DEFAULT_LEVELS), np.arange(256, dtype=np.uint8))

    def test_alpha_untouched(self):
        buf = PixelBuffer.filled(2, 2, (100, 150, 200, 77))
        apply_levels_to_buffer(buf, LevelsSettings(100, 1.0, 200))
        assert buf.pixel(1, 1) == (0, 128, 255, 77)

    def test_mutates_in_place(self):
        buf = PixelBuffer.filled(3, 1, (10, 10, 10, 255))
        result = apply_levels_to_buffer(buf, LevelsSettings(20, 1.0, 255))
        assert result is buf
        assert buf.pixel(0, 0) == (0, 0, 0, 255)
