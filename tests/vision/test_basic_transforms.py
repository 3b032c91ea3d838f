"""
Tests for the basic pixel transforms
"""

import math

import numpy as np
import pytest

from core.buffer import PixelBuffer
from vision.basic_transforms import (
    apply_brightness,
    apply_contrast,
    apply_grayscale,
    apply_invert,
    apply_sharpen,
    apply_threshold,
    contrast_factor,
)


def rgb_values(buffer):
    return buffer.to_array()[..., :3]


def alpha_values(buffer):
    return buffer.to_array()[..., 3]


class TestContrast:
    """Test contrast adjustment"""

    def test_factor_identity(self):
        assert contrast_factor(100) == 1.0

    def test_identity(self, random_buffer):
        """Test that contrast 100 leaves every pixel unchanged"""
        assert apply_contrast(random_buffer, 100) == random_buffer

    def test_increase_spreads_from_mid_gray(self, solid_buffer):
        r, g, b, a = apply_contrast(solid_buffer, 150).pixel(0, 0)

        assert r < 100
        assert g > 150
        assert b > 200
        assert a == 255

    def test_decrease_compresses_toward_mid_gray(self, solid_buffer):
        r, g, b, _ = apply_contrast(solid_buffer, 0).pixel(0, 0)

        assert 100 < r < 128
        assert 128 < g < 150
        assert 128 < b < 200

    def test_uniform_gray_identity(self):
        gray = PixelBuffer.filled(2, 2, (100, 100, 100, 255))
        assert apply_contrast(gray, 100) == gray

    def test_mid_gray_is_fixed(self):
        gray = PixelBuffer.filled(2, 2, (128, 128, 128, 255))
        assert apply_contrast(gray, 200) == gray

    def test_factor_pole(self):
        """Test that contrast 359 gives an infinite factor instead of dividing by zero"""
        assert contrast_factor(359) == math.inf
        assert contrast_factor(400) < 0

    def test_pole_saturates(self):
        """Test that contrast 359 maps channels to 0 or 255 by their side of mid-gray"""
        buffer = PixelBuffer.filled(2, 2, (100, 200, 128, 77))
        assert apply_contrast(buffer, 359).pixel(1, 1) == (0, 255, 0, 77)

    def test_beyond_pole_inverts(self):
        buffer = PixelBuffer.filled(2, 2, (100, 200, 128, 255))
        assert apply_contrast(buffer, 400).pixel(0, 0) == (255, 0, 128, 255)


class TestBrightness:
    """Test brightness adjustment"""

    def test_double_clamps(self, solid_buffer):
        assert apply_brightness(solid_buffer, 200).pixel(0, 0) == (200, 255, 255, 255)

    def test_zero_is_black(self, gradient_buffer):
        result = apply_brightness(gradient_buffer, 0)

        assert np.all(rgb_values(result) == 0)
        assert np.array_equal(alpha_values(result), alpha_values(gradient_buffer))

    def test_rounds_half_to_even(self):
        buffer = PixelBuffer.filled(1, 1, (5, 7, 1, 255))
        assert apply_brightness(buffer, 50).pixel(0, 0) == (2, 4, 0, 255)


class TestSharpen:
    """Test sharpening"""

    def test_amount_zero_is_identity(self, random_buffer):
        assert apply_sharpen(random_buffer, 0) is random_buffer

    def test_flat_region_unchanged(self, solid_buffer):
        assert apply_sharpen(solid_buffer, 10) == solid_buffer

    def test_edge_contrast_increases(self, step_buffer):
        """Test that pixels next to a step edge are pushed apart"""
        result = apply_sharpen(step_buffer, 5)

        assert result.pixel(4, 5)[:3] == (0, 0, 0)
        assert result.pixel(5, 5)[:3] == (255, 255, 255)
        assert result.pixel(0, 0) == step_buffer.pixel(0, 0)

    def test_sharpen_amount(self):
        array = np.full((3, 3, 4), 100, dtype=np.uint8)
        array[1, 1, :3] = 120

        result = apply_sharpen(PixelBuffer.from_array(array), 10)

        # 120 + 4 * (120 - 100)
        assert result.pixel(1, 1) == (200, 200, 200, 100)


class TestGrayscale:
    """Test grayscale conversion"""

    def test_channels_equal(self, random_buffer):
        rgb = rgb_values(apply_grayscale(random_buffer))

        assert np.array_equal(rgb[..., 0], rgb[..., 1])
        assert np.array_equal(rgb[..., 1], rgb[..., 2])

    def test_luma_weights(self):
        red = PixelBuffer.filled(1, 1, (255, 0, 0, 255))
        assert apply_grayscale(red).pixel(0, 0) == (76, 76, 76, 255)

    def test_idempotent(self, random_buffer):
        once = apply_grayscale(random_buffer)
        assert apply_grayscale(once) == once

    def test_alpha_preserved(self, gradient_buffer):
        result = apply_grayscale(gradient_buffer)
        assert np.array_equal(alpha_values(result), alpha_values(gradient_buffer))


class TestThreshold:
    """Test binarization"""

    def test_binary_output(self, random_buffer):
        values = np.unique(rgb_values(apply_threshold(random_buffer, 128)))
        assert set(values.tolist()) <= {0, 255}

    def test_alpha_unchanged(self, gradient_buffer):
        result = apply_threshold(gradient_buffer, 128)
        assert np.array_equal(alpha_values(result), alpha_values(gradient_buffer))

    def test_boundary(self):
        """Test that values equal to the threshold become white"""
        buffer = PixelBuffer.filled(1, 1, (100, 100, 100, 255))

        assert apply_threshold(buffer, 100).pixel(0, 0) == (255, 255, 255, 255)
        assert apply_threshold(buffer, 101).pixel(0, 0) == (0, 0, 0, 255)

    @pytest.mark.parametrize("threshold,expected", [(0, 255), (256, 0)])
    def test_extremes(self, random_buffer, threshold, expected):
        assert np.all(rgb_values(apply_threshold(random_buffer, threshold)) == expected)


class TestInvert:
    """Test color inversion"""

    def test_invert(self, solid_buffer):
        assert apply_invert(solid_buffer).pixel(0, 0) == (155, 105, 55, 255)

    def test_twice_is_identity(self, gradient_buffer):
        assert apply_invert(apply_invert(gradient_buffer)) == gradient_buffer
