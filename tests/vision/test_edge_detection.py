"""
Tests for Sobel and Canny edge detection
"""

import logging

import numpy as np
import pytest

from core.buffer import PixelBuffer
from core.constants import EdgeConstants
from core.enums import EdgeMethod
from vision.edge_detection import (
    EdgeDetector,
    apply_canny,
    apply_sobel,
    double_threshold,
    gaussian_blur,
    hysteresis,
)

STRONG = EdgeConstants.STRONG_EDGE
WEAK = EdgeConstants.WEAK_EDGE


def red_channel(buffer):
    return buffer.to_array()[..., 0]


class TestSobel:
    """Test Sobel edge maps"""

    def test_constant_image_has_no_edges(self, solid_buffer):
        result = apply_sobel(solid_buffer)

        assert np.all(result.to_array()[..., :3] == 0)
        assert np.all(result.to_array()[..., 3] == 255)

    def test_step_edge(self, step_buffer):
        """Test that the columns on either side of a step saturate"""
        edges = red_channel(apply_sobel(step_buffer))

        assert np.all(edges[1:-1, 4] == 255)
        assert np.all(edges[1:-1, 5] == 255)
        assert np.all(edges[1:-1, :4] == 0)
        assert np.all(edges[1:-1, 6:] == 0)

    def test_border_is_black(self, random_buffer):
        edges = red_channel(apply_sobel(random_buffer))

        assert np.all(edges[0] == 0)
        assert np.all(edges[-1] == 0)
        assert np.all(edges[:, 0] == 0)
        assert np.all(edges[:, -1] == 0)

    def test_output_is_opaque(self, gradient_buffer):
        result = apply_sobel(gradient_buffer)
        assert np.all(result.to_array()[..., 3] == 255)

    def test_tiny_image(self):
        result = apply_sobel(PixelBuffer.filled(2, 2, (255, 0, 0, 10)))
        assert result == PixelBuffer.filled(2, 2, (0, 0, 0, 255))


class TestDoubleThreshold:
    """Test magnitude classification"""

    def test_classes(self):
        magnitude = np.array([[10, 50, 51, 150, 151]], dtype=np.float64)
        classes = double_threshold(magnitude, 50, 150)
        assert classes.tolist() == [[0, 0, WEAK, WEAK, STRONG]]

    def test_inverted_thresholds(self):
        """Test that low > high leaves no weak class"""
        magnitude = np.array([[50, 150, 250]], dtype=np.float64)
        classes = double_threshold(magnitude, 200, 100)
        assert classes.tolist() == [[0, STRONG, STRONG]]


class TestHysteresis:
    """Test single-pass edge linking"""

    def test_weak_next_to_strong_is_promoted(self):
        classes = np.zeros((5, 5), dtype=np.uint8)
        classes[1, 1] = STRONG
        classes[2, 2] = WEAK
        classes[3, 3] = WEAK

        result = hysteresis(classes)

        assert result[2, 2] == STRONG
        assert result[3, 3] == STRONG

    def test_isolated_weak_is_dropped(self):
        classes = np.zeros((5, 5), dtype=np.uint8)
        classes[2, 2] = WEAK
        assert np.all(hysteresis(classes) == 0)

    def test_single_pass(self):
        """Test that a weak pixel reaching a strong edge only later in the scan is dropped"""
        classes = np.zeros((5, 5), dtype=np.uint8)
        classes[1, 1] = WEAK
        classes[2, 2] = WEAK
        classes[3, 3] = STRONG

        result = hysteresis(classes)

        assert result[1, 1] == 0
        assert result[2, 2] == STRONG
        assert result[3, 3] == STRONG

    def test_input_not_modified(self):
        classes = np.zeros((3, 3), dtype=np.uint8)
        classes[1, 1] = WEAK
        hysteresis(classes)
        assert classes[1, 1] == WEAK


class TestCanny:
    """Test Canny edge detection"""

    def test_constant_image_has_no_edges(self, solid_buffer):
        result = apply_canny(solid_buffer, 50, 150)
        assert np.all(result.to_array()[..., :3] == 0)

    def test_step_edge(self, step_buffer):
        """Test that a blurred step edge gives strong edges plus linked weak ones"""
        edges = red_channel(apply_canny(step_buffer, 50, 150))
        assert edges[5].tolist() == [0, 0, 255, 255, 255, 255, 255, 255, 0, 0]

    def test_strong_kept_and_adjacent_weak_promoted(self, random_buffer):
        """Test hysteresis properties on an arbitrary image"""
        magnitude = red_channel(apply_sobel(gaussian_blur(random_buffer)))
        classes = double_threshold(magnitude, 30, 90)
        edges = red_channel(apply_canny(random_buffer, 30, 90))

        assert np.all(edges[classes == STRONG] == STRONG)
        for y, x in np.argwhere(classes == WEAK):
            window = classes[max(y - 1, 0) : y + 2, max(x - 1, 0) : x + 2]
            if np.any(window == STRONG):
                assert edges[y, x] == STRONG

    def test_output_values(self, random_buffer):
        values = np.unique(red_channel(apply_canny(random_buffer, 30, 90)))
        assert set(values.tolist()) <= {0, 255}


class TestEdgeDetector:
    """Test the EdgeDetector dispatcher"""

    @pytest.fixture
    def detector(self):
        return EdgeDetector()

    def test_sobel(self, detector, step_buffer):
        assert detector.detect(step_buffer, EdgeMethod.SOBEL) == apply_sobel(step_buffer)

    def test_canny_defaults(self, detector, step_buffer):
        assert detector.detect(step_buffer, EdgeMethod.CANNY) == apply_canny(step_buffer, 50, 150)

    def test_inverted_thresholds_warn(self, detector, step_buffer, caplog):
        with caplog.at_level(logging.WARNING, logger="vision.edge_detection"):
            detector.detect(
                step_buffer, EdgeMethod.CANNY, {"low_threshold": 200, "high_threshold": 100}
            )
        assert "below" in caplog.text

    def test_unknown_method(self, detector, step_buffer):
        with pytest.raises(ValueError):
            detector.detect(step_buffer, "prewitt")
