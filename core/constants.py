"""
Constants and configuration values for Pixel Transform Flow.
Centralizes all magic numbers and declared parameter ranges.
"""

from typing import Dict, Tuple


# Pixel buffer layout
class BufferConstants:
    """Constants describing the RGBA8 buffer layout."""

    CHANNELS = 4
    RGB_CHANNELS = (0, 1, 2)
    ALPHA_CHANNEL = 3
    MAX_VALUE = 255
    OPAQUE = 255


# Basic transform defaults
class BasicTransformDefaults:
    """Default and identity values for the basic operators."""

    CONTRAST_IDENTITY = 100
    BRIGHTNESS_IDENTITY = 100
    SHARPEN_DEFAULT = 0
    SHARPEN_SCALE = 10  # amount / SHARPEN_SCALE gives the kernel factor
    THRESHOLD_DEFAULT = 128

    # Rec. 601 luma weights
    LUMA_R = 0.299
    LUMA_G = 0.587
    LUMA_B = 0.114


# Edge detection
class EdgeConstants:
    """Kernels and class values for Sobel and Canny."""

    SOBEL_X = (-1, 0, 1, -2, 0, 2, -1, 0, 1)
    SOBEL_Y = (-1, -2, -1, 0, 0, 0, 1, 2, 1)

    GAUSSIAN_5X5 = (
        2, 4, 5, 4, 2,
        4, 9, 12, 9, 4,
        5, 12, 15, 12, 5,
        4, 9, 12, 9, 4,
        2, 4, 5, 4, 2,
    )
    GAUSSIAN_RADIUS = 2

    STRONG_EDGE = 255
    WEAK_EDGE = 128
    NO_EDGE = 0

    CANNY_LOW_DEFAULT = 50
    CANNY_HIGH_DEFAULT = 150


# Segmentation
class SegmentationConstants:
    """Constants for color segmentation."""

    TOLERANCE_DEFAULT = 20
    MIN_SIZE_DEFAULT = 100
    UNASSIGNED = -1

    # Neighbor offsets (dx, dy): left, right, up, down
    NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


# Color utilities
class ColorConstants:
    """Constants for color generation."""

    GOLDEN_RATIO_CONJUGATE = 0.6180339887498949
    GOLDEN_ANGLE = 137.5

    DISTINCT_SATURATION = 0.8
    DISTINCT_VALUE = 0.9

    RAINBOW_SV = (0.8, 0.9)
    PASTEL_SV = (0.4, 0.95)
    HIGH_CONTRAST_SV = (1.0, 1.0)
    PRESERVE_BRIGHTNESS_SATURATION = 0.8
    GRAYSCALE_TOP = 255
    GRAYSCALE_SPAN = 220

    # preserve_luminance scan: 0.10, 0.15, ..., 1.00
    LUMINANCE_SCAN_START = 0.1
    LUMINANCE_SCAN_STOP = 1.0
    LUMINANCE_SCAN_STEPS = 19


# Declared parameter ranges (kind -> param -> (min, max))
PARAM_RANGES: Dict[str, Dict[str, Tuple[float, float]]] = {
    "contrast": {"contrast": (0, 200)},
    "brightness": {"brightness": (0, 200)},
    "sharpen": {"amount": (0, 10)},
    "threshold": {"threshold": (0, 255)},
    "canny": {"low_threshold": (0, 255), "high_threshold": (0, 255)},
    "segmentation": {"tolerance": (1, 50), "min_size": (1, float("inf"))},
}


# Image limits for the decode adapter
class ImageConstants:
    """Constants related to decoded image limits."""

    DEFAULT_MAX_PIXELS = 4096 * 4096
    PNG_FORMAT = ".png"
