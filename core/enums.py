"""
Centralized enums for Pixel Transform Flow.

All enums subclass str so they serialize directly into the pipeline wire
format and into JSON responses.
"""

from enum import Enum


class TransformKind(str, Enum):
    """Kinds of pipeline stages."""

    CONTRAST = "contrast"
    BRIGHTNESS = "brightness"
    SHARPEN = "sharpen"
    GRAYSCALE = "grayscale"
    THRESHOLD = "threshold"
    SOBEL = "sobel"
    CANNY = "canny"
    SEGMENTATION = "segmentation"
    INVERT = "invert"


class EdgeMethod(str, Enum):
    """Edge detection methods supported by EdgeDetector."""

    SOBEL = "sobel"
    CANNY = "canny"


class ColorScheme(str, Enum):
    """Segment recoloring schemes."""

    RAINBOW = "rainbow"
    PASTEL = "pastel"
    GRAYSCALE = "grayscale"
    HIGH_CONTRAST = "highContrast"
    PRESERVE_BRIGHTNESS = "preserveBrightness"
