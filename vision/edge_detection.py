"""
Edge detection algorithms for the pixel engine.

Sobel produces an opaque gradient-magnitude edge map. Canny blurs, runs
Sobel, classifies magnitudes with a double threshold and links weak edges to
strong ones with a single hysteresis pass.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np

from core.buffer import PixelBuffer
from core.constants import BufferConstants, EdgeConstants
from core.enums import EdgeMethod
from vision.basic_transforms import apply_grayscale
from vision.convolution import apply_kernel, correlate

logger = logging.getLogger(__name__)


def _edge_map(values: np.ndarray) -> PixelBuffer:
    """Build an opaque buffer with values replicated to R, G and B."""
    height, width = values.shape
    pixels = np.empty((height, width, BufferConstants.CHANNELS), dtype=np.uint8)
    pixels[..., :3] = values[..., np.newaxis]
    pixels[..., BufferConstants.ALPHA_CHANNEL] = BufferConstants.OPAQUE
    return PixelBuffer.from_array(pixels)


def sobel_magnitude(buffer: PixelBuffer) -> np.ndarray:
    """
    Gradient magnitude of the buffer's luma.

    Args:
        buffer: Input buffer

    Returns:
        H x W float64 array; border entries are 0
    """
    gray = apply_grayscale(buffer).to_array()[..., 0]
    magnitude = np.zeros(gray.shape, dtype=np.float64)

    gx = correlate(gray, EdgeConstants.SOBEL_X, radius=1)
    gy = correlate(gray, EdgeConstants.SOBEL_Y, radius=1)
    if gx.size:
        magnitude[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy)
    return magnitude


def apply_sobel(buffer: PixelBuffer) -> PixelBuffer:
    """
    Sobel edge map.

    Interior magnitudes are truncated into a byte, saturating at 255. The
    one-pixel border ring is always (0, 0, 0, 255).
    """
    magnitude = sobel_magnitude(buffer)
    values = np.clip(magnitude, 0, BufferConstants.MAX_VALUE).astype(np.uint8)
    if values.size == 0:
        return _edge_map(values)

    values[0, :] = 0
    values[-1, :] = 0
    values[:, 0] = 0
    values[:, -1] = 0
    return _edge_map(values)


def gaussian_blur(buffer: PixelBuffer) -> PixelBuffer:
    """5x5 Gaussian blur on RGB; the two-pixel border keeps its source values."""
    kernel = EdgeConstants.GAUSSIAN_5X5
    return apply_kernel(
        buffer,
        kernel,
        radius=EdgeConstants.GAUSSIAN_RADIUS,
        channels=BufferConstants.RGB_CHANNELS,
        divisor=sum(kernel),
    )


def double_threshold(magnitude: np.ndarray, low: float, high: float) -> np.ndarray:
    """
    Classify magnitudes as strong (255), weak (128) or none (0).

    high is expected to be >= low. With an inverted pair no weak class
    exists: everything above high is strong and the rest is none.
    """
    classes = np.full(magnitude.shape, EdgeConstants.NO_EDGE, dtype=np.uint8)
    classes[magnitude > low] = EdgeConstants.WEAK_EDGE
    classes[magnitude > high] = EdgeConstants.STRONG_EDGE
    return classes


def hysteresis(classes: np.ndarray) -> np.ndarray:
    """
    Single-pass edge linking.

    Interior weak pixels are visited in raster order and updated in place: a
    weak pixel with any 8-connected neighbor at 255 becomes 255, otherwise 0.
    A weak pixel promoted earlier in the scan counts as strong for later ones,
    but the pass is not repeated, so weak chains that only reach a strong
    edge through pixels later in the scan are dropped.

    Args:
        classes: Output of double_threshold

    Returns:
        New H x W uint8 array
    """
    result = classes.copy()
    height, width = result.shape
    if height < 3 or width < 3:
        return result

    interior = result[1:-1, 1:-1]
    for y, x in np.argwhere(interior == EdgeConstants.WEAK_EDGE):
        y += 1
        x += 1
        window = result[y - 1 : y + 2, x - 1 : x + 2]
        if np.any(window == EdgeConstants.STRONG_EDGE):
            result[y, x] = EdgeConstants.STRONG_EDGE
        else:
            result[y, x] = EdgeConstants.NO_EDGE
    return result


def apply_canny(buffer: PixelBuffer, low_threshold: float, high_threshold: float) -> PixelBuffer:
    """
    Canny-style edge detection.

    Args:
        buffer: Input buffer
        low_threshold: Magnitudes above this are at least weak edges
        high_threshold: Magnitudes above this are strong edges

    Returns:
        Opaque edge map with R = G = B in {0, 255} in the interior
    """
    blurred = gaussian_blur(buffer)
    sobel = apply_sobel(blurred)
    magnitude = sobel.to_array()[..., 0]
    classes = double_threshold(magnitude, low_threshold, high_threshold)
    return _edge_map(hysteresis(classes))


class EdgeDetector:
    """Edge detection processor."""

    def __init__(self):
        """Initialize edge detector."""
        pass  # No initialization needed for stateless detector

    def detect(
        self,
        buffer: PixelBuffer,
        method: EdgeMethod = EdgeMethod.SOBEL,
        params: Optional[Dict[str, Any]] = None,
    ) -> PixelBuffer:
        """
        Perform edge detection on a buffer.

        Args:
            buffer: Input buffer
            method: Edge detection method
            params: Method-specific parameters (low_threshold, high_threshold for Canny)

        Returns:
            Edge map buffer of the same dimensions
        """
        if params is None:
            params = {}

        if method == EdgeMethod.SOBEL:
            return apply_sobel(buffer)
        elif method == EdgeMethod.CANNY:
            low = params.get("low_threshold", EdgeConstants.CANNY_LOW_DEFAULT)
            high = params.get("high_threshold", EdgeConstants.CANNY_HIGH_DEFAULT)
            if high < low:
                logger.warning(f"Canny high threshold {high} is below low threshold {low}")
            return apply_canny(buffer, low, high)
        else:
            raise ValueError(f"Unknown edge detection method: {method}")
