"""
Convolution engine.

Generic kernel application over pixel buffers. Only pixels whose full
neighborhood lies inside the image are computed; the border policy belongs to
the caller.
"""

from typing import Sequence

import numpy as np

from core.buffer import PixelBuffer
from core.constants import BufferConstants


def _kernel_matrix(kernel: Sequence[float], radius: int) -> np.ndarray:
    size = 2 * radius + 1
    matrix = np.asarray(kernel, dtype=np.float64)
    if radius < 0 or matrix.size != size * size:
        raise ValueError(f"Kernel of radius {radius} needs {size * size} weights, got {matrix.size}")
    return matrix.reshape(size, size)


def correlate(plane: np.ndarray, kernel: Sequence[float], radius: int) -> np.ndarray:
    """
    Weighted neighborhood sums for every interior pixel.

    Args:
        plane: H x W or H x W x C array
        kernel: (2r+1)^2 weights in row-major order, kernel[0] is the top-left
            neighbor
        radius: Kernel radius r

    Returns:
        float64 array of shape (H - 2r, W - 2r[, C]); empty when the image is
        smaller than the kernel
    """
    weights = _kernel_matrix(kernel, radius)
    height, width = plane.shape[:2]
    out_h = max(height - 2 * radius, 0)
    out_w = max(width - 2 * radius, 0)

    source = plane.astype(np.float64)
    sums = np.zeros((out_h, out_w) + plane.shape[2:], dtype=np.float64)
    if out_h == 0 or out_w == 0:
        return sums

    size = 2 * radius + 1
    for ky in range(size):
        for kx in range(size):
            weight = weights[ky, kx]
            if weight == 0:
                continue
            sums += weight * source[ky : ky + out_h, kx : kx + out_w]
    return sums


def apply_kernel(
    buffer: PixelBuffer,
    kernel: Sequence[float],
    radius: int,
    channels: Sequence[int] = BufferConstants.RGB_CHANNELS,
    divisor: float = 1.0,
) -> PixelBuffer:
    """
    Convolve the selected channels of a buffer with a kernel.

    Interior results are divided by divisor, clamped to [0, 255] and truncated
    to a byte. Pixels within radius of the border are copied through.

    Args:
        buffer: Input buffer
        kernel: (2r+1)^2 weights, pre-normalized or paired with a divisor
        radius: Kernel radius
        channels: Channel indices to process (0=R, 1=G, 2=B, 3=A)
        divisor: Value each weighted sum is divided by

    Returns:
        New buffer of the same dimensions
    """
    pixels = buffer.to_array()
    channels = list(channels)
    sums = correlate(pixels[..., channels], kernel, radius)
    if sums.size == 0:
        return PixelBuffer.from_array(pixels)

    values = np.clip(sums / divisor, 0, BufferConstants.MAX_VALUE).astype(np.uint8)
    height, width = pixels.shape[:2]
    interior = pixels[radius : height - radius, radius : width - radius]
    interior[..., channels] = values
    return PixelBuffer.from_array(pixels)
