"""
Basic pixel transforms: contrast, brightness, sharpen, grayscale, threshold
and invert.

Each operator reads a PixelBuffer and returns a new one. Results are stored
the way byte-clamped image storage does it: clamp to [0, 255] and round half
to even. Alpha is never modified.
"""

import math

import numpy as np

from core.buffer import PixelBuffer
from core.constants import BasicTransformDefaults, BufferConstants
from vision.convolution import apply_kernel


def _to_bytes(values: np.ndarray) -> np.ndarray:
    # NaN stores as 0, infinities saturate
    values = np.nan_to_num(values, nan=0.0, posinf=BufferConstants.MAX_VALUE, neginf=0.0)
    return np.clip(np.rint(values), 0, BufferConstants.MAX_VALUE).astype(np.uint8)


def _map_rgb(buffer: PixelBuffer, func) -> PixelBuffer:
    pixels = buffer.to_array()
    rgb = pixels[..., :3].astype(np.float64)
    pixels[..., :3] = _to_bytes(func(rgb))
    return PixelBuffer.from_array(pixels)


def contrast_factor(contrast: float) -> float:
    """
    Contrast multiplier for a slider value in 0-200 (100 = unchanged).

    The slider is re-centered so that 100 maps to an adjustment of 0, where
    the factor is exactly 1. At contrast 359 the denominator vanishes and the
    factor is infinite; above it the factor turns negative.
    """
    adjustment = contrast - BasicTransformDefaults.CONTRAST_IDENTITY
    numerator = 259 * (adjustment + 255)
    denominator = 255 * (259 - adjustment)
    if denominator == 0:
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def apply_contrast(buffer: PixelBuffer, contrast: float) -> PixelBuffer:
    """
    Stretch or compress RGB values around mid-gray (128).

    With an infinite factor channels saturate to 0 or 255 by the sign of
    v - 128, and mid-gray itself (inf * 0) stores as 0.
    """
    factor = contrast_factor(contrast)
    with np.errstate(invalid="ignore", over="ignore"):
        return _map_rgb(buffer, lambda rgb: factor * (rgb - 128) + 128)


def apply_brightness(buffer: PixelBuffer, brightness: float) -> PixelBuffer:
    """Scale RGB values by brightness percent (100 = unchanged)."""
    factor = brightness / BasicTransformDefaults.BRIGHTNESS_IDENTITY
    return _map_rgb(buffer, lambda rgb: rgb * factor)


def sharpen_kernel(amount: float) -> list:
    """
    Integer-scaled sharpen kernel for an amount in 0-10.

    Equivalent to [0, -f, 0; -f, 1 + 4f, -f; 0, -f, 0] with f = amount / 10,
    multiplied by 10 so the neighborhood sums stay exact. Use with divisor 10.
    """
    scale = BasicTransformDefaults.SHARPEN_SCALE
    return [
        0, -amount, 0,
        -amount, scale + 4 * amount, -amount,
        0, -amount, 0,
    ]


def apply_sharpen(buffer: PixelBuffer, amount: float) -> PixelBuffer:
    """Sharpen RGB with a 3x3 Laplacian-style kernel; border pixels are copied through."""
    if amount == 0:
        return buffer
    return apply_kernel(
        buffer,
        sharpen_kernel(amount),
        radius=1,
        channels=BufferConstants.RGB_CHANNELS,
        divisor=BasicTransformDefaults.SHARPEN_SCALE,
    )


def luma(pixels: np.ndarray) -> np.ndarray:
    """Float luma plane (Rec. 601 weights) of an H x W x 4 array."""
    rgb = pixels[..., :3].astype(np.float64)
    return (
        rgb[..., 0] * BasicTransformDefaults.LUMA_R
        + rgb[..., 1] * BasicTransformDefaults.LUMA_G
        + rgb[..., 2] * BasicTransformDefaults.LUMA_B
    )


def apply_grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Replace R, G and B with the pixel's luma."""
    pixels = buffer.to_array()
    gray = _to_bytes(luma(pixels))
    pixels[..., :3] = gray[..., np.newaxis]
    return PixelBuffer.from_array(pixels)


def apply_threshold(buffer: PixelBuffer, threshold: float) -> PixelBuffer:
    """Binarize: grayscale values below threshold become 0, the rest 255."""
    pixels = apply_grayscale(buffer).to_array()
    binary = np.where(pixels[..., 0] < threshold, 0, BufferConstants.MAX_VALUE).astype(np.uint8)
    pixels[..., :3] = binary[..., np.newaxis]
    return PixelBuffer.from_array(pixels)


def apply_invert(buffer: PixelBuffer) -> PixelBuffer:
    """Invert RGB values."""
    pixels = buffer.to_array()
    pixels[..., :3] = BufferConstants.MAX_VALUE - pixels[..., :3]
    return PixelBuffer.from_array(pixels)
