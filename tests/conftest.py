"""
Pytest configuration and fixtures for Pixel Transform Flow tests
"""

import base64

import numpy as np
import pytest

from core.buffer import PixelBuffer
from core.image.converters import ImageConverters
from services.transform_service import TransformService


@pytest.fixture
def solid_buffer():
    """4x4 opaque buffer of a single color"""
    return PixelBuffer.filled(4, 4, (100, 150, 200, 255))


@pytest.fixture
def gradient_buffer():
    """8x6 buffer with a horizontal gradient and varying alpha"""
    array = np.zeros((6, 8, 4), dtype=np.uint8)
    array[..., 0] = np.arange(8, dtype=np.uint8) * 30
    array[..., 1] = np.arange(6, dtype=np.uint8)[:, np.newaxis] * 40
    array[..., 2] = 77
    array[..., 3] = np.arange(48, dtype=np.uint8).reshape(6, 8) * 5
    return PixelBuffer.from_array(array)


@pytest.fixture
def two_block_buffer():
    """4x4 buffer: left half black, right half white"""
    array = np.zeros((4, 4, 4), dtype=np.uint8)
    array[:, 2:, :3] = 255
    array[..., 3] = 255
    return PixelBuffer.from_array(array)


@pytest.fixture
def step_buffer():
    """10x10 buffer with a vertical black/white step edge between columns 4 and 5"""
    array = np.zeros((10, 10, 4), dtype=np.uint8)
    array[:, 5:, :3] = 255
    array[..., 3] = 255
    return PixelBuffer.from_array(array)


@pytest.fixture
def random_buffer():
    """16x12 buffer of seeded random pixels"""
    rng = np.random.default_rng(1234)
    array = rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8)
    return PixelBuffer.from_array(array)


@pytest.fixture
def png_base64(gradient_buffer):
    """The gradient buffer encoded as base64 PNG"""
    return ImageConverters.to_base64(gradient_buffer)


@pytest.fixture
def data_url(png_base64):
    """The gradient buffer as a PNG data URL"""
    return f"data:image/png;base64,{png_base64}"


@pytest.fixture
def invalid_base64():
    """Base64 that decodes to bytes that are not an image"""
    return base64.b64encode(b"definitely not an image").decode("utf-8")


@pytest.fixture
def transform_service():
    """Create TransformService instance for testing"""
    return TransformService(max_pixels=1024 * 1024)
