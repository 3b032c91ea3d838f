"""
RGBA8 pixel buffer.

A PixelBuffer is the only value that flows between pipeline stages. It is
immutable: the backing array is read-only, so every operator has to build a
new buffer for its output.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from core.constants import BufferConstants
from core.exceptions import InvalidBufferError


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Row-major RGBA8 image.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        data: Flat uint8 array of width * height * 4 values (R, G, B, A)
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        data = np.asarray(self.data)
        if data.dtype != np.uint8:
            if data.size and (data.min() < 0 or data.max() > BufferConstants.MAX_VALUE):
                raise InvalidBufferError(
                    self.width,
                    self.height,
                    int(data.size),
                    reason=f"values must be in [0, 255], got [{data.min()}, {data.max()}]",
                )
            data = data.astype(np.uint8)
        data = np.ascontiguousarray(data.reshape(-1))
        if data.flags.writeable:
            data = data.copy()
            data.flags.writeable = False
        object.__setattr__(self, "data", data)
        self.validate()

    def validate(self) -> None:
        """
        Check the length invariant.

        Raises:
            InvalidBufferError: If the data length is not width * height * 4
        """
        if (
            self.width < 0
            or self.height < 0
            or self.data.size != self.width * self.height * BufferConstants.CHANNELS
        ):
            raise InvalidBufferError(self.width, self.height, int(self.data.size))

    @classmethod
    def from_bytes(cls, width: int, height: int, raw: Union[bytes, bytearray]) -> "PixelBuffer":
        """Create a buffer from raw RGBA bytes."""
        return cls(width=width, height=height, data=np.frombuffer(bytes(raw), dtype=np.uint8))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Create a buffer from an H x W x 4 array.

        Args:
            array: RGBA array, any integer dtype with values in [0, 255]

        Returns:
            New PixelBuffer
        """
        if array.ndim != 3 or array.shape[2] != BufferConstants.CHANNELS:
            raise InvalidBufferError(
                array.shape[1] if array.ndim > 1 else 0,
                array.shape[0] if array.ndim > 0 else 0,
                int(array.size),
            )
        height, width = array.shape[:2]
        return cls(width=width, height=height, data=array)

    @classmethod
    def filled(cls, width: int, height: int, rgba) -> "PixelBuffer":
        """Create a buffer where every pixel has the same RGBA value."""
        array = np.full((height, width, BufferConstants.CHANNELS), np.asarray(rgba))
        return cls.from_array(array)

    def to_array(self) -> np.ndarray:
        """Return a writable H x W x 4 copy of the pixels."""
        return self.data.reshape(self.height, self.width, BufferConstants.CHANNELS).copy()

    def pixel(self, x: int, y: int) -> tuple:
        """Return the (r, g, b, a) tuple at (x, y)."""
        offset = (y * self.width + x) * BufferConstants.CHANNELS
        return tuple(int(v) for v in self.data[offset : offset + BufferConstants.CHANNELS])

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.data, other.data)
        )
