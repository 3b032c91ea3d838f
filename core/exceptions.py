"""
Engine exceptions for Pixel Transform Flow.

These are raised by the pixel engine (buffers, operators, pipeline) and are
independent of the HTTP layer. api.exceptions maps them to status codes.
"""

from typing import Optional


class PixelTransformError(Exception):
    """Base class for all engine errors."""


class InvalidBufferError(PixelTransformError):
    """Raised when a pixel buffer does not hold width * height * 4 values in [0, 255]."""

    def __init__(self, width: int, height: int, length: int, reason: Optional[str] = None):
        self.width = width
        self.height = height
        self.length = length
        if reason is None:
            reason = f"needs {max(width * height * 4, 0)} bytes, got {length}"
        self.reason = reason
        super().__init__(f"Invalid RGBA buffer: {width}x{height} {reason}")


class ValidationError(PixelTransformError):
    """Raised when transform parameters or a pipeline description cannot be parsed."""


class ResourceExhausted(PixelTransformError):
    """Raised when a recompute runs out of memory. The previous result stays published."""


class RecomputeCancelled(PixelTransformError):
    """Raised between stages when a newer recompute has superseded this one."""

    def __init__(self, generation: int, completed_stages: int):
        self.generation = generation
        self.completed_stages = completed_stages
        super().__init__(
            f"Recompute {generation} cancelled after {completed_stages} stage(s)"
        )
