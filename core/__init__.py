"""
Core modules for Pixel Transform Flow
"""

from .buffer import PixelBuffer
from .exceptions import (
    InvalidBufferError,
    PixelTransformError,
    RecomputeCancelled,
    ResourceExhausted,
    ValidationError,
)
from .pipeline import Pipeline, apply_transform
from .recompute import RecomputeResult, RecomputeScheduler

__all__ = [
    "PixelBuffer",
    "Pipeline",
    "apply_transform",
    "RecomputeScheduler",
    "RecomputeResult",
    "PixelTransformError",
    "InvalidBufferError",
    "ValidationError",
    "ResourceExhausted",
    "RecomputeCancelled",
]
