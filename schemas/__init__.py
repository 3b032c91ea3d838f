"""
Schemas Package

Pydantic schemas for the pipeline wire format, shared by the API, the
service layer and the core pipeline.
"""

# Re-export enums from centralized location for convenience
from core.enums import ColorScheme, EdgeMethod, TransformKind

from .base import BaseTransformParams
from .transform import (
    PARAMS_BY_KIND,
    BrightnessParams,
    CannyParams,
    ContrastParams,
    NoParams,
    SegmentationParams,
    SharpenParams,
    ThresholdParams,
    TransformSpec,
    parse_pipeline,
)

__all__ = [
    "TransformSpec",
    "parse_pipeline",
    "PARAMS_BY_KIND",
    "BaseTransformParams",
    "NoParams",
    "ContrastParams",
    "BrightnessParams",
    "SharpenParams",
    "ThresholdParams",
    "CannyParams",
    "SegmentationParams",
    "ColorScheme",
    "EdgeMethod",
    "TransformKind",
]
