"""
Transform stage models.

A pipeline travels on the wire as an ordered list of {kind, params}
objects. The kind is kept as a plain string on TransformSpec so that an
unrecognized kind survives parsing and reaches the pipeline, which passes the
image through unchanged for it.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.constants import (
    PARAM_RANGES,
    BasicTransformDefaults,
    EdgeConstants,
    SegmentationConstants,
)
from core.enums import TransformKind
from core.exceptions import ValidationError
from core.utils.enum_converter import enum_to_string, parse_enum
from schemas.base import BaseTransformParams

logger = logging.getLogger(__name__)


class NoParams(BaseTransformParams):
    """Parameters for kinds that take none (grayscale, sobel, invert)."""


class ContrastParams(BaseTransformParams):
    contrast: float = Field(
        default=BasicTransformDefaults.CONTRAST_IDENTITY,
        description="Contrast 0-200, 100 leaves the image unchanged",
    )


class BrightnessParams(BaseTransformParams):
    brightness: float = Field(
        default=BasicTransformDefaults.BRIGHTNESS_IDENTITY,
        description="Brightness percent 0-200, 100 leaves the image unchanged",
    )


class SharpenParams(BaseTransformParams):
    amount: float = Field(
        default=BasicTransformDefaults.SHARPEN_DEFAULT, description="Sharpening intensity 0-10"
    )


class ThresholdParams(BaseTransformParams):
    threshold: float = Field(
        default=BasicTransformDefaults.THRESHOLD_DEFAULT, description="Binarization level 0-255"
    )


class CannyParams(BaseTransformParams):
    low_threshold: float = Field(
        default=EdgeConstants.CANNY_LOW_DEFAULT,
        validation_alias=AliasChoices("low_threshold", "lowThreshold", "low"),
        description="Weak edge threshold 0-255",
    )
    high_threshold: float = Field(
        default=EdgeConstants.CANNY_HIGH_DEFAULT,
        validation_alias=AliasChoices("high_threshold", "highThreshold", "high"),
        description="Strong edge threshold 0-255, expected >= low_threshold",
    )


class SegmentationParams(BaseTransformParams):
    tolerance: float = Field(
        default=SegmentationConstants.TOLERANCE_DEFAULT,
        description="RGB distance cutoff from the seed color, 1-50",
    )
    min_size: int = Field(
        default=SegmentationConstants.MIN_SIZE_DEFAULT,
        validation_alias=AliasChoices("min_size", "minSize"),
        description="Segments with fewer pixels are merged into a neighbor",
    )
    color_scheme: str = Field(
        default="rainbow",
        validation_alias=AliasChoices("color_scheme", "colorScheme"),
        description="rainbow, pastel, grayscale, highContrast or preserveBrightness",
    )
    seed: Optional[int] = Field(
        default=None, description="Seed for schemes that use random hues"
    )


PARAMS_BY_KIND: Dict[TransformKind, Type[BaseTransformParams]] = {
    TransformKind.CONTRAST: ContrastParams,
    TransformKind.BRIGHTNESS: BrightnessParams,
    TransformKind.SHARPEN: SharpenParams,
    TransformKind.GRAYSCALE: NoParams,
    TransformKind.THRESHOLD: ThresholdParams,
    TransformKind.SOBEL: NoParams,
    TransformKind.CANNY: CannyParams,
    TransformKind.SEGMENTATION: SegmentationParams,
    TransformKind.INVERT: NoParams,
}


def out_of_range_params(kind: TransformKind, params: BaseTransformParams) -> List[str]:
    """
    Describe every parameter outside its declared range.

    Out-of-range values are still computed; callers only log these.
    """
    problems = []
    for name, (low, high) in PARAM_RANGES.get(kind.value, {}).items():
        value = getattr(params, name, None)
        if value is not None and not (low <= value <= high):
            problems.append(f"{name}={value} outside [{low}, {high}]")
    return problems


class TransformSpec(BaseModel):
    """One pipeline stage: a transform kind and its parameters."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Transform kind, e.g. 'contrast' or 'canny'")
    params: Dict[str, Any] = Field(default_factory=dict, description="Kind-specific parameters")

    @property
    def transform_kind(self) -> Optional[TransformKind]:
        """Parsed kind, or None when the kind is not recognized."""
        return parse_enum(self.kind, TransformKind, None, normalize=True)

    def typed_params(self) -> BaseTransformParams:
        """
        Resolve params into the kind's parameter model.

        Keys may use snake_case or camelCase. Unrecognized keys are logged
        and ignored.

        Returns:
            Parameter model instance (NoParams for unknown kinds)

        Raises:
            ValidationError: If a parameter has the wrong type
        """
        kind = self.transform_kind
        params_class = PARAMS_BY_KIND.get(kind, NoParams)
        if kind is not None:
            unknown = sorted(set(self.params) - params_class.accepted_keys())
            if unknown:
                logger.warning(f"Ignoring unknown parameters for '{self.kind}': {unknown}")
        try:
            return params_class(**self.params)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid parameters for '{self.kind}': {e}") from e

    @classmethod
    def create(cls, kind, **params) -> "TransformSpec":
        """Build a spec from a kind (enum or string) and keyword parameters."""
        return cls(kind=enum_to_string(kind), params=params)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "params": copy.deepcopy(dict(self.params))}


def parse_pipeline(items: List[Dict[str, Any]]) -> List[TransformSpec]:
    """
    Parse the wire shape of a pipeline.

    Args:
        items: Ordered list of {kind, params} objects

    Returns:
        List of TransformSpec in application order

    Raises:
        ValidationError: If an item is not a {kind, params} object or its
            parameters have the wrong type
    """
    specs = []
    for index, item in enumerate(items):
        try:
            spec = TransformSpec.model_validate(item)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid pipeline stage {index}: {e}") from e
        spec.typed_params()
        specs.append(spec)
    return specs
