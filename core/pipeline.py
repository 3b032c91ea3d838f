"""
Transform pipeline.

A Pipeline is an ordered list of TransformSpec. recompute() always starts
from the source buffer and applies every stage in order, so the result
depends only on the source and the pipeline contents.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from core.buffer import PixelBuffer
from core.enums import EdgeMethod, TransformKind
from core.exceptions import RecomputeCancelled, ResourceExhausted
from core.utils.decorators import timer
from schemas.transform import TransformSpec, out_of_range_params, parse_pipeline
from vision.basic_transforms import (
    apply_brightness,
    apply_contrast,
    apply_grayscale,
    apply_invert,
    apply_sharpen,
    apply_threshold,
)
from vision.edge_detection import EdgeDetector
from vision.segmentation import apply_segmentation

logger = logging.getLogger(__name__)

_edge_detector = EdgeDetector()


def _segmentation(buffer: PixelBuffer, params) -> PixelBuffer:
    rng = np.random.default_rng(params.seed)
    return apply_segmentation(
        buffer, params.tolerance, params.min_size, params.color_scheme, rng=rng
    )


OPERATORS: Dict[TransformKind, Callable[[PixelBuffer, Any], PixelBuffer]] = {
    TransformKind.CONTRAST: lambda buffer, p: apply_contrast(buffer, p.contrast),
    TransformKind.BRIGHTNESS: lambda buffer, p: apply_brightness(buffer, p.brightness),
    TransformKind.SHARPEN: lambda buffer, p: apply_sharpen(buffer, p.amount),
    TransformKind.GRAYSCALE: lambda buffer, p: apply_grayscale(buffer),
    TransformKind.THRESHOLD: lambda buffer, p: apply_threshold(buffer, p.threshold),
    TransformKind.SOBEL: lambda buffer, p: _edge_detector.detect(buffer, EdgeMethod.SOBEL),
    TransformKind.CANNY: lambda buffer, p: _edge_detector.detect(
        buffer, EdgeMethod.CANNY, p.to_dict()
    ),
    TransformKind.SEGMENTATION: _segmentation,
    TransformKind.INVERT: lambda buffer, p: apply_invert(buffer),
}


def apply_transform(buffer: PixelBuffer, spec: TransformSpec) -> PixelBuffer:
    """
    Apply a single stage.

    An unrecognized kind is a passthrough: the input buffer is returned
    unchanged.

    Args:
        buffer: Stage input
        spec: Stage description

    Returns:
        Stage output
    """
    kind = spec.transform_kind
    if kind is None:
        logger.warning(f"Unknown transform kind '{spec.kind}', passing image through")
        return buffer

    params = spec.typed_params()
    for problem in out_of_range_params(kind, params):
        logger.warning(f"{kind.value}: {problem}; computing anyway")

    return OPERATORS[kind](buffer, params)


class Pipeline:
    """Ordered, mutable list of transform stages."""

    def __init__(self, stages: Optional[Iterable[TransformSpec]] = None):
        self._stages: List[TransformSpec] = []
        for spec in stages or ():
            self.append(spec)

    @classmethod
    def from_wire(cls, items: List[Dict[str, Any]]) -> "Pipeline":
        """Build a pipeline from its [{kind, params}] wire shape."""
        return cls(parse_pipeline(items))

    def to_wire(self) -> List[Dict[str, Any]]:
        return [spec.to_dict() for spec in self._stages]

    @property
    def stages(self) -> Tuple[TransformSpec, ...]:
        """Snapshot of the current stages. Editing a returned spec does not reach the pipeline."""
        return tuple(spec.model_copy(deep=True) for spec in self._stages)

    @property
    def is_empty(self) -> bool:
        return not self._stages

    def __len__(self) -> int:
        return len(self._stages)

    def append(self, spec: TransformSpec) -> None:
        """Add a stage at the end. The stored spec is a private deep copy."""
        self._stages.append(spec.model_copy(deep=True))

    def remove_at(self, index: int) -> TransformSpec:
        """
        Remove the stage at index.

        Raises:
            IndexError: If index is out of range
        """
        if not 0 <= index < len(self._stages):
            raise IndexError(f"Stage index {index} out of range (0-{len(self._stages) - 1})")
        return self._stages.pop(index)

    def clear(self) -> None:
        self._stages.clear()

    def copy(self) -> "Pipeline":
        return Pipeline(self._stages)

    def recompute(
        self,
        source: PixelBuffer,
        should_cancel: Optional[Callable[[], bool]] = None,
        generation: int = 0,
    ) -> PixelBuffer:
        """
        Apply every stage to the source buffer, in order.

        Args:
            source: Original image; never modified
            should_cancel: Checked before each stage; when it returns True the
                recompute stops
            generation: Identifier reported in cancellation errors

        Returns:
            Final buffer (the source itself when the pipeline is empty)

        Raises:
            InvalidBufferError: If the source violates the length invariant
            RecomputeCancelled: If should_cancel returned True
            ResourceExhausted: If a stage ran out of memory
        """
        source.validate()
        current = source

        with timer() as t:
            for index, spec in enumerate(list(self._stages)):
                if should_cancel is not None and should_cancel():
                    raise RecomputeCancelled(generation, index)
                try:
                    current = apply_transform(current, spec)
                except MemoryError as e:
                    raise ResourceExhausted(
                        f"Out of memory in stage {index} ({spec.kind}) "
                        f"on a {source.width}x{source.height} image"
                    ) from e

        logger.debug(f"Recomputed {len(self)} stage(s) in {t['ms']}ms")
        return current
