"""
Transform Service - Business logic for pipeline editing and recomputation.

This service owns the interactive workspace (one source image plus one
pipeline) and offers a stateless apply operation for scripted use.
"""

import logging
from threading import RLock
from typing import Any, Dict, List, Optional, Tuple

from api.exceptions import NoImageLoadedException, StageIndexException
from core.buffer import PixelBuffer
from core.image.converters import ImageConverters
from core.pipeline import Pipeline
from core.recompute import RecomputeResult, RecomputeScheduler
from core.utils.decorators import log_timing, timer
from schemas.transform import TransformSpec

logger = logging.getLogger(__name__)


class TransformService:
    """
    Service for applying transform pipelines.

    Every workspace mutation recomputes the whole pipeline from the source
    image. Mutations are serialized; recomputes run outside the lock so a
    newer edit can supersede an older recompute in flight.
    """

    def __init__(self, max_pixels: Optional[int] = None):
        """
        Initialize transform service.

        Args:
            max_pixels: Largest decoded image accepted
        """
        self.max_pixels = max_pixels
        self.pipeline = Pipeline()
        self.source: Optional[PixelBuffer] = None
        self.scheduler = RecomputeScheduler()
        self.lock = RLock()

    @log_timing
    def apply(self, image_base64: str, stages: List[Dict[str, Any]]) -> Tuple[PixelBuffer, int]:
        """
        Apply a pipeline to an image without touching the workspace.

        Args:
            image_base64: Encoded source image
            stages: Pipeline in wire shape

        Returns:
            Tuple of (result buffer, processing_time_ms)
        """
        source = ImageConverters.from_base64(image_base64, max_pixels=self.max_pixels)
        pipeline = Pipeline.from_wire(stages)
        with timer() as t:
            result = pipeline.recompute(source)
        return result, t["ms"]

    def load_image(self, image_base64: str) -> Optional[RecomputeResult]:
        """
        Replace the workspace source image. The pipeline is cleared.

        Returns:
            Published recompute result (the source itself), or None if superseded
        """
        source = ImageConverters.from_base64(image_base64, max_pixels=self.max_pixels)
        with self.lock:
            self.source = source
            self.pipeline.clear()
            logger.info(f"Loaded {source.width}x{source.height} source image, pipeline cleared")
        return self._recompute()

    def add_stage(self, spec: TransformSpec) -> Optional[RecomputeResult]:
        """Append a stage and recompute."""
        spec.typed_params()
        with self.lock:
            self._require_source()
            self.pipeline.append(spec)
            logger.info(f"Added stage {len(self.pipeline) - 1}: {spec.kind}")
        return self._recompute()

    def remove_stage(self, index: int) -> Optional[RecomputeResult]:
        """Remove the stage at index and recompute."""
        with self.lock:
            self._require_source()
            try:
                removed = self.pipeline.remove_at(index)
            except IndexError:
                raise StageIndexException(index, len(self.pipeline))
            logger.info(f"Removed stage {index}: {removed.kind}")
        return self._recompute()

    def reset(self) -> Optional[RecomputeResult]:
        """Clear all stages and recompute (the result becomes the source)."""
        with self.lock:
            self._require_source()
            self.pipeline.clear()
            logger.info("Pipeline cleared")
        return self._recompute()

    def get_state(self) -> Dict[str, Any]:
        """Current pipeline, source dimensions and published result."""
        with self.lock:
            self._require_source()
            published = self.scheduler.published
            return {
                "width": self.source.width,
                "height": self.source.height,
                "pipeline": self.pipeline.to_wire(),
                "result": published,
            }

    def _require_source(self) -> None:
        if self.source is None:
            raise NoImageLoadedException()

    def _recompute(self) -> Optional[RecomputeResult]:
        # Reserve the generation while holding the lock so generation order
        # matches mutation order.
        with self.lock:
            source = self.source
            pipeline = self.pipeline.copy()
            generation = self.scheduler.next_generation()
        return self.scheduler.submit(source, pipeline, generation=generation)
