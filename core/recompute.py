"""
Recompute Scheduler - last-submitted-wins recomputation of a pipeline
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Optional

from core.buffer import PixelBuffer
from core.exceptions import RecomputeCancelled
from core.pipeline import Pipeline
from core.utils.decorators import timer

logger = logging.getLogger(__name__)


@dataclass
class RecomputeResult:
    """Published result of a completed recompute"""

    generation: int
    buffer: PixelBuffer
    stage_count: int
    processing_time_ms: int
    completed_at: datetime


class RecomputeScheduler:
    """
    Runs pipeline recomputes and publishes only the newest one.

    Every submission gets a new generation number. A recompute checks between
    stages whether a newer generation has been submitted and stops if so; a
    recompute that finishes after being superseded is discarded. Failed
    recomputes leave the previously published result in place.
    """

    def __init__(self):
        self._generation = 0
        self._published: Optional[RecomputeResult] = None

        # Thread safety (RLock allows reentrant locking)
        self.lock = RLock()

        # Statistics
        self.completed_count = 0
        self.cancelled_count = 0
        self.failed_count = 0

    @property
    def generation(self) -> int:
        with self.lock:
            return self._generation

    @property
    def published(self) -> Optional[RecomputeResult]:
        """Most recent result that was not superseded."""
        with self.lock:
            return self._published

    def next_generation(self) -> int:
        """Reserve a generation number, superseding everything in flight."""
        with self.lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self.lock:
            return generation == self._generation

    def submit(
        self, source: PixelBuffer, pipeline: Pipeline, generation: Optional[int] = None
    ) -> Optional[RecomputeResult]:
        """
        Recompute a pipeline snapshot and publish it unless superseded.

        Args:
            source: Original image
            pipeline: Pipeline to apply (a snapshot is taken)
            generation: Pre-reserved generation number; reserved here if omitted

        Returns:
            The published result, or None if this recompute was superseded

        Raises:
            ResourceExhausted: If a stage ran out of memory (nothing is published)
        """
        if generation is None:
            generation = self.next_generation()
        snapshot = pipeline.copy()

        try:
            with timer() as t:
                buffer = snapshot.recompute(
                    source,
                    should_cancel=lambda: not self.is_current(generation),
                    generation=generation,
                )
        except RecomputeCancelled as e:
            with self.lock:
                self.cancelled_count += 1
            logger.debug(str(e))
            return None
        except Exception:
            with self.lock:
                self.failed_count += 1
            raise

        with self.lock:
            if generation != self._generation:
                self.cancelled_count += 1
                logger.debug(f"Recompute {generation} superseded after completion, discarded")
                return None

            self._published = RecomputeResult(
                generation=generation,
                buffer=buffer,
                stage_count=len(snapshot),
                processing_time_ms=t["ms"],
                completed_at=datetime.now(),
            )
            self.completed_count += 1
            logger.debug(
                f"Published recompute {generation}: {len(snapshot)} stage(s) in {t['ms']}ms"
            )
            return self._published

    def reset(self) -> None:
        """Drop the published result and supersede anything in flight."""
        with self.lock:
            self._generation += 1
            self._published = None

    def get_statistics(self) -> dict:
        with self.lock:
            return {
                "generation": self._generation,
                "completed": self.completed_count,
                "cancelled": self.cancelled_count,
                "failed": self.failed_count,
            }
