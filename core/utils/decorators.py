"""
Utility decorators and context managers.
"""

import functools
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


@contextmanager
def timer() -> Iterator[Dict[str, int]]:
    """
    Measure elapsed wall time of a block.

    The yielded dict gets an "ms" entry when the block exits (also on error),
    so read it after the with statement.

    Example:
        >>> with timer() as t:
        ...     pipeline.recompute(source)
        >>> elapsed = t["ms"]
    """
    result: Dict[str, int] = {"ms": 0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = max(1, int((time.perf_counter() - start) * 1000))


def log_timing(func):
    """Log the duration of every call at debug level."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with timer() as t:
            result = func(*args, **kwargs)
        logger.debug(f"{func.__qualname__} took {t['ms']}ms")
        return result

    return wrapper
