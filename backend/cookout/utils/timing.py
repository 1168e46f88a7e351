"""Timing for request phases; logs one [TIMING] line per span."""

import time
from contextlib import contextmanager
from typing import Iterator

from cookout.logging import get_logger

logger = get_logger(__name__)

_TIMING_PREFIX = "[TIMING]"


def format_duration(elapsed_ms: float) -> str:
    """12500 -> '12.5s', 750 -> '750ms', 0.4 -> '0.4ms'."""
    if elapsed_ms >= 1000:
        return f"{elapsed_ms / 1000:.1f}s"
    if elapsed_ms >= 1:
        return f"{int(elapsed_ms)}ms"
    return f"{elapsed_ms:.1f}ms"


@contextmanager
def time_span(name: str, **extra: object) -> Iterator[None]:
    """Log elapsed wall time of the block with optional key=value fields."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        fields = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.info("%s %s elapsed=%s %s", _TIMING_PREFIX, name, format_duration(elapsed_ms), fields)
