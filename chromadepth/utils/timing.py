"""Timing utilities for pixel passes."""

import time
from typing import Optional


class Stopwatch:
    """Measure wall time of a block in milliseconds.

    Example:
        with Stopwatch() as sw:
            run_pass()
        logger.info(f"pass took {sw.elapsed_ms:.1f}ms")
    """

    def __init__(self):
        self._start: Optional[float] = None
        self._stop: Optional[float] = None

    def __enter__(self) -> "Stopwatch":
        self._start = time.perf_counter()
        self._stop = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._stop = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in ms; still running if read inside the block."""
        if self._start is None:
            return 0.0
        end = self._stop if self._stop is not None else time.perf_counter()
        return (end - self._start) * 1000


def timestamp_ms() -> int:
    """
    Get current wall-clock timestamp in milliseconds.

    Used for export file names, so it is not monotonic.

    Returns:
        Timestamp in milliseconds since the epoch.
    """
    return int(time.time() * 1000)
