"""Accumulated time spent waiting on I/O."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator


class AccumulatedDuration:
    """Adds up the seconds between matching start and stop calls."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._total = 0.0
        self._last_start: float | None = None

    def start(self) -> None:
        """Begin an interval unless one is already running."""
        if self._last_start is None:
            self._last_start = self._clock()

    def stop(self) -> None:
        """End the running interval, if any, and add it to the total."""
        if self._last_start is not None:
            self._total += self._clock() - self._last_start
            self._last_start = None

    @property
    def total(self) -> float:
        """Seconds accumulated by finished intervals."""
        return self._total

    @property
    def running(self) -> bool:
        return self._last_start is not None

    def observe_write(self, written: int | None, expected: int) -> None:
        """Account for a write result.

        A complete write or a failed one (``written`` is None) ends the
        interval; a partial write keeps it running.
        """
        if written is None or written == expected:
            self.stop()
        else:
            self.start()

    @contextmanager
    def timing(self) -> Iterator[AccumulatedDuration]:
        """Count the time spent inside the block, whatever way it exits."""
        self.start()
        try:
            yield self
        finally:
            self.stop()