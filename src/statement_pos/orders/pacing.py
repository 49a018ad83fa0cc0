"""Pacing between successive order operations."""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)


class FixedDelayPacer:
    """Keep at least ``delay_seconds`` between the start of two operations.

    The first ``wait()`` returns immediately; later calls sleep only for
    whatever part of the delay has not already elapsed.
    """

    def __init__(
        self,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds cannot be negative")
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._clock = clock
        self._last: Optional[float] = None

    def wait(self) -> float:
        """Block until the next operation may start; returns seconds slept."""
        now = self._clock()
        slept = 0.0
        if self._last is not None:
            remaining = self.delay_seconds - (now - self._last)
            if remaining > 0:
                logger.debug("Pacing: sleeping %.2fs", remaining)
                self._sleep(remaining)
                slept = remaining
                now = self._clock()
        self._last = now
        return slept

    def reset(self) -> None:
        self._last = None
