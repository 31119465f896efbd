"""Minimum spacing between outbound provider calls."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable


class RateLimiter:
    """Block until ``min_delay_seconds`` have passed since the previous call.

    One limiter is shared by every ticker fetched through a client, since the
    provider's quota is global rather than per symbol.
    """

    def __init__(
        self,
        min_delay_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_delay_seconds < 0:
            raise ValueError("min_delay_seconds cannot be negative")
        self.min_delay_seconds = min_delay_seconds
        self.clock = clock
        self.sleep = sleep
        self.last_call_at: float | None = None
        self.logger = logging.getLogger("smamonitor.data.rate_limit")

    def wait(self) -> float:
        """Sleep out the remaining delay, record the call time, return seconds waited."""
        waited = 0.0
        if self.last_call_at is not None:
            elapsed = self.clock() - self.last_call_at
            if elapsed < self.min_delay_seconds:
                waited = self.min_delay_seconds - elapsed
                self.logger.info("Rate limiting: waiting %.1fs before next API call", waited)
                self.sleep(waited)
        self.last_call_at = self.clock()
        return waited
