"""A token-bucket rate limiter allowing a fixed number of actions per minute."""

from __future__ import annotations

import threading
import time
from typing import Callable


class RateLimiter:
    """Token bucket refilled one token per interval, up to per_minute tokens.

    The bucket starts with a single token. Refills happen on ticks of
    60/per_minute seconds from creation; stopping ends the refills.
    """

    def __init__(
        self, per_minute: int, clock: Callable[[], float] = time.monotonic
    ) -> None:
        per_minute = max(per_minute, 1)
        self.capacity = per_minute
        self.interval = 60.0 / per_minute
        self._clock = clock
        self._start = clock()
        self._ticks = 0
        self._tokens = 1
        self._stopped = False
        self._lock = threading.Lock()

    def _refill(self) -> None:
        if self._stopped:
            return
        ticks = int((self._clock() - self._start) // self.interval)
        if ticks > self._ticks:
            self._tokens = min(self.capacity, self._tokens + ticks - self._ticks)
            self._ticks = ticks

    def allow(self) -> bool:
        """Consume one token and return True, or return False if none is left."""
        with self._lock:
            self._refill()
            if self._tokens > 0:
                self._tokens -= 1
                return True
            return False

    def stop(self) -> None:
        """Stop refilling the bucket."""
        with self._lock:
            self._refill()
            self._stopped = True

    def __enter__(self) -> RateLimiter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()