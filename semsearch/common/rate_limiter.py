"""Blocking token bucket for outbound embedding requests."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

# Absorbs float drift when a sleep lands exactly on the refill moment.
_EPSILON = 1e-9


class RateLimiter:
    """Token bucket refilled continuously at ``requests_per_minute / 60`` per second.

    The bucket starts full, so up to ``requests_per_minute`` requests go out
    as a burst. One limiter is shared by every worker thread of the chunker.
    ``None`` or a non-positive rate disables limiting.
    """

    def __init__(
        self,
        requests_per_minute: int | None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.requests_per_minute = (
            requests_per_minute if requests_per_minute and requests_per_minute > 0 else None
        )
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._tokens = float(self.requests_per_minute or 0)
        self._updated_at = clock()

    @property
    def enabled(self) -> bool:
        return self.requests_per_minute is not None

    @property
    def rate_per_second(self) -> float:
        return (self.requests_per_minute or 0) / 60.0

    def _take(self) -> float:
        """Take a token if one is available; otherwise return the seconds to wait."""
        now = self._clock()
        self._tokens = min(
            float(self.requests_per_minute or 0),
            self._tokens + (now - self._updated_at) * self.rate_per_second,
        )
        self._updated_at = now
        if self._tokens >= 1.0 - _EPSILON:
            self._tokens = max(self._tokens - 1.0, 0.0)
            return 0.0
        return (1.0 - self._tokens) / self.rate_per_second

    def try_acquire(self) -> bool:
        """Take a token without blocking. Returns False when the bucket is empty."""
        if not self.enabled:
            return True
        with self._lock:
            return self._take() == 0.0

    def acquire(self) -> None:
        """Block until a token is available."""
        if not self.enabled:
            return
        while True:
            with self._lock:
                wait = self._take()
            if wait == 0.0:
                return
            self._sleep(wait)
