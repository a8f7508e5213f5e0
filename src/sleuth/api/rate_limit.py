"""Fixed-window request rate limiting keyed by client identity."""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass

from sleuth.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Allows ``limit`` requests per ``window_seconds`` for each key."""

    def __init__(self, limit: int = 20, window_seconds: int = 60, clock=time.monotonic) -> None:
        self._limit = limit
        self._window = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> int:
        """Count one request for ``key``; return remaining allowance.

        Raises RateLimitExceededError with the seconds until the window resets.
        """
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self._window)
                self._cleanup(now)
                return self._limit - 1

            if window.count >= self._limit:
                retry_after = max(1, math.ceil(window.reset_at - now))
                logger.warning(
                    "Rate limit exceeded key=%s count=%d limit=%d", key, window.count, self._limit,
                )
                raise RateLimitExceededError(retry_after)

            window.count += 1
            return self._limit - window.count

    def _cleanup(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]
