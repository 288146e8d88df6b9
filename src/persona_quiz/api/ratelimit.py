"""
Per-client sliding window rate limiter

Process-local; every request runs on the same event loop, so no locking.
Keys whose window has emptied are dropped, so memory tracks active clients only.
"""

import time
from collections import deque
from typing import Callable


class SlidingWindowRateLimiter:
    """Allow at most `limit` hits per key within any `window_seconds` span."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque] = {}

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._hits)

    def _prune(self, key: str, now: float) -> int:
        """Drop expired hits for key and return how many remain."""
        hits = self._hits.get(key)
        if hits is None:
            return 0
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        if not hits:
            del self._hits[key]
            return 0
        return len(hits)

    def hit(self, key: str) -> bool:
        """Record a request. Returns False if it exceeds the limit (and is not recorded)."""
        now = self._clock()
        self.sweep(now)
        if self._prune(key, now) >= self.limit:
            return False
        self._hits.setdefault(key, deque()).append(now)
        return True

    def remaining(self, key: str) -> int:
        return max(0, self.limit - self._prune(key, self._clock()))

    def sweep(self, now: float) -> None:
        """Forget every key whose newest hit has left the window."""
        stale = [key for key, hits in self._hits.items() if now - hits[-1] >= self.window_seconds]
        for key in stale:
            del self._hits[key]

    def reset(self) -> None:
        self._hits.clear()
