"""In-process sliding window rate limiter"""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional


class RateLimitExceeded(Exception):
    """Client exhausted its request budget for the current window"""

    def __init__(self, retry_after: int, message: str):
        super().__init__(message)
        self.retry_after = retry_after
        self.message = message


class SlidingWindowRateLimiter:
    """
    Allow at most `max_requests` per `window_seconds` for each key.

    Keeps the timestamps of accepted requests per key; a request is accepted
    when fewer than `max_requests` timestamps fall inside the trailing window.
    Keys with no timestamps left in the window are forgotten, and a full
    sweep of stale keys runs at most once per window.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of keys currently tracked"""
        with self._lock:
            return len(self._hits)

    def _expire(self, key: str, cutoff: float) -> Optional[Deque[float]]:
        hits = self._hits.get(key)
        if hits is None:
            return None
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if not hits:
            del self._hits[key]
            return None
        return hits

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window_seconds
        for key in [key for key, hits in self._hits.items() if hits[-1] <= cutoff]:
            del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str) -> Optional[float]:
        """
        Register a request for `key`.

        Returns:
            None when accepted, otherwise seconds until a slot frees up
        """
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            hits = self._expire(key, now - self.window_seconds)
            if hits is not None and len(hits) >= self.max_requests:
                return hits[0] + self.window_seconds - now

            if hits is None:
                hits = self._hits[key] = deque()
            hits.append(now)
            return None

    def remaining(self, key: str) -> int:
        now = self._clock()
        with self._lock:
            hits = self._expire(key, now - self.window_seconds)
            active = len(hits) if hits is not None else 0
        return max(self.max_requests - active, 0)
