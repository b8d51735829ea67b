"""
In-process sliding-window rate limiter for booking attempts.
"""

import threading
from collections import defaultdict, deque
from datetime import datetime, timedelta
from typing import Deque, Dict

from clinicbook.application.ports.services.rate_limiter import RateLimiter


class SlidingWindowRateLimiter(RateLimiter):
    """Allows ``max_attempts`` per key within any ``window_seconds`` span.

    Timestamps older than the window are evicted for the key being checked
    on every call, and for all keys every ``sweep_every`` calls.
    """

    def __init__(self, max_attempts: int, window_seconds: int, sweep_every: int = 256):
        if max_attempts < 1 or window_seconds < 1:
            raise ValueError("max_attempts and window_seconds must be positive")
        self.max_attempts = max_attempts
        self.window = timedelta(seconds=window_seconds)
        self._sweep_every = sweep_every
        self._calls = 0
        self._attempts: Dict[str, Deque[datetime]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _evict(self, key: str, now: datetime) -> Deque[datetime]:
        attempts = self._attempts[key]
        cutoff = now - self.window
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        return attempts

    def _sweep(self, now: datetime) -> None:
        for key in list(self._attempts):
            if not self._evict(key, now):
                del self._attempts[key]

    def hit(self, key: str, now: datetime) -> bool:
        with self._lock:
            self._calls += 1
            if self._calls % self._sweep_every == 0:
                self._sweep(now)
            attempts = self._evict(key, now)
            if len(attempts) >= self.max_attempts:
                return False
            attempts.append(now)
            return True

    def retry_after_seconds(self, key: str, now: datetime) -> int:
        with self._lock:
            attempts = self._evict(key, now)
            if len(attempts) < self.max_attempts:
                return 0
            remaining = (attempts[0] + self.window) - now
            return max(1, int(remaining.total_seconds()))

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._attempts)
