"""
Rate limiter interface for booking attempts.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class RateLimiter(ABC):
    """Sliding-window attempt limiter keyed by requester identity."""

    @abstractmethod
    def hit(self, key: str, now: datetime) -> bool:
        """Record an attempt for ``key``; False when the limit is already reached."""
        pass

    @abstractmethod
    def retry_after_seconds(self, key: str, now: datetime) -> int:
        """Seconds until ``key`` may attempt again (0 when allowed now)."""
        pass
