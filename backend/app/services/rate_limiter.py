"""
In-memory fixed-window rate limiter, keyed by client identifier.

Algorithm (per key):
  - no entry, or the window has elapsed  -> count = 1, reset_at = now + window
  - count already at the maximum         -> reject until reset_at passes
  - otherwise                            -> count += 1

Windows are fixed, not sliding: a client can land up to twice the limit
across a window boundary.  That trade-off is intentional.

State is process-wide per limiter instance.  Expired entries are swept on
access (at most once per window) so memory stays proportional to the number
of clients seen in the current window.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Request

from app import config

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._next_sweep_at = clock() + window_seconds

    def hit(self, key: str) -> bool:
        """Record one request for ``key``; return False if it must be rejected."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep_at:
                self._sweep(now)

            entry = self._entries.get(key)
            if entry is None or now > entry.reset_at:
                self._entries[key] = RateLimitEntry(
                    count=1, reset_at=now + self.window_seconds
                )
                return True

            if entry.count >= self.max_requests:
                return False

            entry.count += 1
            return True

    def retry_after(self, key: str) -> Optional[float]:
        """Seconds until ``key``'s window resets, or None if it has no entry."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        return max(0.0, entry.reset_at - self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock
        expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
        for key in expired:
            del self._entries[key]
        self._next_sweep_at = now + self.window_seconds


def get_client_ip(request: Request) -> str:
    """
    Resolve the client identifier used for rate limiting and logging.

    Order: first hop of X-Forwarded-For, then X-Real-IP, then "unknown".
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip", "").strip()
    return real_ip or UNKNOWN_CLIENT


form_rate_limiter = FixedWindowRateLimiter(
    config.FORM_RATE_LIMIT_MAX, config.FORM_RATE_LIMIT_WINDOW_SECONDS
)
analytics_rate_limiter = FixedWindowRateLimiter(
    config.ANALYTICS_RATE_LIMIT_MAX, config.ANALYTICS_RATE_LIMIT_WINDOW_SECONDS
)
