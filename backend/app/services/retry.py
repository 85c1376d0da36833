"""
Bounded retry with backoff for outbound calls.

A RetryPolicy is parameterized per call site:

    verification:  2 retries, linear backoff      (0.5s, 1.0s)
    email:         2 retries, exponential backoff (0.5s, 1.0s)

``run`` re-raises the last error once the budget is exhausted; callers
decide whether that is fatal.  Errors not listed in ``retry_on`` propagate
immediately.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Backoff = Callable[[int], float]


def linear_backoff(base: float) -> Backoff:
    """Delay before retry ``n`` (1-based) is ``base * n``."""
    return lambda attempt: base * attempt


def exponential_backoff(base: float) -> Backoff:
    """Delay before retry ``n`` (1-based) is ``base * 2**(n - 1)``."""
    return lambda attempt: base * (2 ** (attempt - 1))


class RetryPolicy:
    def __init__(
        self,
        retries: int,
        backoff: Backoff,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self.retries = retries
        self.backoff = backoff
        self.retry_on = retry_on
        self.sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    async def run(
        self,
        fn: Callable[[], Awaitable[T]],
        label: Optional[str] = None,
    ) -> T:
        """Await ``fn()`` until it succeeds or the attempt budget runs out."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return await fn()
            except self.retry_on as exc:
                if attempt >= self.max_attempts:
                    raise
                delay = self.backoff(attempt)
                logger.info(
                    "%s attempt %d/%d failed (%s); retrying in %.2fs",
                    label or "call",
                    attempt,
                    self.max_attempts,
                    exc,
                    delay,
                )
                await self.sleep(delay)
