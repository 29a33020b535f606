"""Rate limiter for outgoing requests."""

import asyncio
import logging
import time
from collections import deque
from typing import Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Async sliding-window rate limiter.

    Features:
    - Requests-per-second window
    - Optional concurrent request limit

    Instances are owned by the caller; share one between crawlers to throttle
    them together.
    """

    def __init__(
        self,
        requests_per_second: int = 10,
        max_concurrent: Optional[int] = None,
        window_seconds: float = 1.0,
    ):
        """
        Initialize rate limiter.

        Args:
            requests_per_second: Requests allowed per window
            max_concurrent: Maximum in-flight requests, unlimited when None
            window_seconds: Length of the sliding window
        """
        if requests_per_second < 1:
            raise ValueError("requests_per_second must be at least 1")

        self.requests_per_second = requests_per_second
        self.window_seconds = window_seconds

        # Monotonic timestamps of requests inside the window
        self._requests: deque[float] = deque()
        self._lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None

    def _clean_old_requests(self, now: float) -> None:
        """Remove requests outside the sliding window."""
        cutoff = now - self.window_seconds
        while self._requests and self._requests[0] <= cutoff:
            self._requests.popleft()

    async def acquire(self, url: str = "") -> None:
        """
        Acquire permission to make a request, sleeping while the window is full.

        Args:
            url: The URL being requested (used for logging only)
        """
        if self._semaphore:
            await self._semaphore.acquire()

        try:
            async with self._lock:
                while True:
                    now = time.monotonic()
                    self._clean_old_requests(now)
                    if len(self._requests) < self.requests_per_second:
                        self._requests.append(now)
                        return

                    wait_time = self._requests[0] + self.window_seconds - now
                    logger.debug(f"Rate limit reached, waiting {wait_time:.2f}s before {url}")
                    await asyncio.sleep(wait_time)
        except BaseException:
            # Cancelled while waiting: the caller never gets to release()
            self.release()
            raise

    def release(self) -> None:
        """Release a concurrent request slot."""
        if self._semaphore:
            self._semaphore.release()
