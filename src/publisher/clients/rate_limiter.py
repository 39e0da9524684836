"""Throttling for content-creating GitHub requests.

GitHub's secondary rate limits cap how fast an integration may create
content (blobs, trees, commits, refs). Large publishes issue one blob request
per file, so writes go through a sliding-window limiter.
"""

import threading
import time
from collections import deque
from collections.abc import Callable


class RateLimiter:
    """Sliding-window rate limiter, safe to share between upload threads.

    Example:
        >>> limiter = RateLimiter(requests_per_period=80, period_seconds=60)
        >>> limiter.wait_if_needed()  # Blocks if the window is full
    """

    def __init__(
        self,
        requests_per_period: int,
        period_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize rate limiter.

        Args:
            requests_per_period: Maximum number of requests allowed per window;
                zero or less disables throttling
            period_seconds: Window length in seconds
            clock: Monotonic time source (injectable for tests)
            sleep: Sleep function (injectable for tests)
        """
        self.requests_per_period = requests_per_period
        self.period_seconds = period_seconds
        self.request_times: deque[float] = deque()
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.requests_per_period > 0

    def _evict(self, now: float) -> None:
        while self.request_times and self.request_times[0] <= now - self.period_seconds:
            self.request_times.popleft()

    def wait_if_needed(self) -> float:
        """Block until another request fits in the window, then record it.

        Returns:
            Seconds spent waiting
        """
        if not self.enabled:
            return 0.0

        waited = 0.0
        with self._lock:
            now = self._clock()
            self._evict(now)

            if len(self.request_times) >= self.requests_per_period:
                delay = self.period_seconds - (now - self.request_times[0])
                if delay > 0:
                    self._sleep(delay)
                    waited = delay
                now = self._clock()
                self._evict(now)

            self.request_times.append(now)

        return waited

    def reset(self) -> None:
        """Forget all tracked requests."""
        with self._lock:
            self.request_times.clear()
