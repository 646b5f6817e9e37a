"""Fixed-window request rate limiter shared by all Confluence API calls."""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RequestRateLimiter:
    """Allows at most ``max_requests`` requests per ``window`` seconds.

    A window opens with the first request sent after the previous one has
    expired, and counts requests until it closes. ``acquire()`` blocks until
    the next window once the count reaches the limit. The limiter is safe to
    share between threads; the clock and sleep functions are injectable for
    tests.

    Example:
        >>> limiter = RequestRateLimiter(max_requests=10)
        >>> limiter.acquire()
    """

    def __init__(
        self,
        max_requests: int,
        window: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_requests < 1:
            raise ValueError("Rate limit must be at least 1 request per second")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._window_start: Optional[float] = None
        self._count = 0
        self._lock = threading.Lock()

    def acquire(self) -> None:
        """Block until a request may be sent, then count it."""
        while True:
            with self._lock:
                now = self._clock()
                if self._window_start is None or now - self._window_start >= self.window:
                    self._window_start = now
                    self._count = 0

                if self._count < self.max_requests:
                    self._count += 1
                    return

                wait_time = self.window - (now - self._window_start)

            logger.debug(f"Rate limit reached, waiting {wait_time:.3f}s")
            self._sleep(max(wait_time, 0.0))
