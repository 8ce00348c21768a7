import logging
import math
import threading
import time

from fastapi import Request

from formrelay.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window request counter per client.

    Windows reset lazily on the next hit. Expired entries are swept once per
    window and the table never holds more than max_clients entries.
    """

    def __init__(self, window_seconds: int = 60, max_requests: int = 20, max_clients: int = 10000, clock=time.monotonic):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.max_clients = max_clients
        self.clock = clock
        self._hits: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, start) in self._hits.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._hits[key]
        self._last_sweep = now

    def _make_room(self, now: float) -> None:
        self._sweep(now)
        overflow = len(self._hits) - self.max_clients + 1
        if overflow > 0:
            oldest = sorted(self._hits, key=lambda key: self._hits[key][1])[:overflow]
            for key in oldest:
                del self._hits[key]

    def hit(self, client: str) -> None:
        """Counts one request for client; raises RateLimitExceeded past the threshold."""
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            count, start = self._hits.get(client, (0, now))
            if now - start >= self.window_seconds:
                count, start = 0, now

            if client not in self._hits and len(self._hits) >= self.max_clients:
                self._make_room(now)

            count += 1
            self._hits[client] = (count, start)

        if count > self.max_requests:
            retry_after = max(1, math.ceil(self.window_seconds - (now - start)))
            logger.warning("Rate limit exceeded for %s (%s requests)", client, count)
            raise RateLimitExceeded(retry_after)


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(request: Request) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    limiter.hit(client_key(request))
