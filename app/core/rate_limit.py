"""
In-memory sliding-window rate limiter.

Guards endpoints that spend embedding-provider quota on every request.
"""
import logging
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict
from fastapi import Request, HTTPException, status

from app.core import config

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First hop is the original client
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` per client within ``window_seconds``."""

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _sweep(self, cutoff: float) -> None:
        # Drop clients with no hit inside the window so the table stays bounded
        for key in [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]

    def hit(self, key: str) -> bool:
        """Record a request for ``key``. Returns False when over the limit."""
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def __len__(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = self._clock()


similarity_limiter = SlidingWindowRateLimiter(
    max_requests=config.SIMILARITY_RATE_LIMIT,
    window_seconds=config.SIMILARITY_RATE_WINDOW_SECONDS,
)


def check_similarity_rate_limit(request: Request) -> None:
    """
    FastAPI dependency enforcing the similarity search rate limit.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    ip = get_client_ip(request)
    if not similarity_limiter.hit(ip):
        logger.warning(
            f"Rate limit exceeded for IP: {ip} "
            f"({similarity_limiter.max_requests} requests in {similarity_limiter.window_seconds}s)"
        )
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=(
                f"Rate limit exceeded. Maximum {similarity_limiter.max_requests} requests "
                f"per {similarity_limiter.window_seconds} seconds."
            )
        )
