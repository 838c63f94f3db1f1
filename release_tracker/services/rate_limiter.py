"""
Rate Limiting Service

Per-client daily quota for the Google Books search proxy, built on the
`limits` library (the engine underneath slowapi).

Key Features:
=============
1. IP-based identity taken from the connection peer
2. One window per client, starting at that client's first search
3. Status can be read without consuming a slot
4. In-memory storage; counters live as long as the process

Strategy:
=========
limits' fixed-window strategy on MemoryStorage stamps a key's expiry when
its counter is first created, so every client gets its own window measured
from its first request rather than a shared clock boundary.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime

from fastapi import Request
from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

SEARCH_NAMESPACE = "search"


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Only the connection peer counts. Forwarding headers are set by the
    client and are ignored here; behind a reverse proxy, uvicorn rewrites
    the peer from X-Forwarded-For when the proxy is listed in
    FORWARDED_ALLOW_IPS.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address string
    """
    return get_remote_address(request)


@dataclass(frozen=True)
class RateLimitStatus:
    """Snapshot of one client's quota."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime | None

    def as_headers(self) -> dict[str, str]:
        headers = {
            "X-Searches-Remaining": str(self.remaining),
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
        }
        if self.reset_at is not None:
            headers["X-RateLimit-Reset"] = str(int(self.reset_at.timestamp()))
        return headers


class SearchRateLimiter:
    """
    Counts searches per client identity within a rolling window.

    Request N is allowed while N <= max_requests; every later request in the
    same window is rejected. The window closes window_seconds after the
    client's first request, after which the client starts a fresh one.

    Example:
        limiter = SearchRateLimiter(max_requests=50, window_seconds=86400)
        status = limiter.hit("203.0.113.7")
        if not status.allowed:
            ...
    """

    def __init__(self, max_requests: int = 50, window_seconds: int = 24 * 60 * 60) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(
            max_requests, window_seconds, namespace=SEARCH_NAMESPACE
        )
        self._storage = MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self._storage)
        # hit() and the stats read that follows it must not interleave
        self._lock = threading.Lock()

        logger.info(
            f"Search rate limiter initialized - {max_requests} requests "
            f"per {window_seconds}s window"
        )

    def _status(self, identity: str, allowed: bool) -> RateLimitStatus:
        stats = self._strategy.get_window_stats(self._item, identity)
        untouched = stats.remaining >= self.max_requests
        return RateLimitStatus(
            allowed=allowed,
            limit=self.max_requests,
            remaining=stats.remaining,
            reset_at=None if untouched else datetime.fromtimestamp(stats.reset_time, UTC),
        )

    def hit(self, identity: str) -> RateLimitStatus:
        """
        Consume one slot for the identity.

        Returns:
            Status after the hit; allowed is False once the quota is used up
        """
        with self._lock:
            allowed = self._strategy.hit(self._item, identity)
            status = self._status(identity, allowed)

        if not allowed:
            logger.warning(f"Search rate limit exceeded for {identity}")
        return status

    def peek(self, identity: str) -> RateLimitStatus:
        """Report the identity's quota without consuming a slot."""
        with self._lock:
            allowed = self._strategy.test(self._item, identity)
            return self._status(identity, allowed)
