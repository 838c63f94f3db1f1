"""
Status Router

Utility endpoints for monitoring and for clients that want to show their
remaining search quota.

- GET /health: Liveness check with the current cache size
- GET /rate-limit-status: The caller's search quota (does not use a slot)
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

from release_tracker.dependencies import RateLimiter, SearchCache
from release_tracker.services.rate_limiter import get_client_ip

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    summary="Health check",
    description="Check if the API is running.",
)
def health_check(cache: SearchCache) -> dict:
    """
    Health check endpoint.

    Used by:
    - Load balancers to check if instance is healthy
    - Monitoring systems
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "cacheSize": cache.size,
    }


@router.get(
    "/rate-limit-status",
    summary="Search quota for the caller",
    description="""
Report how many searches the caller has left in the current window.

Reading the status does not count as a search. `resetTime` is `null` until the
caller's first search opens a window.
""",
)
def rate_limit_status(request: Request, limiter: RateLimiter) -> dict:
    status = limiter.peek(get_client_ip(request))
    return {
        "limit": status.limit,
        "remaining": status.remaining,
        "resetTime": status.reset_at.isoformat() if status.reset_at else None,
    }
