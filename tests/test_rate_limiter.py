"""
Tests for the Search Rate Limiter

Covers the quota arithmetic, per-client isolation, the read-only peek and
client identity taken from the connection peer.
"""

import time
from datetime import UTC, datetime

import pytest
from fastapi import Response
from starlette.requests import Request

from release_tracker.dependencies import enforce_search_rate_limit
from release_tracker.errors import RateLimitExceededError
from release_tracker.services.rate_limiter import (
    RateLimitStatus,
    SearchRateLimiter,
    get_client_ip,
)


def make_request(headers: dict[str, str] | None = None, client_host: str = "10.0.0.1") -> Request:
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/books/search",
        "headers": raw_headers,
        "client": (client_host, 12345),
    })


class TestSearchRateLimiter:
    """Quota arithmetic for one and several clients."""

    def test_fifty_searches_allowed_then_rejected(self):
        limiter = SearchRateLimiter(max_requests=50, window_seconds=86400)
        before = datetime.now(UTC)

        for n in range(1, 51):
            status = limiter.hit("203.0.113.7")
            assert status.allowed, f"request {n} should be allowed"
            assert status.remaining == 50 - n

        rejected = limiter.hit("203.0.113.7")

        assert rejected.allowed is False
        assert rejected.remaining == 0
        assert rejected.limit == 50
        assert rejected.reset_at is not None
        assert rejected.reset_at >= before

    def test_reset_time_is_stable_within_window(self):
        limiter = SearchRateLimiter(max_requests=2, window_seconds=86400)

        first = limiter.hit("a")
        limiter.hit("a")
        rejected = limiter.hit("a")

        assert first.reset_at == rejected.reset_at

    def test_identities_are_counted_separately(self):
        limiter = SearchRateLimiter(max_requests=1, window_seconds=86400)

        assert limiter.hit("client-a").allowed
        assert not limiter.hit("client-a").allowed
        assert limiter.hit("client-b").allowed

    def test_peek_does_not_consume(self):
        limiter = SearchRateLimiter(max_requests=3, window_seconds=86400)
        limiter.hit("a")

        for _ in range(10):
            status = limiter.peek("a")

        assert status.allowed
        assert status.remaining == 2

    def test_peek_untouched_identity_has_no_reset_time(self):
        limiter = SearchRateLimiter(max_requests=5, window_seconds=86400)

        status = limiter.peek("never-seen")

        assert status.remaining == 5
        assert status.reset_at is None

    def test_peek_reports_exhausted_quota(self):
        limiter = SearchRateLimiter(max_requests=1, window_seconds=86400)
        limiter.hit("a")

        assert limiter.peek("a").allowed is False

    def test_window_expiry_restores_quota(self):
        limiter = SearchRateLimiter(max_requests=1, window_seconds=1)
        limiter.hit("a")
        assert not limiter.hit("a").allowed

        time.sleep(1.1)

        assert limiter.hit("a").allowed


class TestRateLimitStatusHeaders:
    def test_headers_include_reset_when_known(self):
        reset_at = datetime(2026, 1, 2, tzinfo=UTC)
        status = RateLimitStatus(allowed=True, limit=50, remaining=49, reset_at=reset_at)

        headers = status.as_headers()

        assert headers["X-Searches-Remaining"] == "49"
        assert headers["X-RateLimit-Limit"] == "50"
        assert headers["X-RateLimit-Remaining"] == "49"
        assert headers["X-RateLimit-Reset"] == str(int(reset_at.timestamp()))

    def test_headers_omit_reset_when_unknown(self):
        status = RateLimitStatus(allowed=True, limit=50, remaining=50, reset_at=None)

        assert "X-RateLimit-Reset" not in status.as_headers()


class TestClientIdentity:
    """Client identity is the connection peer, whatever the headers say."""

    def test_connection_address_used(self):
        request = make_request(client_host="192.0.2.33")
        assert get_client_ip(request) == "192.0.2.33"

    def test_forwarded_for_ignored(self):
        request = make_request({"X-Forwarded-For": "198.51.100.4, 10.0.0.2"})
        assert get_client_ip(request) == "10.0.0.1"

    def test_real_ip_ignored(self):
        request = make_request({"X-Real-IP": "198.51.100.9"})
        assert get_client_ip(request) == "10.0.0.1"


class TestSearchQuotaDependency:
    """The per-request gate in front of the search route."""

    def test_rotating_forwarded_for_does_not_reset_quota(self):
        limiter = SearchRateLimiter(max_requests=3, window_seconds=86400)

        for n in range(3):
            request = make_request({"X-Forwarded-For": f"198.51.100.{n}"})
            enforce_search_rate_limit(request, Response(), limiter)

        with pytest.raises(RateLimitExceededError):
            enforce_search_rate_limit(
                make_request({"X-Forwarded-For": "198.51.100.200"}), Response(), limiter
            )

    def test_quota_is_per_peer(self):
        limiter = SearchRateLimiter(max_requests=1, window_seconds=86400)
        enforce_search_rate_limit(make_request(client_host="192.0.2.1"), Response(), limiter)

        with pytest.raises(RateLimitExceededError):
            enforce_search_rate_limit(make_request(client_host="192.0.2.1"), Response(), limiter)

        status = enforce_search_rate_limit(
            make_request(client_host="192.0.2.2"), Response(), limiter
        )
        assert status.allowed

    def test_allowed_request_gets_quota_headers(self):
        limiter = SearchRateLimiter(max_requests=5, window_seconds=86400)
        response = Response()

        enforce_search_rate_limit(make_request(), response, limiter)

        assert response.headers["X-Searches-Remaining"] == "4"
