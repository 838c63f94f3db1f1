"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- Database sessions (per-request)
- The shared cache, rate limiter and Google Books client, read from
  app.state where the lifespan handler put them
- The search rate-limit gate
- Authentication guards (strict and permissive)
"""

from typing import Annotated

import httpx
from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from release_tracker.config import get_settings
from release_tracker.database import get_db
from release_tracker.errors import InvalidTokenError, MissingTokenError, RateLimitExceededError
from release_tracker.services.cache import TTLCache
from release_tracker.services.google_books import GoogleBooksClient
from release_tracker.services.rate_limiter import (
    RateLimitStatus,
    SearchRateLimiter,
    get_client_ip,
)
from release_tracker.services.security import TokenClaims, decode_access_token

settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_tracking(db: Session = Depends(get_db)):
#
# You can write:
#   def list_tracking(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Application Components
# =============================================================================
# The lifespan handler in main.py creates one instance of each and stores it
# on app.state. Reading them through dependencies keeps handlers free of
# globals and lets tests swap them with app.dependency_overrides.

def get_search_cache(request: Request) -> TTLCache:
    return request.app.state.search_cache


def get_rate_limiter(request: Request) -> SearchRateLimiter:
    return request.app.state.rate_limiter


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_google_books_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    cache: TTLCache = Depends(get_search_cache),
) -> GoogleBooksClient:
    return GoogleBooksClient(
        http_client,
        cache,
        api_key=settings.google_books_api_key,
        base_url=settings.google_books_base_url,
    )


SearchCache = Annotated[TTLCache, Depends(get_search_cache)]
RateLimiter = Annotated[SearchRateLimiter, Depends(get_rate_limiter)]
BooksClient = Annotated[GoogleBooksClient, Depends(get_google_books_client)]


# =============================================================================
# Search Rate Limit Gate
# =============================================================================
def enforce_search_rate_limit(
    request: Request,
    response: Response,
    limiter: RateLimiter,
) -> RateLimitStatus:
    """
    Consume one search slot for the caller, or reject the request.

    Runs before the route handler, so a rejected request never reaches it.
    Allowed requests get the remaining quota in the response headers.

    Raises:
        RateLimitExceededError: 429 once the caller's quota is used up
    """
    status = limiter.hit(get_client_ip(request))
    if not status.allowed:
        raise RateLimitExceededError(status.limit, status.reset_at)

    response.headers.update(status.as_headers())
    return status


SearchQuota = Annotated[RateLimitStatus, Depends(enforce_search_rate_limit)]


# =============================================================================
# JWT Authentication
# =============================================================================
# HTTPBearer extracts the token from "Authorization: Bearer <token>".
# auto_error=False lets the guards below choose the error responses.

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """
    Strict guard: the request must carry a valid token.

    The user is not looked up; handlers that need the row do that themselves.

    Raises:
        MissingTokenError: 401 if no bearer token was sent
        InvalidTokenError: 403 if the token is expired, tampered or malformed
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise InvalidTokenError()

    return claims


def get_optional_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims | None:
    """
    Permissive guard: never rejects.

    Returns the caller's claims when a valid token is present, None for
    anonymous callers and for invalid tokens alike.
    """
    if credentials is None or not credentials.credentials:
        return None
    return decode_access_token(credentials.credentials)


CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
OptionalClaims = Annotated[TokenClaims | None, Depends(get_optional_claims)]
