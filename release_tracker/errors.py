"""
Application Errors

Services raise these exceptions; the handlers registered in main.py convert
them to JSON responses. Each error carries its HTTP status and the message
that is safe to show a client. Internal details (upstream bodies, SQL) are
logged, never returned.

Taxonomy:
- BadRequestError              400  malformed or missing input
- EmailAlreadyRegisteredError  400  duplicate registration
- InvalidCredentialsError      401  wrong email or password
- MissingTokenError            401  no bearer token
- InvalidTokenError            403  expired, tampered or malformed token
- NotFoundError                404  targeted lookup found nothing
- RateLimitExceededError       429  daily search quota used up
- UpstreamError                500  Google Books failed or was unreachable
"""

from datetime import datetime
from typing import Any


class ReleaseTrackerError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    message: str = "An internal error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Body of the JSON error response."""
        return {"error": self.message}

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class BadRequestError(ReleaseTrackerError):
    status_code = 400
    message = "Bad request"


class EmailAlreadyRegisteredError(BadRequestError):
    message = "Email already registered"


class InvalidCredentialsError(ReleaseTrackerError):
    # Same message for unknown email and wrong password
    status_code = 401
    message = "Invalid email or password"


class MissingTokenError(ReleaseTrackerError):
    status_code = 401
    message = "Access token required"

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(ReleaseTrackerError):
    status_code = 403
    message = "Invalid or expired token"


class NotFoundError(ReleaseTrackerError):
    status_code = 404
    message = "Not found"


class RateLimitExceededError(ReleaseTrackerError):
    """
    The caller used up its search quota for the current window.

    reset_at is the end of the caller's window, so the reported reset time
    is the same for every rejected request in that window.
    """

    status_code = 429

    def __init__(self, limit: int, reset_at: datetime) -> None:
        self.limit = limit
        self.reset_at = reset_at
        super().__init__(
            f"Daily search limit exceeded ({limit} searches per day). "
            "Please try again tomorrow."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "resetTime": self.reset_at.isoformat(),
        }

    @property
    def headers(self) -> dict[str, str]:
        retry_after = max(0, int((self.reset_at - datetime.now(self.reset_at.tzinfo)).total_seconds()))
        return {
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
        }


class UpstreamError(ReleaseTrackerError):
    """
    Google Books returned a non-success status or could not be reached.

    detail names the HTTP status (or transport failure) only; the upstream
    response body is never forwarded.
    """

    status_code = 500

    def __init__(self, detail: str, message: str = "Failed to search books. Please try again later.") -> None:
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.detail}
