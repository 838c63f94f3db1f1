"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

Router Structure:
- auth.py: /api/auth/* endpoints (registration, login, current user)
- books.py: /api/books/* endpoints (Google Books search and detail)
- tracking.py: /api/tracking/* endpoints (track/untrack, list)
- calendar.py: /api/calendar/{year}
- status.py: /api/health and /api/rate-limit-status

Each router is imported and registered in main.py.
"""

from release_tracker.routers.auth import router as auth_router
from release_tracker.routers.books import router as books_router
from release_tracker.routers.calendar import router as calendar_router
from release_tracker.routers.status import router as status_router
from release_tracker.routers.tracking import router as tracking_router

__all__ = [
    "auth_router",
    "books_router",
    "calendar_router",
    "status_router",
    "tracking_router",
]
