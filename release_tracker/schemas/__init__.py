"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Control exactly what data is exposed in API responses
2. Validation: Field-level errors before any service code runs
3. Decoupling: Database schema can evolve independently of the JSON contract
4. Documentation: Schemas generate OpenAPI documentation

All schemas derive from CamelModel, so the wire format is camelCase.
"""

from release_tracker.schemas.base import CamelModel, PartialDate
from release_tracker.schemas.book import BookDetail, BookSummary, SearchResponse
from release_tracker.schemas.tracking import (
    CalendarResponse,
    MessageResponse,
    TrackAuthorRequest,
    TrackBookRequest,
    TrackedAuthor,
    TrackedBook,
    TrackedItemsResponse,
    TrackedSeries,
    TrackSeriesRequest,
)
from release_tracker.schemas.user import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    UserCreate,
    UserResponse,
)

__all__ = [
    "CamelModel",
    "PartialDate",
    # User schemas
    "UserCreate",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "MeResponse",
    # Book schemas
    "BookSummary",
    "BookDetail",
    "SearchResponse",
    # Tracking schemas
    "TrackBookRequest",
    "TrackAuthorRequest",
    "TrackSeriesRequest",
    "MessageResponse",
    "TrackedBook",
    "TrackedAuthor",
    "TrackedSeries",
    "TrackedItemsResponse",
    "CalendarResponse",
]
