"""
Tracking Router

Endpoints for following books, authors and series.

All routes require a valid session token. Tracking is idempotent: tracking
something twice succeeds both times and leaves a single tracking row.
Untracking something that was never tracked also succeeds.

Books are identified by their Google Books id when tracked (the book row is
created on first use) and by the local id when untracked, as returned by
GET /tracking/all.
"""

from fastapi import APIRouter

from release_tracker.dependencies import CurrentClaims, DbSession
from release_tracker.schemas.tracking import (
    MessageResponse,
    TrackAuthorRequest,
    TrackBookRequest,
    TrackedItemsResponse,
    TrackSeriesRequest,
)
from release_tracker.services import tracking

router = APIRouter(
    prefix="/tracking",
    tags=["Tracking"],
    responses={
        401: {"description": "Access token required"},
        403: {"description": "Invalid or expired token"},
    },
)


# -------------------------------------------------------------------------
# Track Endpoints
# -------------------------------------------------------------------------
@router.post(
    "/books",
    response_model=MessageResponse,
    summary="Track a book",
    description="""
Track a book for release updates.

The body is usually a search hit sent back as is. The first time a book is
tracked by anyone it is stored with this metadata, its authors are linked in
the order given, and its series (unless "Standalone") is recorded.
""",
)
def track_book(data: TrackBookRequest, claims: CurrentClaims, db: DbSession) -> MessageResponse:
    tracking.track_book(db, claims.user_id, data)
    return MessageResponse(message="Book tracked successfully")


@router.post("/authors", response_model=MessageResponse, summary="Track an author")
def track_author(data: TrackAuthorRequest, claims: CurrentClaims, db: DbSession) -> MessageResponse:
    tracking.track_author(db, claims.user_id, data.author_name)
    return MessageResponse(message="Author tracked successfully")


@router.post("/series", response_model=MessageResponse, summary="Track a series")
def track_series(data: TrackSeriesRequest, claims: CurrentClaims, db: DbSession) -> MessageResponse:
    tracking.track_series(db, claims.user_id, data.series_name)
    return MessageResponse(message="Series tracked successfully")


# -------------------------------------------------------------------------
# List Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/all",
    response_model=TrackedItemsResponse,
    summary="List everything tracked",
    description="""
Tracked books (with authors in authorship order and the series name), ordered
by release date with undated books last, followed by tracked authors and
series ordered by name.
""",
)
def list_tracked(claims: CurrentClaims, db: DbSession) -> TrackedItemsResponse:
    return tracking.list_tracked(db, claims.user_id)


# -------------------------------------------------------------------------
# Untrack Endpoints
# -------------------------------------------------------------------------
@router.delete("/books/{book_id}", response_model=MessageResponse, summary="Stop tracking a book")
def untrack_book(book_id: int, claims: CurrentClaims, db: DbSession) -> MessageResponse:
    tracking.untrack_book(db, claims.user_id, book_id)
    return MessageResponse(message="Book untracked")


@router.delete("/authors/{author_id}", response_model=MessageResponse, summary="Stop tracking an author")
def untrack_author(author_id: int, claims: CurrentClaims, db: DbSession) -> MessageResponse:
    tracking.untrack_author(db, claims.user_id, author_id)
    return MessageResponse(message="Author untracked")


@router.delete("/series/{series_id}", response_model=MessageResponse, summary="Stop tracking a series")
def untrack_series(series_id: int, claims: CurrentClaims, db: DbSession) -> MessageResponse:
    tracking.untrack_series(db, claims.user_id, series_id)
    return MessageResponse(message="Series untracked")
