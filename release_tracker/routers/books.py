"""
Books Router

Proxy endpoints over the Google Books volumes API.

- GET /books/search: Rate-limited, cached search
- GET /books/{volume_id}: Cached single-volume detail

Nothing here touches the local books table; a book is stored only when a
user tracks it (see routers/tracking.py).
"""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from release_tracker.dependencies import BooksClient, DbSession, OptionalClaims, SearchQuota
from release_tracker.errors import BadRequestError
from release_tracker.schemas.book import BookDetail, SearchResponse
from release_tracker.services.tracking import is_book_tracked

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        500: {"description": "Google Books is unavailable"},
    },
)


# -------------------------------------------------------------------------
# Search Endpoint
# -------------------------------------------------------------------------
# Declared before /books/{volume_id} so "search" is not taken for an id.
@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search Google Books",
    description="""
Search Google Books by title, author or any free text.

**Rate limit:** 50 searches per client per day. Every response carries the
remaining quota in `X-Searches-Remaining` and `X-RateLimit-*` headers; once
the quota is used up the endpoint answers 429 until the window resets.

**Caching:** identical searches (same query, page size and start index) are
served from a one-hour cache.
""",
    responses={
        400: {"description": "Search query is required"},
        429: {"description": "Daily search limit exceeded"},
    },
)
async def search_books(
    quota: SearchQuota,
    client: BooksClient,
    query: Annotated[
        str | None,
        Query(
            description="Free-text search",
            max_length=200,
            examples=["brandon sanderson", "the way of kings"],
        ),
    ] = None,
    max_results: Annotated[
        int,
        Query(
            alias="maxResults",
            description="Results per page",
            ge=1,
            le=40,
        ),
    ] = 15,
    start_index: Annotated[
        int,
        Query(
            alias="startIndex",
            description="Zero-based offset of the first result",
            ge=0,
        ),
    ] = 0,
) -> dict:
    """
    Search Google Books.

    The rate limit is charged before the query is checked, so a request with
    an empty query still uses a slot.
    """
    if query is None or not query.strip():
        raise BadRequestError("Search query is required")

    return await client.search(query, max_results=max_results, start_index=start_index)


# -------------------------------------------------------------------------
# Detail Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/{volume_id}",
    response_model=BookDetail,
    summary="Get a single book",
    description="""
Fetch one Google Books volume with its full description, publisher and
ISBN-13.

Signed-in callers also get `isTracked`, telling whether they already track
the book. Anonymous callers (and callers with an invalid token) get `null`.
""",
    responses={
        404: {"description": "Book not found"},
    },
)
async def get_book(
    client: BooksClient,
    claims: OptionalClaims,
    db: DbSession,
    volume_id: Annotated[str, Path(min_length=1, max_length=255)],
) -> dict:
    detail = await client.get_volume(volume_id)

    # The cached dict is shared between callers; never mutate it
    detail = {**detail, "isTracked": None}
    if claims is not None:
        detail["isTracked"] = is_book_tracked(db, claims.user_id, volume_id)

    return detail
