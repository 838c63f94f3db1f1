"""
Book Pydantic Schemas

Shapes of the Google Books proxy responses.

- BookSummary: One search hit, reshaped from a Google Books volume
- SearchResponse: A page of search hits plus the upstream total
- BookDetail: A single volume with the longer description and ISBN-13
"""

from pydantic import Field

from release_tracker.schemas.base import CamelModel


class BookSummary(CamelModel):
    """A search hit. Field set is fixed regardless of what Google returns."""

    id: str = Field(..., description="Google Books volume id")
    google_books_id: str = Field(..., description="Same as id; used when tracking")
    title: str | None = None
    subtitle: str | None = None
    authors: list[str] = Field(default_factory=list)
    author: str = Field(..., description="Authors joined for display")
    published_date: str | None = None
    description: str = Field(..., description="Truncated description")
    cover: str | None = Field(default=None, description="https thumbnail URL")
    page_count: int | None = None
    categories: list[str] = Field(default_factory=list)
    series: str = Field(..., description="First category, or 'Standalone'")
    average_rating: float | None = None
    ratings_count: int | None = None
    language: str | None = None
    preview_link: str | None = None
    info_link: str | None = None


class SearchResponse(CamelModel):
    books: list[BookSummary]
    total_items: int
    query: str


class BookDetail(BookSummary):
    """Single-volume lookup."""

    publisher: str | None = None
    isbn: str | None = Field(default=None, description="ISBN-13, when listed")
    release_date: str | None = None
    is_tracked: bool | None = Field(
        default=None,
        description="Whether the signed-in caller tracks this book; null for anonymous callers",
    )
