"""
Tracking Pydantic Schemas

Request bodies for following books, authors and series, and the aggregate
shapes returned by /tracking/all and /calendar/{year}.
"""

from datetime import date
from typing import Annotated

from pydantic import Field, field_validator

from release_tracker.schemas.base import CamelModel, PartialDate

STANDALONE_SERIES = "Standalone"


def _require_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class TrackBookRequest(CamelModel):
    """
    Book metadata supplied by the client, usually copied from a search hit.

    The server trusts this metadata: the book is not re-fetched from Google
    Books when it is first stored.
    """

    google_books_id: str = Field(..., min_length=1, max_length=255, examples=["zyTCAlFPjgYC"])
    title: str = Field(..., min_length=1, max_length=500, examples=["The Google Story"])
    authors: list[Annotated[str, Field(max_length=255)]] = Field(
        default_factory=list,
        examples=[["David A. Vise", "Mark Malseed"]],
    )
    cover: str | None = Field(default=None, max_length=500)
    published_date: PartialDate = None
    release_date: PartialDate = None
    series: str | None = Field(default=None, max_length=255, examples=["Standalone"])

    @field_validator("google_books_id", "title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("authors")
    @classmethod
    def clean_authors(cls, v: list[str]) -> list[str]:
        """Drop blank names, keep the order of the rest."""
        return [name.strip() for name in v if name and name.strip()]

    @property
    def series_name(self) -> str | None:
        """Series to link, or None for standalone books."""
        if self.series is None:
            return None
        name = self.series.strip()
        if not name or name == STANDALONE_SERIES:
            return None
        return name


class TrackAuthorRequest(CamelModel):
    author_name: str = Field(..., min_length=1, max_length=255, examples=["Brandon Sanderson"])

    @field_validator("author_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)


class TrackSeriesRequest(CamelModel):
    series_name: str = Field(..., min_length=1, max_length=255, examples=["The Stormlight Archive"])

    @field_validator("series_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class TrackedBook(CamelModel):
    """A tracked book with its authors in authorship order."""

    id: int
    google_books_id: str | None = None
    title: str
    cover_url: str | None = None
    release_date: date | None = None
    published_date: date | None = None
    authors: list[str] = Field(default_factory=list)
    series_name: str | None = None


class TrackedAuthor(CamelModel):
    id: int
    name: str


class TrackedSeries(CamelModel):
    id: int
    name: str


class TrackedItemsResponse(CamelModel):
    books: list[TrackedBook]
    authors: list[TrackedAuthor]
    series: list[TrackedSeries]


class CalendarResponse(CamelModel):
    releases: list[TrackedBook]
