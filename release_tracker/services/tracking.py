"""
Tracking Service

Data access for books, authors, series and the users who track them.

Find-or-Create
==============
Authors and series are unique by name. get_or_create_author() and
get_or_create_series() issue a single statement:

    INSERT INTO authors (name) VALUES (:name)
    ON CONFLICT (name) DO UPDATE SET name = excluded.name
    RETURNING id

The no-op update makes the insert return a row whether it created one or hit
the existing one. The unique index is the only concurrency guard: two
requests inserting the same new name at once still end up with one row and
the same id. There is no SELECT-then-INSERT anywhere in this module.

Books are unique by google_books_id and use ON CONFLICT DO NOTHING, so only
the request that actually created a book links its authors and series.

Tracking rows are unique per (user, target) and are inserted with
ON CONFLICT DO NOTHING, which makes tracking idempotent. Untracking deletes
zero or one row and both outcomes are success.

Each public write function commits once, at the end.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, extract, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from release_tracker.models import (
    Author,
    Book,
    BookAuthor,
    Series,
    UserTrackedAuthor,
    UserTrackedBook,
    UserTrackedSeries,
)
from release_tracker.schemas.tracking import (
    TrackBookRequest,
    TrackedAuthor,
    TrackedBook,
    TrackedItemsResponse,
    TrackedSeries,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Dialect Helpers
# =============================================================================

def _insert(db: Session, model):
    """
    Build a dialect-specific INSERT that supports ON CONFLICT.

    PostgreSQL and SQLite expose the same on_conflict_* API on their own
    insert constructs; the generic sqlalchemy.insert() has neither.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upserts are not supported on the {dialect} dialect")


def _upsert_by_name(db: Session, model, name: str) -> int:
    stmt = _insert(db, model).values(name=name)
    stmt = stmt.on_conflict_do_update(
        index_elements=["name"],
        set_={"name": stmt.excluded.name},
    ).returning(model.id)
    return db.execute(stmt).scalar_one()


# =============================================================================
# Find-or-Create
# =============================================================================

def get_or_create_author(db: Session, name: str) -> int:
    """
    Return the id of the author with this name, creating it if needed.

    Calling it twice with the same name returns the same id and leaves one
    row. Does not commit.
    """
    return _upsert_by_name(db, Author, name)


def get_or_create_series(db: Session, name: str) -> int:
    """Return the id of the series with this name, creating it if needed."""
    return _upsert_by_name(db, Series, name)


def link_author(db: Session, book_id: int, author_id: int, author_order: int) -> None:
    """Link an author to a book; re-linking an existing pair is ignored."""
    stmt = _insert(db, BookAuthor).values(
        book_id=book_id,
        author_id=author_id,
        author_order=author_order,
    ).on_conflict_do_nothing(index_elements=["book_id", "author_id"])
    db.execute(stmt)


def ensure_book(db: Session, data: TrackBookRequest) -> int:
    """
    Return the id of the book with data.google_books_id, creating it if needed.

    A new book is stored with the caller's metadata, its authors are
    found-or-created and linked in the order given (author_order 1, 2, ...),
    and a series other than "Standalone" is found-or-created and set on the
    book. An existing book is returned untouched. Does not commit.
    """
    stmt = _insert(db, Book).values(
        google_books_id=data.google_books_id,
        title=data.title,
        cover_url=data.cover,
        published_date=data.published_date,
        release_date=data.release_date,
    ).on_conflict_do_nothing(index_elements=["google_books_id"]).returning(Book.id)
    book_id = db.execute(stmt).scalar_one_or_none()

    if book_id is None:
        # Another request created it first; reuse that row as is
        return db.execute(
            select(Book.id).where(Book.google_books_id == data.google_books_id)
        ).scalar_one()

    for position, author_name in enumerate(data.authors, start=1):
        author_id = get_or_create_author(db, author_name)
        link_author(db, book_id, author_id, position)

    if data.series_name:
        series_id = get_or_create_series(db, data.series_name)
        db.execute(update(Book).where(Book.id == book_id).values(series_id=series_id))

    logger.info(
        f"Created book {book_id} ({data.google_books_id}) with "
        f"{len(data.authors)} author(s)"
    )
    return book_id


# =============================================================================
# Track / Untrack
# =============================================================================

def _track(db: Session, model, target_column: str, user_id: int, target_id: int) -> None:
    stmt = _insert(db, model).values(
        user_id=user_id,
        **{target_column: target_id},
    ).on_conflict_do_nothing(index_elements=["user_id", target_column])
    db.execute(stmt)


def _untrack(db: Session, model, target_column: str, user_id: int, target_id: int) -> int:
    result = db.execute(
        delete(model).where(
            model.user_id == user_id,
            getattr(model, target_column) == target_id,
        )
    )
    removed = result.rowcount
    db.commit()
    return removed


def track_book(db: Session, user_id: int, data: TrackBookRequest) -> int:
    """
    Make sure the book exists, then track it for the user.

    Returns:
        The book id
    """
    book_id = ensure_book(db, data)
    _track(db, UserTrackedBook, "book_id", user_id, book_id)
    db.commit()
    logger.info(f"User {user_id} tracks book {book_id}")
    return book_id


def track_author(db: Session, user_id: int, author_name: str) -> int:
    """Find-or-create the author and track it for the user."""
    author_id = get_or_create_author(db, author_name)
    _track(db, UserTrackedAuthor, "author_id", user_id, author_id)
    db.commit()
    logger.info(f"User {user_id} tracks author {author_id}")
    return author_id


def track_series(db: Session, user_id: int, series_name: str) -> int:
    """Find-or-create the series and track it for the user."""
    series_id = get_or_create_series(db, series_name)
    _track(db, UserTrackedSeries, "series_id", user_id, series_id)
    db.commit()
    logger.info(f"User {user_id} tracks series {series_id}")
    return series_id


def untrack_book(db: Session, user_id: int, book_id: int) -> int:
    """Stop tracking a book. Returns the number of rows removed (0 or 1)."""
    return _untrack(db, UserTrackedBook, "book_id", user_id, book_id)


def untrack_author(db: Session, user_id: int, author_id: int) -> int:
    return _untrack(db, UserTrackedAuthor, "author_id", user_id, author_id)


def untrack_series(db: Session, user_id: int, series_id: int) -> int:
    return _untrack(db, UserTrackedSeries, "series_id", user_id, series_id)


def is_book_tracked(db: Session, user_id: int, google_books_id: str) -> bool:
    stmt = (
        select(UserTrackedBook.id)
        .join(Book, UserTrackedBook.book_id == Book.id)
        .where(
            UserTrackedBook.user_id == user_id,
            Book.google_books_id == google_books_id,
        )
    )
    return db.execute(stmt).first() is not None


# =============================================================================
# Aggregate Queries
# =============================================================================

def _author_names_by_book(db: Session, book_ids: Sequence[int]) -> dict[int, list[str]]:
    """Author names per book, in authorship order."""
    if not book_ids:
        return {}

    stmt = (
        select(BookAuthor.book_id, Author.name)
        .join(Author, BookAuthor.author_id == Author.id)
        .where(BookAuthor.book_id.in_(book_ids))
        .order_by(BookAuthor.book_id, BookAuthor.author_order)
    )
    names: dict[int, list[str]] = defaultdict(list)
    for book_id, name in db.execute(stmt):
        names[book_id].append(name)
    return names


def _tracked_books(db: Session, user_id: int, year: int | None = None) -> list[TrackedBook]:
    stmt = (
        select(Book, Series.name)
        .join(UserTrackedBook, UserTrackedBook.book_id == Book.id)
        .outerjoin(Series, Book.series_id == Series.id)
        .where(UserTrackedBook.user_id == user_id)
        .order_by(Book.release_date.asc().nulls_last(), Book.id)
    )
    if year is not None:
        stmt = stmt.where(extract("year", Book.release_date) == year)

    rows = db.execute(stmt).all()
    authors = _author_names_by_book(db, [book.id for book, _ in rows])

    return [
        TrackedBook(
            id=book.id,
            google_books_id=book.google_books_id,
            title=book.title,
            cover_url=book.cover_url,
            release_date=book.release_date,
            published_date=book.published_date,
            authors=authors.get(book.id, []),
            series_name=series_name,
        )
        for book, series_name in rows
    ]


def list_tracked(db: Session, user_id: int) -> TrackedItemsResponse:
    """
    Everything the user tracks.

    Books are ordered by release date with undated books last; authors and
    series by name.
    """
    authors = db.execute(
        select(Author.id, Author.name)
        .join(UserTrackedAuthor, UserTrackedAuthor.author_id == Author.id)
        .where(UserTrackedAuthor.user_id == user_id)
        .order_by(Author.name)
    ).all()

    series = db.execute(
        select(Series.id, Series.name)
        .join(UserTrackedSeries, UserTrackedSeries.series_id == Series.id)
        .where(UserTrackedSeries.user_id == user_id)
        .order_by(Series.name)
    ).all()

    return TrackedItemsResponse(
        books=_tracked_books(db, user_id),
        authors=[TrackedAuthor(id=row.id, name=row.name) for row in authors],
        series=[TrackedSeries(id=row.id, name=row.name) for row in series],
    )


def calendar_releases(db: Session, user_id: int, year: int) -> list[TrackedBook]:
    """Tracked books releasing in the given year, earliest first."""
    return _tracked_books(db, user_id, year=year)
