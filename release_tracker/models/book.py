"""
Book Model

The central model of the tracker: a book whose release users follow.

This file also holds BookAuthor, the association between books and authors.

WHY an Association Model, not a Table?
======================================
A plain association Table only stores the two foreign keys. Authorship order
is data about the relationship itself ("first author", "second author"), so
book_authors is a full model with an author_order column.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from release_tracker.database import Base

if TYPE_CHECKING:
    from release_tracker.models.author import Author
    from release_tracker.models.series import Series


class BookAuthor(Base):
    """
    Links a book to one of its authors.

    Table: book_authors

    author_order is the author's 1-based position in the book's author list.
    """

    __tablename__ = "book_authors"
    __table_args__ = (
        CheckConstraint("author_order > 0", name="ck_book_authors_order_positive"),
    )

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    author_order: Mapped[int] = mapped_column(
        Integer,
        default=1,
        server_default="1",
        nullable=False,
        comment="Position of the author in the book's author list"
    )

    book: Mapped["Book"] = relationship("Book", back_populates="author_links")
    author: Mapped["Author"] = relationship("Author", back_populates="book_links")

    def __repr__(self) -> str:
        return (
            f"BookAuthor(book_id={self.book_id}, author_id={self.author_id}, "
            f"author_order={self.author_order})"
        )


class Book(Base):
    """
    Book model.

    Table: books

    Fields:
    - google_books_id: Volume id at Google Books (unique, optional)
    - release_date: The date users are waiting for; drives the calendar
    - is_released: Whether the book is already out

    Books are created lazily the first time any user tracks them. Metadata
    comes from the tracking request; it is not re-fetched from Google Books.

    Example:
        book = Book(
            google_books_id="zyTCAlFPjgYC",
            title="The Google Story",
            release_date=date(2025, 6, 1),
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    google_books_id: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=True,
        comment="Google Books volume id"
    )

    # -------------------------------------------------------------------------
    # Descriptive Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Book title"
    )

    subtitle: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    cover_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Cover thumbnail URL"
    )

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------
    published_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Publication date reported by Google Books"
    )

    release_date: Mapped[date | None] = mapped_column(
        Date,
        index=True,
        nullable=True,
        comment="Release date shown on the calendar"
    )

    page_count: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    isbn: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    is_released: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    series_id: Mapped[int | None] = mapped_column(
        ForeignKey("series.id", ondelete="SET NULL"),
        nullable=True,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    series: Mapped["Series | None"] = relationship(
        "Series",
        back_populates="books",
    )

    author_links: Mapped[list[BookAuthor]] = relationship(
        BookAuthor,
        back_populates="book",
        order_by=BookAuthor.author_order,
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', google_books_id='{self.google_books_id}')"
