"""
Tracking Models

A tracking row is a user's subscription to future releases of one book,
author or series. Each (user, target) pair is unique, which is what makes
tracking idempotent: a second insert for the same pair hits the constraint
and is ignored.

All three tables share the same shape:
- id, user_id, <target>_id
- tracked_at: when the user started tracking
- notify_on_release: whether the user wants a release notification
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from release_tracker.database import Base

if TYPE_CHECKING:
    from release_tracker.models.author import Author
    from release_tracker.models.book import Book
    from release_tracker.models.series import Series
    from release_tracker.models.user import User


class UserTrackedBook(Base):
    """Table: user_tracked_books"""

    __tablename__ = "user_tracked_books"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_user_tracked_books_user_book"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
    )
    tracked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    notify_on_release: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="tracked_books")
    book: Mapped["Book"] = relationship("Book")

    def __repr__(self) -> str:
        return f"UserTrackedBook(user_id={self.user_id}, book_id={self.book_id})"


class UserTrackedAuthor(Base):
    """Table: user_tracked_authors"""

    __tablename__ = "user_tracked_authors"
    __table_args__ = (
        UniqueConstraint("user_id", "author_id", name="uq_user_tracked_authors_user_author"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="CASCADE"),
        nullable=False,
    )
    tracked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    notify_on_release: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="tracked_authors")
    author: Mapped["Author"] = relationship("Author")

    def __repr__(self) -> str:
        return f"UserTrackedAuthor(user_id={self.user_id}, author_id={self.author_id})"


class UserTrackedSeries(Base):
    """Table: user_tracked_series"""

    __tablename__ = "user_tracked_series"
    __table_args__ = (
        UniqueConstraint("user_id", "series_id", name="uq_user_tracked_series_user_series"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    series_id: Mapped[int] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"),
        nullable=False,
    )
    tracked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    notify_on_release: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="tracked_series")
    series: Mapped["Series"] = relationship("Series")

    def __repr__(self) -> str:
        return f"UserTrackedSeries(user_id={self.user_id}, series_id={self.series_id})"
