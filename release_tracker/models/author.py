"""
Author Model

Represents an author whose releases users can follow.

Authors are never created directly by an endpoint. They appear through
find-or-create when a book is tracked or an author is followed, and the
unique constraint on name is what keeps concurrent first-time trackings from
producing two rows for the same person.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from release_tracker.database import Base

if TYPE_CHECKING:
    from release_tracker.models.book import BookAuthor


class Author(Base):
    """
    Author model representing writers in the system.

    Table: authors

    Relationships:
    - book_links: BookAuthor rows linking this author to books

    Example:
        author_id = get_or_create_author(db, "Jane Doe")
    """

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)

    # unique=True backs the ON CONFLICT (name) clause of the upsert
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Author's full name"
    )

    google_books_author_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Author identifier at Google Books, when known"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    book_links: Mapped[list["BookAuthor"]] = relationship(
        "BookAuthor",
        back_populates="author",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
