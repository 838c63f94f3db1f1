"""
Community Release Date Model

Release dates proposed by users for books whose publisher date is missing
or wrong, with up/down votes and a verified flag. No endpoint reads or
writes these rows yet; the table is part of the schema so submissions can be
added without a migration.
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, false, func
from sqlalchemy.orm import Mapped, mapped_column

from release_tracker.database import Base


class CommunityReleaseDate(Base):
    """Table: community_release_dates"""

    __tablename__ = "community_release_dates"

    id: Mapped[int] = mapped_column(primary_key=True)
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Submissions outlive the account that made them
    submitted_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    release_date: Mapped[date] = mapped_column(Date, nullable=False)
    source_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    votes_up: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    votes_down: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"CommunityReleaseDate(id={self.id}, book_id={self.book_id}, "
            f"release_date={self.release_date})"
        )
