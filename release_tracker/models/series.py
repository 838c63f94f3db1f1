"""
Series Model

A named book series. Like authors, series rows come from find-or-create and
are unique by name. Deleting a series keeps its books and clears their
series reference.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from release_tracker.database import Base

if TYPE_CHECKING:
    from release_tracker.models.book import Book


class Series(Base):
    """
    Series model.

    Table: series
    """

    __tablename__ = "series"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Series name"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Series description"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Books keep existing when the series goes (ON DELETE SET NULL)
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="series",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Series(id={self.id}, name='{self.name}')"
