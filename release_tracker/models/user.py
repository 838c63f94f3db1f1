"""
User Model

Represents a registered account. Users are created at registration and have
no delete path in the API; deleting one in the database cascades to every
tracking row the user owns.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from release_tracker.database import Base

if TYPE_CHECKING:
    from release_tracker.models.tracking import (
        UserTrackedAuthor,
        UserTrackedBook,
        UserTrackedSeries,
    )


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    Indexes:
    - email: Unique index for login lookups

    Example:
        user = User(
            email="reader@example.com",
            password_hash=hash_password("secret1"),
            name="Reader",
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the user was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # passive_deletes leaves the cascade to the ON DELETE CASCADE foreign keys
    tracked_books: Mapped[list["UserTrackedBook"]] = relationship(
        "UserTrackedBook",
        back_populates="user",
        passive_deletes=True,
    )

    tracked_authors: Mapped[list["UserTrackedAuthor"]] = relationship(
        "UserTrackedAuthor",
        back_populates="user",
        passive_deletes=True,
    )

    tracked_series: Mapped[list["UserTrackedSeries"]] = relationship(
        "UserTrackedSeries",
        back_populates="user",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}')"
