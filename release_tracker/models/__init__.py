"""
SQLAlchemy Models Package

Model Relationships:
- Book <-> Author: Many-to-Many through BookAuthor, which records the
                   author's position in the book's author list
- Series -> Book: One-to-Many; deleting a series clears books.series_id
- User -> UserTracked*: One-to-Many subscriptions to books, authors, series

Import all models here to:
1. Make them available as: from release_tracker.models import Book, Author
2. Ensure Alembic discovers them for migrations
"""

from release_tracker.models.user import User
from release_tracker.models.author import Author
from release_tracker.models.series import Series
from release_tracker.models.book import Book, BookAuthor
from release_tracker.models.tracking import (
    UserTrackedAuthor,
    UserTrackedBook,
    UserTrackedSeries,
)
from release_tracker.models.community import CommunityReleaseDate

__all__ = [
    "User",
    "Author",
    "Series",
    "Book",
    "BookAuthor",
    "UserTrackedBook",
    "UserTrackedAuthor",
    "UserTrackedSeries",
    "CommunityReleaseDate",
]
