"""
pytest Fixtures for Release Tracker Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES:
- session: the SQLite engine (tables created once)
- function: database sessions, the test client and the fake Google Books
  service, so every test starts from an empty database, an empty cache and
  a fresh rate limiter

Google Books is never called for real. The `google_books` fixture serves
canned volumes through httpx.MockTransport and records every request it
receives, which is how the tests observe cache hits.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum work factor keeps hashing fast
os.environ["GOOGLE_BOOKS_API_KEY"] = "test-api-key"

from collections.abc import Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from release_tracker.database import Base, enable_sqlite_foreign_keys, get_db
from release_tracker.dependencies import get_http_client
from release_tracker.main import app
from release_tracker.models import User
from release_tracker.services.security import create_access_token, hash_password

VOLUMES_PATH = "/books/v1/volumes"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory database. It supports the ON CONFLICT clauses the
# find-or-create helpers use, and enforces ON DELETE once foreign keys are on.

@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the connection alive for the entire session.
    Without it, SQLite in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is wrapped in a transaction that's rolled back, so the
    commits made by the services never reach the shared database.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# GOOGLE BOOKS FIXTURES
# =============================================================================

def make_volume(volume_id: str, **info: Any) -> dict[str, Any]:
    """A Google Books volume resource with sensible defaults."""
    volume_info = {
        "title": f"Book {volume_id}",
        "authors": ["Jane Doe"],
        "publishedDate": "2025-06-01",
        "description": "A story.",
        "imageLinks": {"thumbnail": f"http://books.google.com/books/content?id={volume_id}"},
        "categories": ["Fantasy"],
        "pageCount": 320,
        "language": "en",
    }
    volume_info.update(info)
    return {"id": volume_id, "volumeInfo": volume_info}


class FakeGoogleBooks:
    """
    Stand-in for the Google Books volumes API.

    - Search requests answer with `search_payload`
    - Volume requests answer with the matching entry of `volumes`, or 404
    - Setting `fail_with` makes every request answer with that status
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None
        self.volumes: dict[str, dict[str, Any]] = {}
        self.search_payload: dict[str, Any] = {
            "totalItems": 2,
            "items": [make_volume("vol1"), make_volume("vol2", title="Second Book")],
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": {"message": "upstream failure"}})

        path = request.url.path
        if path.startswith(VOLUMES_PATH + "/"):
            volume = self.volumes.get(path[len(VOLUMES_PATH) + 1:])
            if volume is None:
                return httpx.Response(404, json={"error": {"code": 404}})
            return httpx.Response(200, json=volume)

        return httpx.Response(200, json=self.search_payload)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def google_books() -> FakeGoogleBooks:
    return FakeGoogleBooks()


# =============================================================================
# CLIENT FIXTURE
# =============================================================================

@pytest.fixture(scope="function")
def client(db_session: Session, google_books: FakeGoogleBooks) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and the fake Google Books.

    Entering the TestClient context runs the lifespan, so each test gets its
    own cache and rate limiter.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    http_client = google_books.http_client()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_http_client] = lambda: http_client

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(
        email="reader@bookmail.com",
        password_hash=hash_password("secret1"),
        name="Test Reader",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing isolation between accounts."""
    user = User(
        email="other@bookmail.com",
        password_hash=hash_password("secret2"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(sample_user: User) -> dict[str, str]:
    """Authorization header carrying a valid token for sample_user."""
    token = create_access_token(sample_user.id, sample_user.email)
    return {"Authorization": f"Bearer {token}"}
