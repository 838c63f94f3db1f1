"""
Tests for the Google Books Proxy

Endpoint tests go through the TestClient with the fake Google Books from
conftest.py; GoogleBooksClient is also tested directly for response shaping.
"""

import httpx
import pytest
from fastapi import status

from release_tracker.errors import NotFoundError, UpstreamError
from release_tracker.services.cache import TTLCache
from release_tracker.services.google_books import (
    GoogleBooksClient,
    shape_volume,
    truncate_description,
)
from tests.conftest import FakeGoogleBooks, make_volume


# =============================================================================
# Response Shaping
# =============================================================================

class TestShapeVolume:
    """Reshaping a Google Books volume into a search hit."""

    def test_full_volume(self):
        volume = make_volume(
            "abc",
            title="The Way of Kings",
            subtitle="Book One",
            authors=["Brandon Sanderson"],
            averageRating=4.5,
            ratingsCount=120,
            previewLink="https://books.google.com/preview",
            infoLink="https://books.google.com/info",
        )

        book = shape_volume(volume)

        assert book["id"] == "abc"
        assert book["googleBooksId"] == "abc"
        assert book["title"] == "The Way of Kings"
        assert book["subtitle"] == "Book One"
        assert book["authors"] == ["Brandon Sanderson"]
        assert book["author"] == "Brandon Sanderson"
        assert book["publishedDate"] == "2025-06-01"
        assert book["description"] == "A story."
        assert book["cover"].startswith("https://")
        assert book["pageCount"] == 320
        assert book["series"] == "Fantasy"
        assert book["averageRating"] == 4.5
        assert book["ratingsCount"] == 120
        assert book["language"] == "en"

    def test_missing_fields_get_defaults(self):
        book = shape_volume({"id": "bare", "volumeInfo": {"title": "Bare"}})

        assert book["authors"] == ["Unknown Author"]
        assert book["author"] == "Unknown Author"
        assert book["description"] == "No description available"
        assert book["cover"] is None
        assert book["categories"] == []
        assert book["series"] == "Standalone"

    def test_multiple_authors_joined(self):
        book = shape_volume(make_volume("x", authors=["Jane Doe", "John Roe"]))

        assert book["author"] == "Jane Doe, John Roe"

    def test_description_truncation(self):
        assert truncate_description("x" * 300, 300) == "x" * 300
        assert truncate_description("x" * 301, 300) == "x" * 300 + "..."
        assert truncate_description(None, 300) == "No description available"


# =============================================================================
# GoogleBooksClient
# =============================================================================

class TestGoogleBooksClient:
    """Caching and failure handling, without HTTP routing in between."""

    @pytest.fixture
    def fake(self) -> FakeGoogleBooks:
        return FakeGoogleBooks()

    @pytest.fixture
    def books_client(self, fake: FakeGoogleBooks) -> GoogleBooksClient:
        return GoogleBooksClient(fake.http_client(), TTLCache(), api_key="k")

    def test_search_url_carries_all_parameters(self, books_client: GoogleBooksClient):
        url = httpx.URL(books_client.build_search_url("  the way of kings ", 20, 40))

        assert url.params["q"] == "the way of kings"
        assert url.params["maxResults"] == "20"
        assert url.params["startIndex"] == "40"
        assert url.params["key"] == "k"

    def test_search_url_without_api_key(self, fake: FakeGoogleBooks):
        client = GoogleBooksClient(fake.http_client(), TTLCache())

        assert "key" not in httpx.URL(client.build_search_url("dune")).params

    async def test_search_result_cached_by_url(self, books_client, fake):
        first = await books_client.search("dune")
        second = await books_client.search("dune")

        assert first == second
        assert first["totalItems"] == 2
        assert first["query"] == "dune"
        assert len(fake.requests) == 1

    async def test_different_page_is_a_different_entry(self, books_client, fake):
        await books_client.search("dune", start_index=0)
        await books_client.search("dune", start_index=15)

        assert len(fake.requests) == 2

    @pytest.mark.parametrize(("elapsed", "upstream_calls"), [(3599, 1), (3600, 2)])
    async def test_search_refetched_once_ttl_elapses(self, fake, elapsed, upstream_calls):
        now = [1000.0]
        books_client = GoogleBooksClient(
            fake.http_client(), TTLCache(ttl_seconds=3600, clock=lambda: now[0])
        )

        await books_client.search("dune")
        now[0] += elapsed
        await books_client.search("dune")

        assert len(fake.requests) == upstream_calls

    async def test_volume_refetched_once_ttl_elapses(self, fake):
        fake.volumes["vol1"] = make_volume("vol1")
        now = [1000.0]
        books_client = GoogleBooksClient(
            fake.http_client(), TTLCache(ttl_seconds=3600, clock=lambda: now[0])
        )

        await books_client.get_volume("vol1")
        now[0] += 3600
        await books_client.get_volume("vol1")

        assert len(fake.requests) == 2

    async def test_upstream_error_status(self, books_client, fake):
        fake.fail_with = 503

        with pytest.raises(UpstreamError) as exc_info:
            await books_client.search("dune")

        assert exc_info.value.to_dict() == {
            "error": "Failed to search books. Please try again later.",
            "details": "Google Books API error: 503",
        }
        assert books_client.cache.size == 0

    async def test_transport_failure(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = GoogleBooksClient(
            httpx.AsyncClient(transport=httpx.MockTransport(refuse)),
            TTLCache(),
        )

        with pytest.raises(UpstreamError):
            await client.search("dune")

    async def test_volume_not_found(self, books_client):
        with pytest.raises(NotFoundError):
            await books_client.get_volume("missing")

    async def test_volume_detail(self, books_client, fake):
        fake.volumes["vol9"] = make_volume(
            "vol9",
            description="y" * 1500,
            publisher="Tor",
            industryIdentifiers=[
                {"type": "ISBN_10", "identifier": "0765326353"},
                {"type": "ISBN_13", "identifier": "9780765326355"},
            ],
        )

        detail = await books_client.get_volume("vol9")

        assert detail["publisher"] == "Tor"
        assert detail["isbn"] == "9780765326355"
        assert detail["releaseDate"] == "2025-06-01"
        assert detail["description"] == "y" * 1000 + "..."


# =============================================================================
# Search Endpoint
# =============================================================================

class TestSearchEndpoint:
    """Tests for GET /api/books/search."""

    def test_search_success(self, client, google_books):
        response = client.get("/api/books/search", params={"query": "fantasy"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["query"] == "fantasy"
        assert data["totalItems"] == 2
        assert [book["googleBooksId"] for book in data["books"]] == ["vol1", "vol2"]
        assert response.headers["X-Searches-Remaining"] == "49"
        assert response.headers["X-RateLimit-Limit"] == "50"

        upstream = google_books.requests[0].url
        assert upstream.params["q"] == "fantasy"
        assert upstream.params["maxResults"] == "15"
        assert upstream.params["startIndex"] == "0"

    def test_repeated_search_served_from_cache(self, client, google_books):
        first = client.get("/api/books/search", params={"query": "fantasy"})
        second = client.get("/api/books/search", params={"query": "fantasy"})

        assert first.json() == second.json()
        assert len(google_books.requests) == 1
        # Cached responses still count against the quota
        assert second.headers["X-Searches-Remaining"] == "48"

    def test_pagination_parameters(self, client, google_books):
        response = client.get(
            "/api/books/search",
            params={"query": "fantasy", "maxResults": 40, "startIndex": 80},
        )

        assert response.status_code == status.HTTP_200_OK
        upstream = google_books.requests[0].url
        assert upstream.params["maxResults"] == "40"
        assert upstream.params["startIndex"] == "80"

    def test_max_results_out_of_range(self, client):
        response = client.get("/api/books/search", params={"query": "x", "maxResults": 41})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "errors" in response.json()

    def test_missing_query(self, client, google_books):
        response = client.get("/api/books/search")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Search query is required"}
        assert google_books.requests == []

    def test_blank_query(self, client):
        response = client.get("/api/books/search", params={"query": "   "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Search query is required"}

    def test_upstream_failure(self, client, google_books):
        google_books.fail_with = 500

        response = client.get("/api/books/search", params={"query": "fantasy"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "error": "Failed to search books. Please try again later.",
            "details": "Google Books API error: 500",
        }

    def test_rate_limit_exceeded(self, client, google_books):
        for _ in range(50):
            assert client.get("/api/books/search", params={"query": "fantasy"}).status_code == 200

        response = client.get("/api/books/search", params={"query": "fantasy"})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        data = response.json()
        assert data["error"] == (
            "Daily search limit exceeded (50 searches per day). Please try again tomorrow."
        )
        assert data["resetTime"]
        assert "Retry-After" in response.headers
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_forwarded_for_cannot_dodge_the_limit(self, client, google_books):
        codes = [
            client.get(
                "/api/books/search",
                params={"query": "fantasy"},
                headers={"X-Forwarded-For": f"198.51.100.{n}"},
            ).status_code
            for n in range(60)
        ]

        assert codes[:50] == [status.HTTP_200_OK] * 50
        assert codes[50:] == [status.HTTP_429_TOO_MANY_REQUESTS] * 10

    def test_tracking_routes_are_not_rate_limited(self, client, auth_headers):
        for _ in range(50):
            client.get("/api/books/search", params={"query": "fantasy"})

        response = client.get("/api/tracking/all", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK


# =============================================================================
# Detail Endpoint
# =============================================================================

class TestBookDetailEndpoint:
    """Tests for GET /api/books/{volume_id}."""

    def test_detail_anonymous(self, client, google_books):
        google_books.volumes["vol1"] = make_volume(
            "vol1",
            publisher="Tor",
            industryIdentifiers=[{"type": "ISBN_13", "identifier": "9780765326355"}],
        )

        response = client.get("/api/books/vol1")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["googleBooksId"] == "vol1"
        assert data["publisher"] == "Tor"
        assert data["isbn"] == "9780765326355"
        assert data["isTracked"] is None

    def test_detail_not_found(self, client):
        response = client.get("/api/books/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Book not found"}

    def test_detail_upstream_failure(self, client, google_books):
        google_books.fail_with = 502

        response = client.get("/api/books/vol1")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Failed to fetch book details. Please try again later."

    def test_detail_is_tracked_for_signed_in_user(self, client, google_books, auth_headers):
        google_books.volumes["vol1"] = make_volume("vol1")

        before = client.get("/api/books/vol1", headers=auth_headers)
        client.post(
            "/api/tracking/books",
            json={"googleBooksId": "vol1", "title": "Book vol1", "authors": ["Jane Doe"]},
            headers=auth_headers,
        )
        after = client.get("/api/books/vol1", headers=auth_headers)

        assert before.json()["isTracked"] is False
        assert after.json()["isTracked"] is True
        # The second lookup came from the cache
        assert len(google_books.requests) == 1

    def test_detail_invalid_token_treated_as_anonymous(self, client, google_books):
        google_books.volumes["vol1"] = make_volume("vol1")

        response = client.get("/api/books/vol1", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["isTracked"] is None

    def test_detail_does_not_use_search_quota(self, client, google_books):
        google_books.volumes["vol1"] = make_volume("vol1")
        client.get("/api/books/vol1")

        response = client.get("/api/rate-limit-status")

        assert response.json()["remaining"] == 50
