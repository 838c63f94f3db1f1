"""
Google Books Proxy Service

Searches the Google Books volumes API on behalf of clients, reshapes the
results into the tracker's fixed field set and caches them.

Flow for a search:
1. Normalize the query and pagination into the resolved upstream URL
2. Serve the cached result for that URL if it is still fresh
3. Otherwise call Google Books; a failure becomes UpstreamError
4. Reshape each volume, cache the result under the URL, return it

The URL is the cache key, so the same query with a different page size or
start index is a different entry.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from release_tracker.errors import NotFoundError, UpstreamError
from release_tracker.services.cache import TTLCache

logger = logging.getLogger(__name__)

SEARCH_DESCRIPTION_LIMIT = 300
DETAIL_DESCRIPTION_LIMIT = 1000
DEFAULT_AUTHOR = "Unknown Author"
STANDALONE_SERIES = "Standalone"
NO_DESCRIPTION = "No description available"
SEARCH_FAILED = "Failed to search books. Please try again later."
DETAIL_FAILED = "Failed to fetch book details. Please try again later."


# =============================================================================
# Response Shaping
# =============================================================================

def truncate_description(description: str | None, limit: int) -> str:
    if not description:
        return NO_DESCRIPTION
    if len(description) <= limit:
        return description
    return description[:limit] + "..."


def secure_url(url: str | None) -> str | None:
    """Google serves thumbnails over http; browsers block mixed content."""
    if not url:
        return None
    if url.startswith("http:"):
        return "https:" + url[len("http:"):]
    return url


def extract_isbn13(volume_info: dict[str, Any]) -> str | None:
    for identifier in volume_info.get("industryIdentifiers") or []:
        if identifier.get("type") == "ISBN_13":
            return identifier.get("identifier")
    return None


def shape_volume(item: dict[str, Any], description_limit: int = SEARCH_DESCRIPTION_LIMIT) -> dict[str, Any]:
    """
    Reshape one Google Books volume into a search hit.

    The series is a guess: Google Books has no series field, so the first
    category stands in, defaulting to "Standalone".
    """
    info = item.get("volumeInfo") or {}
    authors = info.get("authors") or [DEFAULT_AUTHOR]
    categories = info.get("categories") or []
    image_links = info.get("imageLinks") or {}

    return {
        "id": item.get("id"),
        "googleBooksId": item.get("id"),
        "title": info.get("title"),
        "subtitle": info.get("subtitle"),
        "authors": authors,
        "author": ", ".join(authors),
        "publishedDate": info.get("publishedDate"),
        "description": truncate_description(info.get("description"), description_limit),
        "cover": secure_url(image_links.get("thumbnail")),
        "pageCount": info.get("pageCount"),
        "categories": categories,
        "series": categories[0] if categories else STANDALONE_SERIES,
        "averageRating": info.get("averageRating"),
        "ratingsCount": info.get("ratingsCount"),
        "language": info.get("language"),
        "previewLink": info.get("previewLink"),
        "infoLink": info.get("infoLink"),
    }


def shape_volume_detail(item: dict[str, Any]) -> dict[str, Any]:
    """Single-volume shape: longer description plus publisher and ISBN-13."""
    info = item.get("volumeInfo") or {}
    detail = shape_volume(item, description_limit=DETAIL_DESCRIPTION_LIMIT)
    detail.update(
        publisher=info.get("publisher"),
        isbn=extract_isbn13(info),
        releaseDate=info.get("publishedDate"),
    )
    return detail


# =============================================================================
# Client
# =============================================================================

class GoogleBooksClient:
    """
    Cached client for the Google Books volumes API.

    The HTTP client and cache are passed in, so the application lifespan owns
    their lifecycle and tests can pass an httpx.MockTransport and a fresh
    cache.

    Example:
        async with httpx.AsyncClient() as http:
            client = GoogleBooksClient(http, TTLCache(), api_key="...")
            result = await client.search("dune")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cache: TTLCache,
        api_key: str = "",
        base_url: str = "https://www.googleapis.com/books/v1/volumes",
    ) -> None:
        self.http_client = http_client
        self.cache = cache
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def _params(self, **params: Any) -> dict[str, Any]:
        if self.api_key:
            params["key"] = self.api_key
        return params

    def build_search_url(self, query: str, max_results: int = 15, start_index: int = 0) -> str:
        """Resolved upstream URL for a search; also its cache key."""
        params = self._params(q=query.strip(), maxResults=max_results, startIndex=start_index)
        return str(httpx.URL(self.base_url, params=params))

    def build_volume_url(self, volume_id: str) -> str:
        return str(httpx.URL(f"{self.base_url}/{quote(volume_id, safe='')}", params=self._params()))

    async def _fetch(
        self,
        url: str,
        failure_message: str = SEARCH_FAILED,
        missing_is_not_found: bool = False,
    ) -> dict[str, Any]:
        """
        GET a URL and decode its JSON body.

        Raises:
            NotFoundError: On 404, when missing_is_not_found is set
            UpstreamError: On transport failure, non-success status or bad JSON
        """
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Google Books request failed: {e.__class__.__name__}: {e}")
            raise UpstreamError(f"Google Books API unreachable: {e.__class__.__name__}", failure_message) from e

        if missing_is_not_found and response.status_code == 404:
            raise NotFoundError("Book not found")

        if not response.is_success:
            logger.error(f"Google Books API error {response.status_code}")
            raise UpstreamError(f"Google Books API error: {response.status_code}", failure_message)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Google Books returned invalid JSON: {e}")
            raise UpstreamError("Google Books API returned an invalid response", failure_message) from e

    async def search(self, query: str, max_results: int = 15, start_index: int = 0) -> dict[str, Any]:
        """
        Search volumes.

        Returns:
            {"books": [...], "totalItems": int, "query": str}

        Raises:
            UpstreamError: If Google Books fails
        """
        query = query.strip()
        url = self.build_search_url(query, max_results, start_index)

        cached = self.cache.get(url)
        if cached is not None:
            logger.info(f"Cache hit for query: {query}")
            return cached

        logger.info(f"Fetching from Google Books API for query: {query}")
        data = await self._fetch(url)

        result = {
            "books": [shape_volume(item) for item in data.get("items") or []],
            "totalItems": data.get("totalItems") or 0,
            "query": query,
        }
        self.cache.put(url, result)
        return result

    async def get_volume(self, volume_id: str) -> dict[str, Any]:
        """
        Fetch one volume by its Google Books id.

        Raises:
            NotFoundError: If Google Books has no such volume
            UpstreamError: If Google Books fails
        """
        url = self.build_volume_url(volume_id)

        cached = self.cache.get(url)
        if cached is not None:
            logger.info(f"Cache hit for volume: {volume_id}")
            return cached

        logger.info(f"Fetching volume {volume_id} from Google Books API")
        detail = shape_volume_detail(await self._fetch(url, DETAIL_FAILED, missing_is_not_found=True))
        self.cache.put(url, detail)
        return detail
