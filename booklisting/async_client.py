"""Async HTTP client for book searches."""
import asyncio
import httpx
from typing import List, Optional
import logging

from booklisting.config import Config
from booklisting.models import Book, SearchResult
from booklisting.parse import parse_books_response, strip_line_breaks

logger = logging.getLogger(__name__)


class AsyncBookSearchClient:
    """Async counterpart of BookSearchClient with the same fail-soft contract."""

    def __init__(
        self,
        base_url: str = Config.BOOKS_API_URL,
        max_results: int = Config.BOOKS_MAX_RESULTS,
        connect_timeout: float = Config.BOOKS_CONNECT_TIMEOUT,
        read_timeout: float = Config.BOOKS_READ_TIMEOUT,
        max_concurrent: int = Config.BOOKS_MAX_CONCURRENT,
        client: Optional[httpx.AsyncClient] = None,
        stop_on_error: bool = False
    ):
        """
        Initialize async client.

        Args:
            base_url: Volumes search endpoint
            max_results: Number of results requested per search
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            max_concurrent: Maximum concurrent requests in search_multiple
            client: Optional httpx client to reuse
            stop_on_error: Stop extraction at the first malformed item
        """
        self.base_url = base_url
        self.max_results = max_results
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self.stop_on_error = stop_on_error
        self.semaphore = asyncio.Semaphore(max_concurrent)

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    def build_url(self, term: str) -> httpx.URL:
        """
        Build the query URL for a search term.

        Raises:
            httpx.InvalidURL: if the endpoint is not an absolute http(s) URL
        """
        url = httpx.URL(self.base_url, params={"q": term, "maxResults": self.max_results})
        if url.scheme not in ("http", "https") or not url.host:
            raise httpx.InvalidURL(f"Not an absolute http(s) URL: {self.base_url!r}")
        return url

    async def search(self, term: str) -> List[Book]:
        """Search and return the books found, possibly none."""
        result = await self.fetch(term)
        return result.books

    async def fetch(self, term: str) -> SearchResult:
        """
        Run one search asynchronously.

        Args:
            term: Search term; blank terms return an empty result without a request

        Returns:
            SearchResult with the books in API order
        """
        if not term or not term.strip():
            logger.debug("Blank search term, skipping request")
            return SearchResult()

        try:
            url = self.build_url(term)
        except httpx.InvalidURL as e:
            logger.error(f"Error building URL: {e}")
            return SearchResult(error="invalid url")

        async with self.semaphore:
            try:
                logger.info(f"Async request: {term}")
                async with self.client.stream("GET", url, timeout=self.timeout) as response:
                    if response.status_code != 200:
                        logger.error(f"Error response code {response.status_code} for query: {term}")
                        return SearchResult(error=f"http {response.status_code}")
                    body = strip_line_breaks("".join([chunk async for chunk in response.aiter_text()]))

            except httpx.HTTPError as e:
                logger.error(f"Async request failed: {e}")
                return SearchResult(error="request failed")

        result = parse_books_response(body, stop_on_error=self.stop_on_error)
        logger.info(f"Found {len(result)} books for query: {term}")
        return result

    async def search_multiple(self, terms: List[str]) -> List[List[Book]]:
        """
        Search several terms concurrently.

        Args:
            terms: Search terms

        Returns:
            One list of books per term, in input order
        """
        tasks = [self.search(term) for term in terms]
        return list(await asyncio.gather(*tasks))

    async def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
