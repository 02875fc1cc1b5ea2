"""HTTP client for the Google Books volumes search."""
import codecs
import logging
from typing import List, Optional

import requests

from booklisting.config import Config
from booklisting.models import Book, SearchResult
from booklisting.parse import parse_books_response, strip_line_breaks

logger = logging.getLogger(__name__)


class BookSearchClient:
    """
    Fail-soft client for Google Books searches.

    Every failure (bad URL, transport error, non-200 status, malformed JSON)
    is logged and turned into an empty or partial SearchResult. Nothing is
    raised to the caller.
    """

    def __init__(
        self,
        base_url: str = Config.BOOKS_API_URL,
        max_results: int = Config.BOOKS_MAX_RESULTS,
        connect_timeout: float = Config.BOOKS_CONNECT_TIMEOUT,
        read_timeout: float = Config.BOOKS_READ_TIMEOUT,
        session: Optional[requests.Session] = None,
        stop_on_error: bool = False
    ):
        """
        Initialize the search client.

        Args:
            base_url: Volumes search endpoint
            max_results: Number of results requested per search
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            session: Optional session to reuse; an owned one is created otherwise
            stop_on_error: Stop extraction at the first malformed item
        """
        self.base_url = base_url
        self.max_results = max_results
        self.timeout = (connect_timeout, read_timeout)
        self.stop_on_error = stop_on_error

        self._owns_session = session is None
        self.session = session or requests.Session()

    def build_url(self, term: str) -> str:
        """
        Build the query URL for a search term.

        Raises:
            requests.exceptions.RequestException: if the endpoint is malformed
        """
        params = {"q": term, "maxResults": self.max_results}
        return requests.Request("GET", self.base_url, params=params).prepare().url

    def search(self, term: str) -> List[Book]:
        """Search and return the books found, possibly none."""
        return self.fetch(term).books

    def fetch(self, term: str) -> SearchResult:
        """
        Run one search through the full pipeline.

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
        except requests.exceptions.RequestException as e:
            logger.error(f"Error building URL from {self.base_url!r}: {e}")
            return SearchResult(error="invalid url")

        logger.info(f"Searching books: {term}")

        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
            try:
                if response.status_code != 200:
                    logger.error(f"Error response code {response.status_code} for query: {term}")
                    return SearchResult(error=f"http {response.status_code}")
                body = self.read_body(response)
            finally:
                response.close()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error retrieving data from {url}: {e}")
            return SearchResult(error="request failed")

        result = parse_books_response(body, stop_on_error=self.stop_on_error)
        logger.info(f"Found {len(result)} books for query: {term}")
        return result

    @staticmethod
    def read_body(response: requests.Response) -> str:
        """Read the response body with its line breaks removed."""
        try:
            codecs.lookup(response.encoding or "")
        except LookupError:
            # Missing or unknown charset
            response.encoding = "utf-8"
        text = "".join(response.iter_content(chunk_size=8192, decode_unicode=True))
        return strip_line_breaks(text)

    def close(self):
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
