"""Background execution of searches for UI callers."""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from booklisting.client import BookSearchClient
from booklisting.models import SearchResult

logger = logging.getLogger(__name__)


class SearchWorker:
    """
    Runs searches off the caller's thread.

    Each submitted search is delivered exactly once through its Future.
    ``future.done()`` tells "not delivered yet" apart from "delivered empty",
    and ``is_stale`` tells whether a newer search has been submitted since.
    """

    def __init__(self, client: Optional[BookSearchClient] = None, max_workers: int = 1):
        self._owns_client = client is None
        self.client = client or BookSearchClient()
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="book-search")
        self._lock = threading.Lock()
        self._latest: Optional[Future] = None

    def submit(
        self,
        term: str,
        callback: Optional[Callable[[SearchResult], None]] = None
    ) -> "Future[SearchResult]":
        """
        Schedule a search.

        Args:
            term: Search term
            callback: Called once with the result when the search finishes

        Returns:
            Future resolving to the SearchResult
        """
        future = self.executor.submit(self._run, term)
        with self._lock:
            self._latest = future

        if callback is not None:
            future.add_done_callback(lambda f: self._deliver(f, callback))

        logger.debug(f"Submitted search: {term}")
        return future

    def _run(self, term: str) -> SearchResult:
        try:
            return self.client.fetch(term)
        except Exception as e:
            logger.error(f"Unexpected error searching for {term!r}: {e}", exc_info=True)
            return SearchResult(error="unexpected error")

    @staticmethod
    def _deliver(future: Future, callback: Callable[[SearchResult], None]):
        if future.cancelled():
            return
        callback(future.result())

    def latest(self) -> Optional[Future]:
        """Future of the most recently submitted search."""
        with self._lock:
            return self._latest

    def is_stale(self, future: Future) -> bool:
        """True if a newer search was submitted after ``future``."""
        return future is not self.latest()

    def shutdown(self, wait: bool = True):
        """Stop accepting searches and release the client."""
        self.executor.shutdown(wait=wait)
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()
