"""Tests for background search execution."""
import threading
from unittest.mock import Mock

import pytest

from booklisting.client import BookSearchClient
from booklisting.models import Book, SearchResult
from booklisting.worker import SearchWorker


@pytest.fixture
def client():
    client = Mock(spec=BookSearchClient)
    client.fetch.side_effect = lambda term: SearchResult(books=[Book(term)])
    return client


def test_submit_delivers_result_through_future(client):
    """Test the future resolves to the client's result."""
    with SearchWorker(client=client) as worker:
        future = worker.submit("dune")
        result = future.result(timeout=5)

    assert result.books == [Book("dune")]
    client.fetch.assert_called_once_with("dune")


def test_empty_result_is_distinguishable_from_pending():
    """Test a delivered empty result reads as done, a running one does not."""
    release = threading.Event()
    client = Mock(spec=BookSearchClient)

    def fetch(term):
        release.wait(5)
        return SearchResult()

    client.fetch.side_effect = fetch

    with SearchWorker(client=client) as worker:
        future = worker.submit("nothing")
        assert not future.done()
        release.set()
        result = future.result(timeout=5)

    assert future.done()
    assert result.books == []


def test_callback_invoked_once(client):
    """Test the callback receives the result exactly once."""
    received = []
    delivered = threading.Event()

    def callback(result):
        received.append(result)
        delivered.set()

    with SearchWorker(client=client) as worker:
        worker.submit("dune", callback=callback)
        assert delivered.wait(5)

    assert len(received) == 1
    assert received[0].books == [Book("dune")]


def test_latest_search_marks_older_stale(client):
    """Test only the most recent submission is current."""
    with SearchWorker(client=client) as worker:
        first = worker.submit("first")
        second = worker.submit("second")

        assert worker.latest() is second
        assert worker.is_stale(first)
        assert not worker.is_stale(second)
        assert second.result(timeout=5).books == [Book("second")]


def test_shutdown_leaves_injected_client_open(client):
    """Test an injected client is not closed on shutdown."""
    worker = SearchWorker(client=client)
    worker.shutdown()

    client.close.assert_not_called()


def test_client_error_still_delivered_once():
    """Test an exception from the client becomes an error result, delivered once."""
    client = Mock(spec=BookSearchClient)
    client.fetch.side_effect = LookupError("unknown encoding: bogus-charset")
    received = []
    delivered = threading.Event()

    def callback(result):
        received.append(result)
        delivered.set()

    with SearchWorker(client=client) as worker:
        future = worker.submit("dune", callback=callback)
        assert delivered.wait(5)
        result = future.result(timeout=5)

    assert len(received) == 1
    assert received[0] is result
    assert result.books == []
    assert result.error == "unexpected error"
