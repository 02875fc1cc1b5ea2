"""Parse Google Books API responses into Book records."""
import json
import logging
import re
from typing import Dict, Any, Optional
from booklisting.models import Book, SearchResult

logger = logging.getLogger(__name__)

AUTHOR_SEPARATOR = ", "

LINE_BREAK = re.compile(r"\r\n|\r|\n")


class MalformedItemError(ValueError):
    """An item in the response lacks the nesting a volume must have."""


def parse_book(item: Any) -> Optional[Book]:
    """
    Parse a single item from the ``items`` array.

    Args:
        item: Single element of the Google Books API ``items`` array

    Returns:
        Book object, or None if the volume has no title

    Raises:
        MalformedItemError: if the item or its volumeInfo is not an object,
            or a field has an unusable type
    """
    if not isinstance(item, dict):
        raise MalformedItemError(f"item is {type(item).__name__}, not an object")

    volume_info = item.get("volumeInfo")
    if not isinstance(volume_info, dict):
        raise MalformedItemError("item has no volumeInfo object")

    title = volume_info.get("title")
    if title is None:
        return None
    if not isinstance(title, str):
        raise MalformedItemError(f"title is {type(title).__name__}, not a string")
    if not title.strip():
        return None

    authors = volume_info.get("authors") or []
    if not isinstance(authors, list):
        raise MalformedItemError(f"authors is {type(authors).__name__}, not an array")

    published_date = volume_info.get("publishedDate")

    return Book(
        title=title,
        authors=AUTHOR_SEPARATOR.join(str(a) for a in authors if a is not None),
        published_date="" if published_date is None else str(published_date),
        page_count=_page_count(volume_info.get("pageCount"))
    )


def _page_count(value: Any) -> int:
    # "380" and 380.0 count; anything else is 0
    if value is None or isinstance(value, bool):
        return 0
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


def extract_books(data: Dict[str, Any], stop_on_error: bool = False) -> SearchResult:
    """
    Extract books from a decoded API response.

    Items without a title are skipped silently. A malformed item is logged and
    skipped, unless ``stop_on_error`` is set, in which case extraction stops
    there and the books gathered so far are returned.

    Args:
        data: Decoded response object
        stop_on_error: Stop at the first malformed item

    Returns:
        SearchResult in source order; error is "malformed item" if any item
        was rejected
    """
    result = SearchResult()

    items = data.get("items")
    if not isinstance(items, list) or not items:
        logger.debug("Response contains no items")
        return result

    for index, item in enumerate(items):
        try:
            book = parse_book(item)
        except MalformedItemError as e:
            logger.warning(f"Malformed item at index {index}: {e}")
            result.error = "malformed item"
            if stop_on_error:
                break
            continue

        if book is None:
            logger.debug(f"Skipping item at index {index}: no title")
            continue

        result.books.append(book)

    return result


def parse_books_response(body: str, stop_on_error: bool = False) -> SearchResult:
    """
    Parse a raw response body.

    Args:
        body: Response text
        stop_on_error: Passed through to extract_books

    Returns:
        SearchResult (empty with error "invalid json" if the body is not a
        JSON object)
    """
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        logger.error(f"Error while parsing JSON: {e}")
        return SearchResult(error="invalid json")

    if not isinstance(data, dict):
        logger.error(f"Expected a JSON object, got {type(data).__name__}")
        return SearchResult(error="invalid json")

    return extract_books(data, stop_on_error=stop_on_error)


def strip_line_breaks(text: str) -> str:
    """
    Join a body's lines without separators.

    Only CR, LF and CRLF count as line breaks; U+2028 and friends are legal
    inside JSON strings and are kept.
    """
    return LINE_BREAK.sub("", text)
