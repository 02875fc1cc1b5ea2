"""Data models for book search results."""
from dataclasses import dataclass, field
from typing import Optional, List


@dataclass(frozen=True)
class Book:
    """Single volume as shown in a result list."""
    title: str
    authors: str = ""
    published_date: str = ""
    page_count: int = 0


@dataclass
class SearchResult:
    """
    Outcome of one search.

    Books extracted before a failure are kept, so a result can be both
    non-empty and incomplete.
    """
    books: List[Book] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def complete(self) -> bool:
        """True when no failure branch ran."""
        return self.error is None

    def __len__(self):
        return len(self.books)

    def __iter__(self):
        return iter(self.books)
