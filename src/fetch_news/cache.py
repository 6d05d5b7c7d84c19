"""In-memory TTL cache for merged feed results."""

import time
from typing import Callable, Optional

from fetch_news.models import ParsedArticle


class FeedCache:
    """Holds the last merged article list for ``ttl_ms`` milliseconds."""

    def __init__(self, ttl_ms: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._cached_at: Optional[float] = None
        self._data: Optional[list[ParsedArticle]] = None

    def get(self) -> Optional[list[ParsedArticle]]:
        """Return cached articles, or None when empty or expired."""
        if self._data is None or self._cached_at is None:
            return None
        age_ms = (self._clock() - self._cached_at) * 1000
        if age_ms >= self.ttl_ms:
            return None
        return self._data

    def set(self, articles: list[ParsedArticle]) -> None:
        self._data = articles
        self._cached_at = self._clock()

    def clear(self) -> None:
        self._data = None
        self._cached_at = None
