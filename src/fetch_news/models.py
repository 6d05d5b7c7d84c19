"""Data models for fetch_news pipeline stage."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class FeedMetadata:
    """Feed-level fields shared by every entry of one feed."""
    feed_title: Optional[str] = None
    feed_url: Optional[str] = None


@dataclass
class ParsedArticle:
    """Article normalized from a single RSS/Atom entry."""
    title: str
    slug: str
    summary: str
    content: str
    image_url: Optional[str]
    source: str
    source_url: str
    category: str
    tags: str
    published_at: datetime
    is_featured: bool = False
