"""Normalize feed entries into ParsedArticle records."""

import logging
from typing import Any, Optional
from urllib.parse import urlparse

from common.datetime import resolve_published_date
from common.text import slugify, strip_html, truncate_text
from common.utils import first_non_empty
from fetch_news.categories import determine_category
from fetch_news.extractors import (
    CONTENT_EXTRACTORS,
    IMAGE_EXTRACTORS,
    SUMMARY_EXTRACTORS,
    entry_tags,
    inline_image,
)
from fetch_news.models import FeedMetadata, ParsedArticle

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 280
UNKNOWN_SOURCE = "Unknown Source"


def parse_article(entry: Any, metadata: FeedMetadata) -> Optional[ParsedArticle]:
    """Parse a single feed entry. Returns None when title or link is missing."""
    title = (entry.get("title") or "").strip()
    link = (entry.get("link") or "").strip()
    if not title or not link:
        return None

    raw_content = first_non_empty(CONTENT_EXTRACTORS, entry) or ""
    summary_source = first_non_empty(SUMMARY_EXTRACTORS, entry) or ""

    summary = truncate_text(strip_html(summary_source), SUMMARY_MAX_LENGTH)
    content = raw_content or summary
    tags = entry_tags(entry)
    feed_title = metadata.feed_title or ""

    return ParsedArticle(
        title=title,
        slug=slugify(title),
        summary=summary,
        content=content,
        image_url=first_non_empty(IMAGE_EXTRACTORS, entry) or inline_image(content),
        source=resolve_source_name(link, feed_title),
        source_url=link,
        category=determine_category(feed_title, tags, f"{title} {summary} {content}"),
        tags=", ".join(tags),
        published_at=resolve_published_date(entry.get("published") or entry.get("updated")),
        is_featured=False,
    )


def parse_entries(entries: list[Any], metadata: FeedMetadata) -> list[ParsedArticle]:
    """Parse every entry of one feed, skipping invalid or broken entries."""
    articles = []
    for entry in entries:
        try:
            article = parse_article(entry, metadata)
        except Exception as e:
            logger.warning("Failed to parse entry from %s: %s", metadata.feed_url, e)
            continue
        if article is not None:
            articles.append(article)
    return articles


def resolve_source_name(link: str, feed_title: Optional[str] = None) -> str:
    """Feed title when present, otherwise the link's hostname without ``www.``."""
    if feed_title:
        return feed_title

    hostname = urlparse(link).hostname
    if not hostname:
        return UNKNOWN_SOURCE
    return hostname.removeprefix("www.")
