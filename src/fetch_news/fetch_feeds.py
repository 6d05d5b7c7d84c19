"""RSS feed fetching."""

import asyncio
import logging
from typing import Optional

import feedparser
import requests

from common.config import Config
from fetch_news.cache import FeedCache
from fetch_news.dedupe import dedupe_and_sort
from fetch_news.models import FeedMetadata, ParsedArticle
from fetch_news.parse_entry import parse_entries

logger = logging.getLogger(__name__)

USER_AGENT = "news-sync/1.0 (RSS reader)"


class MalformedFeedError(ValueError):
    """Raised when a feed document cannot be parsed into any entries."""


def _download_feed(url: str, timeout: float) -> bytes:
    """Download a feed document."""
    response = requests.get(
        url,
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
    )
    response.raise_for_status()
    return response.content


def _parse_feed(url: str, body: bytes) -> list[ParsedArticle]:
    """Parse a downloaded feed document into articles."""
    feed = feedparser.parse(body)
    if feed.get("bozo") and not feed.entries:
        raise MalformedFeedError(str(feed.get("bozo_exception") or "malformed feed"))

    channel = feed.get("feed", {})
    metadata = FeedMetadata(
        feed_title=channel.get("title") or None,
        feed_url=channel.get("link") or url,
    )
    return parse_entries(feed.entries, metadata)


class FeedFetcher:
    """Fetches, parses and merges a set of RSS feeds.

    The merged result is cached for ``config.cache_ttl_ms``; pass
    ``force_refresh=True`` to bypass the cache.
    """

    def __init__(self, config: Config, cache: Optional[FeedCache] = None):
        self.config = config
        self.cache = cache if cache is not None else FeedCache(config.cache_ttl_ms)

    async def fetch(
        self,
        force_refresh: bool = False,
        feed_urls: Optional[list[str]] = None,
    ) -> list[ParsedArticle]:
        """Fetch all feeds and return deduplicated articles, newest first."""
        urls = self.config.feed_urls if feed_urls is None else feed_urls
        if not urls:
            logger.warning("No RSS feeds configured. Set NEWS_RSS_FEEDS to enable news syncing.")
            return []

        if not force_refresh:
            cached = self.cache.get()
            if cached is not None:
                return cached

        logger.info("Fetching news from %d RSS sources", len(urls))

        groups = await asyncio.gather(
            *(self._fetch_feed(url, index) for index, url in enumerate(urls))
        )
        all_articles = [article for group in groups for article in group]

        deduped = dedupe_and_sort(all_articles)
        self.cache.set(deduped)

        logger.info(
            "Fetched %d articles from RSS feeds (%d after deduplication)",
            len(all_articles),
            len(deduped),
        )
        return deduped

    async def _fetch_feed(self, url: str, index: int) -> list[ParsedArticle]:
        """Fetch one feed. Any failure is logged and yields no articles."""
        try:
            delay_ms = self.config.request_delay_ms
            if delay_ms > 0 and index > 0:
                await asyncio.sleep(index * delay_ms / 1000)

            body = await asyncio.to_thread(_download_feed, url, self.config.request_timeout)
            articles = _parse_feed(url, body)
            logger.info("Found %d articles in %s", len(articles), url)
            return articles
        except Exception as e:
            logger.warning("Failed to fetch or parse RSS feed %s: %s", url, e)
            return []
