"""Fetch feeds and store new articles."""

import asyncio
import logging
from contextlib import AbstractContextManager
from functools import partial
from typing import Callable, Optional

from sqlalchemy.orm import Session

from common.config import Config
from fetch_news.fetch_feeds import FeedFetcher
from fetch_news.models import ParsedArticle
from store_news.connection import get_session
from store_news.store_articles import store_new_articles
from sync_news.scheduler import NewsSyncScheduler

logger = logging.getLogger(__name__)


async def sync_news_articles(
    fetcher: FeedFetcher,
    session_factory: Callable[[], AbstractContextManager[Session]] = get_session,
) -> int:
    """Run one fetch-and-store cycle and return the number of new articles."""
    articles = await fetcher.fetch(force_refresh=True)
    if not articles:
        logger.info("No articles fetched during news sync.")
        return 0

    return await asyncio.to_thread(_store, articles, session_factory)


def _store(
    articles: list[ParsedArticle],
    session_factory: Callable[[], AbstractContextManager[Session]],
) -> int:
    # Runs in a worker thread; the session must be opened here
    with session_factory() as session:
        return store_new_articles(articles, session)


def build_scheduler(
    config: Config,
    fetcher: Optional[FeedFetcher] = None,
    session_factory: Callable[[], AbstractContextManager[Session]] = get_session,
) -> NewsSyncScheduler:
    """Wire a fetcher and the database into a scheduler for this process."""
    fetcher = fetcher or FeedFetcher(config)
    return NewsSyncScheduler(
        partial(sync_news_articles, fetcher, session_factory),
        interval=config.fetch_interval,
        timezone=config.timezone,
    )
