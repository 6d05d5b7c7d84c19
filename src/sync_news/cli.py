"""CLI for fetching and syncing news articles."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

from common.cli_helpers import setup_logging, write_jsonl
from common.config import Config, load_config, set_config
from fetch_news.fetch_feeds import FeedFetcher
from store_news.connection import init_db
from sync_news.errors import NewsSyncInProgressError
from sync_news.helpers import article_to_record, parse_news_sync_args
from sync_news.schedule import resolve_cron_expression
from sync_news.sync_news import build_scheduler

logger = logging.getLogger(__name__)


async def _sync_once(config: Config) -> int:
    scheduler = build_scheduler(config)
    return await scheduler.trigger_news_sync()


async def _fetch(config: Config, force: bool, output: str | None) -> int:
    articles = await FeedFetcher(config).fetch(force_refresh=force)
    records = [article_to_record(article) for article in articles]

    if output:
        count = write_jsonl(records, Path(output))
        logger.info("Saved %d articles to %s", count, output)
    else:
        for record in records:
            print(json.dumps(record, ensure_ascii=False))
    return len(records)


async def _serve(config: Config) -> None:
    scheduler = build_scheduler(config)
    scheduler.register()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()


def main(argv: list[str] | None = None) -> int:
    args = parse_news_sync_args(argv)
    setup_logging(args.log_level)

    config = load_config(args.config)
    set_config(config)

    if args.command == "schedule":
        value = args.value if args.value is not None else config.fetch_interval
        cron_expression = resolve_cron_expression(value)
        print(cron_expression or "disabled")
        return 0

    if args.command == "fetch":
        asyncio.run(_fetch(config, args.force, args.output))
        return 0

    init_db()

    if args.command == "sync":
        try:
            new_articles = asyncio.run(_sync_once(config))
        except NewsSyncInProgressError as e:
            logger.error("%s", e)
            return 1
        print(new_articles)
        return 0

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("News sync stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
