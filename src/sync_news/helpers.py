"""Helper functions for the news-sync CLI."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import datetime
from typing import Any

from fetch_news.models import ParsedArticle


def article_to_record(article: ParsedArticle) -> dict[str, Any]:
    """Serialize a ParsedArticle to a JSON-friendly dict."""
    data = asdict(article)
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = value.isoformat()
    return data


def parse_news_sync_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for news-sync.'''

    parser = argparse.ArgumentParser(prog="news-sync", description="RSS news sync job")
    parser.add_argument("--config", default=None, help="Optional YAML config file.")
    parser.add_argument("--log-level", default="INFO")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Run one sync now and print the number of new articles.")

    fetch = subparsers.add_parser("fetch", help="Fetch feeds without storing anything.")
    fetch.add_argument("--force", action="store_true", help="Bypass the feed cache.")
    fetch.add_argument("--output", default=None, help="Write JSONL to this file instead of stdout.")

    schedule = subparsers.add_parser("schedule", help="Print the cron expression for an interval.")
    schedule.add_argument("value", nargs="?", default=None, help="Interval (default: NEWS_FETCH_INTERVAL).")

    subparsers.add_parser("serve", help="Run the scheduler until interrupted.")

    return parser.parse_args(argv)
