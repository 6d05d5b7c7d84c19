"""Tests for fetch_news.fetch_feeds module."""

import asyncio
import logging
from unittest.mock import Mock, patch

import pytest
import requests

from common.config import Config
from fetch_news.cache import FeedCache
from fetch_news.fetch_feeds import (
    USER_AGENT,
    FeedFetcher,
    MalformedFeedError,
    _download_feed,
    _parse_feed,
)

FEED_A = "https://a.example.com/rss"
FEED_B = "https://b.example.com/rss"


def _rss(title: str, items: list[tuple[str, str, str]]) -> bytes:
    body = "".join(
        f"<item><title>{item_title}</title><link>{link}</link>"
        f"<description>Summary of {item_title}</description>"
        f"<pubDate>{date}</pubDate></item>"
        for item_title, link, date in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<rss version="2.0"><channel><title>{title}</title>'
        f"<link>https://{title.lower()}.example.com</link>{body}</channel></rss>"
    ).encode()


FEED_A_BODY = _rss("Alpha", [
    ("First story", "https://a.example.com/1", "Mon, 01 Jan 2024 10:00:00 GMT"),
    ("Second story", "https://a.example.com/2", "Mon, 01 Jan 2024 12:00:00 GMT"),
    ("Shared story", "https://shared.example.com/x", "Mon, 01 Jan 2024 11:00:00 GMT"),
])

FEED_B_BODY = _rss("Beta", [
    ("Shared story again", "https://shared.example.com/x", "Mon, 01 Jan 2024 09:00:00 GMT"),
    ("Beta story", "https://b.example.com/1", "Mon, 01 Jan 2024 08:00:00 GMT"),
])


def _config(**overrides) -> Config:
    fields = dict(feed_urls=[FEED_A, FEED_B], request_delay_ms=0, cache_ttl_ms=60_000)
    fields.update(overrides)
    return Config(**fields)


def _downloader(responses: dict):
    def download(url, timeout):
        result = responses[url]
        if isinstance(result, Exception):
            raise result
        return result
    return download


class TestDownloadFeed:
    @patch("fetch_news.fetch_feeds.requests.get")
    def test_sends_user_agent_and_timeout(self, mock_get) -> None:
        mock_get.return_value = Mock(content=b"<rss/>")
        assert _download_feed(FEED_A, 12) == b"<rss/>"
        mock_get.assert_called_once_with(FEED_A, timeout=12, headers={"User-Agent": USER_AGENT})
        mock_get.return_value.raise_for_status.assert_called_once()

    @patch("fetch_news.fetch_feeds.requests.get")
    def test_http_error_propagates(self, mock_get) -> None:
        mock_get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        with pytest.raises(requests.HTTPError):
            _download_feed(FEED_A, 12)


class TestParseFeed:
    def test_parses_items_with_feed_metadata(self) -> None:
        articles = _parse_feed(FEED_A, FEED_A_BODY)
        assert len(articles) == 3
        assert {a.source for a in articles} == {"Alpha"}

    def test_malformed_feed_raises(self) -> None:
        with pytest.raises(MalformedFeedError):
            _parse_feed(FEED_A, b"this is not xml <<<")


class TestFeedFetcher:
    def test_no_feeds_configured(self, caplog) -> None:
        fetcher = FeedFetcher(_config(feed_urls=[]))
        with caplog.at_level(logging.WARNING):
            assert asyncio.run(fetcher.fetch()) == []
        assert "No RSS feeds configured" in caplog.text

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_merges_dedupes_and_sorts(self, mock_download) -> None:
        mock_download.side_effect = _downloader({FEED_A: FEED_A_BODY, FEED_B: FEED_B_BODY})
        result = asyncio.run(FeedFetcher(_config()).fetch())

        assert [a.source_url for a in result] == [
            "https://a.example.com/2",
            "https://shared.example.com/x",
            "https://a.example.com/1",
            "https://b.example.com/1",
        ]
        shared = result[1]
        assert shared.title == "Shared story"
        assert shared.source == "Alpha"

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_failing_feed_is_isolated(self, mock_download, caplog) -> None:
        mock_download.side_effect = _downloader({
            FEED_A: FEED_A_BODY,
            FEED_B: requests.ConnectionError("unreachable"),
        })
        with caplog.at_level(logging.WARNING):
            result = asyncio.run(FeedFetcher(_config()).fetch())

        assert len(result) == 3
        assert all(a.source == "Alpha" for a in result)
        assert f"Failed to fetch or parse RSS feed {FEED_B}" in caplog.text

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_all_feeds_failing_returns_empty(self, mock_download) -> None:
        mock_download.side_effect = requests.Timeout("slow")
        assert asyncio.run(FeedFetcher(_config()).fetch()) == []

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_malformed_feed_is_isolated(self, mock_download) -> None:
        mock_download.side_effect = _downloader({FEED_A: FEED_A_BODY, FEED_B: b"<<< nope"})
        result = asyncio.run(FeedFetcher(_config()).fetch())
        assert len(result) == 3

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_cached_result_reused(self, mock_download) -> None:
        mock_download.side_effect = _downloader({FEED_A: FEED_A_BODY, FEED_B: FEED_B_BODY})
        fetcher = FeedFetcher(_config())

        first = asyncio.run(fetcher.fetch())
        second = asyncio.run(fetcher.fetch())

        assert first == second
        assert mock_download.call_count == 2

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_force_refresh_bypasses_cache(self, mock_download) -> None:
        mock_download.side_effect = _downloader({FEED_A: FEED_A_BODY, FEED_B: FEED_B_BODY})
        fetcher = FeedFetcher(_config())

        asyncio.run(fetcher.fetch())
        asyncio.run(fetcher.fetch(force_refresh=True))

        assert mock_download.call_count == 4

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_expired_cache_refetches(self, mock_download) -> None:
        mock_download.side_effect = _downloader({FEED_A: FEED_A_BODY, FEED_B: FEED_B_BODY})
        now = [0.0]
        cache = FeedCache(1000, clock=lambda: now[0])
        fetcher = FeedFetcher(_config(), cache=cache)

        asyncio.run(fetcher.fetch())
        now[0] = 2.0
        asyncio.run(fetcher.fetch())

        assert mock_download.call_count == 4

    @patch("fetch_news.fetch_feeds._download_feed")
    def test_explicit_feed_urls_override_config(self, mock_download) -> None:
        mock_download.side_effect = _downloader({FEED_B: FEED_B_BODY})
        result = asyncio.run(FeedFetcher(_config()).fetch(feed_urls=[FEED_B]))
        assert len(result) == 2
        mock_download.assert_called_once_with(FEED_B, 30)

    @patch("fetch_news.fetch_feeds.asyncio.sleep")
    @patch("fetch_news.fetch_feeds._download_feed")
    def test_requests_are_staggered(self, mock_download, mock_sleep) -> None:
        mock_download.side_effect = _downloader({
            FEED_A: FEED_A_BODY,
            FEED_B: FEED_B_BODY,
            "https://c.example.com/rss": FEED_B_BODY,
        })

        config = _config(
            feed_urls=[FEED_A, FEED_B, "https://c.example.com/rss"],
            request_delay_ms=500,
        )
        asyncio.run(FeedFetcher(config).fetch())

        delays = sorted(call.args[0] for call in mock_sleep.call_args_list)
        assert delays == [0.5, 1.0]
