"""Tests for store_news.queries module."""

from datetime import datetime, timedelta, timezone

from store_news.queries import (
    get_article_by_slug,
    list_articles,
    list_categories,
    list_featured_articles,
)
from store_news.store_articles import store_new_articles

BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _seed(session, make_article, count: int, **overrides) -> None:
    articles = [
        make_article(
            title=f"Article {i}",
            source_url=f"https://example.com/{overrides.get('category', 'x')}/{i}",
            published_at=BASE_DATE + timedelta(hours=i),
            **overrides,
        )
        for i in range(count)
    ]
    store_new_articles(articles, session)


class TestListArticles:
    def test_newest_first_with_pagination(self, session, make_article) -> None:
        _seed(session, make_article, 5)
        items, pagination = list_articles(session, page=1, limit=2)

        assert [a.title for a in items] == ["Article 4", "Article 3"]
        assert pagination == {"page": 1, "limit": 2, "total": 5, "total_pages": 3}

    def test_last_page(self, session, make_article) -> None:
        _seed(session, make_article, 5)
        items, _ = list_articles(session, page=3, limit=2)
        assert [a.title for a in items] == ["Article 0"]

    def test_filters_by_category(self, session, make_article) -> None:
        _seed(session, make_article, 2, category="Research")
        _seed(session, make_article, 3, category="Tutorials")
        items, pagination = list_articles(session, category="Research")
        assert {a.category for a in items} == {"Research"}
        assert pagination["total"] == 2

    def test_filters_by_featured(self, session, make_article) -> None:
        _seed(session, make_article, 2, is_featured=True, category="Research")
        _seed(session, make_article, 3, category="Tutorials")
        items, _ = list_articles(session, featured=True)
        assert len(items) == 2
        assert all(a.is_featured for a in items)

    def test_limit_is_clamped(self, session, make_article) -> None:
        _, pagination = list_articles(session, page=0, limit=500)
        assert pagination["page"] == 1
        assert pagination["limit"] == 100

    def test_missing_limit_uses_default(self, session) -> None:
        _, pagination = list_articles(session, limit=None)
        assert pagination["limit"] == 10

    def test_empty_table(self, session) -> None:
        items, pagination = list_articles(session)
        assert items == []
        assert pagination["total_pages"] == 0


class TestGetArticleBySlug:
    def test_found(self, session, make_article) -> None:
        store_new_articles([make_article(title="Hello World")], session)
        article = get_article_by_slug(session, "hello-world")
        assert article is not None
        assert article.title == "Hello World"

    def test_not_found(self, session) -> None:
        assert get_article_by_slug(session, "missing") is None


class TestListFeaturedArticles:
    def test_only_featured(self, session, make_article) -> None:
        _seed(session, make_article, 3, is_featured=True, category="Research")
        _seed(session, make_article, 2, category="Tutorials")
        items = list_featured_articles(session)
        assert [a.title for a in items] == ["Article 2", "Article 1", "Article 0"]

    def test_limit_is_clamped(self, session, make_article) -> None:
        _seed(session, make_article, 12, is_featured=True)
        assert len(list_featured_articles(session, limit=50)) == 10
        assert len(list_featured_articles(session, limit=2)) == 2


class TestListCategories:
    def test_counts_sorted_by_name(self, session, make_article) -> None:
        _seed(session, make_article, 2, category="Tutorials")
        _seed(session, make_article, 3, category="Research")
        assert list_categories(session) == [("Research", 3), ("Tutorials", 2)]
