"""Cross-feed deduplication."""

from fetch_news.models import ParsedArticle


def deduplicate_articles(articles: list[ParsedArticle]) -> list[ParsedArticle]:
    """Keep the first article seen per source URL (slug when the URL is empty)."""
    seen: dict[str, ParsedArticle] = {}
    for article in articles:
        key = article.source_url or article.slug
        if key not in seen:
            seen[key] = article
    return list(seen.values())


def dedupe_and_sort(articles: list[ParsedArticle]) -> list[ParsedArticle]:
    """Deduplicate, then order newest first (stable for equal dates)."""
    deduped = deduplicate_articles(articles)
    deduped.sort(key=lambda article: article.published_at, reverse=True)
    return deduped
