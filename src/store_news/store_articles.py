"""Store newly fetched articles."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fetch_news.models import ParsedArticle
from store_news.models import NewsArticle

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "article"


def get_existing_source_urls(session: Session, source_urls: list[str]) -> set[str]:
    """Return which of source_urls are already stored, in one query."""
    if not source_urls:
        return set()
    rows = session.execute(
        select(NewsArticle.source_url).where(NewsArticle.source_url.in_(source_urls))
    ).scalars()
    return set(rows)


def ensure_unique_slug(session: Session, base_slug: str, reserved: set[str]) -> str:
    """Find a slug free in the database and not reserved by this run.

    Tries ``base``, then ``base-2``, ``base-3``, ...
    """
    base_slug = base_slug or FALLBACK_SLUG
    candidate = base_slug
    suffix = 2

    while True:
        if candidate not in reserved:
            existing = session.execute(
                select(NewsArticle.id).where(NewsArticle.slug == candidate)
            ).first()
            if existing is None:
                return candidate

        candidate = f"{base_slug}-{suffix}"
        suffix += 1


def _to_row(article: ParsedArticle, slug: str) -> NewsArticle:
    return NewsArticle(
        title=article.title,
        slug=slug,
        summary=article.summary,
        content=article.content,
        image_url=article.image_url,
        source=article.source,
        source_url=article.source_url,
        category=article.category,
        tags=article.tags,
        published_at=article.published_at,
        is_featured=article.is_featured,
    )


def store_new_articles(articles: list[ParsedArticle], session: Session) -> int:
    """
    Insert articles whose source URL is not stored yet.

    Existing articles are never updated. Each insert is committed on its own,
    so a failing article is rolled back and logged without losing the rest
    of the batch.

    Args:
        articles: Parsed articles, newest first
        session: SQLAlchemy session

    Returns:
        Number of newly stored articles
    """
    if not articles:
        logger.info("No articles fetched during news sync.")
        return 0

    existing = get_existing_source_urls(session, [a.source_url for a in articles])
    new_articles = [a for a in articles if a.source_url not in existing]

    if not new_articles:
        logger.info("All fetched articles already exist. No new articles added.")
        return 0

    reserved_slugs: set[str] = set()
    created = 0

    for article in new_articles:
        try:
            slug = ensure_unique_slug(session, article.slug, reserved_slugs)
            session.add(_to_row(article, slug))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to store article \"%s\": %s", article.title, e)
            continue

        reserved_slugs.add(slug)
        created += 1

    logger.info(
        "News sync completed. %d total fetched, %d newly stored.",
        len(articles),
        created,
    )
    return created
