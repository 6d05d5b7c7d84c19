"""Read queries over stored news articles."""

import math
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from store_news.models import NewsArticle

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_FEATURED_LIMIT = 5
MAX_FEATURED_LIMIT = 10


def _clamp(value: Optional[int], default: int, low: int, high: int) -> int:
    if not value:
        return default
    return min(max(value, low), high)


def list_articles(
    session: Session,
    page: Optional[int] = 1,
    limit: Optional[int] = DEFAULT_PAGE_SIZE,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
) -> tuple[list[NewsArticle], dict]:
    """
    List articles newest first with optional filtering.

    Args:
        session: SQLAlchemy session
        page: 1-based page number (values below 1 become 1)
        limit: Page size, clamped to 1..100
        category: Exact category filter
        featured: Filter on the featured flag

    Returns:
        Tuple of (articles, pagination)
    """
    page = max(page or 1, 1)
    limit = _clamp(limit, DEFAULT_PAGE_SIZE, 1, MAX_PAGE_SIZE)

    filters = []
    if category:
        filters.append(NewsArticle.category == category)
    if featured is not None:
        filters.append(NewsArticle.is_featured == featured)

    items = session.execute(
        select(NewsArticle)
        .where(*filters)
        .order_by(NewsArticle.published_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()

    total = session.execute(
        select(func.count()).select_from(NewsArticle).where(*filters)
    ).scalar_one()

    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if total > 0 else 0,
    }
    return list(items), pagination


def get_article_by_slug(session: Session, slug: str) -> Optional[NewsArticle]:
    return session.execute(
        select(NewsArticle).where(NewsArticle.slug == slug)
    ).scalar_one_or_none()


def list_featured_articles(session: Session, limit: Optional[int] = DEFAULT_FEATURED_LIMIT) -> list[NewsArticle]:
    limit = _clamp(limit, DEFAULT_FEATURED_LIMIT, 1, MAX_FEATURED_LIMIT)
    items = session.execute(
        select(NewsArticle)
        .where(NewsArticle.is_featured.is_(True))
        .order_by(NewsArticle.published_at.desc())
        .limit(limit)
    ).scalars().all()
    return list(items)


def list_categories(session: Session) -> list[tuple[str, int]]:
    """Return (category, article_count) pairs sorted by category."""
    rows = session.execute(
        select(NewsArticle.category, func.count(NewsArticle.id))
        .where(NewsArticle.category != "")
        .group_by(NewsArticle.category)
        .order_by(NewsArticle.category)
    ).all()
    return [(category, count) for category, count in rows]
