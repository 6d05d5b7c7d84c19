"""News API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from news_api.dependencies import get_db, get_scheduler
from news_api.models.news import (
    ArticleList,
    ArticleResponse,
    CategoryCount,
    Envelope,
    Pagination,
    SyncResult,
    SyncStatus,
)
from store_news.queries import (
    get_article_by_slug,
    list_articles,
    list_categories,
    list_featured_articles,
)
from sync_news.errors import NewsSyncInProgressError
from sync_news.scheduler import NewsSyncScheduler

router = APIRouter(prefix="/api/news", tags=["news"])


@router.get("", response_model=Envelope[ArticleList])
async def get_articles(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 10,
    category: Annotated[Optional[str], Query(description="Filter by category")] = None,
    featured: Annotated[Optional[bool], Query(description="Filter by featured flag")] = None,
):
    """List stored articles newest first."""
    items, pagination = list_articles(
        db,
        page=page,
        limit=limit,
        category=category.strip() if category else None,
        featured=featured,
    )
    return Envelope(
        data=ArticleList(
            items=[ArticleResponse.model_validate(item.to_dict()) for item in items],
            pagination=Pagination(**pagination),
        )
    )


@router.get("/featured", response_model=Envelope[list[ArticleResponse]])
async def get_featured_articles(
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(description="Max results (1-10)")] = 5,
):
    items = list_featured_articles(db, limit=limit)
    return Envelope(data=[ArticleResponse.model_validate(item.to_dict()) for item in items])


@router.get("/categories", response_model=Envelope[list[CategoryCount]])
async def get_categories(db: Annotated[Session, Depends(get_db)]):
    return Envelope(
        data=[
            CategoryCount(category=category, article_count=count)
            for category, count in list_categories(db)
        ]
    )


@router.get("/sync/status", response_model=Envelope[SyncStatus])
async def get_sync_status(scheduler: Annotated[NewsSyncScheduler, Depends(get_scheduler)]):
    """Current scheduler state, including the last run's outcome."""
    return Envelope(data=SyncStatus(**scheduler.status()))


@router.post("/sync", response_model=Envelope[SyncResult])
async def trigger_sync(scheduler: Annotated[NewsSyncScheduler, Depends(get_scheduler)]):
    """Run a sync now. Returns 409 when a sync is already running."""
    try:
        new_articles = await scheduler.trigger_news_sync()
    except NewsSyncInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return Envelope(data=SyncResult(new_articles=new_articles))


@router.get("/{slug}", response_model=Envelope[ArticleResponse])
async def get_article(slug: str, db: Annotated[Session, Depends(get_db)]):
    article = get_article_by_slug(db, slug.strip())
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return Envelope(data=ArticleResponse.model_validate(article.to_dict()))
