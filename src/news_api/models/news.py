"""News API Pydantic models."""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serializes fields in camelCase, accepts either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Envelope(BaseModel, Generic[T]):
    """Standard ``{"status": ..., "data": ...}`` response wrapper."""

    status: str = "success"
    data: T


class ArticleResponse(CamelModel):
    id: str
    title: str
    slug: str
    summary: str
    content: str
    image_url: Optional[str] = None
    source: str
    source_url: Optional[str] = None
    category: str
    tags: list[str] = Field(default_factory=list)
    published_at: datetime
    is_featured: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ArticleList(CamelModel):
    items: list[ArticleResponse]
    pagination: Pagination


class CategoryCount(CamelModel):
    category: str
    article_count: int


class SyncResult(CamelModel):
    new_articles: int


class SyncStatus(CamelModel):
    in_progress: bool
    cron_expression: Optional[str] = None
    timezone: Optional[str] = None
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_new_articles: Optional[int] = None
    last_error: Optional[str] = None
