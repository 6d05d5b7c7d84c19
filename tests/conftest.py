"""Shared fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fetch_news.models import ParsedArticle
from store_news.models import Base


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_article():
    def _make(
        title: str = "Test Title",
        source_url: str = "https://example.com/article",
        slug: str | None = None,
        published_at: datetime | None = None,
        **overrides,
    ) -> ParsedArticle:
        fields = dict(
            title=title,
            slug=slug if slug is not None else title.lower().replace(" ", "-"),
            summary="Summary",
            content="<p>Content</p>",
            image_url=None,
            source="Example",
            source_url=source_url,
            category="Industry News",
            tags="",
            published_at=published_at or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            is_featured=False,
        )
        fields.update(overrides)
        return ParsedArticle(**fields)

    return _make
