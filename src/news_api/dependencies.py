"""Shared FastAPI dependencies."""

from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from store_news.connection import get_session
from sync_news.scheduler import NewsSyncScheduler


def get_db() -> Iterator[Session]:
    """Dependency to get a database session."""
    with get_session() as session:
        yield session


def get_scheduler(request: Request) -> NewsSyncScheduler:
    """Dependency to get the process-wide news sync scheduler."""
    return request.app.state.scheduler
