"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from common.cli_helpers import setup_logging
from common.config import get_config
from news_api.routers import news
from store_news.connection import init_db
from sync_news.sync_news import build_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    init_db()

    scheduler = build_scheduler(config)
    app.state.scheduler = scheduler

    if config.sync_enabled:
        scheduler.register()
        logger.info("News sync job registered successfully")
    else:
        logger.info("News sync job registration skipped")

    yield

    await scheduler.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title="News API",
        description="Stored RSS news articles and the news sync job",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(news.router)
    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    setup_logging()
    config = get_config()
    uvicorn.run(app, host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
