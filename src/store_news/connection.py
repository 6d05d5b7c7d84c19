"""Database engine and session handling."""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from common.config import get_config
from store_news.models import Base

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Create the engine from DATABASE_URL on first use."""
    global _engine
    if _engine is None:
        url = get_config().database_url
        connect_args = {}
        if url.startswith("sqlite"):
            # API sessions open in a worker thread and close on another
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args)
    return _engine


def set_engine(engine: Engine) -> None:
    """Use a specific engine (useful for testing)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = None


def reset_engine() -> None:
    """Dispose the engine, forcing a new one on next access."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def init_db(engine: Optional[Engine] = None) -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(engine or get_engine())


@contextmanager
def get_session() -> Iterator[Session]:
    """Context manager for a session with automatic commit/rollback."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
