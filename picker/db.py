"""SQLAlchemy 2.x database setup for the SQL-backed recent-selection store.

The engine is created lazily from ``settings.recent.db_url`` (SQLite by
default); nothing connects at import time.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings


@lru_cache(maxsize=None)
def get_engine(url: str | None = None) -> Engine:
    """Cached engine per URL."""
    return create_engine(url or settings.recent.db_url, echo=settings.debug)


def get_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Session factory bound to ``engine`` (or the default one).

    Usage:
        with get_session_factory()() as session:
            ...
    """
    return sessionmaker(bind=engine or get_engine(), expire_on_commit=False)
