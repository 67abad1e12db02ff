"""SQLAlchemy models (2.x style) for persisted picker state."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class RecentSelection(Base):
    """Most-recent-first selected ids, one row per namespace."""
    __tablename__ = "recent_selections"

    namespace: Mapped[str] = mapped_column(String(255), primary_key=True)
    ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
