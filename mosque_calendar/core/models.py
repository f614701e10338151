"""
Core DB models: key-value cache entries.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, JSON

from mosque_calendar.core.db import Base


def _utc_now() -> datetime:
    """UTC now as naive datetime for DateTime(timezone=False) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CacheEntry(Base):
    """One cached JSON document under a fixed key (e.g. the remote holiday data)."""
    __tablename__ = "cache_entries"

    key = Column(String(255), primary_key=True)
    stored_at = Column(DateTime(timezone=False), default=_utc_now, onupdate=_utc_now, nullable=False)
    data = Column(JSON, nullable=False)
