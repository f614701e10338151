"""
Service layer: key-value cache persisted through SQLAlchemy.
Each call runs in its own transaction.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select, delete

from mosque_calendar.core.db import session_scope
from mosque_calendar.core.models import CacheEntry

logger = logging.getLogger(__name__)


class CacheStore:
    """Read/write JSON documents by key."""

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored document for key, or None."""
        with session_scope() as session:
            row = session.execute(select(CacheEntry).where(CacheEntry.key == key)).scalars().first()
            return dict(row.data) if row and row.data is not None else None

    def put(self, key: str, value: Dict[str, Any]) -> None:
        """Insert or replace the document stored under key."""
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        with session_scope() as session:
            row = session.execute(select(CacheEntry).where(CacheEntry.key == key)).scalars().first()
            if row:
                row.data = value
                row.stored_at = now
            else:
                session.add(CacheEntry(key=key, data=value, stored_at=now))
        logger.debug(f"Cache entry saved: {key}")

    def delete(self, key: str) -> None:
        with session_scope() as session:
            session.execute(delete(CacheEntry).where(CacheEntry.key == key))


class MemoryCacheStore(CacheStore):
    """In-process store with the same interface, used when no database is wanted."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._data.get(key)
        return dict(value) if value is not None else None

    def put(self, key: str, value: Dict[str, Any]) -> None:
        self._data[key] = dict(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
