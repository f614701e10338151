"""
Local SQLite database holding the cache table. One engine per process,
created by init_db() from the database.path setting.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_DB_PATH = Path.home() / ".mosque_calendar" / "calendar.db"

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _sqlite_url(path: Path) -> str:
    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path}"


def init_db(config_data: Optional[Dict[str, Any]] = None, db_url: Optional[str] = None) -> None:
    """Create the engine and tables. db_url wins over config_data["database"]["path"]."""
    global _engine, _session_factory
    if _engine is not None:
        logger.debug("Database already initialized")
        return

    if db_url is None:
        configured = ((config_data or {}).get("database") or {}).get("path")
        db_url = _sqlite_url(Path(configured) if configured else DEFAULT_DB_PATH)

    engine = create_engine(db_url, future=True)
    # Registers the tables on Base
    from mosque_calendar.core import models  # noqa: F401

    Base.metadata.create_all(engine)
    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    logger.info(f"Database ready: {engine.url.render_as_string(hide_password=True)}")


def reset_db() -> None:
    """Dispose the engine; the next init_db() starts over."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def is_initialized() -> bool:
    return _engine is not None


def get_engine() -> Optional[Engine]:
    return _engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """One transaction: commit when the block succeeds, roll back when it raises."""
    if _session_factory is None:
        raise RuntimeError("init_db() must be called before using the database")
    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
