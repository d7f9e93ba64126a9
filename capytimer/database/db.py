"""Database connection, session management, and the key-value store.

The rest of the app persists through ``load_number``/``save_number`` and
``load_string``/``save_string``: one ``stored_values`` row per key.
"""

import logging
from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base, StoredValue

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "CapyTimer"
DB_PATH = APP_SUPPORT_DIR / "capytimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── key-value store ───────────────────────────────────────────────────────


def _upsert(db: OrmSession, key: str) -> StoredValue:
    row = db.get(StoredValue, key)
    if row is None:
        row = StoredValue(key=key)
        db.add(row)
    return row


def load_number(key: str, default: int = 0) -> int:
    with get_session() as db:
        row = db.get(StoredValue, key)
        if row is None or row.number_value is None:
            return default
        return row.number_value


def save_number(key: str, value: int) -> None:
    with get_session() as db:
        row = _upsert(db, key)
        row.number_value = int(value)
        row.text_value = None
    logger.debug("Saved %s = %d", key, value)


def load_string(key: str, default: str | None = None) -> str | None:
    with get_session() as db:
        row = db.get(StoredValue, key)
        if row is None or row.text_value is None:
            return default
        return row.text_value


def save_string(key: str, value: str) -> None:
    with get_session() as db:
        row = _upsert(db, key)
        row.text_value = value
        row.number_value = None
    logger.debug("Saved %s = %r", key, value)


def delete_value(key: str) -> bool:
    """Remove *key*.  Returns ``True`` if something was deleted."""
    with get_session() as db:
        row = db.get(StoredValue, key)
        if row is None:
            return False
        db.delete(row)
    return True
