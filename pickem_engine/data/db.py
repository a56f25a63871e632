"""Database engine and session management utilities.

One SQLite engine is cached per process. It is rebuilt automatically when
the configured database path changes, so switching ``PICKEM_DB_PATH`` (and
resetting settings) is enough to point the store at another file.

Example:
    >>> from pickem_engine.data.db import session_scope, init_db
    >>> init_db()
    >>> with session_scope() as session:
    ...     session.get(Game, "g-101")
"""
from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from pickem_engine.config import get_settings
from pickem_engine.data.schema import Base

logger = logging.getLogger(__name__)

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    # Award runs read while recomputation writes
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
)

_engine: Engine | None = None
_engine_path: Path | None = None
_sessions: scoped_session[Session] | None = None


def _apply_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    for pragma in SQLITE_PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


def _build_engine(db_path: Path, timeout: float) -> Engine:
    """Create a SQLite engine whose waits are bounded by ``timeout`` seconds."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_path}",
        pool_pre_ping=True,
        pool_timeout=timeout,
        # sqlite3 busy timeout
        connect_args={"timeout": timeout},
    )
    event.listen(engine, "connect", _apply_pragmas)
    logger.debug(f"Created database engine for {db_path} (timeout={timeout}s)")
    return engine


def get_engine() -> Engine:
    """Return the engine for the configured database, creating it if needed."""
    global _engine, _engine_path
    settings = get_settings()
    db_path = settings.db_path_obj

    if _engine is not None and _engine_path != db_path:
        logger.debug(f"Database path changed to {db_path}, rebuilding engine")
        reset_engine()

    if _engine is None:
        _engine = _build_engine(db_path, settings.store_timeout)
        _engine_path = db_path
    return _engine


def get_session() -> Session:
    """Return the thread-local session bound to the current engine."""
    global _sessions
    engine = get_engine()
    if _sessions is None:
        _sessions = scoped_session(sessionmaker(bind=engine, expire_on_commit=False))
    return _sessions()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Run a block in one transaction.

    Commits when the block exits normally, rolls back and re-raises
    otherwise, and always closes the session.

    Yields:
        SQLAlchemy Session instance.
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create the games, picks and awards tables if they do not exist."""
    from pickem_engine.data import models  # noqa: F401

    Base.metadata.create_all(get_engine())
    logger.info(f"Database ready at {_engine_path}")


def reset_engine() -> None:
    """Dispose the cached engine and session registry."""
    global _engine, _engine_path, _sessions
    if _sessions is not None:
        _sessions.remove()
        _sessions = None
    if _engine is not None:
        _engine.dispose()
        _engine = None
    _engine_path = None


def verify_foreign_keys_enabled() -> bool:
    """Return True if SQLite enforces foreign keys on this engine."""
    with get_engine().connect() as conn:
        row = conn.execute(text("PRAGMA foreign_keys")).fetchone()
    return row is not None and row[0] == 1
