"""
Database session management for Rally.

Provides the SQLAlchemy engine and session factory. Uses the settings
from config.py.

Usage:
    from rally.db import get_session

    with get_session() as session:
        updater.start_session(session, "player-123", now_ms)
        # Commits automatically on exit, rolls back on exception
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from rally.config import settings


def get_engine(database_url: str | None = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    Pool sizing only applies to server databases; SQLite uses its own
    pool class and rejects those options.
    """
    url = database_url or settings.database_url
    kwargs = {
        "echo": settings.log_level == "DEBUG",  # Log SQL only in debug mode
    }
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,  # Verify connection is alive before using
        )
    return create_engine(url, **kwargs)


_engine = None


def _get_engine() -> Engine:
    """Get or create the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


# Bound lazily in get_session() so importing this module never connects
SessionLocal = sessionmaker(autoflush=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = SessionLocal(bind=_get_engine())
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
