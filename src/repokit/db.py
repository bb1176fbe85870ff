"""
Database Connection and Session Management for SQLAlchemy.

Repositories never open sessions themselves; they receive a resolver bound to
a session the caller owns. This module is where callers get that session:

- **Global Engine**: a lazily created singleton `Engine` pooling connections.
- **Session Factory**: a `sessionmaker` bound to the engine.
- **Transactional Context Manager**: `get_db` yields a `Session`, commits when
  the block succeeds, rolls back and re-raises when it fails, and always
  closes the session.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from .config import get_config
from .models import Base

_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """
    Retrieves the global SQLAlchemy engine, creating it if necessary.

    The engine is created with `pool_pre_ping=True` so dead pooled connections
    are detected before use. Pool sizing applies to server databases only;
    SQLite URLs use SQLAlchemy's default SQLite pooling.

    Returns:
        Engine: The singleton SQLAlchemy `Engine` instance.
    """
    global _engine
    if _engine is None:
        config = get_config()
        url = config.get_database_url()
        kwargs: dict[str, Any] = {"echo": config.sql_echo, "pool_pre_ping": True}
        if make_url(url).get_backend_name() != "sqlite":
            kwargs["pool_size"] = 5
            kwargs["max_overflow"] = 10
        _engine = create_engine(url, **kwargs)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """
    Retrieves the global SQLAlchemy session factory, creating it if necessary.

    Sessions are created with `autoflush=False`; repositories flush explicitly
    after creating records.

    Returns:
        sessionmaker[Session]: The singleton `sessionmaker` instance.
    """
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    Provides a transactional database session via a context manager.

    Usage:
    ```
    with get_db() as session:
        users = UserRepository(SessionResolver(session))
        users.criteria(WhereEquals("active", True)).all()
    ```

    Yields:
        Session: A new SQLAlchemy `Session` object ready for use.
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Creates all tables registered on `Base.metadata` that do not exist yet."""
    Base.metadata.create_all(bind=get_engine())


def drop_tables() -> None:
    """
    Drops all tables registered on `Base.metadata`.

    Warning:
        Destroys every table and its data. Only for tests and local resets.
    """
    Base.metadata.drop_all(bind=get_engine())


def reset_engine() -> None:
    """Disposes the global engine and forgets the session factory (tests only)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
