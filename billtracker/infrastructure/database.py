"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from billtracker.config import Settings, get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


settings = get_settings()

logger = logging.getLogger(__name__)


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Return pool options suited to the configured backend.

    Server databases get a bounded queue pool where callers wait up to
    ``db_pool_timeout`` seconds for a free connection. SQLite (used by the test
    suite) keeps SQLAlchemy's default pool.
    """

    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": 0,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, pool_pre_ping=True, **_engine_options(settings))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database() -> None:
    """Verify connectivity and ensure all ORM models have corresponding tables."""

    from billtracker.infrastructure import models  # noqa: F401  # ensure models are imported

    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    logger.info("Connected to database %s", engine.url.render_as_string(hide_password=True))

    Base.metadata.create_all(bind=engine, checkfirst=True)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
