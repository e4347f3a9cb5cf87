"""
Database engine and session management. SQLAlchemy 2.x style.

Engines are built explicitly (see ``weather_alerts.services.container``) rather
than at import time, so tests and scripts can point the app at their own
database.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from weather_alerts.config import Settings


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database URL."""
    url = settings.database_url
    if _is_sqlite(url):
        kwargs: dict = {
            "echo": settings.debug,
            "connect_args": {"check_same_thread": False},
        }
        if ":memory:" in url or url.rstrip("/").endswith("sqlite:"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=settings.debug,
        connect_args={
            "connect_timeout": settings.db_connect_timeout,
            "options": "-c timezone=UTC",
        },
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory; objects stay readable after commit so stores can return them."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def check_db_connection(engine: Engine) -> None:
    """
    Verify database connectivity. Raises if unreachable.
    Call during application startup.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_database_status(engine: Engine) -> dict:
    """Connectivity probe for health reporting. Never raises."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        check_db_connection(engine)
    except Exception as exc:
        return {"status": "disconnected", "error": str(exc), "timestamp": timestamp}
    return {"status": "connected", "timestamp": timestamp}
