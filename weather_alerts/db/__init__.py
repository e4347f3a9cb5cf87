"""Database package."""

from weather_alerts.db.session import (
    Base,
    build_engine,
    build_session_factory,
    check_db_connection,
    get_database_status,
)

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "check_db_connection",
    "get_database_status",
]
