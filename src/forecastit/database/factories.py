"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from sqlalchemy.pool import StaticPool

from forecastit.database.sqlalchemy_db import SQLAlchemyDatabase

# Seconds a connection waits for another writer's lock before failing.
SQLITE_BUSY_TIMEOUT = 5.0


def default_database_path() -> Path:
    """Return FORECASTIT_DB_PATH if set, else ~/.forecastit/forecastit.db."""
    configured = os.environ.get("FORECASTIT_DB_PATH")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".forecastit" / "forecastit.db"


def create_sqlite_database(
    database_path: Optional[str] = None, busy_timeout: float = SQLITE_BUSY_TIMEOUT
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, falls back to
            default_database_path(). Missing parent directories are created.
        busy_timeout: Seconds to wait on a locked database file. The CLI and
            a long-lived session (tests, scripts) can share one file.

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = Path(database_path).expanduser() if database_path else default_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}", connect_args={"timeout": busy_timeout})


def create_memory_database() -> SQLAlchemyDatabase:
    """Create a throwaway in-memory SQLite database.

    All sessions share one connection, otherwise every new connection would
    see an empty database.
    """
    return SQLAlchemyDatabase(
        "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
    )
