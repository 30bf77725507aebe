"""
Database engine management for TravelBooks.
Uses SQLModel with SQLite for persistent storage.
Features Write-Ahead Logging (WAL) mode for improved concurrency.
"""

from sqlalchemy.engine import Engine
from sqlmodel import create_engine
from typing import Optional
import logging

from config import get_settings

logger = logging.getLogger(__name__)

# Global engine instance
_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get or create the database engine with WAL mode enabled."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args = {}
        if settings.is_sqlite:
            connect_args["check_same_thread"] = False  # Allow use across threads
        _engine = create_engine(
            settings.database_url,
            echo=settings.db_echo,
            connect_args=connect_args
        )
        if settings.is_sqlite:
            # Enable WAL mode for better concurrency
            _enable_wal_mode(_engine)
    return _engine


def _enable_wal_mode(engine: Engine):
    """Enable SQLite WAL mode for improved concurrent read/write performance."""
    try:
        with engine.connect() as conn:
            # Enable WAL mode
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            # Set busy timeout to 5 seconds to handle concurrent access
            conn.exec_driver_sql("PRAGMA busy_timeout=5000")
            logger.info("SQLite WAL mode enabled for concurrent access")
    except Exception as e:
        logger.warning(f"Could not enable WAL mode: {e}")


def init_db() -> list[str]:
    """
    Initialize the database by applying the SQL migrations.

    Returns:
        Names of the migration files that were applied
    """
    from migrate import run_migrations

    applied = run_migrations(get_engine())
    logger.info("Database initialized")
    return applied


def reset_engine():
    """Dispose the global engine so the next call rebuilds it from settings."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
