"""
Database migration script for TravelBooks.
Applies the versioned SQL scripts in the migrations directory in lexical order.
Every script must be idempotent (IF NOT EXISTS guards), so the whole set is
re-applied on each startup.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from sqlalchemy.engine import Engine

from config import get_settings

logger = logging.getLogger(__name__)


class MigrationError(RuntimeError):
    """Raised when a migration script cannot be applied."""

    def __init__(self, migration: str, cause: Exception):
        super().__init__(f"Migration {migration} failed: {cause}")
        self.migration = migration


def list_migrations(migrations_dir: Path) -> List[Path]:
    """Return the *.sql files of a directory sorted by file name."""
    if not migrations_dir.is_dir():
        raise MigrationError(str(migrations_dir), FileNotFoundError("migrations directory does not exist"))
    return sorted(migrations_dir.glob("*.sql"), key=lambda path: path.name)


def apply_migration(engine: Engine, path: Path):
    """Run one SQL script on a raw DBAPI connection and commit it."""
    script = path.read_text(encoding="utf-8")
    conn = engine.raw_connection()
    try:
        cursor = conn.cursor()
        try:
            # executescript handles multi-statement files (triggers with BEGIN ... END)
            cursor.executescript(script)
        finally:
            cursor.close()
        conn.commit()
    except Exception as e:
        conn.rollback()
        raise MigrationError(path.name, e) from e
    finally:
        conn.close()


def run_migrations(engine: Optional[Engine] = None, migrations_dir: Optional[Path] = None) -> List[str]:
    """
    Run all migrations in sequence.

    Args:
        engine: Engine to migrate (defaults to the configured engine)
        migrations_dir: Directory of *.sql scripts (defaults to settings.migrations_dir)

    Returns:
        File names of the applied migrations, in application order

    Raises:
        MigrationError: On the first script that fails; later scripts are not run
    """
    if engine is None:
        from db_engine import get_engine
        engine = get_engine()
    if migrations_dir is None:
        migrations_dir = get_settings().migrations_dir

    applied = []
    for path in list_migrations(Path(migrations_dir)):
        logger.info(f"Running migration: {path.name}")
        apply_migration(engine, path)
        logger.info(f"Completed migration: {path.name}")
        applied.append(path.name)
    return applied


def main() -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info("=" * 60)
    logger.info("TravelBooks Database Migration")
    logger.info("=" * 60)

    try:
        applied = run_migrations()
    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        return 1

    logger.info(f"Migration complete! {len(applied)} script(s) applied.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
