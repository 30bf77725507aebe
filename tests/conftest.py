"""Shared fixtures: an in-memory database migrated with the project's SQL scripts."""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from config import PROJECT_ROOT
from migrate import run_migrations
from repositories import TransactionStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    run_migrations(engine, PROJECT_ROOT / "migrations")
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return TransactionStore(engine)


@pytest.fixture
def insert_raw(engine):
    """Write a row straight into the table, bypassing the store's validation."""

    def _insert(amount, category, tx_type, tx_date, description="raw row"):
        with engine.begin() as conn:
            result = conn.exec_driver_sql(
                "INSERT INTO transactions (amount, description, category, type, date) VALUES (?, ?, ?, ?, ?)",
                (amount, description, category, tx_type, tx_date),
            )
            return result.lastrowid

    return _insert
