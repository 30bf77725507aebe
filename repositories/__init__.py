"""
Repositories package for TravelBooks.
Provides the data access layer for bookkeeping transactions.
"""

from repositories.errors import (
    RepositoryError,
    ValidationError,
    NotFoundError,
    IntegrityError,
    InternalError,
    StorageError,
)
from repositories.transaction_repository import TransactionRepository
from repositories.transaction_store import TransactionStore

__all__ = [
    'TransactionRepository',
    'TransactionStore',
    'RepositoryError',
    'ValidationError',
    'NotFoundError',
    'IntegrityError',
    'InternalError',
    'StorageError',
]
