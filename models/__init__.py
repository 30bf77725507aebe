"""
Database and domain models for TravelBooks.
The SQLModel table definition and the domain values are centralized here.
"""

from models.category import (
    TransactionType,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    CATEGORIES_BY_TYPE,
    is_valid_category_for,
)
from models.transaction import (
    AMOUNT_QUANTUM,
    TransactionRecord,
    Transaction,
    TransactionCreate,
    TransactionPatch,
)
from models.financial_summary import FinancialSummary, CategoryKey

__all__ = [
    'TransactionType',
    'EXPENSE_CATEGORIES',
    'INCOME_CATEGORIES',
    'CATEGORIES_BY_TYPE',
    'is_valid_category_for',
    'AMOUNT_QUANTUM',
    'TransactionRecord',
    'Transaction',
    'TransactionCreate',
    'TransactionPatch',
    'FinancialSummary',
    'CategoryKey',
]
