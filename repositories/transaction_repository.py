"""
Transaction Repository - storage-independent contract for transaction persistence.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence, Union

from models import (
    FinancialSummary,
    Transaction,
    TransactionCreate,
    TransactionPatch,
    TransactionType,
)

CreatePayload = Union[TransactionCreate, Mapping[str, Any]]
PatchPayload = Union[TransactionPatch, Mapping[str, Any]]


class TransactionRepository(ABC):
    """
    Operations available on stored transactions.
    Every list result is ordered newest date first.
    """

    @abstractmethod
    async def get_all(self) -> List[Transaction]:
        """Retrieve all transactions."""

    @abstractmethod
    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by its ID, or None if it does not exist."""

    @abstractmethod
    async def create(self, transaction: CreatePayload) -> Transaction:
        """
        Create a transaction.

        Args:
            transaction: Every field except the id

        Returns:
            The created Transaction with its assigned id

        Raises:
            ValidationError: If the payload is invalid; nothing is written
        """

    @abstractmethod
    async def update(self, transaction_id: int, changes: PatchPayload) -> Transaction:
        """
        Replace only the fields present in `changes`.

        Raises:
            NotFoundError: If no transaction has this id
            ValidationError: If the resulting transaction would be invalid
        """

    @abstractmethod
    async def delete(self, transaction_id: int) -> None:
        """Delete a transaction. Deleting a missing id is not an error."""

    @abstractmethod
    async def get_by_date_range(self, start_date: date, end_date: date) -> List[Transaction]:
        """Retrieve transactions dated within [start_date, end_date]."""

    @abstractmethod
    async def get_by_type(self, transaction_type: Union[TransactionType, str]) -> List[Transaction]:
        """Retrieve all income or all expense transactions."""

    @abstractmethod
    async def get_by_category(self, category: str) -> List[Transaction]:
        """Retrieve transactions of one category."""

    @abstractmethod
    async def get_financial_summary(self, start_date: date, end_date: date) -> FinancialSummary:
        """Compute income, expenses, net profit and category totals within [start_date, end_date]."""

    @abstractmethod
    async def create_many(self, transactions: Sequence[CreatePayload]) -> List[Transaction]:
        """
        Create several transactions atomically.

        Returns:
            Created transactions in input order

        Raises:
            ValidationError: If any item is invalid; nothing is written
        """
