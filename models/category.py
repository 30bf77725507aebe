"""
Transaction types and the closed category sets allowed for each type.
"""

from enum import Enum
from typing import Dict, Tuple, Union


class TransactionType(str, Enum):
    """Direction of a bookkeeping transaction."""
    INCOME = "income"
    EXPENSE = "expense"


EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "Accommodation",
    "Transportation",
    "Food & Beverage",
    "Tours & Activities",
    "Marketing",
    "Staff Wages",
    "Insurance",
    "Equipment & Supplies",
    "Maintenance",
    "Commissions",
    "Utilities",
    "Other",
)

INCOME_CATEGORIES: Tuple[str, ...] = (
    "Package Tours",
    "Hotel Bookings",
    "Flight Bookings",
    "Activity Sales",
    "Transport Services",
    "Commission Income",
    "Travel Insurance",
    "Other",
)

CATEGORIES_BY_TYPE: Dict[TransactionType, Tuple[str, ...]] = {
    TransactionType.INCOME: INCOME_CATEGORIES,
    TransactionType.EXPENSE: EXPENSE_CATEGORIES,
}


def is_valid_category_for(transaction_type: Union[TransactionType, str, None], category: object) -> bool:
    """
    Check whether a category belongs to the category set of a transaction type.

    Args:
        transaction_type: TransactionType member or its string value
        category: Category label to check

    Returns:
        True if the category is allowed for the type, False otherwise
        (including unknown types)

    Examples:
        >>> is_valid_category_for("income", "Package Tours")
        True
        >>> is_valid_category_for("income", "Accommodation")
        False
    """
    try:
        tx_type = TransactionType(transaction_type)
    except ValueError:
        return False
    return category in CATEGORIES_BY_TYPE[tx_type]
