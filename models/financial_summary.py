"""
FinancialSummary model - income/expense totals over a date window.
Computed on demand, never persisted.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Tuple

from models.category import TransactionType

CategoryKey = Tuple[TransactionType, str]


@dataclass
class FinancialSummary:
    """
    Aggregated report over an inclusive date range.

    The breakdown is keyed by (type, category): both category sets contain
    "Other", so a key of category alone would merge income and expenses.
    """
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    category_breakdown: Dict[CategoryKey, Decimal] = field(default_factory=dict)

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expenses

    def add(self, transaction_type: TransactionType, category: str, total: Decimal):
        """Fold one (type, category) aggregate into the totals and the breakdown."""
        if transaction_type == TransactionType.INCOME:
            self.total_income += total
        else:
            self.total_expenses += total
        key = (transaction_type, category)
        self.category_breakdown[key] = self.category_breakdown.get(key, Decimal("0")) + total

    def by_category(self, transaction_type: TransactionType) -> Dict[str, Decimal]:
        """Category name -> total for one transaction type."""
        return {
            category: total
            for (tx_type, category), total in self.category_breakdown.items()
            if tx_type == transaction_type
        }
