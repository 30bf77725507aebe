"""
Transaction models - the stored row, the domain value, and the write payloads.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import Column, Numeric, text
from sqlmodel import SQLModel, Field

from models.category import TransactionType

# Storage precision of the amount column: DECIMAL(10,2)
AMOUNT_QUANTUM = Decimal("0.01")


def _date_only(value: Any) -> Any:
    """Narrow datetimes to their calendar date; transactions carry no time of day."""
    if isinstance(value, dt.datetime):
        return value.date()
    return value


class TransactionRecord(SQLModel, table=True):
    """
    Row of the `transactions` table.
    The schema itself is owned by migrations/001_create_transactions.sql;
    values are kept in their raw storage form (ISO-8601 text for dates).
    """
    __tablename__ = "transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    amount: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    description: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None)
    type: str  # "income" or "expense"
    date: str = Field(index=True)  # "YYYY-MM-DD"
    created_at: Optional[str] = Field(
        default=None, sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")}
    )
    updated_at: Optional[str] = Field(
        default=None, sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")}
    )


class Transaction(BaseModel):
    """A recorded income or expense. Immutable once read from storage."""
    model_config = ConfigDict(frozen=True)

    id: int
    date: dt.date
    amount: Decimal
    type: TransactionType
    category: str
    description: str = ""


class TransactionCreate(BaseModel):
    """Payload for creating a transaction (every field except the id)."""
    date: dt.date
    amount: Decimal
    type: TransactionType
    category: str
    description: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def narrow_date(cls, value: Any) -> Any:
        return _date_only(value)

    def to_columns(self) -> Dict[str, Any]:
        """Column values for a new `transactions` row."""
        return {
            "date": self.date.isoformat(),
            "amount": self.amount,
            "type": self.type.value,
            "category": self.category,
            "description": self.description,
        }


class TransactionPatch(BaseModel):
    """
    Partial update of a transaction.

    Each field is independently present or absent: only the fields explicitly
    passed to the constructor are applied. Unknown keys, including `id`, are
    dropped so a patch can never change a transaction's identity.
    """
    model_config = ConfigDict(extra="ignore")

    date: Optional[dt.date] = None
    amount: Optional[Decimal] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    description: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def narrow_date(cls, value: Any) -> Any:
        return _date_only(value)

    def present_fields(self) -> Dict[str, Any]:
        """Fields explicitly set on this patch, with their values."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def assignments(self) -> Dict[str, Any]:
        """Column assignments for the present fields, in storage form."""
        columns = {}
        for name, value in self.present_fields().items():
            if name == "date" and value is not None:
                value = value.isoformat()
            elif name == "type" and value is not None:
                value = value.value
            columns[name] = value
        return columns
