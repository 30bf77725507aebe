"""
Transaction Store - SQLModel/SQLite implementation of TransactionRepository.
Validates payloads before any write and maps stored rows back to Transaction values.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from db_engine import get_engine
from models import (
    AMOUNT_QUANTUM,
    FinancialSummary,
    Transaction,
    TransactionCreate,
    TransactionPatch,
    TransactionRecord,
    TransactionType,
    is_valid_category_for,
)
from repositories.errors import (
    IntegrityError,
    InternalError,
    NotFoundError,
    RepositoryError,
    StorageError,
    ValidationError,
    with_operation,
)
from repositories.transaction_repository import CreatePayload, PatchPayload, TransactionRepository

logger = logging.getLogger(__name__)

# Fields a transaction cannot exist without; a payload may not set them to None
REQUIRED_FIELDS = ("amount", "date", "type", "category")

ModelT = TypeVar("ModelT", bound=BaseModel)


# ==================== Validation ====================
def validate_fields(fields: Mapping[str, Any]):
    """
    Structural and date checks on the fields present in a payload.

    Raises:
        ValidationError: On the first failing check
    """
    for name in REQUIRED_FIELDS:
        if name in fields and fields[name] is None:
            raise ValidationError(f"{name.capitalize()} is required")

    amount = fields.get("amount")
    if amount is not None and amount < 0:
        raise ValidationError("Amount must be positive")

    if "date" in fields and not isinstance(fields["date"], date):
        raise ValidationError("Invalid date format")


def check_consistency(transaction_type: Union[TransactionType, str, None], category: Optional[str]):
    """Reject a category that does not belong to the set of the transaction type."""
    if not is_valid_category_for(transaction_type, category):
        label = getattr(transaction_type, "value", transaction_type)
        raise ValidationError(f"Invalid category for {label} transaction: {category}")


def _check_raw_amount(payload: Any):
    """Amount check on an unparsed mapping, so it still runs first when other fields are malformed."""
    if not isinstance(payload, Mapping) or payload.get("amount") is None:
        return
    try:
        amount = Decimal(str(payload["amount"]))
    except InvalidOperation:
        return
    if not amount.is_nan() and amount < 0:
        raise ValidationError("Amount must be positive")


def _parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        _check_raw_amount(payload)
        errors = e.errors()
        fields = [error["loc"][0] if error["loc"] else "payload" for error in errors]
        if "date" in fields:
            raise ValidationError("Invalid date format") from e
        raise ValidationError(f"Invalid {fields[0]}: {errors[0]['msg']}") from e


def _validate_create(payload: TransactionCreate):
    validate_fields({name: getattr(payload, name) for name in TransactionCreate.model_fields})
    check_consistency(payload.type, payload.category)


# ==================== Row mapping ====================
def to_transaction(record: TransactionRecord) -> Transaction:
    """
    Map a stored row to a Transaction.

    Raises:
        IntegrityError: If the row holds an unknown type, a category outside the
            set of its type, or a date/amount that cannot be parsed
    """
    try:
        tx_type = TransactionType(record.type)
    except ValueError:
        raise IntegrityError(f"Invalid transaction type {record.type!r} in row {record.id}") from None

    if not is_valid_category_for(tx_type, record.category):
        raise IntegrityError(f"Invalid transaction category {record.category!r} in row {record.id}")

    try:
        # Older rows may carry a full ISO timestamp; only the calendar date matters
        tx_date = date.fromisoformat(str(record.date)[:10])
    except ValueError:
        raise IntegrityError(f"Invalid transaction date {record.date!r} in row {record.id}") from None

    try:
        amount = Decimal(str(record.amount)).quantize(AMOUNT_QUANTUM)
    except InvalidOperation:
        raise IntegrityError(f"Invalid transaction amount {record.amount!r} in row {record.id}") from None

    return Transaction(
        id=record.id,
        date=tx_date,
        amount=amount,
        type=tx_type,
        category=record.category,
        description=record.description or "",
    )


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValidationError(f"Invalid date format: {value!r}")


def _date_bounds(start_date, end_date) -> Tuple[str, Optional[str]]:
    """
    Text bounds for an inclusive date range: date >= lower AND date < upper.
    A half-open upper bound also matches stored values with a time part.
    """
    start, end = _as_date(start_date), _as_date(end_date)
    if end == date.max:
        return start.isoformat(), None
    return start.isoformat(), (end + timedelta(days=1)).isoformat()


@contextmanager
def _reported(operation: str) -> Iterator[None]:
    """Log a failed write and re-raise it prefixed with the operation name."""
    try:
        yield
    except RepositoryError as e:
        logger.error(f"Failed to {operation}: {e}")
        raise with_operation(operation, e) from e
    except SQLAlchemyError as e:
        logger.error(f"Failed to {operation}: {e}")
        raise StorageError(f"Failed to {operation}: {e}") from e


class TransactionStore(TransactionRepository):
    """
    Transaction repository backed by the `transactions` table.

    The store receives an engine it does not own: it opens one short session
    per operation and never disposes the engine. Each write runs in a single
    database transaction that also re-reads the written rows, so a failure
    at any step leaves nothing committed.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine if engine is not None else get_engine()

    # ==================== Reads ====================
    def _fetch(self, session: Session, statement) -> List[Transaction]:
        statement = statement.order_by(TransactionRecord.date.desc(), TransactionRecord.id.desc())
        return [to_transaction(record) for record in session.exec(statement).all()]

    async def get_all(self) -> List[Transaction]:
        with Session(self._engine) as session:
            return self._fetch(session, select(TransactionRecord))

    async def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        with Session(self._engine) as session:
            record = session.get(TransactionRecord, transaction_id)
            return to_transaction(record) if record is not None else None

    async def get_by_date_range(self, start_date: date, end_date: date) -> List[Transaction]:
        lower, upper = _date_bounds(start_date, end_date)
        statement = select(TransactionRecord).where(TransactionRecord.date >= lower)
        if upper is not None:
            statement = statement.where(TransactionRecord.date < upper)
        with Session(self._engine) as session:
            return self._fetch(session, statement)

    async def get_by_type(self, transaction_type: Union[TransactionType, str]) -> List[Transaction]:
        type_value = getattr(transaction_type, "value", transaction_type)
        statement = select(TransactionRecord).where(TransactionRecord.type == type_value)
        with Session(self._engine) as session:
            return self._fetch(session, statement)

    async def get_by_category(self, category: str) -> List[Transaction]:
        statement = select(TransactionRecord).where(TransactionRecord.category == category)
        with Session(self._engine) as session:
            return self._fetch(session, statement)

    async def get_financial_summary(self, start_date: date, end_date: date) -> FinancialSummary:
        lower, upper = _date_bounds(start_date, end_date)
        statement = select(
            TransactionRecord.type,
            TransactionRecord.category,
            func.sum(TransactionRecord.amount),
        ).where(TransactionRecord.date >= lower)
        if upper is not None:
            statement = statement.where(TransactionRecord.date < upper)
        statement = statement.group_by(TransactionRecord.type, TransactionRecord.category)

        summary = FinancialSummary()
        with Session(self._engine) as session:
            rows = session.exec(statement).all()

        for type_value, category, total in rows:
            try:
                tx_type = TransactionType(type_value)
            except ValueError:
                raise IntegrityError(f"Invalid transaction type {type_value!r} in summary") from None
            if not is_valid_category_for(tx_type, category):
                raise IntegrityError(f"Invalid transaction category {category!r} in summary")
            summary.add(tx_type, category, Decimal(str(total)).quantize(AMOUNT_QUANTUM))

        logger.debug(
            f"Summary {lower}..{upper}: income={summary.total_income}, expenses={summary.total_expenses}"
        )
        return summary

    # ==================== Writes ====================
    def _insert(self, session: Session, payloads: Sequence[TransactionCreate]) -> List[Transaction]:
        """Insert rows and read them back within the session's open transaction."""
        records = [TransactionRecord(**payload.to_columns()) for payload in payloads]
        session.add_all(records)
        session.flush()

        created = []
        for record in records:
            stored = session.get(TransactionRecord, record.id, populate_existing=True)
            if stored is None:
                raise InternalError(f"Transaction {record.id} could not be read back after insert")
            created.append(to_transaction(stored))
        return created

    async def create(self, transaction: CreatePayload) -> Transaction:
        with _reported("create transaction"):
            payload = _parse_payload(TransactionCreate, transaction)
            _validate_create(payload)
            with Session(self._engine) as session:
                created = self._insert(session, [payload])[0]
                session.commit()

        logger.info(f"Created transaction {created.id} ({created.type.value}, {created.category}, {created.amount})")
        return created

    async def create_many(self, transactions: Sequence[CreatePayload]) -> List[Transaction]:
        with _reported("create transactions"):
            payloads = []
            for index, item in enumerate(transactions):
                try:
                    payload = _parse_payload(TransactionCreate, item)
                    _validate_create(payload)
                except ValidationError as e:
                    raise ValidationError(f"Item {index}: {e}") from e
                payloads.append(payload)

            if not payloads:
                return []

            with Session(self._engine) as session:
                created = self._insert(session, payloads)
                session.commit()

        logger.info(f"Created {len(created)} transactions in one batch")
        return created

    async def update(self, transaction_id: int, changes: PatchPayload) -> Transaction:
        with _reported("update transaction"):
            patch = _parse_payload(TransactionPatch, changes)
            fields = patch.present_fields()
            validate_fields(fields)

            with Session(self._engine) as session:
                record = session.get(TransactionRecord, transaction_id)
                if record is None:
                    raise NotFoundError(f"Transaction with id {transaction_id} not found")

                if "type" in fields or "category" in fields:
                    # Check the pair the row will hold once the patch is applied
                    check_consistency(
                        fields.get("type", record.type),
                        fields.get("category", record.category),
                    )

                for column, value in patch.assignments().items():
                    setattr(record, column, value)
                session.add(record)
                session.flush()

                stored = session.get(TransactionRecord, transaction_id, populate_existing=True)
                if stored is None:
                    raise NotFoundError(f"Transaction with id {transaction_id} not found")
                updated = to_transaction(stored)
                session.commit()

        logger.info(f"Updated transaction {transaction_id} ({', '.join(sorted(fields)) or 'no fields'})")
        return updated

    async def delete(self, transaction_id: int) -> None:
        with Session(self._engine) as session:
            record = session.get(TransactionRecord, transaction_id)
            if record is None:
                logger.debug(f"Transaction {transaction_id} does not exist, nothing to delete")
                return
            session.delete(record)
            session.commit()
        logger.info(f"Deleted transaction {transaction_id}")
