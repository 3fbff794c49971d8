"""
Transaction Repository - the only write path for sales data

commit() validates a cart, snapshots its lines and stores the transaction
header and every line item in a single database transaction. Stored rows
are never updated or deleted.
"""
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as ModelValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload, sessionmaker

from booth_pos.core.database import SessionLocal
from booth_pos.core.exceptions import (
    EmptyOrder, InsufficientCash, InvalidLine, StorageFailure, ValidationError,
)
from booth_pos.domain.money import Money, check_money, multiply, sum_money
from booth_pos.domain.order import CommitLine, LineItem, PaymentMethod, Transaction
from booth_pos.models import LineItemRecord, TransactionRecord

logger = logging.getLogger(__name__)

# One register, one writer: commits never interleave inside this process
_commit_lock = threading.Lock()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionRepository:
    """
    Repository for Transaction data access

    All SQL for orders and order items is centralized here. Returns
    Transaction domain models with their line items.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory or SessionLocal
        self._clock = clock

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def commit(
        self,
        lines: Iterable[Union[CommitLine, dict]],
        payment_method: Union[PaymentMethod, str],
        cash_received: Optional[Money] = None,
    ) -> Transaction:
        """
        Validate and durably store one order

        Args:
            lines: Lines with the name/price snapshot to store
            payment_method: PaymentMethod or its string value ("cash"/"card")
            cash_received: Cash tendered in cents (required for cash,
                ignored for card)

        Returns:
            The stored Transaction, with id and created_at assigned

        Raises:
            EmptyOrder, InvalidPaymentMethod, InvalidLine, MoneyOverflow,
            InsufficientCash: before anything is written
            StorageFailure: the atomic write failed; nothing was stored
        """
        lines = list(lines)
        if not lines:
            raise EmptyOrder("Cannot create an order with no items")

        method = PaymentMethod.parse(payment_method)
        commit_lines = [self._validate_line(line) for line in lines]
        line_totals = [multiply(line.unit_price, line.quantity) for line in commit_lines]
        total = sum_money(line_totals)
        cash_received, change_given = self._settle(method, total, cash_received)

        with _commit_lock:
            session = self._session_factory()
            try:
                with session.begin():
                    last = session.execute(
                        select(TransactionRecord.sequence, TransactionRecord.created_at)
                        .order_by(TransactionRecord.sequence.desc())
                        .limit(1)
                    ).first()

                    sequence = 1 if last is None else last.sequence + 1
                    created_at = self._clock()
                    if last is not None:
                        created_at = max(created_at, as_utc(last.created_at))

                    record = TransactionRecord(
                        id=str(uuid.uuid4()),
                        sequence=sequence,
                        created_at=created_at,
                        total=total,
                        payment_method=method.value,
                        cash_received=cash_received,
                        change_given=change_given,
                    )
                    record.items = [
                        LineItemRecord(
                            id=str(uuid.uuid4()),
                            position=position,
                            product_id=line.product_id,
                            product_name=line.name,
                            unit_price=line.unit_price,
                            quantity=line.quantity,
                            total=line_total,
                        )
                        for position, (line, line_total) in enumerate(zip(commit_lines, line_totals))
                    ]
                    session.add(record)
                    session.flush()

                    transaction = self._to_domain(record, created_at=created_at)
            except (SQLAlchemyError, OSError) as e:
                logger.exception(f"Commit failed, order not stored ({len(commit_lines)} lines, total {total})")
                raise StorageFailure(f"Could not store order: {e}") from e
            finally:
                session.close()

        logger.info(
            f"Committed transaction {transaction.id} #{transaction.sequence}: "
            f"total={transaction.total} method={method.value} lines={len(transaction.items)}"
        )
        return transaction

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def list(self) -> List[Transaction]:
        """
        All transactions, oldest first, each with its line items

        Ordered by (created_at, sequence), which is commit order.
        """
        session = self._session_factory()
        try:
            records = session.scalars(
                select(TransactionRecord)
                .options(selectinload(TransactionRecord.items))
                .order_by(TransactionRecord.created_at, TransactionRecord.sequence)
            ).all()
            return [self._to_domain(record) for record in records]
        except SQLAlchemyError as e:
            logger.exception("Failed to read transactions")
            raise StorageFailure(f"Could not read transactions: {e}") from e
        finally:
            session.close()

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """
        Find a transaction by ID

        Returns:
            Transaction with its items or None if not found
        """
        session = self._session_factory()
        try:
            record = session.scalars(
                select(TransactionRecord)
                .options(selectinload(TransactionRecord.items))
                .where(TransactionRecord.id == transaction_id)
            ).first()
            if record is None:
                return None
            return self._to_domain(record)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to read transaction {transaction_id}")
            raise StorageFailure(f"Could not read transaction {transaction_id}: {e}") from e
        finally:
            session.close()

    def count(self) -> int:
        session = self._session_factory()
        try:
            return session.scalar(select(func.count()).select_from(TransactionRecord))
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not count transactions: {e}") from e
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_line(line: Union[CommitLine, dict]) -> CommitLine:
        try:
            line = CommitLine.model_validate(line)
        except ModelValidationError as e:
            raise InvalidLine(f"Malformed order line: {e.errors()[0]['msg']}") from None

        if not line.product_id or not line.name:
            raise InvalidLine("Order line needs a product id and a name")
        if line.quantity < 1:
            raise InvalidLine(f"Invalid quantity {line.quantity} for product {line.product_id}")
        if line.unit_price < 0:
            raise InvalidLine(f"Invalid unit price {line.unit_price} for product {line.product_id}")
        return line

    @staticmethod
    def _settle(
        method: PaymentMethod, total: Money, cash_received: Optional[Money]
    ) -> Tuple[Optional[Money], Optional[Money]]:
        """Return (cash_received, change_given) as they will be stored"""
        if method is PaymentMethod.CARD:
            if cash_received is not None:
                logger.debug("cash_received ignored for card payment")
            return None, None

        if cash_received is None:
            raise InsufficientCash(total, None)
        if isinstance(cash_received, bool) or not isinstance(cash_received, int):
            raise ValidationError(f"cash_received must be integer cents, got {cash_received!r}")
        check_money(cash_received)
        if cash_received < total:
            raise InsufficientCash(total, cash_received)
        return cash_received, cash_received - total

    @staticmethod
    def _to_domain(record: TransactionRecord, created_at: Optional[datetime] = None) -> Transaction:
        """
        Build a Transaction from stored rows, re-checking the stored invariants

        A row set that breaks them means the database was altered outside
        this repository; that is reported as StorageFailure rather than
        handed to reports.
        """
        try:
            items = [
                LineItem(
                    id=item.id,
                    transaction_id=record.id,
                    position=item.position,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.total,
                )
                for item in record.items
            ]
            transaction = Transaction(
                id=record.id,
                sequence=record.sequence,
                created_at=as_utc(created_at or record.created_at),
                payment_method=record.payment_method,
                total=record.total,
                cash_received=record.cash_received,
                change_given=record.change_given,
                items=items,
            )
        except ModelValidationError as e:
            raise StorageFailure(f"Corrupted transaction {record.id}: {e.errors()[0]['msg']}") from e

        problems = []
        if not transaction.items:
            problems.append("no line items")
        for item in transaction.items:
            if item.line_total != item.unit_price * item.quantity:
                problems.append(f"line {item.position} total {item.line_total} != price * quantity")
        if transaction.total != sum(item.line_total for item in transaction.items):
            problems.append(f"total {transaction.total} != sum of line totals")
        if transaction.payment_method is PaymentMethod.CASH:
            if (transaction.cash_received is None
                    or transaction.change_given != transaction.cash_received - transaction.total):
                problems.append("inconsistent cash fields")
        elif transaction.cash_received is not None or transaction.change_given is not None:
            problems.append("card payment with cash fields")

        if problems:
            raise StorageFailure(f"Corrupted transaction {record.id}: {'; '.join(problems)}")
        return transaction
