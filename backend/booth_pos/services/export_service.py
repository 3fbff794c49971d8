"""
Export Service
Renders transactions and sales summaries as semicolon-delimited text

Format: one header row, then one row per transaction or summary group.
Text fields are double-quoted (embedded quotes doubled), money is a fixed
two-decimal number, counts are bare integers.
"""
import csv
import io
from datetime import datetime
from typing import Iterable, List, Sequence

from booth_pos.domain.money import format_cents, to_decimal
from booth_pos.domain.order import Transaction
from booth_pos.domain.summary import PaymentMethodSummary, ProductSalesSummary

DELIMITER = ";"

TRANSACTION_HEADER = [
    "id", "created_at", "payment_method", "items", "total", "cash_received", "change_given",
]
PRODUCT_HEADER = ["product_id", "product_name", "unit_prices", "total_quantity", "total_revenue"]
PAYMENT_HEADER = ["payment_method", "transaction_count", "total_revenue"]


def _render(header: List[str], rows: Iterable[list]) -> str:
    buffer = io.StringIO()
    # QUOTE_NONNUMERIC: str fields are quoted, int and Decimal are not
    writer = csv.writer(buffer, delimiter=DELIMITER, quoting=csv.QUOTE_NONNUMERIC)
    writer.writerow(header)
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def _optional_money(cents):
    return "" if cents is None else to_decimal(cents)


def _describe_items(transaction: Transaction) -> str:
    return ", ".join(f"{item.quantity}x {item.product_name}" for item in transaction.items)


def export_transactions(transactions: Sequence[Transaction]) -> str:
    """One row per transaction, in the order given"""
    return _render(TRANSACTION_HEADER, (
        [
            transaction.id,
            transaction.created_at.isoformat(),
            transaction.payment_method.value,
            _describe_items(transaction),
            to_decimal(transaction.total),
            _optional_money(transaction.cash_received),
            _optional_money(transaction.change_given),
        ]
        for transaction in transactions
    ))


def export_product_summary(rows: Sequence[ProductSalesSummary]) -> str:
    """One row per product; every distinct sale price listed, separated by ' / '"""
    return _render(PRODUCT_HEADER, (
        [
            row.product_id,
            row.product_name,
            " / ".join(format_cents(price) for price in row.unit_prices),
            row.total_quantity,
            to_decimal(row.total_revenue),
        ]
        for row in rows
    ))


def export_payment_summary(rows: Sequence[PaymentMethodSummary]) -> str:
    return _render(PAYMENT_HEADER, (
        [row.payment_method.value, row.transaction_count, to_decimal(row.total_revenue)]
        for row in rows
    ))


def export_filename(kind: str, now: datetime) -> str:
    """e.g. transactions_20261018_143000.csv"""
    return f"{kind}_{now.strftime('%Y%m%d_%H%M%S')}.csv"
