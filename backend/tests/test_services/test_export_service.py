"""
Tests for the CSV export functions
"""
from datetime import datetime, timezone

from booth_pos.domain.order import LineItem, PaymentMethod, Transaction
from booth_pos.domain.summary import PaymentMethodSummary, ProductSalesSummary
from booth_pos.services.export_service import (
    export_filename, export_payment_summary, export_product_summary, export_transactions,
)


def make_cash_transaction():
    return Transaction(
        id="t1",
        sequence=1,
        created_at=datetime(2026, 10, 18, 14, 30, tzinfo=timezone.utc),
        payment_method=PaymentMethod.CASH,
        total=500,
        cash_received=1000,
        change_given=500,
        items=[
            LineItem(
                id="i1", transaction_id="t1", position=0, product_id="a",
                product_name="Product A", unit_price=150, quantity=2, line_total=300,
            ),
            LineItem(
                id="i2", transaction_id="t1", position=1, product_id="b",
                product_name="Product B", unit_price=200, quantity=1, line_total=200,
            ),
        ],
    )


class TestExportTransactions:

    def test_header_and_row(self):
        lines = export_transactions([make_cash_transaction()]).splitlines()

        assert lines[0] == (
            '"id";"created_at";"payment_method";"items";"total";"cash_received";"change_given"'
        )
        assert lines[1] == (
            '"t1";"2026-10-18T14:30:00+00:00";"cash";"2x Product A, 1x Product B";5.00;10.00;5.00'
        )

    def test_card_leaves_cash_columns_empty(self):
        transaction = make_cash_transaction().model_copy(
            update={"payment_method": PaymentMethod.CARD, "cash_received": None, "change_given": None}
        )

        row = export_transactions([transaction]).splitlines()[1]

        assert row.endswith(';5.00;"";""')

    def test_quotes_are_doubled(self):
        transaction = make_cash_transaction()
        item = transaction.items[0].model_copy(update={"product_name": 'Bière "maison"'})
        transaction = transaction.model_copy(update={"items": [item]})

        row = export_transactions([transaction]).splitlines()[1]

        assert '"2x Bière ""maison"""' in row

    def test_empty_export_is_header_only(self):
        assert len(export_transactions([]).splitlines()) == 1


class TestExportSummaries:

    def test_product_summary(self):
        rows = [
            ProductSalesSummary(
                product_id="a", product_name="Product A",
                total_quantity=4, total_revenue=650, unit_prices=[150, 200],
            ),
        ]

        lines = export_product_summary(rows).splitlines()

        assert lines[0] == '"product_id";"product_name";"unit_prices";"total_quantity";"total_revenue"'
        assert lines[1] == '"a";"Product A";"1.50 / 2.00";4;6.50'

    def test_payment_summary(self):
        rows = [
            PaymentMethodSummary(payment_method=PaymentMethod.CARD, total_revenue=200, transaction_count=1),
            PaymentMethodSummary(payment_method=PaymentMethod.CASH, total_revenue=1200, transaction_count=3),
        ]

        lines = export_payment_summary(rows).splitlines()

        assert lines[1:] == ['"card";1;2.00', '"cash";3;12.00']


class TestExportFilename:

    def test_timestamped_name(self):
        now = datetime(2026, 10, 18, 9, 5, 7)

        assert export_filename("transactions", now) == "transactions_20261018_090507.csv"
