"""
Sales Aggregation Service
Builds the dashboard figures from stored transactions

Nothing is cached: every call reads the store once and aggregates that
snapshot, so the figures can never go stale after a commit. Only line
item snapshots are used, never the live catalog, so editing a product
cannot change historical revenue.
"""
import logging
from typing import Dict, List, Optional, Sequence

from booth_pos.domain.order import Transaction
from booth_pos.domain.summary import DashboardSummary, PaymentMethodSummary, ProductSalesSummary
from booth_pos.repositories.order_repository import TransactionRepository

logger = logging.getLogger(__name__)


# ============================================================================
# Pure aggregation over a snapshot
# ============================================================================

def summarize_products(transactions: Sequence[Transaction]) -> List[ProductSalesSummary]:
    """
    Group line items by product_id

    Order: total revenue descending, ties in first-sale order. The name is
    the snapshot from the product's most recent line.
    """
    groups: Dict[str, dict] = {}
    for transaction in transactions:
        for item in transaction.items:
            group = groups.get(item.product_id)
            if group is None:
                group = groups[item.product_id] = {
                    "first_seen": len(groups),
                    "product_name": item.product_name,
                    "total_quantity": 0,
                    "total_revenue": 0,
                    "unit_prices": [],
                }
            group["product_name"] = item.product_name
            group["total_quantity"] += item.quantity
            group["total_revenue"] += item.line_total
            if item.unit_price not in group["unit_prices"]:
                group["unit_prices"].append(item.unit_price)

    ordered = sorted(groups.items(), key=lambda kv: (-kv[1]["total_revenue"], kv[1]["first_seen"]))
    return [
        ProductSalesSummary(
            product_id=product_id,
            product_name=group["product_name"],
            total_quantity=group["total_quantity"],
            total_revenue=group["total_revenue"],
            unit_prices=group["unit_prices"],
        )
        for product_id, group in ordered
    ]


def summarize_payment_methods(transactions: Sequence[Transaction]) -> List[PaymentMethodSummary]:
    """Revenue and count per payment method, ordered by method value"""
    revenue: Dict[str, int] = {}
    counts: Dict[str, int] = {}
    methods = {}
    for transaction in transactions:
        key = transaction.payment_method.value
        methods[key] = transaction.payment_method
        revenue[key] = revenue.get(key, 0) + transaction.total
        counts[key] = counts.get(key, 0) + 1

    return [
        PaymentMethodSummary(
            payment_method=methods[key],
            total_revenue=revenue[key],
            transaction_count=counts[key],
        )
        for key in sorted(methods)
    ]


def total_revenue(transactions: Sequence[Transaction]) -> int:
    return sum(transaction.total for transaction in transactions)


def build_dashboard(transactions: Sequence[Transaction]) -> DashboardSummary:
    return DashboardSummary(
        total_revenue=total_revenue(transactions),
        total_transactions=len(transactions),
        per_product=summarize_products(transactions),
        per_payment_method=summarize_payment_methods(transactions),
    )


# ============================================================================
# Service
# ============================================================================

class SalesAggregationService:
    """
    Read-only reporting over the transaction store

    Every method is a pure function of the current durable state. A store
    whose rows break the commit invariants raises StorageFailure (from the
    repository) instead of returning misleading totals.
    """

    def __init__(self, repository: Optional[TransactionRepository] = None):
        self.repository = repository or TransactionRepository()

    def per_product_summary(self) -> List[ProductSalesSummary]:
        return summarize_products(self.repository.list())

    def per_payment_method_summary(self) -> List[PaymentMethodSummary]:
        return summarize_payment_methods(self.repository.list())

    def grand_total(self) -> int:
        """Sum of all transaction totals (cents)"""
        return total_revenue(self.repository.list())

    def transaction_count(self) -> int:
        """Number of stored transactions; a corrupted store raises StorageFailure"""
        return len(self.repository.list())

    def dashboard_summary(self) -> DashboardSummary:
        """All dashboard figures computed from a single read of the store"""
        transactions = self.repository.list()
        summary = build_dashboard(transactions)
        logger.debug(
            f"Dashboard: {summary.total_transactions} transactions, "
            f"revenue {summary.total_revenue}, {len(summary.per_product)} products"
        )
        return summary
