"""
Sales summary models returned by the aggregation service
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import List

from booth_pos.domain.order import PaymentMethod


class ProductSalesSummary(BaseModel):
    """
    Per-product sales row, derived only from stored line items

    unit_prices lists each distinct snapshot price the product was sold at,
    in the order they first appeared, so a mid-event price change shows up
    as two prices instead of a blended average.
    """

    product_id: str
    product_name: str = Field(..., description="Name snapshot of the most recent line")
    total_quantity: int
    total_revenue: int
    unit_prices: List[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PaymentMethodSummary(BaseModel):
    """Revenue and transaction count for one payment method"""

    payment_method: PaymentMethod
    total_revenue: int
    transaction_count: int

    model_config = ConfigDict(frozen=True)


class DashboardSummary(BaseModel):
    """Complete dashboard view, computed from one consistent read"""

    total_revenue: int
    total_transactions: int
    per_product: List[ProductSalesSummary] = Field(default_factory=list)
    per_payment_method: List[PaymentMethodSummary] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
