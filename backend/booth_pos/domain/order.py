"""
Order Domain Models

Transactions (completed orders) and their line items. Both are immutable
once committed: line items carry a snapshot of the product name and unit
price so later catalog edits never change historical figures.
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import Optional, List
from datetime import datetime

from booth_pos.core.exceptions import InvalidPaymentMethod


class PaymentMethod(str, Enum):
    """Accepted payment methods, stored as lowercase strings"""

    CASH = "cash"
    CARD = "card"

    @classmethod
    def parse(cls, value) -> "PaymentMethod":
        """Coerce an enum member or its string value; anything else is rejected"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise InvalidPaymentMethod(value) from None


class CommitLine(BaseModel):
    """
    One line of a commit request

    name and unit_price are the snapshot that will be stored; they are
    taken from the catalog at commit time by the caller (usually
    OrderBuilder.to_commit_lines).
    """

    product_id: str
    name: str
    unit_price: StrictInt
    quantity: StrictInt

    model_config = ConfigDict(frozen=True)


class LineItem(BaseModel):
    """
    Line item domain model

    Fields:
        id: Line item ID
        transaction_id: Parent transaction ID
        position: Order of the line within its transaction
        product_id: Reference to the catalog product (not ownership)
        product_name: Product name at sale time
        unit_price: Unit price at sale time (cents)
        quantity: Units sold
        line_total: unit_price * quantity (cents)
    """

    id: str = Field(..., description="Line item ID")
    transaction_id: str = Field(..., description="Parent transaction ID")
    position: int = Field(..., description="Position within the transaction", ge=0)
    product_id: str = Field(..., description="Catalog product ID")
    product_name: str = Field(..., description="Product name at sale time")
    unit_price: int = Field(..., description="Unit price at sale time (cents)", ge=0)
    quantity: int = Field(..., description="Units sold", ge=1)
    line_total: int = Field(..., description="unit_price * quantity (cents)", ge=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "line_total": self.line_total,
        }


class Transaction(BaseModel):
    """
    Transaction domain model - a completed, immutable order

    Fields:
        id: Transaction ID (uuid4, assigned at commit)
        sequence: Commit sequence number, tie-breaker for equal timestamps
        created_at: UTC commit timestamp, non-decreasing across commits
        payment_method: cash or card
        total: Sum of line totals (cents)
        cash_received: Cash tendered (cash payments only)
        change_given: cash_received - total (cash payments only)
        items: Line items in the order they were rung up
    """

    id: str = Field(..., description="Transaction ID")
    sequence: int = Field(..., description="Commit sequence number", ge=1)
    created_at: datetime = Field(..., description="Commit timestamp (UTC)")
    payment_method: PaymentMethod = Field(..., description="Payment method")
    total: int = Field(..., description="Total amount (cents)", ge=0)
    cash_received: Optional[int] = Field(None, description="Cash tendered (cents)")
    change_given: Optional[int] = Field(None, description="Change returned (cents)")
    items: List[LineItem] = Field(default_factory=list, description="Line items")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def item_count(self) -> int:
        """Total number of units across all lines"""
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        """JSON-ready dict; money stays in integer cents"""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "total": self.total,
            "payment_method": self.payment_method.value,
            "cash_received": self.cash_received,
            "change_given": self.change_given,
            "item_count": self.item_count,
            "items": [item.to_dict() for item in self.items],
        }


class CommitLineIn(BaseModel):
    """Request schema for one line of POST /orders"""
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    unit_price: StrictInt
    quantity: StrictInt


class CommitRequest(BaseModel):
    """Request schema for committing an order"""
    lines: List[CommitLineIn] = Field(default_factory=list)
    payment_method: str
    cash_received: Optional[StrictInt] = None

    def commit_lines(self) -> List[CommitLine]:
        return [CommitLine(**line.model_dump()) for line in self.lines]


class CheckoutRequest(BaseModel):
    """Request schema for checking out the current cart"""
    payment_method: str
    cash_received: Optional[StrictInt] = None
