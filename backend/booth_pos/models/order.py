"""
Order tables - transactions and their line items

Both tables are append-only: the application inserts rows at checkout and
never updates or deletes them.
"""
from sqlalchemy import (
    BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer, String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from booth_pos.core.database import Base


class TransactionRecord(Base):
    """
    Completed orders - single source of truth for revenue
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    sequence = Column(Integer, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Amounts (integer cents)
    total = Column(BigInteger, nullable=False)
    payment_method = Column(String(10), nullable=False, index=True)
    cash_received = Column(BigInteger)
    change_given = Column(BigInteger)

    items = relationship(
        "LineItemRecord",
        back_populates="transaction",
        order_by="LineItemRecord.position",
    )

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_orders_total_non_negative"),
        CheckConstraint("payment_method IN ('cash', 'card')", name="ck_orders_payment_method"),
        CheckConstraint(
            "(payment_method = 'cash' AND cash_received IS NOT NULL"
            " AND change_given = cash_received - total AND change_given >= 0)"
            " OR (payment_method = 'card' AND cash_received IS NULL AND change_given IS NULL)",
            name="ck_orders_cash_fields",
        ),
    )


class LineItemRecord(Base):
    """
    Order lines with the product snapshot taken at sale time

    product_id is a plain reference, not a foreign key: a line stays valid
    whatever happens to the catalog afterwards.
    """
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    product_id = Column(String(64), nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    unit_price = Column(BigInteger, nullable=False)
    quantity = Column(Integer, nullable=False)
    total = Column(BigInteger, nullable=False)

    transaction = relationship("TransactionRecord", back_populates="items")

    __table_args__ = (
        UniqueConstraint("order_id", "position", name="uq_order_items_position"),
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_order_items_unit_price"),
        CheckConstraint("total = unit_price * quantity", name="ck_order_items_total"),
    )
