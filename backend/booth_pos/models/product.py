"""
Catalog tables
"""
from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, ForeignKey, String
from sqlalchemy.orm import relationship

from booth_pos.core.database import Base


class CategoryRecord(Base):
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    label = Column(String(100), nullable=False)
    color = Column(String(20), nullable=False)

    products = relationship("ProductRecord", back_populates="category")


class ProductRecord(Base):
    """
    Products on the sales screen (prices in cents)
    """
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    unit_price = Column(BigInteger, nullable=False)
    category_id = Column(String(64), ForeignKey("categories.id"), nullable=False, index=True)
    available = Column(Boolean, nullable=False, default=True)

    category = relationship("CategoryRecord", back_populates="products")

    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_products_unit_price"),
    )
