"""
Catalog Domain Models

Products and categories as seen by the sales core. The core only reads
id, name and unit_price from a product, at the moment a line is created.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from booth_pos.domain.money import MONEY_MAX

CATEGORY_ID_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"
COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class Category(BaseModel):
    """
    Category domain model

    Fields:
        id: Stable slug (e.g. "boisson-sans-alcool")
        label: Display label
        color: Hex color used by the sales screen
    """

    id: str = Field(..., description="Category slug")
    label: str = Field(..., description="Display label")
    color: str = Field(..., description="Hex color, e.g. #3b82f6")

    model_config = ConfigDict(from_attributes=True)


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Products are never deleted; the management screens only toggle
    `available`. Prices are integer cents.

    Fields:
        id: Opaque stable identifier
        name: Product name
        unit_price: Price per unit in cents
        category_id: Reference to Category.id
        available: Whether the product can be sold right now
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name", min_length=1)
    unit_price: int = Field(..., description="Price per unit in cents", ge=0, le=MONEY_MAX)
    category_id: str = Field(..., description="Category ID")
    available: bool = Field(True, description="Whether product is on sale")

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    unit_price: int = Field(..., ge=0, le=MONEY_MAX)
    category_id: str


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    name: Optional[str] = Field(None, min_length=1)
    unit_price: Optional[int] = Field(None, ge=0, le=MONEY_MAX)
    category_id: Optional[str] = None
    available: Optional[bool] = None


class CategoryCreate(BaseModel):
    """Schema for creating a category; the slug is chosen by the caller"""
    id: str = Field(..., pattern=CATEGORY_ID_PATTERN, max_length=64)
    label: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., pattern=COLOR_PATTERN)


class CategoryUpdate(BaseModel):
    """Schema for updating a category's label or color"""
    label: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
