"""
Database models
"""
from .order import TransactionRecord, LineItemRecord
from .product import CategoryRecord, ProductRecord

__all__ = [
    "TransactionRecord",
    "LineItemRecord",
    "CategoryRecord",
    "ProductRecord",
]
