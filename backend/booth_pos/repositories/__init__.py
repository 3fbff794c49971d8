"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from booth_pos.repositories.order_repository import TransactionRepository
from booth_pos.repositories.product_repository import ProductRepository

__all__ = [
    'TransactionRepository',
    'ProductRepository',
]
