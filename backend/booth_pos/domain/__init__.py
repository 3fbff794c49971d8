"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities,
the money helpers and the in-memory cart.
"""
from booth_pos.domain.product import Product, Category
from booth_pos.domain.order import PaymentMethod, CommitLine, LineItem, Transaction
from booth_pos.domain.cart import OrderBuilder, CartLine
from booth_pos.domain.summary import DashboardSummary, PaymentMethodSummary, ProductSalesSummary

__all__ = [
    'Product', 'Category',
    'PaymentMethod', 'CommitLine', 'LineItem', 'Transaction',
    'OrderBuilder', 'CartLine',
    'DashboardSummary', 'PaymentMethodSummary', 'ProductSalesSummary',
]
