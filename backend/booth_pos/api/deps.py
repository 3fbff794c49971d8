"""
Shared request dependencies and error mapping for the API routers
"""
from fastapi import HTTPException, Request

from booth_pos.core.exceptions import NotFound, PosError, StorageFailure, ValidationError
from booth_pos.domain.cart import OrderBuilder
from booth_pos.repositories.order_repository import TransactionRepository
from booth_pos.repositories.product_repository import ProductRepository


def get_transaction_repository(request: Request) -> TransactionRepository:
    return request.app.state.transactions


def get_product_repository(request: Request) -> ProductRepository:
    return request.app.state.products


def get_cart(request: Request) -> OrderBuilder:
    """The register's single cart, owned by the application instance"""
    return request.app.state.cart


def http_error(error: PosError) -> HTTPException:
    """
    Map a core error to an HTTP error

    - ValidationError -> 400 (user-fixable)
    - NotFound -> 404
    - StorageFailure -> 503 (environment problem; safe to retry)
    """
    if isinstance(error, ValidationError):
        status_code = 400
    elif isinstance(error, NotFound):
        status_code = 404
    elif isinstance(error, StorageFailure):
        status_code = 503
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=error.to_dict())
