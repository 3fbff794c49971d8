"""
Cart API Endpoints
The register's in-progress order and checkout
"""
from fastapi import APIRouter, Depends

from booth_pos.api.deps import (
    get_cart, get_product_repository, get_transaction_repository, http_error,
)
from booth_pos.core.exceptions import NotFound, PosError
from booth_pos.domain.cart import OrderBuilder
from booth_pos.domain.order import CheckoutRequest
from booth_pos.repositories.order_repository import TransactionRepository
from booth_pos.repositories.product_repository import ProductRepository
from booth_pos.services.checkout_service import CheckoutService

router = APIRouter()


def _cart_response(cart: OrderBuilder) -> dict:
    return {"status": "success", "data": cart.to_dict()}


@router.get("/")
async def get_cart_contents(cart: OrderBuilder = Depends(get_cart)):
    """Current lines with live catalog prices and the running total"""
    try:
        return _cart_response(cart)
    except PosError as e:
        raise http_error(e)


@router.post("/items/{product_id}")
async def add_unit(
    product_id: str,
    cart: OrderBuilder = Depends(get_cart),
    products: ProductRepository = Depends(get_product_repository),
):
    """Add one unit of a product (creates the line at quantity 1)"""
    try:
        product = products.find_by_id(product_id)
        if product is None:
            raise NotFound(f"Product not found: {product_id}")
        cart.add_unit(product)
        return _cart_response(cart)
    except PosError as e:
        raise http_error(e)


@router.post("/items/{product_id}/increase")
async def increase_quantity(product_id: str, cart: OrderBuilder = Depends(get_cart)):
    try:
        cart.increase(product_id)
        return _cart_response(cart)
    except PosError as e:
        raise http_error(e)


@router.post("/items/{product_id}/decrease")
async def decrease_quantity(product_id: str, cart: OrderBuilder = Depends(get_cart)):
    """Remove one unit; a line at quantity 1 is removed, unknown lines are ignored"""
    try:
        cart.decrease(product_id)
        return _cart_response(cart)
    except PosError as e:
        raise http_error(e)


@router.delete("/")
async def clear_cart(cart: OrderBuilder = Depends(get_cart)):
    cart.clear()
    return _cart_response(cart)


@router.post("/checkout", status_code=201)
async def checkout(
    payload: CheckoutRequest,
    cart: OrderBuilder = Depends(get_cart),
    transactions: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Commit the cart as a transaction

    On success the cart is emptied. On any error the cart is unchanged
    and can be submitted again.
    """
    try:
        transaction = CheckoutService(transactions).checkout(
            cart, payload.payment_method, payload.cash_received
        )
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": transaction.to_dict()}
