"""
Checkout Service
Turns the register's cart into a stored transaction
"""
import logging
from typing import Optional, Union

from booth_pos.core.exceptions import ValidationError
from booth_pos.domain.cart import OrderBuilder
from booth_pos.domain.order import PaymentMethod, Transaction
from booth_pos.repositories.order_repository import TransactionRepository

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Commits a cart and clears it only once the commit has succeeded

    If validation or storage fails the cart is left exactly as it was, so
    the cashier can fix the problem (or retry) without ringing the order
    up again.
    """

    def __init__(self, repository: Optional[TransactionRepository] = None):
        self.repository = repository or TransactionRepository()

    def checkout(
        self,
        cart: OrderBuilder,
        payment_method: Union[PaymentMethod, str],
        cash_received: Optional[int] = None,
    ) -> Transaction:
        # Holding the cart lock makes a double-tapped checkout commit once;
        # the second call finds an empty cart and fails with EmptyOrder
        with cart.lock:
            try:
                transaction = self.repository.commit(
                    cart.to_commit_lines(), payment_method, cash_received
                )
            except ValidationError as e:
                logger.info(f"Checkout rejected ({e.code}): {e.message}")
                raise

            cart.clear()

        return transaction
