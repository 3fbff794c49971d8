"""
Order Builder - the in-progress cart

Purely in-memory. Nothing here is persisted; a cart becomes durable only
when it is passed to TransactionRepository.commit (see CheckoutService).
"""
import threading
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from booth_pos.core.config import settings
from booth_pos.core.exceptions import LineTotalExceeded, UnavailableProduct, UnknownProduct
from booth_pos.domain.money import Money, multiply, sum_money
from booth_pos.domain.order import CommitLine
from booth_pos.domain.product import Product


class CatalogLookup(Protocol):
    def find_by_id(self, product_id: str) -> Optional[Product]:
        ...


class CartLine(BaseModel):
    """A cart entry: product reference and a quantity of at least 1"""

    product_id: str
    quantity: int = Field(..., ge=1)

    model_config = ConfigDict(frozen=True)


class OrderBuilder:
    """
    Insertion-ordered mapping of product id -> quantity

    Prices are not frozen in the cart: total() and to_commit_lines() use
    the current catalog price. When a catalog lookup is given it is the
    source of truth; otherwise the product last passed to add_unit is used.

    Every mutation validates first and only then changes state, so a
    rejected operation leaves the cart exactly as it was.
    """

    def __init__(self, catalog: Optional[CatalogLookup] = None, max_line_total: Optional[Money] = None):
        self._catalog = catalog
        self._max_line_total = (
            settings.MAX_LINE_TOTAL_CENTS if max_line_total is None else max_line_total
        )
        self._quantities: Dict[str, int] = {}
        self._products: Dict[str, Product] = {}
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_unit(self, product: Product) -> CartLine:
        """Add one unit of product, creating the line at quantity 1"""
        if not product.available:
            raise UnavailableProduct(product.id)

        with self.lock:
            quantity = self._quantities.get(product.id, 0) + 1
            self._check_line(product, quantity)
            self._products[product.id] = product
            self._quantities[product.id] = quantity
            return CartLine(product_id=product.id, quantity=quantity)

    def increase(self, product_id: str) -> CartLine:
        with self.lock:
            if product_id not in self._quantities:
                raise UnknownProduct(product_id)
            quantity = self._quantities[product_id] + 1
            self._check_line(self._current_product(product_id), quantity)
            self._quantities[product_id] = quantity
            return CartLine(product_id=product_id, quantity=quantity)

    def decrease(self, product_id: str) -> Optional[CartLine]:
        """
        Remove one unit; the line disappears when it reaches zero

        Returns the updated line, or None when the line was removed or
        was never in the cart.
        """
        with self.lock:
            quantity = self._quantities.get(product_id)
            if quantity is None:
                return None
            if quantity <= 1:
                del self._quantities[product_id]
                self._products.pop(product_id, None)
                return None
            self._quantities[product_id] = quantity - 1
            return CartLine(product_id=product_id, quantity=quantity - 1)

    def clear(self) -> None:
        with self.lock:
            self._quantities.clear()
            self._products.clear()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def lines(self) -> List[CartLine]:
        with self.lock:
            return [
                CartLine(product_id=product_id, quantity=quantity)
                for product_id, quantity in self._quantities.items()
            ]

    @property
    def is_empty(self) -> bool:
        return not self._quantities

    @property
    def item_count(self) -> int:
        """Total number of units in the cart"""
        with self.lock:
            return sum(self._quantities.values())

    def quantity_of(self, product_id: str) -> int:
        return self._quantities.get(product_id, 0)

    def total(self) -> Money:
        """
        Sum of current unit price * quantity over all lines

        Raises LineTotalExceeded when a catalog price change has pushed a
        line past the ceiling since it was rung up.
        """
        with self.lock:
            return sum_money(
                self._check_line(self._current_product(product_id), quantity)
                for product_id, quantity in self._quantities.items()
            )

    def to_commit_lines(self) -> List[CommitLine]:
        """Snapshot the current name and price of every line for a commit"""
        with self.lock:
            commit_lines = []
            for product_id, quantity in self._quantities.items():
                product = self._current_product(product_id)
                self._check_line(product, quantity)
                commit_lines.append(CommitLine(
                    product_id=product_id,
                    name=product.name,
                    unit_price=product.unit_price,
                    quantity=quantity,
                ))
            return commit_lines

    def to_dict(self) -> dict:
        """
        Cart view for the register screen

        Never raises on the line ceiling: a line pushed over it by a price
        change is flagged with over_ceiling so it can be reduced.
        """
        with self.lock:
            lines = []
            for product_id, quantity in self._quantities.items():
                product = self._current_product(product_id)
                line_total = multiply(product.unit_price, quantity)
                lines.append({
                    "product_id": product_id,
                    "name": product.name,
                    "unit_price": product.unit_price,
                    "quantity": quantity,
                    "line_total": line_total,
                    "over_ceiling": line_total > self._max_line_total,
                })
            return {
                "lines": lines,
                "item_count": self.item_count,
                "total": sum_money(line["line_total"] for line in lines),
            }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _current_product(self, product_id: str) -> Product:
        if self._catalog is not None:
            product = self._catalog.find_by_id(product_id)
            if product is not None:
                return product
        try:
            return self._products[product_id]
        except KeyError:
            raise UnknownProduct(product_id) from None

    def _check_line(self, product: Product, quantity: int) -> Money:
        """Return the line total, or raise if it is above the ceiling"""
        line_total = multiply(product.unit_price, quantity)
        if line_total > self._max_line_total:
            raise LineTotalExceeded(product.id, line_total, self._max_line_total)
        return line_total
