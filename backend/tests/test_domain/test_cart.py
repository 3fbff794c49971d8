"""
Unit tests for OrderBuilder (the in-memory cart)

These tests need no database: products are plain domain models and the
catalog lookup, where used, is a Mock.
"""
from unittest.mock import Mock

import pytest
from pydantic import ValidationError as ModelValidationError

from booth_pos.core.exceptions import LineTotalExceeded, UnavailableProduct, UnknownProduct
from booth_pos.domain.cart import CartLine, OrderBuilder
from booth_pos.domain.order import CommitLine
from booth_pos.domain.product import Product


def make_product(product_id="a", name="Product A", unit_price=150, available=True) -> Product:
    return Product(
        id=product_id,
        name=name,
        unit_price=unit_price,
        category_id="snack",
        available=available,
    )


class TestOrderBuilder:
    """Test cart mutations"""

    def test_add_unit_creates_line_at_one(self):
        cart = OrderBuilder()
        line = cart.add_unit(make_product())

        assert line == CartLine(product_id="a", quantity=1)
        assert cart.lines == [CartLine(product_id="a", quantity=1)]

    def test_add_unit_twice_increments(self):
        cart = OrderBuilder()
        product = make_product()
        cart.add_unit(product)
        cart.add_unit(product)

        assert cart.quantity_of("a") == 2
        assert len(cart.lines) == 1

    def test_lines_keep_insertion_order(self):
        cart = OrderBuilder()
        cart.add_unit(make_product("b", "B", 200))
        cart.add_unit(make_product("a", "A", 150))
        cart.add_unit(make_product("b", "B", 200))

        assert [line.product_id for line in cart.lines] == ["b", "a"]

    def test_add_unavailable_product_fails(self):
        """Unavailable products are rejected and the cart is untouched"""
        cart = OrderBuilder()
        with pytest.raises(UnavailableProduct):
            cart.add_unit(make_product(available=False))

        assert cart.is_empty

    def test_increase_and_decrease(self):
        cart = OrderBuilder()
        cart.add_unit(make_product())
        cart.increase("a")
        cart.increase("a")
        assert cart.quantity_of("a") == 3

        line = cart.decrease("a")
        assert line == CartLine(product_id="a", quantity=2)

    def test_decrease_at_one_removes_line(self):
        cart = OrderBuilder()
        cart.add_unit(make_product())

        assert cart.decrease("a") is None
        assert cart.lines == []
        assert cart.quantity_of("a") == 0

    def test_decrease_missing_line_is_noop(self):
        cart = OrderBuilder()
        cart.add_unit(make_product())

        assert cart.decrease("missing") is None
        assert cart.lines == [CartLine(product_id="a", quantity=1)]

    def test_increase_missing_line_fails(self):
        cart = OrderBuilder()
        with pytest.raises(UnknownProduct):
            cart.increase("missing")

    def test_clear_is_idempotent(self):
        cart = OrderBuilder()
        cart.add_unit(make_product())
        cart.clear()
        cart.clear()

        assert cart.is_empty
        assert cart.total() == 0

    def test_item_count(self):
        cart = OrderBuilder()
        cart.add_unit(make_product("a"))
        cart.add_unit(make_product("a"))
        cart.add_unit(make_product("b", unit_price=200))

        assert cart.item_count == 3


class TestOrderBuilderTotals:
    """Test totals, the line ceiling and commit snapshots"""

    def test_total_uses_unit_price_times_quantity(self):
        cart = OrderBuilder()
        a = make_product("a", "A", 150)
        b = make_product("b", "B", 200)
        cart.add_unit(a)
        cart.add_unit(a)
        cart.add_unit(b)

        assert cart.total() == 500

    def test_total_follows_current_catalog_price(self):
        """Before commit there is no snapshot: a price change shows up in the total"""
        catalog = Mock()
        catalog.find_by_id.return_value = make_product(unit_price=300)
        cart = OrderBuilder(catalog=catalog)
        cart.add_unit(make_product(unit_price=150))

        assert cart.total() == 300
        catalog.find_by_id.assert_called_with("a")

    def test_total_falls_back_to_added_product_when_catalog_misses(self):
        catalog = Mock()
        catalog.find_by_id.return_value = None
        cart = OrderBuilder(catalog=catalog)
        cart.add_unit(make_product(unit_price=150))

        assert cart.total() == 150

    def test_line_ceiling_rejects_add(self):
        cart = OrderBuilder(max_line_total=300)
        product = make_product(unit_price=150)
        cart.add_unit(product)
        cart.add_unit(product)

        with pytest.raises(LineTotalExceeded) as exc_info:
            cart.add_unit(product)

        assert exc_info.value.line_total == 450
        assert cart.quantity_of("a") == 2

    def test_line_ceiling_rejects_increase_without_mutating(self):
        cart = OrderBuilder(max_line_total=150)
        cart.add_unit(make_product(unit_price=150))

        with pytest.raises(LineTotalExceeded):
            cart.increase("a")

        assert cart.quantity_of("a") == 1

    def test_to_commit_lines_snapshots_name_and_price(self):
        cart = OrderBuilder()
        cart.add_unit(make_product("a", "Crêpe", 250))
        cart.add_unit(make_product("a", "Crêpe", 250))

        assert cart.to_commit_lines() == [
            CommitLine(product_id="a", name="Crêpe", unit_price=250, quantity=2)
        ]

    def test_to_dict(self):
        cart = OrderBuilder()
        cart.add_unit(make_product("a", "A", 150))
        cart.add_unit(make_product("a", "A", 150))

        data = cart.to_dict()

        assert data["total"] == 300
        assert data["item_count"] == 2
        assert data["lines"] == [
            {
                "product_id": "a", "name": "A", "unit_price": 150, "quantity": 2,
                "line_total": 300, "over_ceiling": False,
            }
        ]


class TestOrderBuilderPriceChanges:
    """The line ceiling still holds when the catalog price rises after ringing up"""

    def make_cart(self):
        catalog = Mock()
        catalog.find_by_id.return_value = make_product(unit_price=150)
        cart = OrderBuilder(catalog=catalog, max_line_total=1000)
        for _ in range(5):
            cart.add_unit(make_product(unit_price=150))
        return cart, catalog

    def test_total_rejects_line_over_ceiling(self):
        # Arrange: 5 x 150 is under the ceiling, then the price jumps
        cart, catalog = self.make_cart()
        catalog.find_by_id.return_value = make_product(unit_price=100000)

        # Act / Assert
        with pytest.raises(LineTotalExceeded) as exc_info:
            cart.total()
        assert exc_info.value.line_total == 500000
        assert exc_info.value.ceiling == 1000

    def test_commit_lines_reject_line_over_ceiling(self):
        cart, catalog = self.make_cart()
        catalog.find_by_id.return_value = make_product(unit_price=100000)

        with pytest.raises(LineTotalExceeded):
            cart.to_commit_lines()

        assert cart.quantity_of("a") == 5

    def test_to_dict_flags_line_over_ceiling(self):
        """The cart view still renders so the cashier can reduce the line"""
        cart, catalog = self.make_cart()
        catalog.find_by_id.return_value = make_product(unit_price=100000)

        line = cart.to_dict()["lines"][0]

        assert line["over_ceiling"] is True
        assert line["line_total"] == 500000

    def test_reducing_the_line_clears_the_error(self):
        cart, catalog = self.make_cart()
        catalog.find_by_id.return_value = make_product(unit_price=250)
        with pytest.raises(LineTotalExceeded):
            cart.total()

        cart.decrease("a")

        assert cart.total() == 1000


class TestCartLine:

    def test_quantity_must_be_positive(self):
        with pytest.raises(ModelValidationError):
            CartLine(product_id="a", quantity=0)
