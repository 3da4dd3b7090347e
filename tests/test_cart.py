"""Tests for the cart engine."""

import random
from decimal import Decimal

import pytest

from tpv_core.cart import Cart
from tpv_core.errors import UnknownProductError


@pytest.fixture
def cart(catalog):
    return Cart(catalog)


class TestAdd:
    """Tests for Cart.add."""

    def test_creates_entry_at_one(self, cart):
        """Adding a new product creates a line with quantity one."""
        cart.add("cerveza")
        assert cart.quantities() == {"cerveza": 1}

    def test_increments(self, cart):
        """Adding the same product again increments its quantity."""
        cart.add("cerveza")
        cart.add("cerveza")
        assert cart.quantity_of("cerveza") == 2

    def test_rejects_unknown_product(self, cart):
        """Adding a product missing from the catalog raises UnknownProductError."""
        with pytest.raises(UnknownProductError):
            cart.add("whisky")
        assert cart.is_empty()


class TestDecrement:
    """Tests for Cart.decrement."""

    def test_decrements(self, cart):
        """Decrementing lowers the quantity by one."""
        cart.add("tinto")
        cart.add("tinto")
        cart.decrement("tinto")
        assert cart.quantity_of("tinto") == 1

    def test_removes_entry_at_zero(self, cart):
        """Decrementing the last unit removes the line."""
        cart.add("tinto")
        cart.decrement("tinto")
        assert "tinto" not in cart.quantities()

    def test_absent_is_noop(self, cart):
        """Decrementing a product not in the cart changes nothing."""
        cart.decrement("tinto")
        assert cart.is_empty()


class TestRemoveAndClear:
    """Tests for Cart.remove and Cart.clear."""

    def test_remove_regardless_of_quantity(self, cart):
        """Removing drops the whole line whatever its quantity."""
        for _ in range(5):
            cart.add("chupito")
        cart.add("tinto")
        cart.remove("chupito")
        assert cart.quantities() == {"tinto": 1}

    def test_remove_absent_is_noop(self, cart):
        """Removing a product not in the cart changes nothing."""
        cart.remove("chupito")
        assert cart.is_empty()

    def test_clear(self, cart):
        """Clearing empties the cart."""
        cart.add("chupito")
        cart.add("tinto")
        cart.clear()
        assert cart.is_empty()
        assert cart.total() == 0


class TestLines:
    """Tests for derived line items and totals."""

    def test_catalog_order_not_tap_order(self, cart):
        """Lines follow catalog order, not the order products were tapped."""
        cart.add("agua_15")
        cart.add("cerveza")
        cart.add("cubata")
        assert [line.product_id for line in cart.lines()] == ["cerveza", "cubata", "agua_15"]

    def test_line_values(self, cart):
        """Lines carry name, quantity, unit price and line total."""
        cart.add("refresco")
        cart.add("refresco")
        (line,) = cart.lines()
        assert line.name == "Refresco"
        assert line.quantity == 2
        assert line.unit_price == Decimal("1.5")
        assert line.line_total == Decimal("3.0")

    def test_total(self, cart):
        """Total is the sum of quantity times price."""
        cart.add("cerveza")
        cart.add("cerveza")
        cart.add("tinto")
        assert cart.total() == Decimal("6")
        assert cart.item_count() == 3

    def test_empty_total_is_zero(self, cart):
        """An empty cart totals zero."""
        assert cart.total() == Decimal("0")
        assert list(cart.lines()) == []


class TestRestore:
    """Tests for Cart.restore."""

    def test_keeps_valid_entries(self, catalog):
        """Valid persisted entries are restored as-is."""
        cart = Cart.restore(catalog, {"cerveza": 2, "tinto": 1})
        assert cart.quantities() == {"cerveza": 2, "tinto": 1}

    def test_drops_unknown_and_invalid(self, catalog):
        """Unknown products and bad quantities are dropped on restore."""
        cart = Cart.restore(catalog, {"whisky": 1, "cerveza": 0, "tinto": -2, "cubata": "3", "plus": True, "chupito": 2})
        assert cart.quantities() == {"chupito": 2}


@pytest.mark.parametrize("seed", range(20))
def test_random_operations_keep_quantities_positive_and_total_consistent(catalog, seed):
    """Random add/decrement/remove sequences never store a non-positive quantity."""
    rng = random.Random(seed)
    cart = Cart(catalog)
    product_ids = catalog.ids()

    for _ in range(200):
        product_id = rng.choice(product_ids)
        op = rng.choices(["add", "decrement", "remove"], weights=[5, 4, 1])[0]
        getattr(cart, op)(product_id)

        assert all(quantity > 0 for quantity in cart.quantities().values())
        assert all(product_id in catalog for product_id in cart.quantities())
        expected = sum(
            (catalog.get(pid).price * quantity for pid, quantity in cart.quantities().items()),
            Decimal("0"),
        )
        assert cart.total() == expected
        assert cart.total() >= 0
