"""pytest-bdd shared steps and fixtures for till scenarios."""

from decimal import Decimal

import pytest
from pytest_bdd import given, parsers, then, when

from tpv_core.persistence import MemoryStore, PersistenceGateway
from tpv_core.session import Session

from ..conftest import SequentialIds, fixed_clock


class TillContext:
    """Scenario state shared between steps."""

    def __init__(self) -> None:
        self.store = MemoryStore()
        self.session = self.open_session()
        self.result = None
        self.error = None
        self.last_debt_id = None

    def open_session(self) -> Session:
        return Session(PersistenceGateway(self.store), ids=SequentialIds(), clock=fixed_clock)


@pytest.fixture
def till():
    return TillContext()


@given("an empty till")
def empty_till(till):
    assert till.session.cart_lines() == []


def add_products(till, product_id, quantity):
    for _ in range(quantity):
        till.session.add_to_cart(product_id)


@given(parsers.parse('the cart holds {quantity:d} "{product_id:w}"'))
def cart_holds_one_product(till, quantity, product_id):
    add_products(till, product_id, quantity)


@given(parsers.parse('the cart holds {first_qty:d} "{first:w}" and {second_qty:d} "{second:w}"'))
def cart_holds_two_products(till, first_qty, first, second_qty, second):
    add_products(till, first, first_qty)
    add_products(till, second, second_qty)


@when("the till restarts")
def till_restarts(till):
    till.session = till.open_session()


@then(parsers.parse('the cart total is "{amount}"'))
def cart_total_is(till, amount):
    assert till.session.cart_total() == Decimal(amount)


@then("the cart is empty")
def cart_is_empty(till):
    assert till.session.cart_lines() == []
    assert till.session.cart_total() == 0


@then("no sale is recorded")
def no_sale(till):
    assert till.session.sales == ()


@then("no debts are open")
def no_debts(till):
    assert till.session.debts == ()
