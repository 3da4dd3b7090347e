"""Checkout scenarios."""

from decimal import Decimal

from pytest_bdd import parsers, scenarios, then, when

from tpv_core.errors import InvalidTenderError
from tpv_core.state import SaleOrigin

scenarios("../../features/checkout.feature")


@when(parsers.parse('the operator types "{keys}" on the keypad'))
def types_on_keypad(till, keys):
    till.session.open_payment()
    for key in keys:
        till.session.payment.append_key(key)


@when(parsers.parse('the operator taps the "{amount}" preset'))
def taps_preset(till, amount):
    till.session.payment.set_preset(Decimal(amount))


@when("the operator confirms the payment")
def confirms_payment(till):
    try:
        till.result = till.session.checkout()
    except InvalidTenderError as e:
        till.error = e


@then(parsers.parse('the change shown is "{amount}"'))
def change_shown(till, amount):
    assert till.session.payment.display_change(till.session.cart_total()) == Decimal(amount)


@then(parsers.parse('the missing amount shown is "{amount}"'))
def missing_shown(till, amount):
    assert till.session.payment.shortfall(till.session.cart_total()) == Decimal(amount)


@then(parsers.parse('a direct sale is recorded with total "{total}", paid "{paid}" and change "{change}"'))
def direct_sale_recorded(till, total, paid, change):
    sale = till.session.sales[0]
    assert sale is till.result
    assert sale.origin == SaleOrigin.DIRECT
    assert sale.total == Decimal(total)
    assert sale.amount_tendered == Decimal(paid)
    assert sale.change == Decimal(change)


@then("the payment is refused")
def payment_refused(till):
    assert isinstance(till.error, InvalidTenderError)
    assert till.result is None


@then(parsers.parse('the session history holds {count:d} sale totalling "{amount}"'))
def history_holds(till, count, amount):
    assert len(till.session.sales) == count
    assert till.session.total_collected() == Decimal(amount)
