"""Ledger: completed sales and open debts, and the transitions between them."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Optional, Union

import structlog

from . import timestamps
from .cart import Cart
from .errors import DebtNotFoundError, InvalidDebtError, InvalidTenderError, errmsg
from .identity import IdGenerator
from .state import ZERO, Debt, Sale, SaleLine, SaleOrigin
from .validation import require_at_least, require_not_blank, require_positive

logger = structlog.get_logger()


class Ledger:
    """Sales (newest first) and open debts (insertion order).

    The ledger snapshots cart lines but never clears the cart; clearing is
    the caller's half of checkout. Session pairs both halves under one lock.
    """

    def __init__(
        self,
        sales: Iterable[Sale] = (),
        debts: Iterable[Debt] = (),
        ids: Optional[IdGenerator] = None,
        clock: Callable[[], datetime] = timestamps.now,
    ) -> None:
        self._sales: list[Sale] = list(sales)
        self._debts: list[Debt] = list(debts)
        self._ids = ids if ids is not None else IdGenerator()
        self._clock = clock

    @property
    def sales(self) -> tuple[Sale, ...]:
        return tuple(self._sales)

    @property
    def debts(self) -> tuple[Debt, ...]:
        return tuple(self._debts)

    def checkout(self, cart: Cart, tendered: Union[Decimal, int, float, str]) -> Sale:
        """Record a direct cash sale for the cart.

        Raises:
            InvalidTenderError: If the cart is empty, tendered is not a
                finite amount or tendered < total.
        """
        tendered = _as_amount(tendered)
        total = cart.total()
        require_positive(total, errmsg.CART_EMPTY, InvalidTenderError)
        require_at_least(tendered, total, errmsg.TENDER_BELOW_TOTAL, InvalidTenderError)

        sale = Sale(
            id=self._ids.new_id(),
            timestamp=self._clock(),
            total=total,
            amount_tendered=tendered,
            change=tendered - total,
            items=tuple(SaleLine.from_line_item(line) for line in cart.lines()),
            origin=SaleOrigin.DIRECT,
        )
        self._sales = [sale, *self._sales]

        logger.info("sale_recorded", sale_id=sale.id, total=str(total), tendered=str(tendered), change=str(sale.change))
        return sale

    def defer_as_debt(self, cart: Cart, customer_name: str) -> Debt:
        """Open a debt for the cart under the customer's name.

        Raises:
            InvalidDebtError: If the cart is empty or the name is blank.
        """
        total = cart.total()
        require_positive(total, errmsg.CART_EMPTY, InvalidDebtError)
        name = require_not_blank(customer_name, errmsg.CUSTOMER_NAME_REQUIRED, InvalidDebtError)

        debt = Debt(
            id=self._ids.new_id(),
            timestamp=self._clock(),
            customer_name=name,
            items=tuple(SaleLine.from_line_item(line) for line in cart.lines()),
            total=total,
        )
        self._debts = [*self._debts, debt]

        logger.info("debt_opened", debt_id=debt.id, customer_name=name, total=str(total))
        return debt

    def settle_debt(self, debt_id: str) -> Sale:
        """Convert an open debt into a paid sale.

        Raises:
            DebtNotFoundError: If no open debt has this id.
        """
        debt = self.find_debt(debt_id)
        if debt is None:
            raise DebtNotFoundError(debt_id)

        sale = Sale(
            id=self._ids.new_id(),
            timestamp=self._clock(),
            total=debt.total,
            amount_tendered=debt.total,
            change=ZERO,
            items=debt.items,
            customer_name=debt.customer_name,
            origin=SaleOrigin.SETTLED_DEBT,
        )
        sales = [sale, *self._sales]
        debts = [d for d in self._debts if d.id != debt_id]
        self._sales, self._debts = sales, debts

        logger.info("debt_settled", debt_id=debt_id, sale_id=sale.id, customer_name=debt.customer_name, total=str(debt.total))
        return sale

    def discard_debt(self, debt_id: str) -> bool:
        """Drop a debt without payment. Returns False if it was already gone."""
        debts = [d for d in self._debts if d.id != debt_id]
        if len(debts) == len(self._debts):
            return False
        self._debts = debts
        logger.info("debt_discarded", debt_id=debt_id)
        return True

    def clear_history(self) -> None:
        logger.info("history_cleared", sales=len(self._sales), debts=len(self._debts))
        self._sales = []
        self._debts = []

    def find_debt(self, debt_id: str) -> Optional[Debt]:
        for debt in self._debts:
            if debt.id == debt_id:
                return debt
        return None

    def total_collected(self) -> Decimal:
        return sum((sale.total for sale in self._sales), ZERO)

    def total_outstanding(self) -> Decimal:
        return sum((debt.total for debt in self._debts), ZERO)

    def sale_count(self) -> int:
        return len(self._sales)

    def debt_count(self) -> int:
        return len(self._debts)


def _as_amount(value: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise InvalidTenderError(f"{errmsg.TENDER_NOT_AN_AMOUNT}: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidTenderError(errmsg.TENDER_NOT_AN_AMOUNT, e) from e
    if not amount.is_finite():
        raise InvalidTenderError(f"{errmsg.TENDER_NOT_AN_AMOUNT}: {value!r}")
    return amount
