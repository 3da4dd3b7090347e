"""Till session: the single owner of cart, payment buffer and ledger.

The presentation layer talks only to a Session. Every mutation runs under
one re-entrant lock and writes the full snapshot before the lock is
released, so the stored blob always reflects the last observable state and
no caller can see a ledger entry whose cart has not been cleared yet.
"""

from __future__ import annotations

import threading
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Union

import structlog

from . import timestamps
from .cart import Cart
from .catalog import Catalog, default_catalog, load_catalog
from .config import Config
from .errors import DebtNotFoundError, errmsg
from .identity import IdGenerator
from .ledger import Ledger
from .payment import PaymentCalculator
from .persistence import FileStore, PersistenceGateway
from .state import Debt, DisplayMode, LineItem, Sale, SessionSnapshot

logger = structlog.get_logger()


class Session:
    def __init__(
        self,
        gateway: PersistenceGateway,
        catalog: Optional[Catalog] = None,
        ids: Optional[IdGenerator] = None,
        clock: Callable[[], datetime] = timestamps.now,
    ) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.gateway = gateway
        self.payment = PaymentCalculator()
        self._lock = threading.RLock()

        snapshot = gateway.load()
        self.cart = Cart.restore(self.catalog, snapshot.cart)
        self.ledger = Ledger(snapshot.sales, snapshot.debts, ids=ids, clock=clock)
        self._display_mode = DisplayMode(snapshot.display_mode)

        logger.info(
            "session_restored",
            cart_items=self.cart.item_count(),
            sales=self.ledger.sale_count(),
            debts=self.ledger.debt_count(),
        )

    @classmethod
    def from_config(cls, config: Config) -> Session:
        catalog = load_catalog(config.catalog_path) if config.catalog_path else default_catalog()
        gateway = PersistenceGateway(FileStore(config.state_dir), key=config.storage_key)
        return cls(gateway, catalog=catalog, ids=IdGenerator(prefer_strong=config.strong_ids))

    # Cart

    def add_to_cart(self, product_id: str) -> None:
        with self._lock:
            self.cart.add(product_id)
            self._persist()

    def decrement_in_cart(self, product_id: str) -> None:
        with self._lock:
            self.cart.decrement(product_id)
            self._persist()

    def remove_from_cart(self, product_id: str) -> None:
        with self._lock:
            self.cart.remove(product_id)
            self._persist()

    def clear_cart(self) -> None:
        with self._lock:
            self.cart.clear()
            self._persist()

    def cart_lines(self) -> list[LineItem]:
        with self._lock:
            return list(self.cart.lines())

    def cart_total(self) -> Decimal:
        with self._lock:
            return self.cart.total()

    # Payment

    def open_payment(self) -> bool:
        """Reset the keypad buffer for a new checkout.

        Returns False when the cart has nothing to charge.
        """
        with self._lock:
            self.payment.reset()
            return self.cart.total() > 0

    def checkout(self, tendered: Optional[Union[Decimal, int, float, str]] = None) -> Sale:
        """Record a cash sale and clear the cart in one step.

        Args:
            tendered: Cash handed over; defaults to the keypad amount.

        Raises:
            InvalidTenderError: Nothing to charge, tendered is not an amount
                or not enough tendered.
                Cart and ledger are left unchanged.
        """
        with self._lock:
            if tendered is None:
                tendered = self.payment.parsed_amount()
            sale = self.ledger.checkout(self.cart, tendered)
            self.cart.clear()
            self.payment.reset()
            self._persist()
            return sale

    checkout_and_clear = checkout

    def defer_as_debt(self, customer_name: str) -> Debt:
        """Open a debt for the cart and clear the cart in one step.

        Raises:
            InvalidDebtError: Empty cart or blank customer name.
        """
        with self._lock:
            debt = self.ledger.defer_as_debt(self.cart, customer_name)
            self.cart.clear()
            self._persist()
            return debt

    defer_and_clear = defer_as_debt

    # Debts and history

    def settle_debt(self, debt_id: str) -> Optional[Sale]:
        """Turn an open debt into a sale. Returns None if the id is stale."""
        with self._lock:
            try:
                sale = self.ledger.settle_debt(debt_id)
            except DebtNotFoundError as e:
                logger.info("debt_settle_skipped", debt_id=debt_id, reason=str(e))
                return None
            self._persist()
            return sale

    def discard_debt(self, debt_id: str) -> None:
        with self._lock:
            if self.ledger.discard_debt(debt_id):
                self._persist()

    def clear_history(self) -> None:
        with self._lock:
            self.ledger.clear_history()
            self._persist()

    @property
    def sales(self) -> tuple[Sale, ...]:
        return self.ledger.sales

    @property
    def debts(self) -> tuple[Debt, ...]:
        return self.ledger.debts

    def total_collected(self) -> Decimal:
        with self._lock:
            return self.ledger.total_collected()

    def total_outstanding(self) -> Decimal:
        with self._lock:
            return self.ledger.total_outstanding()

    # Display mode

    @property
    def display_mode(self) -> DisplayMode:
        return self._display_mode

    def set_display_mode(self, mode: Union[DisplayMode, str]) -> None:
        """Raises ValueError for modes other than "dark" and "color"."""
        try:
            mode = DisplayMode(mode)
        except ValueError as e:
            raise ValueError(f"{errmsg.UNKNOWN_DISPLAY_MODE}: {mode!r}") from e
        with self._lock:
            self._display_mode = mode
            self._persist()

    def toggle_display_mode(self) -> DisplayMode:
        with self._lock:
            if self._display_mode == DisplayMode.DARK:
                self.set_display_mode(DisplayMode.COLOR)
            else:
                self.set_display_mode(DisplayMode.DARK)
            return self._display_mode

    # Persistence

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                cart=self.cart.quantities(),
                display_mode=self._display_mode,
                sales=list(self.ledger.sales),
                debts=list(self.ledger.debts),
            )

    def _persist(self) -> None:
        try:
            self.gateway.save(self.snapshot())
        except OSError as e:
            # In-memory state stays authoritative; the next mutation retries the write.
            logger.error("session_persist_failed", key=self.gateway.key, error=str(e))
