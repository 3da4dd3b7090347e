"""Cart engine: the operator's uncommitted set of products and quantities."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator, Mapping

import structlog

from .catalog import Catalog
from .errors import UnknownProductError
from .state import ZERO, LineItem

logger = structlog.get_logger()


class Cart:
    """Mapping of product id to a positive quantity.

    No operation ever leaves a quantity of zero or below stored; such
    entries are removed instead.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._quantities: dict[str, int] = {}

    @classmethod
    def restore(cls, catalog: Catalog, quantities: Mapping[str, object]) -> Cart:
        """Rebuild a cart from persisted quantities, dropping invalid entries."""
        cart = cls(catalog)
        for product_id, quantity in quantities.items():
            if product_id not in catalog:
                logger.warning("cart_entry_dropped", product_id=product_id, reason="unknown_product")
                continue
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                logger.warning("cart_entry_dropped", product_id=product_id, reason="invalid_quantity")
                continue
            cart._quantities[product_id] = quantity
        return cart

    def add(self, product_id: str) -> None:
        if product_id not in self.catalog:
            raise UnknownProductError(product_id)
        self._quantities[product_id] = self._quantities.get(product_id, 0) + 1

    def decrement(self, product_id: str) -> None:
        remaining = self._quantities.get(product_id, 0) - 1
        if remaining <= 0:
            self._quantities.pop(product_id, None)
        else:
            self._quantities[product_id] = remaining

    def remove(self, product_id: str) -> None:
        self._quantities.pop(product_id, None)

    def clear(self) -> None:
        self._quantities.clear()

    def lines(self) -> Iterator[LineItem]:
        """Yield line items in catalog order."""
        for product in self.catalog:
            quantity = self._quantities.get(product.id, 0)
            if quantity > 0:
                yield LineItem(
                    product_id=product.id,
                    name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                )

    def total(self) -> Decimal:
        return sum((line.line_total for line in self.lines()), ZERO)

    def quantities(self) -> dict[str, int]:
        return dict(self._quantities)

    def quantity_of(self, product_id: str) -> int:
        return self._quantities.get(product_id, 0)

    def item_count(self) -> int:
        return sum(self._quantities.values())

    def is_empty(self) -> bool:
        return not self._quantities
