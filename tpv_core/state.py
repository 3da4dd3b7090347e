"""Session value types: line items, sales, debts and the persisted snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

ZERO = Decimal("0")

SUMMARY_LIMIT = 60


class SaleOrigin(str, Enum):
    DIRECT = "direct"
    SETTLED_DEBT = "settled-debt"


class DisplayMode(str, Enum):
    DARK = "dark"
    COLOR = "color"


@dataclass(frozen=True)
class LineItem:
    """Cart entry joined with its catalog price. Derived, never stored."""

    product_id: str
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class SaleLine:
    """Frozen copy of a line at the moment of sale, independent of the catalog."""

    id: str
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    @classmethod
    def from_line_item(cls, line: LineItem) -> "SaleLine":
        return cls(id=line.product_id, name=line.name, quantity=line.quantity, unit_price=line.unit_price)


def items_total(items: Iterable[SaleLine]) -> Decimal:
    return sum((item.line_total for item in items), ZERO)


@dataclass(frozen=True)
class Sale:
    id: str
    timestamp: datetime
    total: Decimal
    amount_tendered: Decimal
    change: Decimal
    items: tuple[SaleLine, ...]
    customer_name: Optional[str] = None
    origin: SaleOrigin = SaleOrigin.DIRECT

    @property
    def is_settled_debt(self) -> bool:
        return self.origin == SaleOrigin.SETTLED_DEBT


@dataclass(frozen=True)
class Debt:
    id: str
    timestamp: datetime
    customer_name: str
    items: tuple[SaleLine, ...]
    total: Decimal


@dataclass
class SessionSnapshot:
    """Everything that survives a restart, written and read as one blob."""

    cart: dict[str, int] = field(default_factory=dict)
    display_mode: DisplayMode = DisplayMode.DARK
    sales: list[Sale] = field(default_factory=list)
    debts: list[Debt] = field(default_factory=list)


def summarize_items(items: Iterable[SaleLine], limit: int = SUMMARY_LIMIT) -> str:
    """One-line summary such as "2×Cerveza, 1×Tinto", cut to `limit` chars."""
    joined = ", ".join(f"{item.quantity}×{item.name}" for item in items)
    if len(joined) <= limit:
        return joined
    return joined[: limit - 3] + "…"
