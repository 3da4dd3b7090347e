"""Persistence gateway: the whole session as one JSON blob.

Every save overwrites the previous blob in full; there is no incremental
log. Loading is fail-soft: a missing blob, malformed JSON or a wrong root
type yields the default snapshot, and inside a readable blob each field
(cart, displayMode, sales, debts) falls back to its default on its own.
Individual sale or debt records that do not decode are dropped.

Blobs written by the web till use older field names (colorMode, paid,
source, qty, price) and epoch-millisecond timestamps; those are read too.
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from decimal import Decimal, DecimalException, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import structlog

from .config import DEFAULT_STORAGE_KEY
from .errors import CorruptPersistedStateError
from .state import Debt, DisplayMode, Sale, SaleLine, SaleOrigin, SessionSnapshot, items_total
from .timestamps import parse_timestamp, to_rfc3339

logger = structlog.get_logger()

T = TypeVar("T")

LEGACY_ORIGINS = {"debt": SaleOrigin.SETTLED_DEBT}
CENT_TOLERANCE = Decimal("0.005")
# no till amount reaches a quadrillion
MAX_AMOUNT_EXPONENT = 15


class SnapshotStore(ABC):
    """Durable key/value storage for serialized snapshots."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored text, or None if nothing is stored under key."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""


class MemoryStore(SnapshotStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class FileStore(SnapshotStore):
    """One `<key>.json` file per key inside a directory.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=str(self.directory)) as tmp:
            tmp.write(value)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = Path(tmp.name)
        tmp_path.replace(self.path_for(key))


class PersistenceGateway:
    def __init__(self, store: SnapshotStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.store = store
        self.key = key

    def save(self, snapshot: SessionSnapshot) -> None:
        self.store.write(self.key, json.dumps(encode_snapshot(snapshot), ensure_ascii=False))

    def load(self) -> SessionSnapshot:
        """Read the stored snapshot. Never raises; falls back to defaults."""
        try:
            raw = self.store.read(self.key)
        except (OSError, ValueError) as e:
            logger.warning("persisted_state_unreadable", key=self.key, error=str(e))
            return SessionSnapshot()

        if raw is None:
            return SessionSnapshot()

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.warning("persisted_state_corrupt", key=self.key, error=str(e))
            return SessionSnapshot()

        try:
            return decode_snapshot(data)
        except CorruptPersistedStateError as e:
            logger.warning("persisted_state_corrupt", key=self.key, error=str(e))
            return SessionSnapshot()


# Encoding


def encode_snapshot(snapshot: SessionSnapshot) -> dict:
    return {
        "cart": dict(snapshot.cart),
        "displayMode": DisplayMode(snapshot.display_mode).value,
        "sales": [encode_sale(sale) for sale in snapshot.sales],
        "debts": [encode_debt(debt) for debt in snapshot.debts],
    }


def encode_sale(sale: Sale) -> dict:
    data = {
        "id": sale.id,
        "timestamp": to_rfc3339(sale.timestamp),
        "total": str(sale.total),
        "amountTendered": str(sale.amount_tendered),
        "change": str(sale.change),
        "items": [encode_line(item) for item in sale.items],
        "origin": sale.origin.value,
    }
    if sale.customer_name is not None:
        data["customerName"] = sale.customer_name
    return data


def encode_debt(debt: Debt) -> dict:
    return {
        "id": debt.id,
        "timestamp": to_rfc3339(debt.timestamp),
        "customerName": debt.customer_name,
        "items": [encode_line(item) for item in debt.items],
        "total": str(debt.total),
    }


def encode_line(line: SaleLine) -> dict:
    return {
        "id": line.id,
        "name": line.name,
        "quantity": line.quantity,
        "unitPrice": str(line.unit_price),
    }


# Decoding


def decode_snapshot(data: Any) -> SessionSnapshot:
    """Decode a parsed blob field by field.

    Raises:
        CorruptPersistedStateError: Only if the root is not a JSON object.
    """
    if not isinstance(data, dict):
        raise CorruptPersistedStateError(f"snapshot root must be an object, got {type(data).__name__}")

    return SessionSnapshot(
        cart=_field(data, "cart", decode_cart, dict),
        display_mode=_field(data, "displayMode", decode_display_mode, lambda: DisplayMode.DARK, legacy="colorMode"),
        sales=_field(data, "sales", lambda v: _decode_records(v, decode_sale, "sale"), list),
        debts=_field(data, "debts", lambda v: _decode_records(v, decode_debt, "debt"), list),
    )


def _field(
    data: dict,
    name: str,
    decode: Callable[[Any], T],
    default: Callable[[], T],
    legacy: Optional[str] = None,
) -> T:
    if name in data:
        value = data[name]
    elif legacy is not None and legacy in data:
        value = data[legacy]
    else:
        return default()
    try:
        return decode(value)
    except CorruptPersistedStateError as e:
        logger.warning("persisted_field_reset", field=name, error=str(e))
        return default()


def _decode_records(value: Any, decode: Callable[[Any], T], kind: str) -> list[T]:
    if not isinstance(value, list):
        raise CorruptPersistedStateError(f"{kind} history must be a list")
    records = []
    for raw in value:
        try:
            records.append(decode(raw))
        except CorruptPersistedStateError as e:
            logger.warning("persisted_record_dropped", kind=kind, error=str(e))
    return records


def decode_cart(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        raise CorruptPersistedStateError("cart must be an object")
    cart = {}
    for product_id, quantity in value.items():
        if isinstance(quantity, float) and quantity.is_integer():
            quantity = int(quantity)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            logger.warning("persisted_cart_entry_dropped", product_id=product_id)
            continue
        cart[product_id] = quantity
    return cart


def decode_display_mode(value: Any) -> DisplayMode:
    try:
        return DisplayMode(value)
    except ValueError as e:
        raise CorruptPersistedStateError(f"unknown display mode: {value!r}") from e


def decode_sale(value: Any) -> Sale:
    data = _require_object(value, "sale")
    items = decode_lines(data.get("items"))
    total = decode_money(data.get("total"), "total")
    tendered = decode_money(_first(data, "amountTendered", "paid"), "amountTendered")
    change = decode_money(data.get("change"), "change")
    origin = decode_origin(_first(data, "origin", "source"))

    if not _same_amount(total, _lines_total(items)):
        raise CorruptPersistedStateError("sale total does not match its items")
    if not _same_amount(change, _difference(tendered, total)):
        raise CorruptPersistedStateError("sale change does not match tendered amount")
    if origin == SaleOrigin.SETTLED_DEBT and change != 0:
        raise CorruptPersistedStateError("settled debt cannot carry change")

    customer_name = data.get("customerName")
    if customer_name is not None and not isinstance(customer_name, str):
        raise CorruptPersistedStateError("customerName must be a string")

    return Sale(
        id=_require_id(data),
        timestamp=parse_timestamp(data.get("timestamp")),
        total=total,
        amount_tendered=tendered,
        change=change,
        items=items,
        customer_name=customer_name,
        origin=origin,
    )


def decode_debt(value: Any) -> Debt:
    data = _require_object(value, "debt")
    items = decode_lines(data.get("items"))
    total = decode_money(data.get("total"), "total")

    if total <= 0 or not _same_amount(total, _lines_total(items)):
        raise CorruptPersistedStateError("debt total does not match its items")

    customer_name = data.get("customerName")
    if not isinstance(customer_name, str) or not customer_name.strip():
        raise CorruptPersistedStateError("debt has no customer name")

    return Debt(
        id=_require_id(data),
        timestamp=parse_timestamp(data.get("timestamp")),
        customer_name=customer_name.strip(),
        items=items,
        total=total,
    )


def decode_lines(value: Any) -> tuple[SaleLine, ...]:
    if not isinstance(value, list):
        raise CorruptPersistedStateError("items must be a list")
    return tuple(decode_line(item) for item in value)


def decode_line(value: Any) -> SaleLine:
    data = _require_object(value, "item")
    quantity = _first(data, "quantity", "qty")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise CorruptPersistedStateError(f"invalid item quantity: {quantity!r}")
    name = data.get("name")
    if not isinstance(name, str):
        raise CorruptPersistedStateError("item name must be a string")
    return SaleLine(
        id=_require_id(data),
        name=name,
        quantity=quantity,
        unit_price=decode_money(_first(data, "unitPrice", "price"), "unitPrice"),
    )


def decode_money(value: Any, name: str) -> Decimal:
    """Read a non-negative amount stored as a decimal string or a JSON number."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise CorruptPersistedStateError(f"{name} must be an amount, got {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise CorruptPersistedStateError(f"{name} is not a number", e) from e
    if not amount.is_finite() or amount < 0:
        raise CorruptPersistedStateError(f"{name} must be a finite, non-negative amount")
    if amount and amount.adjusted() >= MAX_AMOUNT_EXPONENT:
        raise CorruptPersistedStateError(f"{name} is out of range: {value!r}")
    return amount


def decode_origin(value: Any) -> SaleOrigin:
    if value is None:
        return SaleOrigin.DIRECT
    if isinstance(value, str) and value in LEGACY_ORIGINS:
        return LEGACY_ORIGINS[value]
    try:
        return SaleOrigin(value)
    except ValueError as e:
        raise CorruptPersistedStateError(f"unknown sale origin: {value!r}") from e


def _require_object(value: Any, kind: str) -> dict:
    if not isinstance(value, dict):
        raise CorruptPersistedStateError(f"{kind} must be an object")
    return value


def _require_id(data: dict) -> str:
    record_id = data.get("id")
    if not isinstance(record_id, str) or not record_id:
        raise CorruptPersistedStateError("record id must be a non-empty string")
    return record_id


def _first(data: dict, name: str, legacy: str) -> Any:
    return data[name] if name in data else data.get(legacy)


def _lines_total(items: tuple[SaleLine, ...]) -> Decimal:
    try:
        return items_total(items)
    except DecimalException as e:
        raise CorruptPersistedStateError("item amounts out of range", e) from e


def _difference(a: Decimal, b: Decimal) -> Decimal:
    try:
        return a - b
    except DecimalException as e:
        raise CorruptPersistedStateError("amounts out of range", e) from e


def _same_amount(a: Decimal, b: Decimal) -> bool:
    # web till blobs hold binary floats, so compare to the cent
    return abs(a - b) < CENT_TOLERANCE
