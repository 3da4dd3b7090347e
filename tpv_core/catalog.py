"""Product catalog: the fixed, ordered list of sellable items."""

import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Iterator, Optional


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal


DEFAULT_PRODUCTS = (
    Product("cerveza", "Cerveza", Decimal("2")),
    Product("tinto", "Tinto", Decimal("2")),
    Product("refresco", "Refresco", Decimal("1.5")),
    Product("cubata", "Cubata", Decimal("5")),
    Product("plus", "+ Extra", Decimal("1")),
    Product("chupito", "Chupito", Decimal("1.5")),
    Product("chupito_premium", "Chupito premium", Decimal("2")),
    Product("agua_15", "Botella de agua 1,5L", Decimal("1.5")),
)


class Catalog:
    """Read-only, ordered product lookup.

    Iteration follows the order the products were supplied in, which is
    also the order cart lines are derived in.
    """

    def __init__(self, products: Iterable[Product]):
        self._products: dict[str, Product] = {}
        for product in products:
            if not product.id:
                raise ValueError("Product id is required")
            if product.id in self._products:
                raise ValueError(f"Duplicate product id: {product.id}")
            if product.price < 0:
                raise ValueError(f"Product price cannot be negative: {product.id}")
            self._products[product.id] = product

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def ids(self) -> list[str]:
        return list(self._products)


def default_catalog() -> Catalog:
    return Catalog(DEFAULT_PRODUCTS)


def load_catalog(path: Path) -> Catalog:
    """Load a catalog from a JSON list of {id, name, price} objects.

    Raises:
        ValueError: If the file is not a list of well-formed products.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Catalog file must contain a JSON list")

    products = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Catalog entry must be an object: {entry!r}")
        try:
            price = Decimal(str(entry["price"]))
        except (KeyError, InvalidOperation) as e:
            raise ValueError(f"Catalog entry has no valid price: {entry!r}") from e
        if not price.is_finite():
            raise ValueError(f"Catalog entry has no valid price: {entry!r}")
        products.append(Product(id=str(entry.get("id", "")), name=str(entry.get("name", "")), price=price))
    return Catalog(products)
