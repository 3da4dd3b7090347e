"""Transaction state core for a cash-stand point-of-sale screen."""

from .errors import (
    errmsg,
    CommandRejectedError,
    UnknownProductError,
    InvalidTenderError,
    InvalidDebtError,
    DebtNotFoundError,
    CorruptPersistedStateError,
)
from .catalog import Product, Catalog, DEFAULT_PRODUCTS, default_catalog, load_catalog
from .state import (
    LineItem,
    SaleLine,
    Sale,
    SaleOrigin,
    Debt,
    DisplayMode,
    SessionSnapshot,
    summarize_items,
)
from .cart import Cart
from .payment import PaymentCalculator, PRESET_AMOUNTS
from .identity import IdGenerator
from .ledger import Ledger
from .persistence import (
    SnapshotStore,
    MemoryStore,
    FileStore,
    PersistenceGateway,
    encode_snapshot,
    decode_snapshot,
)
from .config import Config, load_config, DEFAULT_STORAGE_KEY
from .logs import configure_logging
from .session import Session

__all__ = [
    # Errors
    "errmsg",
    "CommandRejectedError",
    "UnknownProductError",
    "InvalidTenderError",
    "InvalidDebtError",
    "DebtNotFoundError",
    "CorruptPersistedStateError",
    # Catalog
    "Product",
    "Catalog",
    "DEFAULT_PRODUCTS",
    "default_catalog",
    "load_catalog",
    # State
    "LineItem",
    "SaleLine",
    "Sale",
    "SaleOrigin",
    "Debt",
    "DisplayMode",
    "SessionSnapshot",
    "summarize_items",
    # Engines
    "Cart",
    "PaymentCalculator",
    "PRESET_AMOUNTS",
    "IdGenerator",
    "Ledger",
    # Persistence
    "SnapshotStore",
    "MemoryStore",
    "FileStore",
    "PersistenceGateway",
    "encode_snapshot",
    "decode_snapshot",
    # Configuration
    "Config",
    "load_config",
    "DEFAULT_STORAGE_KEY",
    "configure_logging",
    "Session",
]
