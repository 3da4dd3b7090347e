"""Error types and error message constants for the till core."""

from typing import Optional


class errmsg:
    """Error message constants for cart, payment and ledger commands."""

    UNKNOWN_PRODUCT = "Product is not in the catalog"
    CART_EMPTY = "Cart is empty"
    TENDER_BELOW_TOTAL = "Amount tendered is below the cart total"
    TENDER_NOT_AN_AMOUNT = "Amount tendered is not a finite amount"
    CUSTOMER_NAME_REQUIRED = "Customer name is required"
    DEBT_NOT_FOUND = "Debt does not exist"
    UNKNOWN_DISPLAY_MODE = "Unknown display mode"
    UNKNOWN_KEYPAD_KEY = "Unknown keypad key"
    PRESET_NEGATIVE = "Preset amount cannot be negative"
    PRESET_NOT_AN_AMOUNT = "Preset is not an amount"


class CommandRejectedError(Exception):
    """Command was rejected due to business rule violation."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class UnknownProductError(CommandRejectedError):
    """Product id is not part of the catalog."""

    def __init__(self, product_id: str):
        super().__init__(f"{errmsg.UNKNOWN_PRODUCT}: {product_id}")
        self.product_id = product_id


class InvalidTenderError(CommandRejectedError):
    """Checkout rejected: nothing to charge or not enough cash tendered."""


class InvalidDebtError(CommandRejectedError):
    """Deferring as debt rejected: empty cart or blank customer name."""


class DebtNotFoundError(CommandRejectedError):
    """Debt id is stale. Benign: the debt may already be settled or discarded."""

    def __init__(self, debt_id: str):
        super().__init__(f"{errmsg.DEBT_NOT_FOUND}: {debt_id}")
        self.debt_id = debt_id


class CorruptPersistedStateError(Exception):
    """Stored session content could not be decoded.

    Raised inside the persistence layer only; load() replaces the offending
    part of the snapshot with its default instead of propagating this.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message
