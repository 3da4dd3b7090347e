"""Cash payment calculator driven by the checkout keypad."""

from decimal import Decimal, InvalidOperation
from typing import Union

from .errors import errmsg
from .state import ZERO

DIGITS = frozenset("0123456789")
SEPARATORS = frozenset(".,")
DOUBLE_ZERO = "00"

# Banknote shortcuts shown above the keypad
PRESET_AMOUNTS = (Decimal("5"), Decimal("10"), Decimal("20"), Decimal("50"))

Amount = Union[Decimal, int, str]


class PaymentCalculator:
    """Accumulates the amount tendered as the operator types it.

    The buffer is free-form text; parsed_amount() is the only place it is
    interpreted and it never raises.
    """

    def __init__(self, buffer: str = "") -> None:
        self._buffer = buffer

    @property
    def buffer(self) -> str:
        return self._buffer

    def append_key(self, key: str) -> None:
        """Apply one keypad press: a digit, "00" or a decimal separator.

        Raises:
            ValueError: If the key is not on the keypad.
        """
        if key in SEPARATORS:
            if not self._buffer:
                self._buffer = "0" + key
            elif not SEPARATORS.intersection(self._buffer):
                self._buffer += key
            return

        if key == DOUBLE_ZERO:
            self._buffer = self._buffer + DOUBLE_ZERO if self._buffer else "0"
            return

        if key not in DIGITS:
            raise ValueError(f"{errmsg.UNKNOWN_KEYPAD_KEY}: {key!r}")

        if self._buffer == "0":
            self._buffer = key
        else:
            self._buffer += key

    append_digit = append_key

    def set_preset(self, amount: Amount) -> None:
        """Replace the buffer with a fixed amount, e.g. a banknote value.

        Raises:
            ValueError: If the amount is not a finite, non-negative number.
        """
        try:
            value = Decimal(amount)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise ValueError(f"{errmsg.PRESET_NOT_AN_AMOUNT}: {amount!r}") from e
        if not value.is_finite():
            raise ValueError(f"{errmsg.PRESET_NOT_AN_AMOUNT}: {amount!r}")
        if value < 0:
            raise ValueError(f"{errmsg.PRESET_NEGATIVE}: {amount!r}")
        self._buffer = format(value, "f")

    def backspace(self) -> None:
        self._buffer = self._buffer[:-1]

    def clear(self) -> None:
        self._buffer = ""

    reset = clear

    def parsed_amount(self) -> Decimal:
        """Buffer as a Decimal, with "," read as ".". Zero if empty or unparsable."""
        if not self._buffer:
            return ZERO
        try:
            value = Decimal(self._buffer.replace(",", ".", 1))
        except InvalidOperation:
            return ZERO
        if not value.is_finite():
            return ZERO
        return value

    def change(self, total: Decimal) -> Decimal:
        """Tendered minus total; negative while the customer has not paid enough."""
        return self.parsed_amount() - total

    def display_change(self, total: Decimal) -> Decimal:
        return max(self.change(total), ZERO)

    def shortfall(self, total: Decimal) -> Decimal:
        """Amount still missing, zero once the tender covers the total."""
        return max(total - self.parsed_amount(), ZERO)

    def can_confirm(self, total: Decimal) -> bool:
        return total > 0 and self.parsed_amount() >= total
