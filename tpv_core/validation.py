"""Validation helpers for command precondition checks.

Each helper raises the given CommandRejectedError subclass with the given
message when its condition does not hold.
"""

from decimal import Decimal

from .errors import CommandRejectedError

RejectionType = type[CommandRejectedError]


def require_positive(value: Decimal, error_msg: str, error: RejectionType = CommandRejectedError) -> None:
    """Require that a value is greater than zero."""
    if value <= 0:
        raise error(error_msg)


def require_at_least(value: Decimal, minimum: Decimal, error_msg: str, error: RejectionType = CommandRejectedError) -> None:
    """Require that a value is at least the given minimum."""
    if value < minimum:
        raise error(error_msg)


def require_non_negative(value: Decimal, error_msg: str, error: RejectionType = CommandRejectedError) -> None:
    """Require that a value is zero or greater."""
    if value < 0:
        raise error(error_msg)


def require_not_blank(text: str, error_msg: str, error: RejectionType = CommandRejectedError) -> str:
    """Require that a string has content after trimming; return it trimmed."""
    trimmed = (text or "").strip()
    if not trimmed:
        raise error(error_msg)
    return trimmed
