"""Decimal arithmetic utilities for ledger amounts.

All amounts are ``decimal.Decimal`` in the domain and ``Decimal128`` in MongoDB.
Documents written by older services may still carry float/int amounts; those
are converted through ``str`` so 0.1 stays 0.1.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from bson.decimal128 import Decimal128

AMOUNT_PRECISION = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Convert a stored amount to Decimal. Raises ValueError on anything non-numeric."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, bool):
        raise ValueError(f"Amount must be numeric, got bool {value!r}")
    if isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Amount is not a number: {value!r}") from exc
        if not result.is_finite():
            raise ValueError(f"Amount is not finite: {value!r}")
        return result
    raise ValueError(f"Amount must be numeric, got {type(value).__name__}")


def round_amount(amount: Decimal) -> Decimal:
    """Round half-up to 2 places: Decimal('1.005') -> Decimal('1.01')."""
    return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_UP)


def to_decimal128(amount: Decimal) -> Decimal128:
    return Decimal128(amount)
