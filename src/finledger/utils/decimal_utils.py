"""Helpers for Decimal normalization."""

from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    """Coerce a value to Decimal rounded to cents.

    Args:
        value: Raw numeric value.

    Returns:
        Decimal: Value with exactly two decimal places.
    """
    return coerce_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


__all__ = ["coerce_decimal", "quantize_money"]
