"""Fixed-point and basis-point conversions — pure, total, no I/O.

The pool ledger carries amounts as integers of 10^7 base units per token
and ratios as basis points. Values cross the boundary untyped: ints,
floats, decimal strings (i128 values usually arrive as strings), or
nothing at all. Anything that cannot be read as a finite number counts as
zero.
"""
from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

DEFAULT_SCALE = 10_000_000
BPS_PER_PERCENT = 100


def to_decimal_value(value: Any) -> Decimal:
    """Coerce an untyped numeric value to a finite Decimal, zero on failure."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(int(value))
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return Decimal(0)
    else:
        return Decimal(0)

    if not number.is_finite():
        return Decimal(0)
    return number


def to_int(value: Any) -> int:
    """Read an untyped value as an integer count of base units (truncating)."""
    return int(to_decimal_value(value).to_integral_value(rounding=ROUND_DOWN))


def to_decimal(raw: Any, scale: int = DEFAULT_SCALE) -> float:
    """Fixed-point base units → human currency units.

    >>> to_decimal(500_000_000)
    50.0
    """
    return float(to_decimal_value(raw) / Decimal(scale))


def to_fixed_point(amount: Any, scale: int = DEFAULT_SCALE) -> int:
    """Human currency units → fixed-point base units, truncated toward zero.

    The product is taken in Decimal so that ``"0.29"`` maps to
    ``2_900_000`` rather than the ``2_899_999`` a float product gives.
    """
    product = to_decimal_value(amount) * Decimal(scale)
    return int(product.to_integral_value(rounding=ROUND_DOWN))


def bps_to_percent(bps: Any) -> float:
    """Basis points → percentage (250 → 2.5)."""
    return float(to_decimal_value(bps) / BPS_PER_PERCENT)


def percent_to_bps(percent: Any) -> int:
    """Percentage → basis points (2.5 → 250)."""
    return int((to_decimal_value(percent) * BPS_PER_PERCENT).to_integral_value())


def parse_amount(text: Any) -> Decimal | None:
    """Parse a user-entered amount; None unless it is a finite positive number."""
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, str):
        text = text.strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        amount = to_decimal_value(text)

    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def format_amount(value: Any) -> str:
    """Render an amount with separators and at most two fraction digits.

    Examples:
        1000.0 → "1,000"
        2.5 → "2.5"
        1234.567 → "1,234.57"
    """
    rendered = f"{float(to_decimal_value(value)):,.2f}"
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered
