"""Pure decoding functions for lending pool responses — no I/O."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...models import LenderPosition
from .units import DEFAULT_SCALE, bps_to_percent, to_decimal, to_int


def unwrap_simulation_result(value: Any) -> Any:
    """Return the most specific payload inside a simulate/invoke envelope.

    Examples:
        {"result": {"retval": 42}} → 42
        {"result": {"retval": None, "x": 1}} → {"retval": None, "x": 1}
        {"result": 7} → 7
        {"result": None} → {"result": None}
        7 → 7
    """
    if not isinstance(value, Mapping) or "result" not in value:
        return value

    result = value["result"]
    if isinstance(result, Mapping) and "retval" in result:
        retval = result["retval"]
        return retval if retval is not None else result
    return result if result is not None else value


def parse_lender_info(
    payload: Any, scale: int = DEFAULT_SCALE
) -> LenderPosition | None:
    """Build a LenderPosition from an unwrapped lender-info payload.

    Amounts arrive in fixed-point base units, the share in basis points:
        {"deposit_amount": 500000000, "earned_interest": 10000000,
         "share_percentage": 250}
        → deposit 50, interest 1, share 2.5%

    Returns None when the payload is not a mapping.
    """
    if not isinstance(payload, Mapping):
        return None

    return LenderPosition(
        deposit_amount=to_decimal(payload.get("deposit_amount"), scale),
        earned_interest=to_decimal(payload.get("earned_interest"), scale),
        share_percentage=bps_to_percent(payload.get("share_percentage")),
    )


def parse_allowance(payload: Any) -> int:
    """Read an allowance payload as a non-negative count of base units."""
    return max(to_int(payload), 0)
