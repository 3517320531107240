"""Utilization-driven yield model and derived pool aggregates.

The APY is a straight line between ``base_apy`` at 0% utilization and
``max_apy`` at 100%. Borrowed volume is not read from the pool; it is
inferred from the utilization ratio and the available liquidity by
inverting ``utilization = borrowed / (available + borrowed)``:

    borrowed = available * utilization / (100 - utilization)

This is a heuristic. It assumes the contract computes utilization exactly
that way (no reserves, no basis-point rounding) and it reports zero
borrowed at 100% utilization, where the inverse is undefined. Treat the
result as an estimate that can drift from the on-chain total.
"""
from __future__ import annotations

from ...models import PoolStatistics

BASE_APY = 5.0
MAX_APY = 15.0
MONTHS_PER_YEAR = 12


def calc_current_apy(
    utilization_rate: float,
    base_apy: float = BASE_APY,
    max_apy: float = MAX_APY,
) -> float:
    """Linear interpolation of the APY over utilization (percentage)."""
    return base_apy + (max_apy - base_apy) * (utilization_rate / 100)


def calc_total_borrowed(available_liquidity: float, utilization_rate: float) -> float:
    """Estimate borrowed volume; zero unless 0 < utilization < 100."""
    if 0 < utilization_rate < 100:
        return available_liquidity * utilization_rate / (100 - utilization_rate)
    return 0.0


def calc_total_value_locked(available_liquidity: float, total_borrowed: float) -> float:
    return available_liquidity + total_borrowed


def build_pool_statistics(
    available_liquidity: float,
    utilization_rate: float,
    base_apy: float = BASE_APY,
    max_apy: float = MAX_APY,
) -> PoolStatistics:
    """Derive the full PoolStatistics from the two on-chain inputs."""
    total_borrowed = calc_total_borrowed(available_liquidity, utilization_rate)
    return PoolStatistics(
        total_value_locked=calc_total_value_locked(available_liquidity, total_borrowed),
        utilization_rate=utilization_rate,
        current_apy=calc_current_apy(utilization_rate, base_apy, max_apy),
        total_borrowed=total_borrowed,
        available_liquidity=available_liquidity,
    )


def estimate_monthly_earnings(amount: float, current_apy: float) -> float:
    """Simple-interest earnings for one month at the current APY."""
    return amount * current_apy / 100 / MONTHS_PER_YEAR
