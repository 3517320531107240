"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PoolStatistics:
    """Aggregate pool state at a point in time.

    Built through ``yield_model.build_pool_statistics`` so that
    ``total_value_locked == available_liquidity + total_borrowed`` holds.
    """

    total_value_locked: float
    utilization_rate: float
    current_apy: float
    total_borrowed: float
    available_liquidity: float

    @classmethod
    def empty(cls) -> PoolStatistics:
        return cls(
            total_value_locked=0.0,
            utilization_rate=0.0,
            current_apy=0.0,
            total_borrowed=0.0,
            available_liquidity=0.0,
        )


@dataclass(frozen=True)
class LenderPosition:
    """One account's stake in the pool."""

    deposit_amount: float
    earned_interest: float
    share_percentage: float

    @property
    def total_value(self) -> float:
        return self.deposit_amount + self.earned_interest

    @classmethod
    def empty(cls) -> LenderPosition:
        return cls(deposit_amount=0.0, earned_interest=0.0, share_percentage=0.0)


@dataclass(frozen=True)
class SyncToken:
    """Generation token carried by a synchronization pass."""

    epoch: int
    stream: str
    sequence: int
