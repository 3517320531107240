"""Unit tests for the utilization-driven yield model."""
from __future__ import annotations

import pytest

from lender_sync.protocols.lending_pool.yield_model import (
    build_pool_statistics,
    calc_current_apy,
    calc_total_borrowed,
    calc_total_value_locked,
    estimate_monthly_earnings,
)


class TestCalcCurrentApy:
    def test_zero_utilization_is_base(self) -> None:
        assert calc_current_apy(0.0) == pytest.approx(5.0)

    def test_full_utilization_is_max(self) -> None:
        assert calc_current_apy(100.0) == pytest.approx(15.0)

    def test_linear_midpoint(self) -> None:
        assert calc_current_apy(50.0) == pytest.approx(10.0)

    def test_custom_bounds(self) -> None:
        assert calc_current_apy(25.0, base_apy=2.0, max_apy=10.0) == pytest.approx(4.0)


class TestCalcTotalBorrowed:
    def test_half_utilized(self) -> None:
        assert calc_total_borrowed(1000.0, 50.0) == pytest.approx(1000.0)

    def test_zero_utilization(self) -> None:
        assert calc_total_borrowed(1000.0, 0.0) == 0.0

    def test_full_utilization_guard(self) -> None:
        assert calc_total_borrowed(1000.0, 100.0) == 0.0

    def test_quarter_utilized(self) -> None:
        # borrowed / (available + borrowed) == 0.25
        borrowed = calc_total_borrowed(750.0, 25.0)
        assert borrowed == pytest.approx(250.0)
        assert borrowed / (750.0 + borrowed) == pytest.approx(0.25)


class TestBuildPoolStatistics:
    def test_scenario_half_utilized(self) -> None:
        stats = build_pool_statistics(1000.0, 50.0)
        assert stats.total_borrowed == pytest.approx(1000.0)
        assert stats.total_value_locked == pytest.approx(2000.0)
        assert stats.current_apy == pytest.approx(10.0)
        assert stats.available_liquidity == 1000.0
        assert stats.utilization_rate == 50.0

    def test_zero_utilization(self) -> None:
        stats = build_pool_statistics(1000.0, 0.0)
        assert stats.current_apy == pytest.approx(5.0)
        assert stats.total_borrowed == 0.0
        assert stats.total_value_locked == pytest.approx(1000.0)

    def test_full_utilization(self) -> None:
        stats = build_pool_statistics(0.0, 100.0)
        assert stats.current_apy == pytest.approx(15.0)
        assert stats.total_borrowed == 0.0

    @pytest.mark.parametrize(
        "available,utilization",
        [(0.0, 0.0), (1.5, 12.34), (10_000.0, 99.99), (123.0, 100.0), (5e8, 73.0)],
    )
    def test_tvl_invariant(self, available: float, utilization: float) -> None:
        stats = build_pool_statistics(available, utilization)
        assert stats.total_value_locked == stats.available_liquidity + stats.total_borrowed
        assert 5.0 <= stats.current_apy <= 15.0

    def test_tvl_helper(self) -> None:
        assert calc_total_value_locked(1.0, 2.0) == 3.0


class TestEstimateMonthlyEarnings:
    def test_basic(self) -> None:
        assert estimate_monthly_earnings(1200.0, 10.0) == pytest.approx(10.0)

    def test_zero_amount(self) -> None:
        assert estimate_monthly_earnings(0.0, 10.0) == 0.0
