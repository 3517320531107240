"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from lender_sync.config import (
    AppConfig,
    GatewayConfig,
    MonitorConfig,
    PoolConfig,
    WalletConfig,
)
from lender_sync.interfaces.wallet import StaticWalletSession
from lender_sync.models import LenderPosition, PoolStatistics

LENDER = "GLENDERACCOUNT0000000000000000000000000000000000000000XYZ"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_gateway_config() -> GatewayConfig:
    return GatewayConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_pool_config() -> PoolConfig:
    return PoolConfig(
        contract_id="CPOOL",
        token_contract_id="CTOKEN",
        asset_symbol="USDC",
        decimals=7,
        base_apy=5.0,
        max_apy=15.0,
    )


@pytest.fixture()
def sample_app_config(
    sample_gateway_config: GatewayConfig, sample_pool_config: PoolConfig
) -> AppConfig:
    return AppConfig(
        gateway=sample_gateway_config,
        pool=sample_pool_config,
        wallet=WalletConfig(label="test-lender", address=LENDER),
        monitor=MonitorConfig(refresh_interval_seconds=5),
    )


@pytest.fixture()
def session() -> StaticWalletSession:
    return StaticWalletSession(public_key=LENDER)


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_position() -> LenderPosition:
    return LenderPosition(deposit_amount=50.0, earned_interest=1.0, share_percentage=2.5)


@pytest.fixture()
def sample_statistics() -> PoolStatistics:
    return PoolStatistics(
        total_value_locked=2000.0,
        utilization_rate=50.0,
        current_apy=10.0,
        total_borrowed=1000.0,
        available_liquidity=1000.0,
    )


# ---------------------------------------------------------------------------
# Sample contract responses (simulation envelopes)
# ---------------------------------------------------------------------------


@pytest.fixture()
def lender_info_envelope() -> dict:
    return {
        "result": {
            "retval": {
                "deposit_amount": 500000000,  # 50 USDC
                "earned_interest": "10000000",  # 1 USDC, string-encoded i128
                "share_percentage": 250,  # 2.5%
            }
        }
    }


@pytest.fixture()
def mock_contract(lender_info_envelope: dict) -> AsyncMock:
    contract = AsyncMock()
    contract.get_lender_info.return_value = lender_info_envelope
    contract.get_available_liquidity.return_value = {"result": {"retval": "10000000000"}}
    contract.get_utilization_rate.return_value = {"result": {"retval": 5000}}
    contract.get_allowance.return_value = {"result": {"retval": "2000000000"}}
    contract.grant_allowance.return_value = 10_000_000_000_000
    contract.deposit.return_value = {"status": "SUCCESS", "hash": "0xdep"}
    contract.withdraw.return_value = {"status": "SUCCESS", "hash": "0xwd"}
    contract.mint_test_asset.return_value = {"status": "SUCCESS", "hash": "0xmint"}
    return contract


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    gateway:
      rpc_endpoints: ["https://rpc.example.com", "https://rpc2.example.com"]
      rpc_timeout: 10
    pool:
      contract_id: "CPOOL"
      token_contract_id: "CTOKEN"
      asset_symbol: USDC
      decimals: 7
      base_apy: 5.0
      max_apy: 15.0
    wallet:
      label: test-lender
      address: "GTEST"
    monitor:
      refresh_interval_seconds: 30
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
