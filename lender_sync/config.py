"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GatewayConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class PoolConfig:
    contract_id: str = ""
    token_contract_id: str = ""
    asset_symbol: str = "USDC"
    decimals: int = 7
    base_apy: float = 5.0
    max_apy: float = 15.0

    @property
    def scale(self) -> int:
        """Fixed-point base units per whole token (10^7 for 7 decimals)."""
        return 10**self.decimals


@dataclass(frozen=True)
class WalletConfig:
    label: str = ""
    address: str = ""


@dataclass(frozen=True)
class MonitorConfig:
    refresh_interval_seconds: int = 60


@dataclass(frozen=True)
class AppConfig:
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_gateway(raw: dict[str, Any]) -> GatewayConfig:
    return GatewayConfig(
        rpc_endpoints=tuple(raw.get("rpc_endpoints", [])),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_pool(raw: dict[str, Any]) -> PoolConfig:
    return PoolConfig(
        contract_id=raw.get("contract_id", ""),
        token_contract_id=raw.get("token_contract_id", ""),
        asset_symbol=raw.get("asset_symbol", "USDC"),
        decimals=int(raw.get("decimals", 7)),
        base_apy=float(raw.get("base_apy", 5.0)),
        max_apy=float(raw.get("max_apy", 15.0)),
    )


def _build_wallet(raw: dict[str, Any]) -> WalletConfig:
    return WalletConfig(
        label=raw.get("label", ""),
        address=raw.get("address", ""),
    )


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        refresh_interval_seconds=int(raw.get("refresh_interval_seconds", 60)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        gateway=_build_gateway(raw.get("gateway") or {}),
        pool=_build_pool(raw.get("pool") or {}),
        wallet=_build_wallet(raw.get("wallet") or {}),
        monitor=_build_monitor(raw.get("monitor") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.gateway.rpc_endpoints:
        raise ValueError("At least one gateway RPC endpoint must be configured")

    if not cfg.wallet.address:
        raise ValueError(f"Wallet '{cfg.wallet.label}' has no address")

    if cfg.pool.decimals < 0:
        raise ValueError(f"Pool decimals must be non-negative, got {cfg.pool.decimals}")

    if not 0 <= cfg.pool.base_apy <= cfg.pool.max_apy:
        raise ValueError(
            f"Pool APY bounds are inconsistent: base_apy={cfg.pool.base_apy}, "
            f"max_apy={cfg.pool.max_apy}"
        )
