"""Soroban contract gateway client."""
from .client import PoolGatewayClient

__all__ = ["PoolGatewayClient"]
