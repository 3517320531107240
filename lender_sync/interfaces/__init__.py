"""Protocol interfaces for the lending pool collaborators."""
from .contract import PoolContract
from .wallet import StaticWalletSession, WalletSession

__all__ = ["PoolContract", "StaticWalletSession", "WalletSession"]
