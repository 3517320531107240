"""Wallet session protocol — connected flag and public account."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class WalletSession(Protocol):
    """Abstract interface for a wallet-session provider."""

    @property
    def connected(self) -> bool: ...

    @property
    def public_key(self) -> str | None: ...


@dataclass(frozen=True)
class StaticWalletSession:
    """Wallet session backed by a configured address."""

    public_key: str | None = None

    @property
    def connected(self) -> bool:
        return bool(self.public_key)
