"""Position synchronizer — fetches and reconciles lender position and pool stats."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..config import PoolConfig
from ..interfaces.contract import PoolContract
from ..interfaces.wallet import WalletSession
from ..models import LenderPosition, PoolStatistics
from ..protocols.lending_pool import parser
from ..protocols.lending_pool.units import bps_to_percent, to_decimal
from ..protocols.lending_pool.yield_model import build_pool_statistics
from .state import ALLOWANCE_STREAM, REFRESH_STREAM, SessionState

logger = logging.getLogger(__name__)


class PositionSynchronizer:
    """Keeps the SessionState's position, statistics and allowance truthful.

    A refresh runs the lender-info path and the pool statistics path side
    by side; either may fail without affecting the other. Failures are
    logged and the previously displayed figures stay in place.
    """

    def __init__(
        self,
        contract: PoolContract,
        state: SessionState,
        pool_config: PoolConfig | None = None,
    ) -> None:
        self._contract = contract
        self._state = state
        self._pool = pool_config or PoolConfig()

    @property
    def state(self) -> SessionState:
        return self._state

    # ------------------------------------------------------------------
    # Fetch + decode
    # ------------------------------------------------------------------

    async def _fetch_position(self, account: str) -> LenderPosition | None:
        raw = await self._contract.get_lender_info(account)
        logger.debug("Lender info result: %r", raw)
        return parser.parse_lender_info(
            parser.unwrap_simulation_result(raw), self._pool.scale
        )

    async def _fetch_statistics(self) -> PoolStatistics:
        liquidity_raw, utilization_raw = await asyncio.gather(
            self._contract.get_available_liquidity(),
            self._contract.get_utilization_rate(),
        )
        logger.debug("Liquidity result: %r", liquidity_raw)
        logger.debug("Utilization result: %r", utilization_raw)

        available_liquidity = to_decimal(
            parser.unwrap_simulation_result(liquidity_raw), self._pool.scale
        )
        utilization_rate = bps_to_percent(
            parser.unwrap_simulation_result(utilization_raw)
        )
        return build_pool_statistics(
            available_liquidity,
            utilization_rate,
            base_apy=self._pool.base_apy,
            max_apy=self._pool.max_apy,
        )

    @staticmethod
    def _failed(result: Any, what: str) -> bool:
        if isinstance(result, Exception):
            logger.error("Error fetching %s: %s", what, result)
            return True
        if isinstance(result, BaseException):
            raise result
        return False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def refresh(self, account: str | None) -> tuple[LenderPosition, PoolStatistics]:
        """Re-fetch position and statistics and replace them wholesale.

        Returns the pair held by the state afterwards: fresh figures for
        each path that succeeded, the previous figures for any that failed.
        """
        if not account:
            logger.debug("No active wallet session, skipping refresh")
            return self._state.position, self._state.statistics

        token = self._state.issue_token(REFRESH_STREAM)
        self._state.is_fetching_data = True
        try:
            position, statistics = await asyncio.gather(
                self._fetch_position(account),
                self._fetch_statistics(),
                return_exceptions=True,
            )
        finally:
            if self._state.is_current(token):
                self._state.is_fetching_data = False

        if not self._failed(position, "lender info"):
            if position is None:
                logger.warning("Lender info payload is not a structure, keeping previous position")
            else:
                self._state.replace_position(position, token)

        if not self._failed(statistics, "pool statistics"):
            self._state.replace_statistics(statistics, token)

        return self._state.position, self._state.statistics

    async def load_allowance(self, account: str | None) -> int:
        """Fetch the authoritative allowance; keep the previous value on failure."""
        if not account:
            return self._state.allowance

        token = self._state.issue_token(ALLOWANCE_STREAM)
        self._state.is_allowance_loading = True
        try:
            raw = await self._contract.get_allowance(account)
        except Exception as e:
            logger.error("Error fetching allowance: %s", e)
        else:
            self._state.set_allowance(
                parser.parse_allowance(parser.unwrap_simulation_result(raw)), token
            )
        finally:
            if self._state.is_current(token):
                self._state.is_allowance_loading = False

        return self._state.allowance

    async def on_session_change(self, session: WalletSession) -> None:
        """Start over for a new (or absent) wallet session.

        Results of passes started under the previous session are discarded
        when they complete.
        """
        self._state.new_epoch()

        account = session.public_key if session.connected else None
        if not account:
            logger.info("Wallet disconnected, resetting allowance")
            self._state.set_allowance(0)
            return

        logger.info("Synchronizing lender position for %s", account)
        await asyncio.gather(self.refresh(account), self.load_allowance(account))
