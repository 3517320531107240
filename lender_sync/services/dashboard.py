"""Lender dashboard — wires the pool client, state, synchronizer and controller."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..chains.soroban import PoolGatewayClient
from ..config import AppConfig
from ..interfaces.contract import PoolContract
from ..interfaces.wallet import StaticWalletSession, WalletSession
from ..models import LenderPosition, PoolStatistics
from ..protocols.lending_pool.units import format_amount, parse_amount, to_decimal
from ..protocols.lending_pool.yield_model import estimate_monthly_earnings
from .mutations import MutationController
from .state import SessionState
from .synchronizer import PositionSynchronizer

logger = logging.getLogger(__name__)


class LenderDashboard:
    """One lender's view of one pool, kept in sync across mutations."""

    def __init__(
        self,
        config: AppConfig,
        contract: PoolContract | None = None,
        session: WalletSession | None = None,
    ) -> None:
        self._config = config
        self._pool = config.pool
        self._session: WalletSession = session or StaticWalletSession(
            public_key=config.wallet.address or None
        )
        self._contract: PoolContract = contract or PoolGatewayClient(
            config.gateway, config.wallet.address, config.pool
        )

        self.state = SessionState()
        self.synchronizer = PositionSynchronizer(self._contract, self.state, self._pool)
        self.controller = MutationController(
            self._contract, self.state, self.synchronizer, self._session, self._pool
        )

    @property
    def account(self) -> str | None:
        return self._session.public_key if self._session.connected else None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        """Initial load of position, statistics and allowance."""
        await self.synchronizer.on_session_change(self._session)

    async def set_session(self, session: WalletSession) -> None:
        """Switch wallets; results still in flight for the old one are dropped."""
        self._session = session
        self.controller.session = session
        await self.synchronizer.on_session_change(session)

    def close(self) -> None:
        """Tear down; anything that completes afterwards is ignored."""
        self.state.new_epoch()
        logger.debug("Dashboard closed")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def refresh(self) -> tuple[LenderPosition, PoolStatistics]:
        return await self.synchronizer.refresh(self.account)

    async def deposit(self, amount: str | None = None) -> bool:
        return await self.controller.deposit(amount)

    async def withdraw(self, amount: str | None = None) -> bool:
        return await self.controller.withdraw(amount)

    async def grant_allowance(self) -> bool:
        return await self.controller.grant_allowance()

    async def mint_test_asset(self, amount: str | None = None) -> bool:
        return await self.controller.mint_test_asset(amount)

    def estimated_monthly_earnings(self, amount_text: str | None = None) -> float:
        """Monthly earnings for a prospective deposit at the current APY."""
        text = self.state.deposit_input if amount_text is None else amount_text
        amount = parse_amount(text)
        return estimate_monthly_earnings(
            float(amount) if amount is not None else 0.0,
            self.state.statistics.current_apy,
        )

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_wallet(address: str | None) -> str:
        if not address:
            return "—"
        if len(address) > 14:
            return f"{address[:8]}...{address[-6:]}"
        return address

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    def render(self) -> str:
        """Plain-text summary of everything the dashboard shows."""
        state = self.state
        stats = state.statistics
        position = state.position
        symbol = self._pool.asset_symbol
        allowance = to_decimal(state.allowance, self._pool.scale)

        lines = [
            f"📊 {self._config.wallet.label or 'Lender'} · "
            f"{self._format_wallet(self.account)} · {symbol} pool",
            "",
        ]
        if state.is_fetching_data:
            lines += ["Loading pool data...", ""]

        lines += [
            "Pool Statistics",
            f"  Total Value Locked:  ${format_amount(stats.total_value_locked)}",
            f"  Utilization Rate:    {stats.utilization_rate:g}%",
            f"  Current APY:         {stats.current_apy:g}%",
            f"  Total Borrowed (est): ${format_amount(stats.total_borrowed)}",
            f"  Available Liquidity: ${format_amount(stats.available_liquidity)}",
            "",
            "Your Position",
            f"  Total Value:     ${format_amount(position.total_value)}",
            f"  Principal:       ${format_amount(position.deposit_amount)}",
            f"  Interest Earned: +${format_amount(position.earned_interest)}",
            f"  Pool Share:      {position.share_percentage:g}%",
            "",
            f"Allowance: {format_amount(allowance)} {symbol}",
        ]

        if state.success_message:
            lines += ["", f"✅ {state.success_message}"]
        if state.error:
            lines += ["", f"❌ {state.error}"]

        lines += ["", f"{self._now_str()} UTC"]
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run_continuous(self, interval_seconds: int | None = None) -> None:
        """Refresh on a fixed interval and log the summary."""
        interval = interval_seconds or self._config.monitor.refresh_interval_seconds
        logger.info("Starting continuous refresh (every %d seconds)", interval)

        while True:
            try:
                await self.refresh()
                logger.info("\n%s", self.render())
                await asyncio.sleep(interval)
            except Exception as e:
                logger.error("Error in refresh loop: %s", e)
                await asyncio.sleep(interval)
