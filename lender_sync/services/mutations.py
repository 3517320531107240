"""Mutation controller — deposit, withdraw, allowance grant and test mint."""
from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

from ..config import PoolConfig
from ..interfaces.contract import PoolContract
from ..interfaces.wallet import WalletSession
from ..protocols.lending_pool import parser
from ..protocols.lending_pool.units import (
    format_amount,
    parse_amount,
    to_decimal,
    to_decimal_value,
    to_fixed_point,
)
from .state import SessionState
from .synchronizer import PositionSynchronizer

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "Please connect your wallet"


class MutationController:
    """Validate → convert → invoke → react, for each state-changing action.

    Deposit and withdraw share the ``is_transacting`` flag; the allowance
    grant and the test mint each have their own, so one kind of operation
    never blocks another.

    A mutation that completes after its wallet session ended (switch or
    teardown) leaves the state alone: no notices, no allowance change and
    no refresh for the old account.
    """

    def __init__(
        self,
        contract: PoolContract,
        state: SessionState,
        synchronizer: PositionSynchronizer,
        session: WalletSession,
        pool_config: PoolConfig | None = None,
    ) -> None:
        self._contract = contract
        self._state = state
        self._synchronizer = synchronizer
        self._session = session
        self._pool = pool_config or PoolConfig()

    @property
    def session(self) -> WalletSession:
        return self._session

    @session.setter
    def session(self, session: WalletSession) -> None:
        self._session = session

    def _account(self) -> str | None:
        if not self._session.connected:
            return None
        return self._session.public_key or None

    def _to_base_units(self, amount: Decimal | None) -> int | None:
        """Fixed-point amount, or None when the input does not survive conversion."""
        if amount is None:
            return None
        base_units = to_fixed_point(amount, self._pool.scale)
        return base_units if base_units > 0 else None

    def _outlived(self, epoch: int, account: str) -> bool:
        """True once the session a mutation started under has ended."""
        return self._state.epoch != epoch or self._account() != account

    async def _resync(self, account: str, action: str, include_allowance: bool) -> None:
        """Refresh after a successful mutation; never affects its outcome."""
        tasks = [self._synchronizer.refresh(account)]
        if include_allowance:
            tasks.append(self._synchronizer.load_allowance(account))
        try:
            await asyncio.gather(*tasks)
        except Exception as e:
            logger.error("Error refreshing data after %s: %s", action, e)

    # ------------------------------------------------------------------
    # Deposit / withdraw
    # ------------------------------------------------------------------

    async def deposit(self, amount: str | None = None) -> bool:
        state = self._state
        if amount is not None:
            state.deposit_input = amount
        text = state.deposit_input.strip()
        symbol = self._pool.asset_symbol

        account = self._account()
        if account is None:
            state.set_error(NOT_CONNECTED_MESSAGE)
            return False

        base_units = self._to_base_units(parse_amount(text))
        if base_units is None:
            state.set_error("Please enter a valid deposit amount")
            return False

        if state.is_transacting:
            logger.warning("Deposit ignored, another pool transaction is in flight")
            return False

        epoch = state.epoch
        state.is_transacting = True
        state.clear_notices()
        try:
            logger.info("Depositing to pool: %d base units", base_units)
            try:
                result = await self._contract.deposit(base_units)
            except Exception as e:
                logger.error("Deposit failed: %s", e)
                if not self._outlived(epoch, account):
                    state.set_error(str(e) or "Failed to deposit to pool")
                return False

            logger.info("Deposit successful: %r", result)
            if self._outlived(epoch, account):
                logger.info("Session for %s ended during deposit, not updating state", account)
                return True

            state.set_success(f"Successfully deposited {text} {symbol} to the lending pool!")
            state.deposit_input = ""
            state.decrement_allowance(base_units)

            await self._resync(account, "deposit", include_allowance=True)
            return True
        finally:
            state.is_transacting = False

    async def withdraw(self, amount: str | None = None) -> bool:
        state = self._state
        if amount is not None:
            state.withdraw_input = amount
        text = state.withdraw_input.strip()
        symbol = self._pool.asset_symbol

        account = self._account()
        if account is None:
            state.set_error(NOT_CONNECTED_MESSAGE)
            return False

        requested = parse_amount(text)
        base_units = self._to_base_units(requested)
        if requested is None or base_units is None:
            state.set_error("Please enter a valid withdrawal amount")
            return False

        # Checked against the last synchronized figures, which may be stale.
        position = state.position
        available = to_decimal_value(position.deposit_amount) + to_decimal_value(
            position.earned_interest
        )
        if requested > available:
            state.set_error("Withdrawal amount exceeds your available balance")
            return False

        if state.is_transacting:
            logger.warning("Withdrawal ignored, another pool transaction is in flight")
            return False

        epoch = state.epoch
        state.is_transacting = True
        state.clear_notices()
        try:
            logger.info("Withdrawing from pool: %d base units", base_units)
            try:
                result = await self._contract.withdraw(base_units)
            except Exception as e:
                logger.error("Withdrawal failed: %s", e)
                if not self._outlived(epoch, account):
                    state.set_error(str(e) or "Failed to withdraw from pool")
                return False

            logger.info("Withdrawal successful: %r", result)
            if self._outlived(epoch, account):
                logger.info("Session for %s ended during withdrawal, not updating state", account)
                return True

            state.set_success(f"Successfully withdrew {text} {symbol} from the lending pool!")
            state.withdraw_input = ""

            await self._resync(account, "withdrawal", include_allowance=False)
            return True
        finally:
            state.is_transacting = False

    # ------------------------------------------------------------------
    # Allowance
    # ------------------------------------------------------------------

    async def grant_allowance(self) -> bool:
        """Approve the pool to pull funds; the returned amount becomes the allowance."""
        state = self._state
        symbol = self._pool.asset_symbol

        account = self._account()
        if account is None:
            state.set_error(NOT_CONNECTED_MESSAGE)
            return False

        if state.is_approving:
            logger.warning("Allowance grant already in flight")
            return False

        epoch = state.epoch
        state.clear_notices()
        state.is_approving = True
        try:
            raw = await self._contract.grant_allowance(account)
        except Exception as e:
            logger.error("Failed to enable allowance: %s", e)
            if not self._outlived(epoch, account):
                state.set_error(str(e) or f"Failed to enable {symbol} spending")
            return False
        finally:
            state.is_approving = False

        approved = parser.parse_allowance(parser.unwrap_simulation_result(raw))
        if self._outlived(epoch, account):
            logger.info("Session for %s ended during allowance grant, not updating state", account)
            return True

        state.set_allowance(approved)
        approved_display = format_amount(to_decimal(approved, self._pool.scale))
        state.set_success(f"{symbol} spending enabled for {approved_display} {symbol}.")
        logger.info("Allowance set to %d base units", approved)
        return True

    # ------------------------------------------------------------------
    # Test asset
    # ------------------------------------------------------------------

    async def mint_test_asset(self, amount: str | None = None) -> bool:
        state = self._state
        if amount is not None:
            state.mint_input = amount
        symbol = self._pool.asset_symbol

        account = self._account()
        if account is None:
            state.set_error(NOT_CONNECTED_MESSAGE)
            return False

        requested = parse_amount(state.mint_input)
        base_units = self._to_base_units(requested)
        if requested is None or base_units is None:
            state.set_error("Enter a valid mint amount")
            return False

        if state.is_minting:
            logger.warning("Mint already in flight")
            return False

        epoch = state.epoch
        state.is_minting = True
        state.clear_notices()
        try:
            await self._contract.mint_test_asset(base_units)
        except Exception as e:
            logger.error("Mint failed: %s", e)
            if not self._outlived(epoch, account):
                state.set_error(str(e) or f"Failed to mint test {symbol}")
            return False
        finally:
            state.is_minting = False

        if self._outlived(epoch, account):
            return True
        state.set_success(f"Minted {format_amount(requested)} {symbol} to your wallet.")
        return True
