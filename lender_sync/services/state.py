"""Session-scoped view state for one lender and one pool."""
from __future__ import annotations

import logging

from ..models import LenderPosition, PoolStatistics, SyncToken

logger = logging.getLogger(__name__)

REFRESH_STREAM = "refresh"
ALLOWANCE_STREAM = "allowance"


class SessionState:
    """Holds what the dashboard displays.

    Position and statistics are only ever replaced whole, and only with a
    token that is still current: a token goes stale when a newer pass of
    the same stream starts or when the session epoch moves on (wallet
    change, teardown). Allowance additionally supports the one optimistic
    decrement applied after a deposit.
    """

    def __init__(self, mint_input: str = "100") -> None:
        self._position = LenderPosition.empty()
        self._statistics = PoolStatistics.empty()
        self._allowance = 0
        self._epoch = 0
        self._sequences: dict[str, int] = {}

        self.error: str | None = None
        self.success_message: str | None = None

        self.deposit_input = ""
        self.withdraw_input = ""
        self.mint_input = mint_input

        self.is_fetching_data = False
        self.is_transacting = False
        self.is_allowance_loading = False
        self.is_approving = False
        self.is_minting = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def position(self) -> LenderPosition:
        return self._position

    @property
    def statistics(self) -> PoolStatistics:
        return self._statistics

    @property
    def allowance(self) -> int:
        return self._allowance

    @property
    def epoch(self) -> int:
        return self._epoch

    # ------------------------------------------------------------------
    # Generations
    # ------------------------------------------------------------------

    def new_epoch(self) -> int:
        """Invalidate every outstanding token (session changed or torn down)."""
        self._epoch += 1
        self._sequences.clear()
        self.is_fetching_data = False
        self.is_allowance_loading = False
        return self._epoch

    def issue_token(self, stream: str) -> SyncToken:
        """Start a new pass of ``stream``, superseding any pass in flight."""
        sequence = self._sequences.get(stream, 0) + 1
        self._sequences[stream] = sequence
        return SyncToken(epoch=self._epoch, stream=stream, sequence=sequence)

    def is_current(self, token: SyncToken) -> bool:
        return (
            token.epoch == self._epoch
            and token.sequence == self._sequences.get(token.stream, 0)
        )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def replace_position(self, position: LenderPosition, token: SyncToken) -> bool:
        if not self.is_current(token):
            logger.debug("Discarding stale position update (%s)", token)
            return False
        self._position = position
        return True

    def replace_statistics(self, statistics: PoolStatistics, token: SyncToken) -> bool:
        if not self.is_current(token):
            logger.debug("Discarding stale statistics update (%s)", token)
            return False
        self._statistics = statistics
        return True

    def set_allowance(self, amount: int, token: SyncToken | None = None) -> bool:
        """Replace the allowance.

        Without a token the value is authoritative (a grant result) and
        supersedes any allowance load still in flight.
        """
        if token is None:
            self.issue_token(ALLOWANCE_STREAM)
        elif not self.is_current(token):
            logger.debug("Discarding stale allowance update (%s)", token)
            return False
        self._allowance = max(int(amount), 0)
        return True

    def decrement_allowance(self, amount: int) -> int:
        """Optimistically spend ``amount`` of the allowance, floored at zero."""
        self.issue_token(ALLOWANCE_STREAM)
        self._allowance = self._allowance - amount if self._allowance > amount else 0
        return self._allowance

    # ------------------------------------------------------------------
    # Notices
    # ------------------------------------------------------------------

    def clear_notices(self) -> None:
        self.error = None
        self.success_message = None

    def set_error(self, message: str) -> None:
        self.error = message

    def set_success(self, message: str) -> None:
        self.success_message = message
