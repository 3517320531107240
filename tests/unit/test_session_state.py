"""Unit tests for the session state container and its generation tokens."""
from __future__ import annotations

from lender_sync.models import LenderPosition, PoolStatistics
from lender_sync.services.state import ALLOWANCE_STREAM, REFRESH_STREAM, SessionState


class TestDefaults:
    def test_initial_values(self) -> None:
        state = SessionState()
        assert state.position == LenderPosition.empty()
        assert state.statistics == PoolStatistics.empty()
        assert state.allowance == 0
        assert state.mint_input == "100"
        assert state.deposit_input == ""
        assert not state.is_transacting
        assert not state.is_minting
        assert not state.is_approving


class TestTokens:
    def test_current_token_applies(self, sample_position: LenderPosition) -> None:
        state = SessionState()
        token = state.issue_token(REFRESH_STREAM)
        assert state.replace_position(sample_position, token) is True
        assert state.position == sample_position

    def test_superseded_token_is_discarded(
        self, sample_position: LenderPosition, sample_statistics: PoolStatistics
    ) -> None:
        state = SessionState()
        old = state.issue_token(REFRESH_STREAM)
        state.issue_token(REFRESH_STREAM)
        assert state.replace_position(sample_position, old) is False
        assert state.replace_statistics(sample_statistics, old) is False
        assert state.position == LenderPosition.empty()
        assert state.statistics == PoolStatistics.empty()

    def test_new_epoch_invalidates_everything(self, sample_statistics: PoolStatistics) -> None:
        state = SessionState()
        refresh = state.issue_token(REFRESH_STREAM)
        allowance = state.issue_token(ALLOWANCE_STREAM)
        state.is_fetching_data = True
        state.new_epoch()
        assert not state.is_current(refresh)
        assert not state.is_current(allowance)
        assert state.replace_statistics(sample_statistics, refresh) is False
        assert state.set_allowance(5, allowance) is False
        assert state.is_fetching_data is False

    def test_streams_are_independent(self) -> None:
        state = SessionState()
        refresh = state.issue_token(REFRESH_STREAM)
        state.issue_token(ALLOWANCE_STREAM)
        assert state.is_current(refresh)


class TestAllowance:
    def test_authoritative_set_supersedes_pending_load(self) -> None:
        state = SessionState()
        pending = state.issue_token(ALLOWANCE_STREAM)
        assert state.set_allowance(1_000) is True
        assert state.set_allowance(5, pending) is False
        assert state.allowance == 1_000

    def test_decrement(self) -> None:
        state = SessionState()
        state.set_allowance(1_000)
        assert state.decrement_allowance(300) == 700
        assert state.allowance == 700

    def test_decrement_floors_at_zero(self) -> None:
        state = SessionState()
        state.set_allowance(100)
        assert state.decrement_allowance(500) == 0

    def test_decrement_exact_amount(self) -> None:
        state = SessionState()
        state.set_allowance(100)
        assert state.decrement_allowance(100) == 0

    def test_decrement_supersedes_pending_load(self) -> None:
        state = SessionState()
        state.set_allowance(1_000)
        pending = state.issue_token(ALLOWANCE_STREAM)
        state.decrement_allowance(400)
        assert state.set_allowance(1_000, pending) is False
        assert state.allowance == 600


class TestNotices:
    def test_clear(self) -> None:
        state = SessionState()
        state.set_error("bad")
        state.set_success("good")
        state.clear_notices()
        assert state.error is None
        assert state.success_message is None
