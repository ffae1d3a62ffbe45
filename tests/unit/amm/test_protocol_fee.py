"""Tests for protocol fee accrual."""

from structlog.testing import capture_logs

from cpamm.amm.protocol_fee import ProtocolFeeAccrual
from cpamm.state.reserves import ReserveState
from cpamm.state.shares import ShareLedger
from tests.helpers import LP, TREASURY


class TestFeeShares:
    """Tests for the dilution formula."""

    def test_growth_is_shared(self):
        """sqrt(k) grows 1000 -> 1100 over 1000 shares: 1000 * 100 / 6500."""
        accrual = ProtocolFeeAccrual()
        assert accrual.fee_shares(1_000_000, 1_100, 1_100, 1_000) == 15

    def test_no_growth(self):
        accrual = ProtocolFeeAccrual()
        assert accrual.fee_shares(1_210_000, 1_100, 1_100, 1_000) == 0

    def test_shrinking_invariant(self):
        accrual = ProtocolFeeAccrual()
        assert accrual.fee_shares(4_000_000, 1_100, 1_100, 1_000) == 0

    def test_disabled_when_k_last_unset(self):
        accrual = ProtocolFeeAccrual()
        assert accrual.fee_shares(0, 1_100, 1_100, 1_000) == 0


class TestAccrue:
    """Tests for minting fee shares into a staged ledger."""

    def _state_and_shares(self):
        state = ReserveState(reserve_a=1_100, reserve_b=1_100, k_last=1_000_000)
        shares = ShareLedger()
        shares.mint(LP, 1_000)
        return state, shares

    def test_mints_to_recipient(self):
        state, shares = self._state_and_shares()

        with capture_logs() as logs:
            minted = ProtocolFeeAccrual().accrue(state, shares, TREASURY)

        assert minted == 15
        assert shares.balance_of(TREASURY) == 15
        assert shares.total_supply == 1_015
        assert [entry["event"] for entry in logs] == ["protocol_fee_accrued"]

    def test_no_recipient(self):
        state, shares = self._state_and_shares()
        assert ProtocolFeeAccrual().accrue(state, shares, None) == 0
        assert shares.total_supply == 1_000
