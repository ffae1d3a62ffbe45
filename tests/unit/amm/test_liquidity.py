"""Tests for liquidity share issuance and redemption."""

import pytest

from cpamm.amm.liquidity import size_deposit
from cpamm.constants import LOCKED_SHARES_HOLDER, MINIMUM_LIQUIDITY
from cpamm.errors import (
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientShares,
    SlippageExceeded,
    TransferFailed,
    ZeroInput,
)
from cpamm.models.records import LiquidityAction
from tests.helpers import ALICE, BOB, CAROL, FUNDED_AMOUNT, LP, TKA, TKB


class TestSizeDeposit:
    """Tests for ratio-matched deposit sizing."""

    def test_empty_pool_takes_desired(self):
        assert size_deposit(5_000, 20_000, 0, 0, 0, 0) == (5_000, 20_000)

    def test_uses_full_a_when_b_fits(self):
        assert size_deposit(50, 500, 0, 0, 200, 800) == (50, 200)

    def test_solves_a_when_b_does_not_fit(self):
        """Reserves 200/800 and desired 50/50 deposit 12 A and 50 B."""
        assert size_deposit(50, 50, 0, 0, 200, 800) == (12, 50)

    def test_min_b_enforced(self):
        with pytest.raises(SlippageExceeded):
            size_deposit(50, 500, 0, 201, 200, 800)

    def test_min_a_enforced(self):
        with pytest.raises(SlippageExceeded):
            size_deposit(50, 50, 13, 0, 200, 800)


class TestFirstDeposit:
    """Tests for the deposit into an empty pool."""

    def test_mints_sqrt_minus_locked(self, pool, ledger):
        """100,000 / 100,000 mints 99,000 shares and locks 1,000."""
        record = pool.add_liquidity(100_000, 100_000, LP)

        assert record.action is LiquidityAction.MINT
        assert record.shares == 99_000
        assert pool.share_balance(LP) == 99_000
        assert pool.share_balance(LOCKED_SHARES_HOLDER) == MINIMUM_LIQUIDITY
        assert pool.total_shares == 100_000
        assert pool.get_reserves()[:2] == (100_000, 100_000)
        assert ledger.balance_of(TKA, LP) == FUNDED_AMOUNT - 100_000

    def test_sets_initial_price(self, pool):
        pool.add_liquidity(10_000, 40_000, LP)
        assert pool.get_reserves()[:2] == (10_000, 40_000)
        assert pool.total_shares == 20_000

    def test_deposit_at_minimum_fails(self, pool, ledger):
        with pytest.raises(InsufficientLiquidityMinted):
            pool.add_liquidity(1_000, 1_000, LP)
        assert pool.total_shares == 0
        assert ledger.balance_of(TKA, LP) == FUNDED_AMOUNT

    def test_deposit_just_above_minimum(self, pool):
        record = pool.add_liquidity(1_001, 1_001, LP)
        assert record.shares == 1

    def test_zero_desired_amount(self, pool):
        with pytest.raises(ZeroInput):
            pool.add_liquidity(0, 1_000, LP)

    def test_unfunded_provider(self, pool, ledger):
        with pytest.raises(TransferFailed):
            pool.add_liquidity(100_000, 100_000, CAROL)
        assert pool.state.is_empty


class TestLaterDeposits:
    """Tests for proportional share issuance."""

    def test_proportional_mint(self, seeded_pool):
        record = seeded_pool.add_liquidity(5_000, 5_000, ALICE)
        assert record.shares == 5_000
        assert seeded_pool.share_balance(ALICE) == 5_000

    def test_deposit_sized_to_ratio(self, pool):
        pool.add_liquidity(20_000, 80_000, LP)
        record = pool.add_liquidity(5_000, 5_000, ALICE)
        assert (record.amount_a, record.amount_b) == (1_250, 5_000)

    def test_shares_credited_to_other_account(self, seeded_pool):
        seeded_pool.add_liquidity(5_000, 5_000, ALICE, to=BOB)
        assert seeded_pool.share_balance(ALICE) == 0
        assert seeded_pool.share_balance(BOB) == 5_000

    def test_slippage_rolls_back(self, seeded_pool, ledger):
        with pytest.raises(SlippageExceeded):
            seeded_pool.add_liquidity(5_000, 5_000, ALICE, min_a=5_000, min_b=5_001)
        assert ledger.balance_of(TKA, ALICE) == FUNDED_AMOUNT
        assert seeded_pool.total_shares == 100_000

    def test_dust_deposit_worth_zero_shares(self, pool):
        pool.add_liquidity(10_000_000, 1_000_000, LP)
        with pytest.raises(InsufficientLiquidityMinted):
            pool.add_liquidity(1, 1, ALICE)


class TestRemoveLiquidity:
    """Tests for burning shares."""

    def test_pro_rata_payout(self, seeded_pool, ledger):
        record = seeded_pool.remove_liquidity(49_500, LP)

        assert record.action is LiquidityAction.BURN
        assert (record.amount_a, record.amount_b) == (49_500, 49_500)
        assert seeded_pool.get_reserves()[:2] == (50_500, 50_500)
        assert ledger.balance_of(TKB, LP) == FUNDED_AMOUNT - 100_000 + 49_500

    def test_burn_everything_but_locked(self, seeded_pool):
        seeded_pool.remove_liquidity(99_000, LP)
        assert seeded_pool.total_shares == MINIMUM_LIQUIDITY
        assert seeded_pool.get_reserves()[:2] == (1_000, 1_000)

    def test_payout_to_recipient(self, seeded_pool, ledger):
        seeded_pool.remove_liquidity(1_000, LP, recipient=CAROL)
        assert ledger.balance_of(TKA, CAROL) == 1_000
        assert ledger.balance_of(TKB, CAROL) == 1_000

    def test_more_than_held(self, seeded_pool):
        with pytest.raises(InsufficientShares):
            seeded_pool.remove_liquidity(99_001, LP)

    def test_zero_shares(self, seeded_pool):
        with pytest.raises(ZeroInput):
            seeded_pool.remove_liquidity(0, LP)

    def test_locked_shares_cannot_be_burned(self, seeded_pool):
        with pytest.raises(InsufficientShares):
            seeded_pool.remove_liquidity(1, LOCKED_SHARES_HOLDER)
        assert seeded_pool.shares.locked == MINIMUM_LIQUIDITY

    def test_payout_below_minimum(self, seeded_pool, ledger):
        with pytest.raises(SlippageExceeded):
            seeded_pool.remove_liquidity(1_000, LP, min_a=1_001)
        assert seeded_pool.share_balance(LP) == 99_000
        assert ledger.balance_of(TKA, LP) == FUNDED_AMOUNT - 100_000

    def test_payout_rounding_to_zero(self, pool):
        pool.add_liquidity(10_000_000, 1_000_000, LP)
        # 1 of 3,162,277 shares is worth less than one unit of TKB
        with pytest.raises(InsufficientLiquidityBurned):
            pool.remove_liquidity(1, LP)


class TestDepositConservation:
    """A deposit followed by burning its shares never returns more than went in."""

    def test_balanced_pool(self, seeded_pool):
        deposit = seeded_pool.add_liquidity(5_000, 5_000, ALICE)
        payout = seeded_pool.remove_liquidity(deposit.shares, ALICE)
        assert (payout.amount_a, payout.amount_b) == (5_000, 5_000)

    def test_after_trading(self, seeded_pool):
        seeded_pool.swap_exact_in(TKA, 1_000, 0, BOB)
        assert seeded_pool.get_reserves()[:2] == (101_000, 99_013)

        deposit = seeded_pool.add_liquidity(10_100, 10_000, ALICE)
        assert (deposit.amount_a, deposit.amount_b) == (10_100, 9_901)
        assert deposit.shares == 9_999

        payout = seeded_pool.remove_liquidity(deposit.shares, ALICE)
        assert (payout.amount_a, payout.amount_b) == (10_099, 9_900)
        assert payout.amount_a <= deposit.amount_a
        assert payout.amount_b <= deposit.amount_b
