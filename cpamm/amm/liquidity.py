"""Liquidity share issuance and redemption.

The first deposit into an empty pool mints ``isqrt(a * b)`` shares, of which
MINIMUM_LIQUIDITY are locked forever so nobody can cheaply inflate the value
of a single share before real liquidity arrives. Later deposits mint shares
in proportion to the smaller of the two deposit ratios.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from cpamm.amm.protocol_fee import ProtocolFeeAccrual
from cpamm.amm.swap import quote_proportional
from cpamm.constants import MINIMUM_LIQUIDITY
from cpamm.errors import (
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientShares,
    SlippageExceeded,
    TransferFailed,
    ZeroInput,
)
from cpamm.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from cpamm.models.records import LiquidityAction, LiquidityRecord
from cpamm.safe_int import S
from cpamm.state.reserves import ReserveState
from cpamm.state.shares import ShareLedger

if TYPE_CHECKING:
    from cpamm.pools.pool import Pool

logger = structlog.get_logger()


def size_deposit(
    desired_a: int,
    desired_b: int,
    min_a: int,
    min_b: int,
    reserve_a: int,
    reserve_b: int,
) -> tuple[int, int]:
    """Choose deposit amounts that match the pool's current ratio.

    An empty pool takes the desired amounts as-is, which sets its initial
    price. Otherwise the full ``desired_a`` is used when the matching amount
    of B fits in ``desired_b``; if not, the full ``desired_b`` is used and A
    is solved from it.

    Returns:
        (amount_a, amount_b) to deposit

    Raises:
        SlippageExceeded: If the solved side falls below its minimum
    """
    if reserve_a == 0 and reserve_b == 0:
        return desired_a, desired_b

    optimal_b = quote_proportional(desired_a, reserve_a, reserve_b)
    if optimal_b <= desired_b:
        if optimal_b < min_b:
            raise SlippageExceeded(f"Optimal amount_b {optimal_b} is below minimum {min_b}")
        return desired_a, optimal_b

    optimal_a = quote_proportional(desired_b, reserve_b, reserve_a)
    # optimal_a <= desired_a holds whenever optimal_b > desired_b
    if optimal_a < min_a:
        raise SlippageExceeded(f"Optimal amount_a {optimal_a} is below minimum {min_a}")
    return optimal_a, desired_b


@dataclass(frozen=True)
class LiquidityOutcome:
    """Staged result of a mint or burn, committed by the pool."""

    state: ReserveState
    shares: ShareLedger
    record: LiquidityRecord


class LiquidityEngine:
    """Mints and burns pool shares against ledger deposits and withdrawals."""

    def __init__(self, fees: FeeConfig = DEFAULT_FEE_CONFIG) -> None:
        self.protocol_fee = ProtocolFeeAccrual(fees)

    def mint_shares(
        self,
        pool: Pool,
        amount_a: int,
        amount_b: int,
        provider: str,
        to: str,
    ) -> LiquidityOutcome:
        """Pull a deposit from ``provider`` and mint shares to ``to``.

        Shares are sized from the balance deltas the ledger actually shows,
        not from the nominal amounts.

        Raises:
            InsufficientLiquidityMinted: If the deposit is worth no shares
            TransferFailed: If the ledger refused to pull either asset
        """
        state = pool.state
        shares = pool.shares.copy()
        fee_shares = self.protocol_fee.accrue(state, shares, pool.fee_recipient)

        ledger = pool.ledger
        if not ledger.transfer_from(pool.asset_a, provider, pool.address, amount_a):
            raise TransferFailed(f"Could not pull {amount_a} {pool.asset_a} from {provider}")
        if not ledger.transfer_from(pool.asset_b, provider, pool.address, amount_b):
            raise TransferFailed(f"Could not pull {amount_b} {pool.asset_b} from {provider}")

        balance_a = ledger.balance_of(pool.asset_a, pool.address)
        balance_b = ledger.balance_of(pool.asset_b, pool.address)
        deposit_a = S(balance_a) - S(state.reserve_a)
        deposit_b = S(balance_b) - S(state.reserve_b)

        total = shares.total_supply
        if total == 0:
            root = (deposit_a * deposit_b).isqrt()
            if root <= MINIMUM_LIQUIDITY:
                raise InsufficientLiquidityMinted(
                    f"Initial deposit worth {root.value} shares, must exceed {MINIMUM_LIQUIDITY}"
                )
            minted = (root - S(MINIMUM_LIQUIDITY)).value
            shares.lock(MINIMUM_LIQUIDITY)
            logger.info("minimum_liquidity_locked", pool=pool.address, shares=MINIMUM_LIQUIDITY)
        else:
            by_a = deposit_a * S(total) // S(state.reserve_a)
            by_b = deposit_b * S(total) // S(state.reserve_b)
            minted = by_a.min(by_b).value
            if minted == 0:
                raise InsufficientLiquidityMinted("Deposit is worth zero shares")

        shares.mint(to, minted)
        staged = state.advanced(balance_a, balance_b, pool.now())
        staged = staged.with_k_last(staged.invariant)

        record = LiquidityRecord(
            pool=pool.address,
            action=LiquidityAction.MINT,
            provider=provider,
            recipient=to,
            amount_a=deposit_a.value,
            amount_b=deposit_b.value,
            shares=minted,
            protocol_fee_shares=fee_shares,
            timestamp=staged.last_update_time,
        )
        return LiquidityOutcome(state=staged, shares=shares, record=record)

    def burn_shares(
        self,
        pool: Pool,
        amount: int,
        min_a: int,
        min_b: int,
        owner: str,
        recipient: str,
    ) -> LiquidityOutcome:
        """Burn ``owner``'s shares and pay the underlying assets to ``recipient``.

        Payouts are ``amount / total_shares`` of the pool's ledger balances,
        rounded down.

        Raises:
            InsufficientShares: If ``owner`` holds fewer than ``amount`` shares
            InsufficientLiquidityBurned: If either payout rounds to zero
            SlippageExceeded: If a payout is below its minimum
        """
        if amount == 0:
            raise ZeroInput("Share amount to burn is zero")
        state = pool.state
        shares = pool.shares.copy()
        fee_shares = self.protocol_fee.accrue(state, shares, pool.fee_recipient)

        held = shares.balance_of(owner)
        if held < amount:
            raise InsufficientShares(f"{owner} holds {held} shares, asked to burn {amount}")

        ledger = pool.ledger
        balance_a = ledger.balance_of(pool.asset_a, pool.address)
        balance_b = ledger.balance_of(pool.asset_b, pool.address)
        total = S(shares.total_supply)
        amount_a = (S(amount) * S(balance_a) // total).value
        amount_b = (S(amount) * S(balance_b) // total).value

        if amount_a == 0 or amount_b == 0:
            raise InsufficientLiquidityBurned(
                f"Burning {amount} shares returns {amount_a}/{amount_b}"
            )
        if amount_a < min_a or amount_b < min_b:
            raise SlippageExceeded(
                f"Payout {amount_a}/{amount_b} is below minimum {min_a}/{min_b}"
            )

        shares.burn(owner, amount)
        if not ledger.transfer(pool.asset_a, pool.address, recipient, amount_a):
            raise TransferFailed(f"Could not push {amount_a} {pool.asset_a}")
        if not ledger.transfer(pool.asset_b, pool.address, recipient, amount_b):
            raise TransferFailed(f"Could not push {amount_b} {pool.asset_b}")

        balance_a = ledger.balance_of(pool.asset_a, pool.address)
        balance_b = ledger.balance_of(pool.asset_b, pool.address)
        staged = state.advanced(balance_a, balance_b, pool.now())
        staged = staged.with_k_last(staged.invariant)

        record = LiquidityRecord(
            pool=pool.address,
            action=LiquidityAction.BURN,
            provider=owner,
            recipient=recipient,
            amount_a=amount_a,
            amount_b=amount_b,
            shares=amount,
            protocol_fee_shares=fee_shares,
            timestamp=staged.last_update_time,
        )
        return LiquidityOutcome(state=staged, shares=shares, record=record)
