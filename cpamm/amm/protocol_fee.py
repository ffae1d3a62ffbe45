"""Protocol fee accrual on invariant growth.

Between two liquidity events, swap fees grow k = reserve_a * reserve_b. When a
fee recipient is configured, the protocol claims ``1 / (factor + 1)`` of the
growth in sqrt(k) by minting new shares, diluting existing holders instead of
moving assets:

    fee_shares = T * (sqrt(k_new) - sqrt(k_old)) / (sqrt(k_new) * factor + sqrt(k_old))
"""

import structlog

from cpamm.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from cpamm.safe_int import S
from cpamm.state.reserves import ReserveState
from cpamm.state.shares import ShareLedger

logger = structlog.get_logger()


class ProtocolFeeAccrual:
    """Computes and mints the protocol's share of invariant growth."""

    def __init__(self, fees: FeeConfig = DEFAULT_FEE_CONFIG) -> None:
        self.fees = fees

    def fee_shares(self, k_last: int, reserve_a: int, reserve_b: int, total_shares: int) -> int:
        """Shares owed to the protocol for growth from ``k_last`` to the current reserves."""
        if k_last == 0:
            return 0
        root_new = (S(reserve_a) * S(reserve_b)).isqrt()
        root_old = S(k_last).isqrt()
        if root_new <= root_old:
            return 0
        numerator = S(total_shares) * (root_new - root_old)
        denominator = root_new * S(self.fees.protocol_fee_factor) + root_old
        return (numerator // denominator).value

    def accrue(self, state: ReserveState, shares: ShareLedger, recipient: str | None) -> int:
        """Mint fee shares to ``recipient`` into the staged share ledger.

        Must run before any share quantity of a mint or burn is computed,
        so the dilution is priced in first. Calling it again with no growth
        mints nothing.

        Args:
            state: Pool state before the liquidity event
            shares: Staged share ledger to mint into
            recipient: Protocol fee recipient, or None when the fee is off

        Returns:
            Number of shares minted (0 when the fee is off or k did not grow)
        """
        if recipient is None:
            return 0

        minted = self.fee_shares(state.k_last, state.reserve_a, state.reserve_b, shares.total_supply)
        if minted > 0:
            shares.mint(recipient, minted)
            logger.info(
                "protocol_fee_accrued",
                recipient=recipient,
                fee_shares=minted,
                k_last=state.k_last,
                k=state.invariant,
            )
        return minted
