"""Records emitted by pools for observability."""

from dataclasses import dataclass
from enum import Enum


class LiquidityAction(str, Enum):
    """Direction of a liquidity change."""

    MINT = "mint"
    BURN = "burn"


@dataclass(frozen=True)
class TradeRecord:
    """A swap executed against a pool.

    Amounts are the realized ones, derived from ledger balance deltas.
    """

    pool: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int
    trader: str
    recipient: str
    timestamp: int


@dataclass(frozen=True)
class LiquidityRecord:
    """A share mint or burn.

    Attributes:
        pool: Pool ledger account
        action: MINT or BURN
        provider: Account that deposited assets (mint) or owned the shares (burn)
        recipient: Account credited with shares (mint) or assets (burn)
        amount_a: Realized amount of asset_a deposited or withdrawn
        amount_b: Realized amount of asset_b deposited or withdrawn
        shares: Shares minted to or burned from the provider
        protocol_fee_shares: Shares minted to the protocol fee recipient first
        timestamp: Pool clock at commit
    """

    pool: str
    action: LiquidityAction
    provider: str
    recipient: str
    amount_a: int
    amount_b: int
    shares: int
    protocol_fee_shares: int
    timestamp: int
