"""Records, wire models and shared types."""

from cpamm.models.records import LiquidityAction, LiquidityRecord, TradeRecord
from cpamm.models.types import Identifier, Uint256, normalize_asset, pool_address, sort_assets

__all__ = [
    # Types
    "Identifier",
    "Uint256",
    "normalize_asset",
    "sort_assets",
    "pool_address",
    # Records
    "TradeRecord",
    "LiquidityRecord",
    "LiquidityAction",
]
