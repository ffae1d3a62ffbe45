"""Constant-product AMM engines."""

from cpamm.amm.liquidity import LiquidityEngine, LiquidityOutcome, size_deposit
from cpamm.amm.protocol_fee import ProtocolFeeAccrual
from cpamm.amm.swap import (
    SwapEngine,
    SwapKind,
    SwapOutcome,
    SwapQuote,
    quote_in,
    quote_out,
    quote_proportional,
)

__all__ = [
    # Pricing
    "quote_out",
    "quote_in",
    "quote_proportional",
    # Swaps
    "SwapEngine",
    "SwapKind",
    "SwapQuote",
    "SwapOutcome",
    # Liquidity
    "LiquidityEngine",
    "LiquidityOutcome",
    "size_deposit",
    # Protocol fee
    "ProtocolFeeAccrual",
]
