"""Constant-product AMM engine."""

from cpamm.amm.swap import SwapKind, quote_in, quote_out, quote_proportional
from cpamm.fees.config import FeeConfig, PoolConfig
from cpamm.ledger import InMemoryLedger, LedgerPort
from cpamm.pools import Pool, PoolRegistry

__version__ = "0.1.0"
__all__ = [
    "Pool",
    "PoolRegistry",
    "PoolConfig",
    "FeeConfig",
    "LedgerPort",
    "InMemoryLedger",
    "SwapKind",
    "quote_out",
    "quote_in",
    "quote_proportional",
    "__version__",
]
