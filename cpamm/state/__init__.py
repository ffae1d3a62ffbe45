"""Pool state: reserves, accumulators and liquidity shares."""

from cpamm.state.reserves import ReserveState
from cpamm.state.shares import ShareLedger

__all__ = ["ReserveState", "ShareLedger"]
