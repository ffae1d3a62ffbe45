"""Pools and the registry that creates them."""

from cpamm.pools.access import AdminGate, PauseState
from cpamm.pools.lock import PoolLock
from cpamm.pools.pool import Pool, system_clock
from cpamm.pools.registry import PoolRegistry

__all__ = [
    "Pool",
    "PoolRegistry",
    "PoolLock",
    "AdminGate",
    "PauseState",
    "system_clock",
]
