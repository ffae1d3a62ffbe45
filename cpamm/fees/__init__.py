"""Fee configuration for constant-product pools."""

from cpamm.fees.config import DEFAULT_FEE_CONFIG, DEFAULT_POOL_CONFIG, FeeConfig, PoolConfig

__all__ = [
    "FeeConfig",
    "PoolConfig",
    "DEFAULT_FEE_CONFIG",
    "DEFAULT_POOL_CONFIG",
]
