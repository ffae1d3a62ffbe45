"""Protocol constants for the constant-product engine.

Centralizes numeric bounds and well-known identities.
"""

# Shares permanently withheld at the first deposit of every pool
MINIMUM_LIQUIDITY = 1000

# Reserves are bounded to 112 bits; intermediates to 256 bits
RESERVE_BITS = 112
MAX_RESERVE = 2**RESERVE_BITS - 1
UINT256_MAX = 2**256 - 1

# UQ112.112 fixed-point scale used by the cumulative price accumulators
Q112 = 2**112

# Default swap fee: 30 / 10000 = 0.3%
DEFAULT_FEE_NUMERATOR = 30
DEFAULT_FEE_DENOMINATOR = 10_000

# Protocol fee takes 1 / (factor + 1) of the growth in sqrt(k)
DEFAULT_PROTOCOL_FEE_FACTOR = 5

# Unreachable share holder that owns MINIMUM_LIQUIDITY of every active pool
LOCKED_SHARES_HOLDER = "0x0000000000000000000000000000000000000000"
