"""Fee and pool configuration."""

from dataclasses import dataclass, field

from cpamm.constants import (
    DEFAULT_FEE_DENOMINATOR,
    DEFAULT_FEE_NUMERATOR,
    DEFAULT_PROTOCOL_FEE_FACTOR,
)


@dataclass(frozen=True)
class FeeConfig:
    """Swap and protocol fee parameters of a pool.

    The swap fee is ``fee_numerator / fee_denominator`` of every input amount.
    The protocol takes ``1 / (protocol_fee_factor + 1)`` of the growth in
    ``sqrt(k)`` between liquidity events, when a recipient is configured.

    Attributes:
        fee_numerator: Fee numerator (default: 30)
        fee_denominator: Fee denominator (default: 10,000)
        protocol_fee_factor: Divisor term of the protocol fee formula (default: 5)
    """

    fee_numerator: int = DEFAULT_FEE_NUMERATOR
    fee_denominator: int = DEFAULT_FEE_DENOMINATOR
    protocol_fee_factor: int = DEFAULT_PROTOCOL_FEE_FACTOR

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not 0 <= self.fee_numerator < self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in [0, {self.fee_denominator}): {self.fee_numerator}"
            )
        if self.protocol_fee_factor <= 0:
            raise ValueError(f"protocol_fee_factor must be positive: {self.protocol_fee_factor}")

    @classmethod
    def from_bps(cls, fee_bps: int) -> "FeeConfig":
        """Create a config with a fee in basis points (30 = 0.3%)."""
        return cls(fee_numerator=fee_bps, fee_denominator=10_000)


@dataclass(frozen=True)
class PoolConfig:
    """Behaviour settings of a pool instance.

    Attributes:
        fees: Swap and protocol fee parameters
        history_size: Number of trade/liquidity records kept in memory (default: 1000)
    """

    fees: FeeConfig = field(default_factory=FeeConfig)
    history_size: int = 1000


# Default configuration instances
DEFAULT_FEE_CONFIG = FeeConfig()
DEFAULT_POOL_CONFIG = PoolConfig()
