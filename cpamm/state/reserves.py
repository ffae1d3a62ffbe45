"""Persistent numeric state of a pool."""

from __future__ import annotations

from dataclasses import dataclass, replace

from cpamm.constants import Q112, UINT256_MAX
from cpamm.safe_int import S

# Accumulators are difference-based and wrap like 256-bit words
_ACCUMULATOR_MODULUS = UINT256_MAX + 1


@dataclass(frozen=True)
class ReserveState:
    """Reserves, clock and price accumulators of one pool.

    Instances are immutable. Operations stage a new state and the pool
    swaps it in only after every check has passed.

    Attributes:
        reserve_a: Recorded reserve of asset_a
        reserve_b: Recorded reserve of asset_b
        last_update_time: Pool clock at the last reserve commit
        cumulative_price_a: Sum of UQ112.112 price of asset_a (in asset_b) times seconds
        cumulative_price_b: Sum of UQ112.112 price of asset_b (in asset_a) times seconds
        k_last: reserve_a * reserve_b right after the last liquidity event
    """

    reserve_a: int = 0
    reserve_b: int = 0
    last_update_time: int = 0
    cumulative_price_a: int = 0
    cumulative_price_b: int = 0
    k_last: int = 0

    @property
    def invariant(self) -> int:
        """Current product of the reserves."""
        return self.reserve_a * self.reserve_b

    @property
    def is_empty(self) -> bool:
        return self.reserve_a == 0 and self.reserve_b == 0

    def reserves_for(self, a_is_input: bool) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if a_is_input:
            return self.reserve_a, self.reserve_b
        return self.reserve_b, self.reserve_a

    def advanced(self, balance_a: int, balance_b: int, now: int) -> ReserveState:
        """Stage new reserves from ledger balances.

        Accumulators advance first, priced with the outgoing reserves over
        the time elapsed since the last commit.

        Raises:
            Overflow: If either balance exceeds the 112-bit reserve bound
        """
        reserve_a = S(balance_a).to_reserve()
        reserve_b = S(balance_b).to_reserve()

        price_a, price_b = self.cumulative_price_a, self.cumulative_price_b
        elapsed = now - self.last_update_time
        if elapsed > 0 and self.reserve_a != 0 and self.reserve_b != 0:
            price_a = (price_a + self.reserve_b * Q112 // self.reserve_a * elapsed) % _ACCUMULATOR_MODULUS
            price_b = (price_b + self.reserve_a * Q112 // self.reserve_b * elapsed) % _ACCUMULATOR_MODULUS

        return replace(
            self,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            last_update_time=max(now, self.last_update_time),
            cumulative_price_a=price_a,
            cumulative_price_b=price_b,
        )

    def with_k_last(self, k_last: int) -> ReserveState:
        return replace(self, k_last=k_last)
