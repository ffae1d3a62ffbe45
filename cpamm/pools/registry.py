"""Pool registry: at most one pool per unordered asset pair."""

from __future__ import annotations

import threading

import structlog

from cpamm.errors import PoolExists, PoolNotFound, Unauthorized
from cpamm.fees.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.ledger.port import LedgerPort
from cpamm.models.types import sort_assets
from cpamm.pools.pool import Clock, Pool, system_clock

logger = structlog.get_logger()


class PoolRegistry:
    """Creates and looks up pools keyed by their canonically ordered pair.

    All pools created by a registry share its ledger, clock and
    administrator, and start with its protocol fee recipient.
    """

    def __init__(
        self,
        ledger: LedgerPort,
        admin: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        fee_recipient: str | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.ledger = ledger
        self.admin = admin
        self.config = config
        self.fee_recipient = fee_recipient
        self._clock = clock
        self._pools: dict[tuple[str, str], Pool] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._pools)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.find_pool(*pair) is not None

    def create_pool(self, asset_x: str, asset_y: str, config: PoolConfig | None = None) -> Pool:
        """Create the pool for a pair.

        Args:
            asset_x: One asset of the pair (order does not matter)
            asset_y: The other asset
            config: Pool settings (default: the registry's config)

        Raises:
            InvalidAsset: If the assets are equal or empty
            PoolExists: If the pair already has a pool
        """
        key = sort_assets(asset_x, asset_y)
        with self._lock:
            if key in self._pools:
                raise PoolExists(f"Pool {key[0]}/{key[1]} already exists")
            pool = Pool(
                key[0],
                key[1],
                self.ledger,
                admin=self.admin,
                config=config or self.config,
                fee_recipient=self.fee_recipient,
                clock=self._clock,
            )
            self._pools[key] = pool

        logger.info(
            "pool_created",
            pool=pool.address,
            asset_a=pool.asset_a,
            asset_b=pool.asset_b,
            fee_numerator=pool.config.fees.fee_numerator,
            fee_denominator=pool.config.fees.fee_denominator,
            pool_count=len(self._pools),
        )
        return pool

    def find_pool(self, asset_x: str, asset_y: str) -> Pool | None:
        """Get the pool for a pair, or None if it was never created."""
        return self._pools.get(sort_assets(asset_x, asset_y))

    def get_pool(self, asset_x: str, asset_y: str) -> Pool:
        """Get the pool for a pair.

        Raises:
            PoolNotFound: If the pair has no pool
        """
        pool = self.find_pool(asset_x, asset_y)
        if pool is None:
            raise PoolNotFound(f"No pool for {asset_x}/{asset_y}")
        return pool

    def all_pools(self) -> list[Pool]:
        """All pools in creation order."""
        return list(self._pools.values())

    def set_fee_recipient(self, caller: str, recipient: str | None) -> None:
        """Set the protocol fee recipient of the registry and every pool.

        Either every pool is updated or none is: a pool whose admin has been
        handed to someone else fails the whole call up front.
        """
        if caller != self.admin:
            raise Unauthorized(f"{caller} is not the registry administrator")
        with self._lock:
            pools = list(self._pools.values())
            foreign = [pool.address for pool in pools if pool.admin != caller]
            if foreign:
                raise Unauthorized(f"{caller} does not administer pools {', '.join(foreign)}")
            for pool in pools:
                pool.set_fee_recipient(caller, recipient)
            self.fee_recipient = recipient
