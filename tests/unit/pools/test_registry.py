"""Tests for the pool registry."""

import pytest
from structlog.testing import capture_logs

from cpamm.errors import InvalidAsset, PoolExists, PoolNotFound, Unauthorized
from cpamm.fees.config import FeeConfig, PoolConfig
from cpamm.pools.registry import PoolRegistry
from tests.helpers import ADMIN, ALICE, BOB, TKA, TKB, TKC, TREASURY, FakeClock, make_ledger


@pytest.fixture
def registry():
    return PoolRegistry(make_ledger(), admin=ADMIN, clock=FakeClock())


class TestCreatePool:
    """Tests for pool creation."""

    def test_create(self, registry):
        with capture_logs() as logs:
            pool = registry.create_pool(TKB, TKA)

        assert (pool.asset_a, pool.asset_b) == (TKA, TKB)
        assert pool.ledger is registry.ledger
        assert pool.admin == ADMIN
        assert len(registry) == 1
        assert logs[-1]["event"] == "pool_created"

    def test_duplicate_in_either_order(self, registry):
        registry.create_pool(TKA, TKB)
        with pytest.raises(PoolExists):
            registry.create_pool(TKA, TKB)
        with pytest.raises(PoolExists):
            registry.create_pool(TKB, TKA)
        assert len(registry) == 1

    def test_identical_assets(self, registry):
        with pytest.raises(InvalidAsset):
            registry.create_pool(TKA, TKA)

    def test_custom_config(self, registry):
        pool = registry.create_pool(TKA, TKC, PoolConfig(fees=FeeConfig.from_bps(100)))
        assert pool.config.fees.fee_numerator == 100

    def test_inherits_fee_recipient(self):
        registry = PoolRegistry(make_ledger(), admin=ADMIN, fee_recipient=TREASURY)
        assert registry.create_pool(TKA, TKB).fee_recipient == TREASURY


class TestLookup:
    """Tests for finding pools."""

    def test_get_either_order(self, registry):
        pool = registry.create_pool(TKA, TKB)
        assert registry.get_pool(TKA, TKB) is pool
        assert registry.get_pool(TKB, TKA) is pool
        assert (TKB, TKA) in registry

    def test_missing(self, registry):
        assert registry.find_pool(TKA, TKC) is None
        assert (TKA, TKC) not in registry
        assert "TKA" not in registry
        with pytest.raises(PoolNotFound):
            registry.get_pool(TKA, TKC)

    def test_all_pools_in_creation_order(self, registry):
        first = registry.create_pool(TKA, TKB)
        second = registry.create_pool(TKB, TKC)
        assert registry.all_pools() == [first, second]


class TestFeeRecipient:
    """Tests for registry-wide protocol fee control."""

    def test_propagates_to_pools(self, registry):
        pools = [registry.create_pool(TKA, TKB), registry.create_pool(TKA, TKC)]
        registry.set_fee_recipient(ADMIN, TREASURY)

        assert all(pool.fee_recipient == TREASURY for pool in pools)
        assert registry.create_pool(TKB, TKC).fee_recipient == TREASURY

    def test_admin_only(self, registry):
        registry.create_pool(TKA, TKB)
        with pytest.raises(Unauthorized):
            registry.set_fee_recipient(ALICE, ALICE)
        assert registry.fee_recipient is None

    def test_foreign_pool_admin_blocks_every_pool(self, registry):
        ab = registry.create_pool(TKA, TKB)
        bc = registry.create_pool(TKB, TKC)
        bc.transfer_admin(ADMIN, BOB)

        with pytest.raises(Unauthorized):
            registry.set_fee_recipient(ADMIN, TREASURY)

        assert ab.fee_recipient is None
        assert bc.fee_recipient is None
        assert registry.fee_recipient is None
