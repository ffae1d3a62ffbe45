"""Pytest configuration and fixtures."""

import pytest

from cpamm.ledger.memory import InMemoryLedger
from cpamm.pools.pool import Pool
from tests.helpers import FakeClock, make_ledger, make_pool, seed_pool


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger with LP, ALICE and BOB funded in both assets."""
    return make_ledger()


@pytest.fixture
def pool(ledger: InMemoryLedger, clock: FakeClock) -> Pool:
    """Empty TKA/TKB pool with the default 0.3% fee."""
    return make_pool(ledger, clock)


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """TKA/TKB pool with 100,000 / 100,000 reserves deposited by LP."""
    return seed_pool(pool)
