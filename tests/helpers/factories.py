"""Factories for clocks, ledgers and pools."""

from cpamm.fees.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.ledger.memory import InMemoryLedger
from cpamm.pools.pool import Pool
from tests.helpers.constants import (
    ADMIN,
    ALICE,
    BOB,
    FUNDED_AMOUNT,
    LP,
    SEED_AMOUNT,
    START_TIME,
    TKA,
    TKB,
)


class FakeClock:
    """Manually advanced clock in whole seconds."""

    def __init__(self, start: int = START_TIME) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


def make_ledger(accounts: tuple[str, ...] = (LP, ALICE, BOB)) -> InMemoryLedger:
    """Ledger where every account holds FUNDED_AMOUNT of TKA and TKB."""
    ledger = InMemoryLedger()
    for account in accounts:
        ledger.mint(TKA, account, FUNDED_AMOUNT)
        ledger.mint(TKB, account, FUNDED_AMOUNT)
    return ledger


def make_pool(
    ledger: InMemoryLedger | None = None,
    clock: FakeClock | None = None,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
    fee_recipient: str | None = None,
) -> Pool:
    """Empty TKA/TKB pool administered by ADMIN."""
    return Pool(
        TKA,
        TKB,
        ledger if ledger is not None else make_ledger(),
        admin=ADMIN,
        config=config,
        fee_recipient=fee_recipient,
        clock=clock if clock is not None else FakeClock(),
    )


def seed_pool(pool: Pool, amount_a: int = SEED_AMOUNT, amount_b: int = SEED_AMOUNT) -> Pool:
    """Make LP the first depositor of ``pool``."""
    pool.add_liquidity(amount_a, amount_b, LP)
    return pool
