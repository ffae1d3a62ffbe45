"""Test helpers module for shared test utilities.

- constants: Asset identifiers, accounts and common amounts
- factories: Clock, ledger and pool factory functions
"""

from tests.helpers.constants import (
    ADMIN,
    ALICE,
    BOB,
    CAROL,
    FUNDED_AMOUNT,
    LP,
    SEED_AMOUNT,
    START_TIME,
    TKA,
    TKB,
    TKC,
    TREASURY,
)
from tests.helpers.factories import FakeClock, make_ledger, make_pool, seed_pool

__all__ = [
    # Constants
    "TKA",
    "TKB",
    "TKC",
    "ADMIN",
    "LP",
    "ALICE",
    "BOB",
    "CAROL",
    "TREASURY",
    "SEED_AMOUNT",
    "FUNDED_AMOUNT",
    "START_TIME",
    # Factories
    "FakeClock",
    "make_ledger",
    "make_pool",
    "seed_pool",
]
