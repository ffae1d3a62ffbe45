"""Asset ledgers: the port pools consume and an in-memory implementation."""

from cpamm.ledger.memory import InMemoryLedger
from cpamm.ledger.port import LedgerPort

__all__ = ["LedgerPort", "InMemoryLedger"]
