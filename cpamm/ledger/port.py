"""Ledger port consumed by pools for custody of the two pooled assets."""

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class LedgerPort(Protocol):
    """Protocol for external asset ledgers.

    Pools never assume a transfer moved exactly the requested amount.
    After transferring they re-read balances and derive realized amounts
    from the deltas, so assets that charge their own transfer fee (or call
    back into the pool) cannot cheat the invariant check.

    Account identities and asset identifiers are opaque strings.
    """

    def balance_of(self, asset: str, owner: str) -> int:
        """Return the balance of ``owner`` in ``asset``."""
        ...

    def transfer_from(self, asset: str, owner: str, to: str, amount: int) -> bool:
        """Pull ``amount`` of ``asset`` from ``owner`` to ``to``.

        Returns:
            True on success, False if the ledger refused the transfer
        """
        ...

    def transfer(self, asset: str, sender: str, to: str, amount: int) -> bool:
        """Push ``amount`` of ``asset`` from the pool account ``sender`` to ``to``.

        Returns:
            True on success, False if the ledger refused the transfer
        """
        ...

    def atomic(self) -> AbstractContextManager[None]:
        """Open a transactional scope.

        Transfers made inside the scope are kept when the block exits
        normally and reverted when it raises. Scopes may nest.
        """
        ...
