"""In-memory ledger implementing LedgerPort.

Used by the HTTP service and by tests. Supports assets that skim a fee on
every transfer, and a hook invoked after each transfer (an untrusted asset
calling back into whoever moved it).
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

logger = structlog.get_logger()

# (asset, sender or None for a mint, receiver, debited, credited)
JournalEntry = tuple[str, str | None, str, int, int]
TransferHook = Callable[[str, str, str, int], None]


class InMemoryLedger:
    """Dict-backed balances for any number of assets.

    Transfers fail (return False) instead of raising when the sender's
    balance is insufficient, mirroring tokens that signal failure by return
    value. Journals are kept per thread so that one thread's rollback never
    touches another thread's transfers. A rollback takes back from each
    receiver only what it still holds: when another thread has already
    moved the credit on, that transfer stands and the sender is
    refunded the remainder.
    """

    def __init__(
        self,
        transfer_fee_bps: dict[str, int] | None = None,
        on_transfer: TransferHook | None = None,
    ) -> None:
        """Create an empty ledger.

        Args:
            transfer_fee_bps: Per-asset fee in basis points withheld from the
                amount delivered to the receiver (e.g. 100 = 1%)
            on_transfer: Called as ``hook(asset, sender, to, amount)`` after
                every successful transfer
        """
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._transfer_fee_bps = dict(transfer_fee_bps or {})
        self.on_transfer = on_transfer
        self._lock = threading.RLock()
        self._local = threading.local()

    # --- LedgerPort ---

    def balance_of(self, asset: str, owner: str) -> int:
        with self._lock:
            return self._balances.get((asset, owner), 0)

    def transfer_from(self, asset: str, owner: str, to: str, amount: int) -> bool:
        return self._move(asset, owner, to, amount)

    def transfer(self, asset: str, sender: str, to: str, amount: int) -> bool:
        return self._move(asset, sender, to, amount)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        stack = self._journal_stack()
        stack.append([])
        try:
            yield
        except BaseException:
            entries = stack.pop()
            self._revert(entries)
            raise
        else:
            entries = stack.pop()
            if stack:
                stack[-1].extend(entries)

    # --- Administration ---

    def mint(self, asset: str, owner: str, amount: int) -> None:
        """Credit ``amount`` of ``asset`` to ``owner`` out of thin air."""
        if amount < 0:
            raise ValueError(f"Mint amount cannot be negative: {amount}")
        with self._lock:
            self._balances[(asset, owner)] += amount
            self._record((asset, None, owner, 0, amount))
        logger.debug("ledger_mint", asset=asset, owner=owner, amount=amount)

    def set_transfer_fee(self, asset: str, fee_bps: int) -> None:
        """Set the fee withheld on transfers of ``asset``."""
        if not 0 <= fee_bps <= 10_000:
            raise ValueError(f"Transfer fee must be in [0, 10000] bps: {fee_bps}")
        self._transfer_fee_bps[asset] = fee_bps

    # --- Internals ---

    def _move(self, asset: str, sender: str, to: str, amount: int) -> bool:
        if amount < 0:
            return False
        fee = amount * self._transfer_fee_bps.get(asset, 0) // 10_000
        with self._lock:
            if self._balances.get((asset, sender), 0) < amount:
                logger.debug(
                    "ledger_transfer_refused",
                    asset=asset,
                    sender=sender,
                    amount=amount,
                    balance=self._balances.get((asset, sender), 0),
                )
                return False
            self._balances[(asset, sender)] -= amount
            self._balances[(asset, to)] += amount - fee
            self._record((asset, sender, to, amount, amount - fee))
        if self.on_transfer is not None:
            self.on_transfer(asset, sender, to, amount)
        return True

    def _record(self, entry: JournalEntry) -> None:
        stack = self._journal_stack()
        if stack:
            stack[-1].append(entry)

    def _revert(self, entries: list[JournalEntry]) -> None:
        with self._lock:
            for asset, sender, to, debited, credited in reversed(entries):
                clawback = min(credited, max(0, self._balances[(asset, to)]))
                self._balances[(asset, to)] -= clawback
                if sender is not None:
                    self._balances[(asset, sender)] += debited - (credited - clawback)
                if clawback < credited:
                    logger.warning(
                        "ledger_revert_shortfall",
                        asset=asset,
                        sender=sender,
                        to=to,
                        credited=credited,
                        recovered=clawback,
                    )
        if entries:
            logger.debug("ledger_reverted", entries=len(entries))

    def _journal_stack(self) -> list[list[JournalEntry]]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack
