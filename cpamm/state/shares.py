"""Fungible liquidity-share ledger of a pool."""

from __future__ import annotations

from cpamm.constants import LOCKED_SHARES_HOLDER
from cpamm.errors import InsufficientShares, InvalidRecipient, ZeroInput


class ShareLedger:
    """Share balances and total supply.

    Shares held by LOCKED_SHARES_HOLDER are the permanently locked minimum
    liquidity: they can never be burned or transferred out.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    @property
    def locked(self) -> int:
        """Shares permanently held by the unreachable sink."""
        return self._balances.get(LOCKED_SHARES_HOLDER, 0)

    def balance_of(self, owner: str) -> int:
        return self._balances.get(owner, 0)

    def holders(self) -> dict[str, int]:
        """Snapshot of all non-zero balances."""
        return dict(self._balances)

    def copy(self) -> ShareLedger:
        """Independent copy for staging an operation."""
        clone = ShareLedger()
        clone._balances = dict(self._balances)
        clone._total_supply = self._total_supply
        return clone

    def mint(self, to: str, amount: int) -> None:
        if amount <= 0:
            raise ZeroInput(f"Cannot mint {amount} shares")
        self._balances[to] = self._balances.get(to, 0) + amount
        self._total_supply += amount

    def lock(self, amount: int) -> None:
        """Mint ``amount`` shares to the unreachable sink."""
        self.mint(LOCKED_SHARES_HOLDER, amount)

    def burn(self, owner: str, amount: int) -> None:
        """Destroy ``amount`` of ``owner``'s shares.

        Raises:
            InsufficientShares: If owner holds fewer shares or is the sink
        """
        if owner == LOCKED_SHARES_HOLDER:
            raise InsufficientShares("Locked minimum liquidity cannot be burned")
        self._debit(owner, amount)
        self._total_supply -= amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move shares between holders.

        Raises:
            InsufficientShares: If sender holds fewer shares or is the sink
            InvalidRecipient: If ``to`` is the sink
        """
        if sender == LOCKED_SHARES_HOLDER:
            raise InsufficientShares("Locked minimum liquidity cannot be transferred")
        if to == LOCKED_SHARES_HOLDER:
            raise InvalidRecipient("Shares cannot be sent to the locked holder")
        self._debit(sender, amount)
        self._balances[to] = self._balances.get(to, 0) + amount

    def _debit(self, owner: str, amount: int) -> None:
        if amount <= 0:
            raise ZeroInput(f"Share amount must be positive: {amount}")
        balance = self._balances.get(owner, 0)
        if balance < amount:
            raise InsufficientShares(f"{owner} holds {balance} shares, needs {amount}")
        if balance == amount:
            del self._balances[owner]
        else:
            self._balances[owner] = balance - amount
