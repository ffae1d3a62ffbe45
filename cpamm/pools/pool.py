"""Pool orchestrator.

A Pool owns one ReserveState and one ShareLedger and composes the swap,
liquidity and protocol fee engines. Every mutating operation:

1. holds the pool's critical section for its full duration, ledger calls included
2. checks the pause flag, then the caller's deadline
3. runs inside a ledger transaction and on staged copies of the state
4. commits the staged state only after every check has passed

Any error aborts the operation with no partial change.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from cpamm.amm.liquidity import LiquidityEngine, size_deposit
from cpamm.amm.swap import SwapEngine, SwapKind, SwapQuote
from cpamm.errors import (
    AMMError,
    DeadlineExpired,
    InsufficientLiquidity,
    InvalidAsset,
    SecurityError,
    TransferFailed,
    ZeroInput,
)
from cpamm.fees.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.ledger.port import LedgerPort
from cpamm.models.records import LiquidityRecord, TradeRecord
from cpamm.models.types import pool_address, sort_assets
from cpamm.pools.access import AdminGate, PauseState
from cpamm.pools.lock import PoolLock
from cpamm.state.reserves import ReserveState
from cpamm.state.shares import ShareLedger

logger = structlog.get_logger()

Clock = Callable[[], int]


def system_clock() -> int:
    """Wall-clock time in whole seconds."""
    return int(time.time())


class Pool:
    """Constant-product pool for one canonically ordered asset pair."""

    def __init__(
        self,
        asset_x: str,
        asset_y: str,
        ledger: LedgerPort,
        admin: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        fee_recipient: str | None = None,
        clock: Clock = system_clock,
    ) -> None:
        """Create an empty pool.

        Args:
            asset_x: One pooled asset (order does not matter)
            asset_y: The other pooled asset
            ledger: Custody of both assets
            admin: Account allowed to run admin operations
            config: Fee and history settings
            fee_recipient: Protocol fee recipient, None to disable the fee
            clock: Source of the pool's timestamps (seconds)

        Raises:
            InvalidAsset: If the assets are equal or empty
        """
        self.asset_a, self.asset_b = sort_assets(asset_x, asset_y)
        self.address = pool_address(self.asset_a, self.asset_b)
        self.ledger = ledger
        self.config = config
        self.fee_recipient = fee_recipient
        self._clock = clock

        self._state = ReserveState()
        self._shares = ShareLedger()
        self._swaps = SwapEngine(config.fees)
        self._liquidity = LiquidityEngine(config.fees)
        self._lock = PoolLock(self.address)
        self._admin = AdminGate(admin)
        self._pause = PauseState()
        self._history: deque[TradeRecord | LiquidityRecord] = deque(maxlen=config.history_size)

    def __repr__(self) -> str:
        state = self._state
        return f"Pool({self.asset_a}/{self.asset_b}, reserves={state.reserve_a}/{state.reserve_b})"

    # --- Read-only views ---

    @property
    def state(self) -> ReserveState:
        """Committed state snapshot."""
        return self._state

    @property
    def shares(self) -> ShareLedger:
        """Committed share ledger (read-only by convention)."""
        return self._shares

    @property
    def total_shares(self) -> int:
        return self._shares.total_supply

    @property
    def admin(self) -> str:
        return self._admin.admin

    @property
    def paused(self) -> bool:
        return self._pause.paused

    @property
    def history(self) -> list[TradeRecord | LiquidityRecord]:
        """Most recent trade and liquidity records, oldest first."""
        return list(self._history)

    def now(self) -> int:
        return self._clock()

    def share_balance(self, owner: str) -> int:
        return self._shares.balance_of(owner)

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve_a, reserve_b, last_update_time)."""
        state = self._state
        return state.reserve_a, state.reserve_b, state.last_update_time

    def get_cumulative_prices(self) -> tuple[int, int]:
        """Return (cumulative_price_a, cumulative_price_b) as of the last commit."""
        state = self._state
        return state.cumulative_price_a, state.cumulative_price_b

    def other_asset(self, asset: str) -> str:
        """Get the counterpart of ``asset`` in this pool.

        Raises:
            InvalidAsset: If ``asset`` is not one of the pool's assets
        """
        if asset == self.asset_a:
            return self.asset_b
        if asset == self.asset_b:
            return self.asset_a
        raise InvalidAsset(f"Asset {asset} not in pool {self.asset_a}/{self.asset_b}")

    def quote_exact_in(self, asset_in: str, amount_in: int) -> SwapQuote:
        """Price selling exactly ``amount_in`` of ``asset_in``."""
        return self._swaps.quote(self, asset_in, amount_in, SwapKind.EXACT_IN)

    def quote_exact_out(self, asset_in: str, amount_out: int) -> SwapQuote:
        """Price buying exactly ``amount_out`` of the other asset with ``asset_in``."""
        return self._swaps.quote(self, asset_in, amount_out, SwapKind.EXACT_OUT)

    # --- Swaps ---

    def swap_exact_in(
        self,
        asset_in: str,
        amount_in: int,
        min_amount_out: int,
        trader: str,
        recipient: str | None = None,
        deadline: int | None = None,
    ) -> TradeRecord:
        """Sell exactly ``amount_in`` of ``asset_in`` for at least ``min_amount_out``."""
        return self._swap(
            asset_in, amount_in, SwapKind.EXACT_IN, min_amount_out, trader, recipient, deadline
        )

    def swap_exact_out(
        self,
        asset_in: str,
        amount_out: int,
        max_amount_in: int,
        trader: str,
        recipient: str | None = None,
        deadline: int | None = None,
    ) -> TradeRecord:
        """Buy exactly ``amount_out`` of the other asset for at most ``max_amount_in``."""
        return self._swap(
            asset_in, amount_out, SwapKind.EXACT_OUT, max_amount_in, trader, recipient, deadline
        )

    def _swap(
        self,
        asset_in: str,
        amount: int,
        kind: SwapKind,
        limit: int,
        trader: str,
        recipient: str | None,
        deadline: int | None,
    ) -> TradeRecord:
        recipient = recipient or trader
        with self._operation("swap", deadline, asset_in=asset_in, kind=kind.value, amount=amount):
            outcome = self._swaps.execute_swap(
                self, asset_in, amount, kind, limit, trader, recipient
            )
            self._state = outcome.state

        record = outcome.record
        self._history.append(record)
        logger.info(
            "swap_executed",
            pool=self.address,
            asset_in=record.asset_in,
            asset_out=record.asset_out,
            amount_in=record.amount_in,
            amount_out=record.amount_out,
            recipient=record.recipient,
        )
        return record

    # --- Liquidity ---

    def add_liquidity(
        self,
        desired_a: int,
        desired_b: int,
        provider: str,
        min_a: int = 0,
        min_b: int = 0,
        to: str | None = None,
        deadline: int | None = None,
    ) -> LiquidityRecord:
        """Deposit both assets at the current ratio and mint shares.

        Args:
            desired_a: Most of asset_a the provider is willing to deposit
            desired_b: Most of asset_b the provider is willing to deposit
            provider: Account the assets are pulled from
            min_a: Least of asset_a the provider accepts to deposit
            min_b: Least of asset_b the provider accepts to deposit
            to: Account credited with the shares (default: provider)
            deadline: Latest pool time at which the deposit may execute

        Returns:
            LiquidityRecord with the realized deposit and minted shares
        """
        if desired_a == 0 or desired_b == 0:
            raise ZeroInput("Both desired deposit amounts must be positive")
        to = to or provider
        with self._operation("add_liquidity", deadline, provider=provider):
            state = self._state
            amount_a, amount_b = size_deposit(
                desired_a, desired_b, min_a, min_b, state.reserve_a, state.reserve_b
            )
            outcome = self._liquidity.mint_shares(self, amount_a, amount_b, provider, to)
            self._state = outcome.state
            self._shares = outcome.shares

        return self._record_liquidity(outcome.record)

    def remove_liquidity(
        self,
        shares: int,
        owner: str,
        min_a: int = 0,
        min_b: int = 0,
        recipient: str | None = None,
        deadline: int | None = None,
    ) -> LiquidityRecord:
        """Burn ``shares`` held by ``owner`` and withdraw the underlying assets."""
        recipient = recipient or owner
        with self._operation("remove_liquidity", deadline, owner=owner, shares=shares):
            outcome = self._liquidity.burn_shares(self, shares, min_a, min_b, owner, recipient)
            self._state = outcome.state
            self._shares = outcome.shares

        return self._record_liquidity(outcome.record)

    def transfer_shares(self, sender: str, to: str, amount: int) -> None:
        """Move pool shares between holders."""
        with self._operation("transfer_shares", None, sender=sender):
            shares = self._shares.copy()
            shares.transfer(sender, to, amount)
            self._shares = shares
        logger.debug("shares_transferred", pool=self.address, sender=sender, to=to, amount=amount)

    def _record_liquidity(self, record: LiquidityRecord) -> LiquidityRecord:
        self._history.append(record)
        logger.info(
            "liquidity_changed",
            pool=self.address,
            action=record.action.value,
            amount_a=record.amount_a,
            amount_b=record.amount_b,
            shares=record.shares,
            protocol_fee_shares=record.protocol_fee_shares,
            total_shares=self._shares.total_supply,
        )
        return record

    # --- Balance reconciliation ---

    def skim(self, to: str) -> tuple[int, int]:
        """Send ledger balances in excess of the reserves to ``to``.

        Returns:
            (excess_a, excess_b) transferred
        """
        with self._operation("skim", None, to=to):
            excess = []
            state = self._state
            for asset, reserve in ((self.asset_a, state.reserve_a), (self.asset_b, state.reserve_b)):
                amount = max(0, self.ledger.balance_of(asset, self.address) - reserve)
                if amount and not self.ledger.transfer(asset, self.address, to, amount):
                    raise TransferFailed(f"Could not push {amount} {asset}")
                excess.append(amount)
        logger.info("pool_skimmed", pool=self.address, excess_a=excess[0], excess_b=excess[1], to=to)
        return excess[0], excess[1]

    def sync(self) -> ReserveState:
        """Force the reserves to match the ledger balances.

        An empty pool cannot be synced, as donated balances would become
        reserves that no share claims.
        """
        with self._operation("sync", None):
            if self._shares.total_supply == 0:
                raise InsufficientLiquidity("Cannot sync a pool with no liquidity")
            balance_a = self.ledger.balance_of(self.asset_a, self.address)
            balance_b = self.ledger.balance_of(self.asset_b, self.address)
            self._state = self._state.advanced(balance_a, balance_b, self.now())
        logger.info(
            "pool_synced",
            pool=self.address,
            reserve_a=self._state.reserve_a,
            reserve_b=self._state.reserve_b,
        )
        return self._state

    # --- Administration ---

    def set_fee_recipient(self, caller: str, recipient: str | None) -> None:
        """Enable (or with None, disable) the protocol fee."""
        with self._lock.hold("set_fee_recipient"):
            self._admin.require(caller)
            self.fee_recipient = recipient
        logger.info("fee_recipient_set", pool=self.address, recipient=recipient)

    def pause(self, caller: str) -> None:
        with self._lock.hold("pause"):
            self._admin.require(caller)
            self._pause.set(True)
        logger.warning("pool_paused", pool=self.address, caller=caller)

    def unpause(self, caller: str) -> None:
        with self._lock.hold("unpause"):
            self._admin.require(caller)
            self._pause.set(False)
        logger.info("pool_unpaused", pool=self.address, caller=caller)

    def transfer_admin(self, caller: str, new_admin: str) -> None:
        with self._lock.hold("transfer_admin"):
            self._admin.transfer(caller, new_admin)

    # --- Internals ---

    @contextmanager
    def _operation(self, name: str, deadline: int | None, **context: Any) -> Iterator[None]:
        """Critical section + pause and deadline checks + ledger transaction."""
        with self._lock.hold(name):
            try:
                self._pause.check()
                if deadline is not None and self.now() > deadline:
                    raise DeadlineExpired(f"Deadline {deadline} passed at {self.now()}")
                with self.ledger.atomic():
                    yield
            except SecurityError as err:
                logger.error(
                    "security_event",
                    pool=self.address,
                    operation=name,
                    code=err.code,
                    error=str(err),
                    **context,
                )
                raise
            except AMMError as err:
                logger.info(
                    "operation_rejected",
                    pool=self.address,
                    operation=name,
                    code=err.code,
                    error=str(err),
                    **context,
                )
                raise
