"""Constant-product swap pricing and execution.

The pool prices trades with x * y = k, charging ``fee_numerator / fee_denominator``
of every input amount. All quotes round in the pool's favour.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from cpamm.errors import (
    ExcessiveInputAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvalidRecipient,
    InvariantViolation,
    TransferFailed,
    ZeroInput,
    ZeroOutput,
)
from cpamm.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from cpamm.models.records import TradeRecord
from cpamm.safe_int import S
from cpamm.state.reserves import ReserveState

if TYPE_CHECKING:
    from cpamm.pools.pool import Pool

logger = structlog.get_logger()


def quote_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int,
    fee_denominator: int,
) -> int:
    """Calculate output amount for an exact input.

    Formula: out = (in * (D - F) * r_out) / (r_in * D + in * (D - F)), rounded down

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee_numerator: Fee numerator F
        fee_denominator: Fee denominator D

    Returns:
        Output token amount

    Raises:
        ZeroInput: If amount_in is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_in == 0:
        raise ZeroInput("Swap input amount is zero")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity("Pool has an empty reserve")

    amount_in_with_fee = S(amount_in) * (S(fee_denominator) - S(fee_numerator))
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(fee_denominator) + amount_in_with_fee

    return (numerator // denominator).value


def quote_in(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int,
    fee_denominator: int,
) -> int:
    """Calculate required input for an exact output.

    Formula: in = (r_in * out * D) / ((r_out - out) * (D - F)) + 1

    The extra unit guarantees that feeding the result back through
    quote_out never yields less than ``amount_out``.

    Raises:
        ZeroOutput: If amount_out is zero
        InsufficientLiquidity: If either reserve is zero or
            amount_out would drain the output reserve
    """
    if amount_out == 0:
        raise ZeroOutput("Swap output amount is zero")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity("Pool has an empty reserve")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Output {amount_out} would drain reserve {reserve_out}"
        )

    numerator = S(reserve_in) * S(amount_out) * S(fee_denominator)
    denominator = (S(reserve_out) - S(amount_out)) * (S(fee_denominator) - S(fee_numerator))

    return ((numerator // denominator) + S(1)).value


def quote_proportional(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of asset B worth ``amount_a`` at the current reserve ratio, rounded down.

    Raises:
        ZeroInput: If amount_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_a == 0:
        raise ZeroInput("Amount to quote is zero")
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientLiquidity("Pool has an empty reserve")
    return (S(amount_a) * S(reserve_b) // S(reserve_a)).value


class SwapKind(str, Enum):
    """Which side of the trade the caller fixed."""

    EXACT_IN = "exact_in"
    EXACT_OUT = "exact_out"


@dataclass(frozen=True)
class SwapQuote:
    """Counterpart amounts of a trade at the current reserves."""

    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class SwapOutcome:
    """Staged result of a swap, committed by the pool."""

    state: ReserveState
    record: TradeRecord


class SwapEngine:
    """Swap math bound to a fee configuration, plus the mutating trade."""

    def __init__(self, fees: FeeConfig = DEFAULT_FEE_CONFIG) -> None:
        self.fees = fees

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return quote_out(
            amount_in, reserve_in, reserve_out, self.fees.fee_numerator, self.fees.fee_denominator
        )

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return quote_in(
            amount_out, reserve_in, reserve_out, self.fees.fee_numerator, self.fees.fee_denominator
        )

    def quote(self, pool: Pool, asset_in: str, amount: int, kind: SwapKind) -> SwapQuote:
        """Price a trade against the pool's current reserves without executing it."""
        asset_out = pool.other_asset(asset_in)
        reserve_in, reserve_out = pool.state.reserves_for(asset_in == pool.asset_a)
        if kind is SwapKind.EXACT_IN:
            amount_in = amount
            amount_out = self.get_amount_out(amount_in, reserve_in, reserve_out)
        else:
            amount_out = amount
            amount_in = self.get_amount_in(amount_out, reserve_in, reserve_out)
        return SwapQuote(asset_in, asset_out, amount_in, amount_out)

    def execute_swap(
        self,
        pool: Pool,
        asset_in: str,
        amount: int,
        kind: SwapKind,
        limit: int,
        trader: str,
        recipient: str,
    ) -> SwapOutcome:
        """Run a trade through the ledger and stage the new reserves.

        Must run inside the pool's critical section and ledger transaction.

        Args:
            pool: Pool being traded against
            asset_in: Asset the trader pays
            amount: Exact input (EXACT_IN) or exact output (EXACT_OUT)
            kind: Which side ``amount`` fixes
            limit: Minimum output (EXACT_IN) or maximum input (EXACT_OUT)
            trader: Account paying ``asset_in``
            recipient: Account receiving the output asset

        Returns:
            SwapOutcome with the staged state and the realized trade

        Raises:
            InsufficientOutputAmount: If the output is zero or below ``limit``
            ExcessiveInputAmount: If the input is above ``limit``
            InvariantViolation: If the fee-adjusted product decreased
        """
        if recipient in (pool.asset_a, pool.asset_b):
            raise InvalidRecipient(f"Recipient cannot be a pool asset: {recipient}")

        quote = self.quote(pool, asset_in, amount, kind)
        if kind is SwapKind.EXACT_IN:
            if quote.amount_out == 0:
                raise InsufficientOutputAmount("Trade rounds down to zero output")
            if quote.amount_out < limit:
                raise InsufficientOutputAmount(
                    f"Output {quote.amount_out} is below minimum {limit}"
                )
        elif quote.amount_in > limit:
            raise ExcessiveInputAmount(f"Input {quote.amount_in} exceeds maximum {limit}")

        ledger = pool.ledger
        if not ledger.transfer_from(asset_in, trader, pool.address, quote.amount_in):
            raise TransferFailed(f"Could not pull {quote.amount_in} {asset_in} from {trader}")
        if not ledger.transfer(quote.asset_out, pool.address, recipient, quote.amount_out):
            raise TransferFailed(f"Could not push {quote.amount_out} {quote.asset_out}")

        state = pool.state
        a_is_input = asset_in == pool.asset_a
        reserve_in, reserve_out = state.reserves_for(a_is_input)
        balance_in = ledger.balance_of(asset_in, pool.address)
        balance_out = ledger.balance_of(quote.asset_out, pool.address)

        # Whatever arrived beyond the reserves (net of nominal outflow) counts as input
        received_in = max(0, balance_in - reserve_in)
        received_out_side = max(0, balance_out - (reserve_out - quote.amount_out))
        if received_in == 0 and received_out_side == 0:
            raise InsufficientInputAmount("No input reached the pool")
        realized_out = reserve_out + received_out_side - balance_out

        self._check_invariant(
            pool.address,
            balance_in,
            balance_out,
            received_in,
            received_out_side,
            reserve_in,
            reserve_out,
        )

        if a_is_input:
            staged = state.advanced(balance_in, balance_out, pool.now())
        else:
            staged = state.advanced(balance_out, balance_in, pool.now())

        record = TradeRecord(
            pool=pool.address,
            asset_in=asset_in,
            asset_out=quote.asset_out,
            amount_in=received_in,
            amount_out=realized_out,
            trader=trader,
            recipient=recipient,
            timestamp=staged.last_update_time,
        )
        return SwapOutcome(state=staged, record=record)

    def _check_invariant(
        self,
        pool_address: str,
        balance_in: int,
        balance_out: int,
        received_in: int,
        received_out_side: int,
        reserve_in: int,
        reserve_out: int,
    ) -> None:
        """Fee-adjusted product check.

        (b_in*D - in_in*F) * (b_out*D - in_out*F) >= r_in * r_out * D^2
        """
        fee_n = S(self.fees.fee_numerator)
        fee_d = S(self.fees.fee_denominator)
        adjusted_in = S(balance_in) * fee_d - S(received_in) * fee_n
        adjusted_out = S(balance_out) * fee_d - S(received_out_side) * fee_n
        required = S(reserve_in) * S(reserve_out) * fee_d * fee_d

        if adjusted_in * adjusted_out < required:
            logger.error(
                "invariant_violation",
                pool=pool_address,
                balance_in=balance_in,
                balance_out=balance_out,
                received_in=received_in,
                reserve_in=reserve_in,
                reserve_out=reserve_out,
            )
            raise InvariantViolation(
                f"Fee-adjusted product decreased: reserves {reserve_in}/{reserve_out}, "
                f"balances {balance_in}/{balance_out}"
            )
