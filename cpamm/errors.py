"""Error classes for pool operations.

Every error aborts the whole operation with no partial state change.
Each class carries a stable ``code`` used on the wire and in logs.
"""


class AMMError(Exception):
    """Base error for constant-product pool operations."""

    code = "amm_error"


class SecurityError(AMMError):
    """Errors that may indicate a misbehaving asset or an attack attempt.

    The pool logs these as security events, separately from ordinary
    caller mistakes such as a bad slippage bound.
    """

    code = "security_error"


# --- Input errors ---


class ZeroInput(AMMError):
    """Input amount is zero."""

    code = "zero_input"


class ZeroOutput(AMMError):
    """Requested output amount is zero."""

    code = "zero_output"


class InsufficientInputAmount(AMMError):
    """No input reached the pool during a swap."""

    code = "insufficient_input_amount"


class InvalidAsset(AMMError):
    """Asset identifier is not one of the pool's two assets."""

    code = "invalid_asset"


class InvalidRecipient(AMMError):
    """Recipient is one of the pool's own asset identifiers."""

    code = "invalid_recipient"


class DeadlineExpired(AMMError):
    """Caller-supplied validity window elapsed before execution."""

    code = "deadline_expired"


# --- Liquidity and pricing errors ---


class InsufficientLiquidity(AMMError):
    """A reserve is zero or the output would drain it."""

    code = "insufficient_liquidity"


class InsufficientOutputAmount(AMMError):
    """Actual output is below the caller's minimum."""

    code = "insufficient_output_amount"


class ExcessiveInputAmount(AMMError):
    """Actual input is above the caller's maximum."""

    code = "excessive_input_amount"


class SlippageExceeded(AMMError):
    """Liquidity sizing fell below the caller's minimum amounts."""

    code = "slippage_exceeded"


class InsufficientLiquidityMinted(AMMError):
    """Deposit would mint zero shares."""

    code = "insufficient_liquidity_minted"


class InsufficientLiquidityBurned(AMMError):
    """Redemption would return zero of an asset."""

    code = "insufficient_liquidity_burned"


class InsufficientShares(AMMError):
    """Share holder does not own enough shares."""

    code = "insufficient_shares"


# --- Security-relevant errors ---


class InvariantViolation(SecurityError):
    """Post-trade fee-adjusted product is below the pre-trade product."""

    code = "invariant_violation"


class Overflow(SecurityError, ArithmeticError):
    """A reserve or intermediate product exceeds its representable bound."""

    code = "overflow"


class Underflow(Overflow):
    """Subtraction would produce a negative result."""

    code = "underflow"


class DivisionByZero(Overflow):
    """Division or modulo by zero."""

    code = "division_by_zero"


# --- Execution errors ---


class TransferFailed(AMMError):
    """The ledger reported a failed transfer."""

    code = "transfer_failed"


class Reentrancy(AMMError):
    """An operation tried to re-enter a pool that is mid-operation."""

    code = "reentrancy"


class PoolPaused(AMMError):
    """The pool is paused; mutating operations are rejected."""

    code = "pool_paused"


class Unauthorized(AMMError):
    """Caller is not the pool administrator."""

    code = "unauthorized"


# --- Registry errors ---


class PoolExists(AMMError):
    """A pool for this asset pair already exists."""

    code = "pool_exists"


class PoolNotFound(AMMError):
    """No pool exists for this asset pair."""

    code = "pool_not_found"


# --- Service errors ---


class UnsupportedOperation(AMMError):
    """The configured ledger does not offer this operation."""

    code = "unsupported_operation"
