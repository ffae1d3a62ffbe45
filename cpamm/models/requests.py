"""Pydantic models for HTTP request bodies.

Amounts travel as decimal strings so that 112-bit reserves and 256-bit
intermediates survive JSON.
"""

from pydantic import BaseModel, Field

from cpamm.amm.swap import SwapKind
from cpamm.models.types import Identifier, Uint256


class CreatePoolRequest(BaseModel):
    """Create a pool for a pair of assets."""

    asset_x: Identifier = Field(alias="assetX")
    asset_y: Identifier = Field(alias="assetY")
    fee_bps: int | None = Field(
        default=None,
        alias="feeBps",
        ge=0,
        lt=10_000,
        description="Swap fee in basis points (default: service fee)",
    )

    model_config = {"populate_by_name": True}


class QuoteRequest(BaseModel):
    """Price a trade without executing it."""

    asset_in: Identifier = Field(alias="assetIn")
    amount: Uint256 = Field(description="Exact input (exact_in) or exact output (exact_out)")
    kind: SwapKind = SwapKind.EXACT_IN

    model_config = {"populate_by_name": True}


class SwapRequest(QuoteRequest):
    """Execute a trade."""

    limit: Uint256 = Field(description="Minimum output (exact_in) or maximum input (exact_out)")
    trader: Identifier
    recipient: Identifier | None = None
    deadline: int | None = Field(default=None, description="Latest pool time, in seconds")


class AddLiquidityRequest(BaseModel):
    """Deposit both assets and mint shares."""

    desired_a: Uint256 = Field(alias="desiredA")
    desired_b: Uint256 = Field(alias="desiredB")
    min_a: Uint256 = Field(default="0", alias="minA")
    min_b: Uint256 = Field(default="0", alias="minB")
    provider: Identifier
    to: Identifier | None = None
    deadline: int | None = None

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn shares and withdraw both assets."""

    shares: Uint256
    owner: Identifier
    min_a: Uint256 = Field(default="0", alias="minA")
    min_b: Uint256 = Field(default="0", alias="minB")
    recipient: Identifier | None = None
    deadline: int | None = None

    model_config = {"populate_by_name": True}


class LedgerMintRequest(BaseModel):
    """Credit an account on the in-memory ledger."""

    asset: Identifier
    owner: Identifier
    amount: Uint256
