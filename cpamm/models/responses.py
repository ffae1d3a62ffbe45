"""Pydantic models for HTTP responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from cpamm.models.records import LiquidityRecord, TradeRecord
from cpamm.models.types import Uint256

if TYPE_CHECKING:
    from cpamm.amm.swap import SwapQuote
    from cpamm.pools.pool import Pool


class PoolInfo(BaseModel):
    """Snapshot of a pool's public state."""

    address: str
    asset_a: str = Field(alias="assetA")
    asset_b: str = Field(alias="assetB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    last_update_time: int = Field(alias="lastUpdateTime")
    cumulative_price_a: Uint256 = Field(alias="cumulativePriceA")
    cumulative_price_b: Uint256 = Field(alias="cumulativePriceB")
    total_shares: Uint256 = Field(alias="totalShares")
    fee_numerator: int = Field(alias="feeNumerator")
    fee_denominator: int = Field(alias="feeDenominator")
    paused: bool

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pool(cls, pool: Pool) -> PoolInfo:
        reserve_a, reserve_b, last_update_time = pool.get_reserves()
        price_a, price_b = pool.get_cumulative_prices()
        return cls(
            address=pool.address,
            asset_a=pool.asset_a,
            asset_b=pool.asset_b,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            last_update_time=last_update_time,
            cumulative_price_a=price_a,
            cumulative_price_b=price_b,
            total_shares=pool.total_shares,
            fee_numerator=pool.config.fees.fee_numerator,
            fee_denominator=pool.config.fees.fee_denominator,
            paused=pool.paused,
        )


class QuoteResponse(BaseModel):
    """Counterpart amounts of a priced trade."""

    asset_in: str = Field(alias="assetIn")
    asset_out: str = Field(alias="assetOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> QuoteResponse:
        return cls(
            asset_in=quote.asset_in,
            asset_out=quote.asset_out,
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
        )


class TradeResponse(QuoteResponse):
    """A realized trade."""

    trader: str
    recipient: str
    timestamp: int

    @classmethod
    def from_record(cls, record: TradeRecord) -> TradeResponse:
        return cls(
            asset_in=record.asset_in,
            asset_out=record.asset_out,
            amount_in=record.amount_in,
            amount_out=record.amount_out,
            trader=record.trader,
            recipient=record.recipient,
            timestamp=record.timestamp,
        )


class LiquidityResponse(BaseModel):
    """A realized share mint or burn."""

    action: str
    provider: str
    recipient: str
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")
    shares: Uint256
    protocol_fee_shares: Uint256 = Field(alias="protocolFeeShares")
    timestamp: int

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, record: LiquidityRecord) -> LiquidityResponse:
        return cls(
            action=record.action.value,
            provider=record.provider,
            recipient=record.recipient,
            amount_a=record.amount_a,
            amount_b=record.amount_b,
            shares=record.shares,
            protocol_fee_shares=record.protocol_fee_shares,
            timestamp=record.timestamp,
        )


class BalanceResponse(BaseModel):
    """Balance of one account."""

    owner: str
    balance: Uint256


class ErrorResponse(BaseModel):
    """Typed failure of a pool operation."""

    code: str
    detail: str
