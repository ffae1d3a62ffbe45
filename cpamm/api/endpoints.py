"""API endpoints for pools and the in-memory ledger."""

import os
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends

from cpamm.amm.swap import SwapKind
from cpamm.errors import UnsupportedOperation
from cpamm.fees.config import FeeConfig, PoolConfig
from cpamm.ledger.memory import InMemoryLedger
from cpamm.models.requests import (
    AddLiquidityRequest,
    CreatePoolRequest,
    LedgerMintRequest,
    QuoteRequest,
    RemoveLiquidityRequest,
    SwapRequest,
)
from cpamm.models.responses import (
    BalanceResponse,
    LiquidityResponse,
    PoolInfo,
    QuoteResponse,
    TradeResponse,
)
from cpamm.pools.registry import PoolRegistry

logger = structlog.get_logger()

router = APIRouter()

# Configurable via environment variables
FEE_BPS = int(os.environ.get("CPAMM_FEE_BPS", "30"))
ADMIN = os.environ.get("CPAMM_ADMIN", "admin")
FEE_RECIPIENT = os.environ.get("CPAMM_FEE_RECIPIENT") or None


@lru_cache(maxsize=1)
def get_default_registry() -> PoolRegistry:
    """Process-wide registry backed by an in-memory ledger."""
    logger.info("registry_initialized", fee_bps=FEE_BPS, fee_recipient=FEE_RECIPIENT)
    return PoolRegistry(
        InMemoryLedger(),
        admin=ADMIN,
        config=PoolConfig(fees=FeeConfig.from_bps(FEE_BPS)),
        fee_recipient=FEE_RECIPIENT,
    )


def get_registry() -> PoolRegistry:
    """Dependency provider for the registry.

    Override this in tests to inject a fresh registry:
        app.dependency_overrides[get_registry] = lambda: registry
    """
    return get_default_registry()


@router.post("/pools", status_code=201)
def create_pool(
    request: CreatePoolRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> PoolInfo:
    config = None
    if request.fee_bps is not None:
        config = PoolConfig(fees=FeeConfig.from_bps(request.fee_bps))
    pool = registry.create_pool(request.asset_x, request.asset_y, config)
    return PoolInfo.from_pool(pool)


@router.get("/pools")
def list_pools(registry: PoolRegistry = Depends(get_registry)) -> list[PoolInfo]:
    return [PoolInfo.from_pool(pool) for pool in registry.all_pools()]


@router.get("/pools/{asset_x}/{asset_y}")
def get_pool(
    asset_x: str,
    asset_y: str,
    registry: PoolRegistry = Depends(get_registry),
) -> PoolInfo:
    """Reserves, last update time and cumulative prices of a pool."""
    return PoolInfo.from_pool(registry.get_pool(asset_x, asset_y))


@router.post("/pools/{asset_x}/{asset_y}/quote")
def quote(
    asset_x: str,
    asset_y: str,
    request: QuoteRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> QuoteResponse:
    pool = registry.get_pool(asset_x, asset_y)
    amount = int(request.amount)
    if request.kind is SwapKind.EXACT_IN:
        result = pool.quote_exact_in(request.asset_in, amount)
    else:
        result = pool.quote_exact_out(request.asset_in, amount)
    return QuoteResponse.from_quote(result)


@router.post("/pools/{asset_x}/{asset_y}/swap")
def swap(
    asset_x: str,
    asset_y: str,
    request: SwapRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> TradeResponse:
    """Execute a trade.

    Error Handling:
        - Slippage, liquidity and input errors: 400 with the error code
        - Invariant violation or overflow: 422, logged as a security event
        - Paused pool: 423
    """
    pool = registry.get_pool(asset_x, asset_y)
    amount, limit = int(request.amount), int(request.limit)
    if request.kind is SwapKind.EXACT_IN:
        record = pool.swap_exact_in(
            request.asset_in, amount, limit, request.trader, request.recipient, request.deadline
        )
    else:
        record = pool.swap_exact_out(
            request.asset_in, amount, limit, request.trader, request.recipient, request.deadline
        )
    return TradeResponse.from_record(record)


@router.post("/pools/{asset_x}/{asset_y}/liquidity/add")
def add_liquidity(
    asset_x: str,
    asset_y: str,
    request: AddLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> LiquidityResponse:
    pool = registry.get_pool(asset_x, asset_y)
    record = pool.add_liquidity(
        int(request.desired_a),
        int(request.desired_b),
        request.provider,
        min_a=int(request.min_a),
        min_b=int(request.min_b),
        to=request.to,
        deadline=request.deadline,
    )
    return LiquidityResponse.from_record(record)


@router.post("/pools/{asset_x}/{asset_y}/liquidity/remove")
def remove_liquidity(
    asset_x: str,
    asset_y: str,
    request: RemoveLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> LiquidityResponse:
    pool = registry.get_pool(asset_x, asset_y)
    record = pool.remove_liquidity(
        int(request.shares),
        request.owner,
        min_a=int(request.min_a),
        min_b=int(request.min_b),
        recipient=request.recipient,
        deadline=request.deadline,
    )
    return LiquidityResponse.from_record(record)


@router.get("/pools/{asset_x}/{asset_y}/shares/{owner}")
def share_balance(
    asset_x: str,
    asset_y: str,
    owner: str,
    registry: PoolRegistry = Depends(get_registry),
) -> BalanceResponse:
    pool = registry.get_pool(asset_x, asset_y)
    return BalanceResponse(owner=owner, balance=pool.share_balance(owner))


@router.post("/ledger/mint", status_code=201)
def ledger_mint(
    request: LedgerMintRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> BalanceResponse:
    """Fund an account on the in-memory ledger."""
    ledger = registry.ledger
    if not isinstance(ledger, InMemoryLedger):
        raise UnsupportedOperation("Registry ledger does not support minting")
    ledger.mint(request.asset, request.owner, int(request.amount))
    balance = ledger.balance_of(request.asset, request.owner)
    return BalanceResponse(owner=request.owner, balance=balance)


@router.get("/ledger/{asset}/{owner}")
def ledger_balance(
    asset: str,
    owner: str,
    registry: PoolRegistry = Depends(get_registry),
) -> BalanceResponse:
    return BalanceResponse(owner=owner, balance=registry.ledger.balance_of(asset, owner))
