"""FastAPI application exposing constant-product pools over HTTP."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.errors import (
    AMMError,
    PoolExists,
    PoolNotFound,
    PoolPaused,
    Reentrancy,
    SecurityError,
    Unauthorized,
    UnsupportedOperation,
)
from cpamm.log_config import configure_logging
from cpamm.models.responses import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CPAMM_HOST", "127.0.0.1")
PORT = int(os.environ.get("CPAMM_PORT", "8000"))
DEBUG = os.environ.get("CPAMM_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_JSON = os.environ.get("CPAMM_LOG_JSON", "false").lower() in ("true", "1", "yes")

# Error class -> HTTP status; first match wins, anything else is 400
ERROR_STATUS: list[tuple[type[AMMError], int]] = [
    (PoolNotFound, 404),
    (Unauthorized, 403),
    (PoolExists, 409),
    (Reentrancy, 409),
    (PoolPaused, 423),
    (SecurityError, 422),
    (UnsupportedOperation, 501),
]

app = FastAPI(
    title="Constant-product AMM",
    description="Two-asset constant-product pools with liquidity shares and protocol fees",
    version=__version__,
)

app.include_router(router)


def status_for(error: AMMError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


@app.exception_handler(AMMError)
async def amm_error_handler(request: Request, exc: AMMError) -> JSONResponse:
    """Surface pool errors as typed JSON failures."""
    status = status_for(exc)
    logger.info("request_failed", path=request.url.path, code=exc.code, status=status)
    body = ErrorResponse(code=exc.code, detail=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - CPAMM_HOST: Host to bind to (default: 127.0.0.1)
    - CPAMM_PORT: Port to bind to (default: 8000)
    - CPAMM_DEBUG: Enable debug logging and reload mode (default: false)
    - CPAMM_LOG_JSON: Emit JSON log lines (default: false)
    - CPAMM_FEE_BPS: Swap fee of new pools in basis points (default: 30)
    - CPAMM_ADMIN: Administrator account of new pools (default: admin)
    - CPAMM_FEE_RECIPIENT: Protocol fee recipient (default: disabled)
    """
    configure_logging(logging.DEBUG if DEBUG else logging.INFO, json=LOG_JSON)
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
