"""FastAPI application for the swap bank.

Note: authentication is intentionally not implemented at the application
level; the ``account`` field is trusted as the caller. Run behind a
gateway that binds it to an authenticated identity.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bank import __version__
from bank.api.endpoints import router
from bank.errors import (
    BankError,
    CapacityError,
    InsufficientSwapOutput,
    OracleError,
    SwapError,
    TransferFailed,
    ValidationError,
)
from bank.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BANK_HOST", "127.0.0.1")
PORT = int(os.environ.get("BANK_PORT", "8000"))
DEBUG = os.environ.get("BANK_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Swap Bank",
    description="Custodial ledger that settles deposits in a single reserve asset",
    version=__version__,
)


def status_for(error: BankError) -> int:
    """Map a bank error to an HTTP status code.

    Slippage is checked before the generic swap family: the caller fixes
    it by resubmitting, like a capacity rejection.
    """
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, (CapacityError, InsufficientSwapOutput)):
        return 409
    if isinstance(error, (OracleError, SwapError, TransferFailed)):
        return 502
    return 400


@app.exception_handler(BankError)
async def bank_error_handler(request: Request, exc: BankError) -> JSONResponse:
    status = status_for(exc)
    logger.warning(
        "operation_rejected",
        path=request.url.path,
        error=exc.code,
        detail=exc.detail,
        status=status,
    )
    body = ErrorResponse(error=exc.code, detail=exc.detail)
    return JSONResponse(status_code=status, content=body.model_dump())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("operation_crashed", path=request.url.path, error_type=type(exc).__name__)
    body = ErrorResponse(error="internal_error", detail="Operation failed and was reverted")
    return JSONResponse(status_code=500, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the bank API server.

    Configuration via environment variables:
    - BANK_HOST: Host to bind to (default: 127.0.0.1)
    - BANK_PORT: Port to bind to (default: 8000)
    - BANK_DEBUG: Enable debug/reload mode (default: false)
    - BANK_GLOBAL_CAP, BANK_WITHDRAW_LIMIT, BANK_ORACLE_STALENESS: see BankConfig
    """
    uvicorn.run(
        "bank.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
