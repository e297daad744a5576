"""API endpoints for the bank.

Handlers are ``async def`` with no await inside an operation: they run
on the event loop one at a time, so operations never interleave.
"""

from fastapi import APIRouter, Depends, Path

from bank.bootstrap import get_default_deployment
from bank.engine import Bank
from bank.models.api import (
    BalanceResponse,
    DepositResponse,
    NativeDepositRequest,
    ReserveDepositRequest,
    StatsResponse,
    TokenDepositRequest,
    WithdrawRequest,
    WithdrawResponse,
)
from bank.models.types import normalize_address

router = APIRouter()

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"


def get_bank() -> Bank:
    """Dependency provider for the bank instance.

    Override this in tests to inject a prepared bank:
        app.dependency_overrides[get_bank] = lambda: deployment.bank
    """
    return get_default_deployment().bank


@router.get("/accounts/{account}")
async def get_balance(
    account: str = Path(pattern=ADDRESS_PATTERN), bank: Bank = Depends(get_bank)
) -> BalanceResponse:
    account = normalize_address(account)
    return BalanceResponse.for_account(account, bank.balance_of(account))


@router.get("/stats")
async def get_stats(bank: Bank = Depends(get_bank)) -> StatsResponse:
    return StatsResponse.from_stats(bank.stats())


@router.post("/deposits/reserve")
async def deposit_reserve(
    request: ReserveDepositRequest, bank: Bank = Depends(get_bank)
) -> DepositResponse:
    receipt = bank.deposit_reserve_asset(request.account, int(request.amount))
    return DepositResponse.from_receipt(receipt)


@router.post("/deposits/native")
async def deposit_native(
    request: NativeDepositRequest, bank: Bank = Depends(get_bank)
) -> DepositResponse:
    receipt = bank.deposit_native_and_swap(
        request.account, int(request.value), int(request.min_out)
    )
    return DepositResponse.from_receipt(receipt)


@router.post("/deposits/token")
async def deposit_token(
    request: TokenDepositRequest, bank: Bank = Depends(get_bank)
) -> DepositResponse:
    receipt = bank.deposit_token_and_swap(
        request.account, request.token, int(request.amount), int(request.min_out)
    )
    return DepositResponse.from_receipt(receipt)


@router.post("/withdrawals")
async def withdraw(request: WithdrawRequest, bank: Bank = Depends(get_bank)) -> WithdrawResponse:
    receipt = bank.withdraw(request.account, int(request.amount))
    return WithdrawResponse.from_receipt(receipt)
