"""Pydantic models for the bank HTTP API.

Amounts travel as uint256 decimal strings so 18-decimal values survive
JSON without float rounding.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from bank.models.receipts import BankStats, DepositReceipt, WithdrawReceipt
from bank.models.types import Address, Uint256
from bank.units import to_display


class ReserveDepositRequest(BaseModel):
    """Direct deposit of the reserve asset."""

    account: Address
    amount: Uint256


class NativeDepositRequest(BaseModel):
    """Native value deposit, converted through the pool."""

    account: Address
    value: Uint256 = Field(description="Native amount in wei")
    min_out: Uint256 = Field(default="0", alias="minOut")

    model_config = {"populate_by_name": True}


class TokenDepositRequest(BaseModel):
    """Fungible token deposit, converted through the pool."""

    account: Address
    token: Address
    amount: Uint256
    min_out: Uint256 = Field(default="0", alias="minOut")

    model_config = {"populate_by_name": True}


class WithdrawRequest(BaseModel):
    account: Address
    amount: Uint256


class DepositResponse(BaseModel):
    account: Address
    asset: Address
    amount_in: Uint256 = Field(alias="amountIn")
    credited: Uint256
    balance: Uint256
    total: Uint256
    cap_check: list[str] = Field(alias="capCheck")
    pool: Address | None = None
    calldata: str | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_receipt(cls, receipt: DepositReceipt) -> DepositResponse:
        return cls(
            account=receipt.account,
            asset=receipt.asset,
            amount_in=receipt.amount_in,
            credited=receipt.credited,
            balance=receipt.balance,
            total=receipt.total,
            cap_check=[check.value for check in receipt.cap_check],
            pool=receipt.swap.pool_address if receipt.swap else None,
            calldata=receipt.swap.calldata if receipt.swap else None,
        )


class WithdrawResponse(BaseModel):
    account: Address
    amount: Uint256
    balance: Uint256
    total: Uint256

    @classmethod
    def from_receipt(cls, receipt: WithdrawReceipt) -> WithdrawResponse:
        return cls(
            account=receipt.account,
            amount=receipt.amount,
            balance=receipt.balance,
            total=receipt.total,
        )


class BalanceResponse(BaseModel):
    account: Address
    balance: Uint256
    formatted: str = Field(description="Balance in whole reserve-asset units")

    @classmethod
    def for_account(cls, account: str, balance: int) -> BalanceResponse:
        return cls(account=account, balance=balance, formatted=f"{to_display(balance):f}")


class StatsResponse(BaseModel):
    total: Uint256
    global_cap: Uint256 = Field(alias="globalCap")
    headroom: Uint256
    per_tx_withdraw_limit: Uint256 = Field(alias="perTxWithdrawLimit")
    deposit_count: int = Field(alias="depositCount")
    withdrawal_count: int = Field(alias="withdrawalCount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_stats(cls, stats: BankStats) -> StatsResponse:
        return cls(
            total=stats.total,
            global_cap=stats.global_cap,
            headroom=stats.headroom,
            per_tx_withdraw_limit=stats.per_tx_withdraw_limit,
            deposit_count=stats.deposit_count,
            withdrawal_count=stats.withdrawal_count,
        )


class ErrorResponse(BaseModel):
    """Body returned for any rejected operation."""

    error: str = Field(description="Stable machine-readable reason code")
    detail: str
