"""Result types returned by bank operations."""

from __future__ import annotations

from dataclasses import dataclass

from bank.amm.base import SwapResult
from bank.cap import CapCheck


@dataclass(frozen=True)
class DepositReceipt:
    """Outcome of a successful deposit.

    Attributes:
        account: Credited account
        asset: Asset the caller sent (NATIVE_ASSET for native value)
        amount_in: Amount the bank received, in the asset's own units
        credited: Reserve-asset amount added to the account
        balance: Account balance after the deposit
        total: Bank total after the deposit
        cap_check: Cap timing(s) applied, in order
        swap: Swap details, or None for direct reserve deposits
    """

    account: str
    asset: str
    amount_in: int
    credited: int
    balance: int
    total: int
    cap_check: tuple[CapCheck, ...]
    swap: SwapResult | None = None


@dataclass(frozen=True)
class WithdrawReceipt:
    """Outcome of a successful withdrawal."""

    account: str
    amount: int
    balance: int
    total: int


@dataclass(frozen=True)
class BankStats:
    """Aggregate counters for a bank instance."""

    total: int
    global_cap: int
    headroom: int
    per_tx_withdraw_limit: int
    deposit_count: int
    withdrawal_count: int
