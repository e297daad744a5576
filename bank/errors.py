"""Bank error classes.

Every failure aborts the operation that raised it and the host reverts all
state touched by that operation. The ``code`` attribute is a stable,
machine-readable reason the caller can use to pick a corrective action.
"""

from __future__ import annotations

from typing import ClassVar


class BankError(Exception):
    """Base error for bank operations."""

    code: ClassVar[str] = "bank_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)

    @property
    def detail(self) -> str:
        return str(self)


# --- Input validation ---


class ValidationError(BankError):
    """The request is malformed."""

    code = "validation_error"


class ZeroAmount(ValidationError):
    """Amount must be greater than zero."""

    code = "zero_amount"


class InvalidToken(ValidationError):
    """Token address is not a depositable fungible token."""

    code = "invalid_token"


class InvalidAccount(ValidationError):
    """Account is not a 0x-prefixed 20-byte address."""

    code = "invalid_account"


# --- Capacity ---


class CapacityError(BankError):
    """The operation exceeds a ledger or bank limit."""

    code = "capacity_error"


class GlobalLimitExceeded(CapacityError):
    """Deposit would push the bank total above the global cap."""

    code = "global_limit_exceeded"

    def __init__(self, total: int, amount: int, cap: int) -> None:
        self.total = total
        self.amount = amount
        self.cap = cap
        super().__init__(f"Global cap exceeded: {total} + {amount} > {cap}")


class WithdrawalLimitExceeded(CapacityError):
    """Withdrawal exceeds the per-transaction limit."""

    code = "withdrawal_limit_exceeded"

    def __init__(self, amount: int, limit: int) -> None:
        self.amount = amount
        self.limit = limit
        super().__init__(f"Withdrawal {amount} exceeds per-transaction limit {limit}")


class InsufficientBalance(CapacityError):
    """Balance is too small for the requested amount."""

    code = "insufficient_balance"


# --- Oracle ---


class OracleError(BankError):
    """The price oracle cannot be trusted for this operation."""

    code = "oracle_error"


class OracleCompromised(OracleError):
    """Oracle reported a zero or negative price."""

    code = "oracle_compromised"


class StalePrice(OracleError):
    """Oracle price is older than the staleness window."""

    code = "stale_price"


# --- Swap ---


class SwapError(BankError):
    """Conversion through the swap venue failed."""

    code = "swap_error"


class PairDoesNotExist(SwapError):
    """No pool is registered for the requested pair."""

    code = "pair_does_not_exist"


class InsufficientSwapOutput(SwapError):
    """Swap output is below the caller's slippage floor."""

    code = "insufficient_swap_output"

    def __init__(self, amount_out: int, amount_out_min: int) -> None:
        self.amount_out = amount_out
        self.amount_out_min = amount_out_min
        super().__init__(f"Swap output {amount_out} below minimum {amount_out_min}")


class SwapFailed(SwapError):
    """The swap venue rejected the exchange."""

    code = "swap_failed"


# --- Transfer ---


class TransferFailed(BankError):
    """An asset transfer failed (false return or revert)."""

    code = "transfer_failed"
