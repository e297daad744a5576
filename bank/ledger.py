"""Authoritative account ledger in reserve-asset accounting units.

Invariant: total == sum(balances) at every point observable from outside
an operation. Balances are created implicitly on first credit and are
never deleted; an account drained to zero keeps its entry.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from bank.errors import InsufficientBalance
from bank.models.types import normalize_address
from bank.safe_int import S


class Ledger:
    """Per-account balances plus the running bank total."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._total = 0
        self._deposit_count = 0
        self._withdrawal_count = 0

    @property
    def total(self) -> int:
        """Bank total: all reserve-asset value currently held for accounts."""
        return self._total

    @property
    def deposit_count(self) -> int:
        return self._deposit_count

    @property
    def withdrawal_count(self) -> int:
        return self._withdrawal_count

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def accounts(self) -> Iterator[tuple[str, int]]:
        return iter(sorted(self._balances.items()))

    def credit(self, account: str, amount: int) -> int:
        """Add amount to account and total. Returns the new balance."""
        account = normalize_address(account)
        amount = S(amount).to_uint256()
        balance = self._balances.get(account, 0) + amount
        self._balances[account] = balance
        self._total += amount
        return balance

    def debit(self, account: str, amount: int) -> int:
        """Remove amount from account and total. Returns the new balance.

        Raises:
            InsufficientBalance: If the account holds less than amount
        """
        account = normalize_address(account)
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalance(f"Balance {balance} < requested {amount}")
        new_balance = (S(balance) - S(amount)).value
        self._balances[account] = new_balance
        self._total = (S(self._total) - S(amount)).value
        return new_balance

    def record_deposit(self) -> None:
        self._deposit_count += 1

    def record_withdrawal(self) -> None:
        self._withdrawal_count += 1

    def take_snapshot(self) -> dict[str, Any]:
        return {
            "balances": dict(self._balances),
            "total": self._total,
            "deposit_count": self._deposit_count,
            "withdrawal_count": self._withdrawal_count,
        }

    def restore_snapshot(self, snapshot: dict[str, Any]) -> None:
        self._balances = dict(snapshot["balances"])
        self._total = snapshot["total"]
        self._deposit_count = snapshot["deposit_count"]
        self._withdrawal_count = snapshot["withdrawal_count"]
