"""Native value asset balances."""

from __future__ import annotations

from typing import Any

from bank.errors import TransferFailed
from bank.models.types import normalize_address


class NativeBalances:
    """Balances of the chain's intrinsic value asset, in wei.

    Unlike fungible tokens there is no allowance: value only moves when
    its owner sends it.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def mint(self, to: str, amount: int) -> None:
        """Create native value out of thin air (genesis and test funding)."""
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        to = normalize_address(to)
        self._balances[to] = self._balances.get(to, 0) + amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move native value from sender to recipient.

        Raises:
            TransferFailed: If sender's balance is insufficient
        """
        sender = normalize_address(sender)
        to = normalize_address(to)
        if amount < 0:
            raise TransferFailed(f"Negative native transfer: {amount}")
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise TransferFailed(
                f"Insufficient native balance: {sender} has {balance}, needs {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[to] = self._balances.get(to, 0) + amount

    def take_snapshot(self) -> dict[str, Any]:
        return {"balances": dict(self._balances)}

    def restore_snapshot(self, snapshot: dict[str, Any]) -> None:
        self._balances = dict(snapshot["balances"])
