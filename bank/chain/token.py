"""In-memory fungible tokens.

FungibleToken follows the ERC20 surface, including its awkward parts:
transfer/transfer_from/approve report failure by returning False rather
than raising. Callers go through SafeToken to get uniform failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from bank.chain.native import NativeBalances
from bank.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class ApproveCall:
    """One observed approve() call."""

    owner: str
    spender: str
    amount: int


class FungibleToken:
    """ERC20-like token ledger.

    Attributes:
        address: Token contract address
        symbol: Ticker, informational only
        decimals: Number of fractional digits
        approve_calls: Trace of every approve() call. Traces are not part of
            the snapshot, so calls made by a reverted operation stay visible.
    """

    def __init__(self, address: str, symbol: str, decimals: int = 18) -> None:
        self.address = normalize_address(address, validate=True)
        self.symbol = symbol
        self.decimals = decimals
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0
        self.approve_calls: list[ApproveCall] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.symbol}, {self.address})"

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        to = normalize_address(to)
        self._balances[to] = self._balances.get(to, 0) + amount
        self._total_supply += amount

    def approve(self, sender: str, spender: str, amount: int) -> bool:
        """Set spender's allowance over sender's tokens (replaces, not adds)."""
        owner = normalize_address(sender)
        spender = normalize_address(spender)
        self.approve_calls.append(ApproveCall(owner=owner, spender=spender, amount=amount))
        if amount < 0:
            return False
        self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        return self._move(normalize_address(sender), normalize_address(to), amount)

    def transfer_from(self, sender: str, owner: str, to: str, amount: int) -> bool:
        """Move owner's tokens on behalf of sender, consuming allowance."""
        spender = normalize_address(sender)
        owner = normalize_address(owner)
        key = (owner, spender)
        allowed = self._allowances.get(key, 0)
        if allowed < amount:
            logger.debug(
                "transfer_from_insufficient_allowance",
                token=self.symbol,
                owner=owner[-8:],
                spender=spender[-8:],
                allowed=allowed,
                amount=amount,
            )
            return False
        if not self._move(owner, normalize_address(to), amount):
            return False
        self._allowances[key] = allowed - amount
        return True

    def _move(self, src: str, dst: str, amount: int) -> bool:
        if amount < 0:
            return False
        balance = self._balances.get(src, 0)
        if balance < amount:
            return False
        self._balances[src] = balance - amount
        self._credit(dst, amount)
        return True

    def _credit(self, account: str, amount: int) -> None:
        self._balances[account] = self._balances.get(account, 0) + amount

    def take_snapshot(self) -> dict[str, Any]:
        return {
            "balances": dict(self._balances),
            "allowances": dict(self._allowances),
            "total_supply": self._total_supply,
        }

    def restore_snapshot(self, snapshot: dict[str, Any]) -> None:
        self._balances = dict(snapshot["balances"])
        self._allowances = dict(snapshot["allowances"])
        self._total_supply = snapshot["total_supply"]


class WrappedNative(FungibleToken):
    """Token backed 1:1 by native value held by the wrapper contract."""

    def __init__(
        self,
        address: str,
        native: NativeBalances,
        symbol: str = "WETH",
    ) -> None:
        super().__init__(address, symbol, decimals=18)
        self._native = native

    def deposit(self, sender: str, value: int) -> None:
        """Lock sender's native value and mint the same amount of wrapped token.

        Raises:
            TransferFailed: If sender lacks the native value
        """
        self._native.transfer(sender, self.address, value)
        self.mint(sender, value)

