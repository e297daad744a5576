"""Safe wrapper around fungible-token calls.

ERC20 implementations signal failure either by returning False or by
reverting. SafeToken collapses both into TransferFailed so the engine
handles exactly one failure shape.
"""

from __future__ import annotations

from collections.abc import Callable

from bank.chain.token import FungibleToken
from bank.errors import TransferFailed


class SafeToken:
    """Uniform-failure adapter over a FungibleToken."""

    def __init__(self, token: FungibleToken) -> None:
        self.token = token

    @property
    def address(self) -> str:
        return self.token.address

    @property
    def symbol(self) -> str:
        return self.token.symbol

    def balance_of(self, account: str) -> int:
        return self.token.balance_of(account)

    def safe_transfer(self, sender: str, to: str, amount: int) -> None:
        self._call("transfer", self.token.transfer, sender, to, amount)

    def safe_transfer_from(self, sender: str, owner: str, to: str, amount: int) -> None:
        self._call("transfer_from", self.token.transfer_from, sender, owner, to, amount)

    def _call(self, op: str, fn: Callable[..., bool], *args: object) -> None:
        try:
            ok = fn(*args)
        except TransferFailed:
            raise
        except Exception as err:
            raise TransferFailed(f"{self.token.symbol}.{op} reverted: {err}") from err
        if ok is False:
            raise TransferFailed(f"{self.token.symbol}.{op} returned false")
