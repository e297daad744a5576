"""Narrow capability interfaces for the swap venue.

The engine only ever talks to a pool through SwapPool, so alternate
implementations (mocks, forks, multi-hop routers) can be substituted
without touching the swap executor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class SwapPool(Protocol):
    """Read/exchange contract of a constant-product pair.

    Reserves are stored in canonical pair order (token0, token1), not in
    the order any caller happens to use.
    """

    address: str

    def reserves(self) -> tuple[int, int]:
        """Current (reserve0, reserve1)."""
        ...

    def token0_address(self) -> str:
        """Address of the token stored as reserve0."""
        ...

    def token1_address(self) -> str:
        """Address of the token stored as reserve1."""
        ...

    def exchange(
        self,
        sender: str,
        amount0_out: int,
        amount1_out: int,
        recipient: str,
        data: bytes = b"",
    ) -> None:
        """Atomically swap, sending the requested outputs to recipient.

        The input must already have been transferred to the pool.
        """
        ...


@dataclass(frozen=True)
class SwapQuote:
    """Expected result of a single-hop swap, computed from fresh reserves."""

    pool_address: str
    token_in: str
    token_out: str
    amount_in: int
    reserve_in: int
    reserve_out: int
    expected_out: int


@dataclass(frozen=True)
class SwapResult:
    """Measured result of an executed swap.

    amount_out is the custody balance delta of the output token, which is
    authoritative over quote.expected_out.
    """

    quote: SwapQuote
    amount_out: int
    calldata: str

    @property
    def amount_in(self) -> int:
        return self.quote.amount_in

    @property
    def pool_address(self) -> str:
        return self.quote.pool_address
