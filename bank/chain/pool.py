"""In-memory constant-product pair (UniswapV2Pair semantics).

The caller delivers the input to the pair before calling exchange. The
pair pays out the requested amounts, infers the input from its balances
and then enforces the fee-adjusted constant-product invariant. A failing
exchange may leave partial transfers behind; callers run it inside
``Chain.atomic()``.
"""

from __future__ import annotations

from typing import Any

import structlog

from bank.chain.token import FungibleToken
from bank.constants import SWAP_FEE_DENOMINATOR, SWAP_FEE_NUMERATOR
from bank.models.types import normalize_address

logger = structlog.get_logger()


class PoolError(Exception):
    """Exchange rejected by the pool."""

    pass


class ConstantProductPool:
    """Two-token x * y = k pool with a fee on the input amount.

    Tokens are stored in canonical order (lower address is token0),
    regardless of the order they were passed in.

    Attributes:
        reserves_calls: Number of reserves() reads (trace, not snapshotted)
        exchange_calls: Number of exchange() invocations (trace, not snapshotted)
    """

    def __init__(
        self,
        address: str,
        token_a: FungibleToken,
        token_b: FungibleToken,
        fee_numerator: int = SWAP_FEE_NUMERATOR,
        fee_denominator: int = SWAP_FEE_DENOMINATOR,
    ) -> None:
        if token_a.address == token_b.address:
            raise ValueError(f"Pool tokens must differ: {token_a.address}")
        self.address = normalize_address(address, validate=True)
        if bytes.fromhex(token_a.address[2:]) > bytes.fromhex(token_b.address[2:]):
            token_a, token_b = token_b, token_a
        self._token0 = token_a
        self._token1 = token_b
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator
        self._reserve0 = 0
        self._reserve1 = 0
        self.reserves_calls = 0
        self.exchange_calls = 0

    def __repr__(self) -> str:
        return f"ConstantProductPool({self._token0.symbol}/{self._token1.symbol}, {self.address})"

    @property
    def token0(self) -> FungibleToken:
        return self._token0

    @property
    def token1(self) -> FungibleToken:
        return self._token1

    def token0_address(self) -> str:
        return self._token0.address

    def token1_address(self) -> str:
        return self._token1.address

    def reserves(self) -> tuple[int, int]:
        self.reserves_calls += 1
        return self._reserve0, self._reserve1

    def add_liquidity(self, provider: str, amount0: int, amount1: int) -> None:
        """Move tokens from provider into the pool and sync reserves."""
        if not self._token0.transfer(provider, self.address, amount0):
            raise PoolError(f"{self._token0.symbol} liquidity transfer failed")
        if not self._token1.transfer(provider, self.address, amount1):
            raise PoolError(f"{self._token1.symbol} liquidity transfer failed")
        self._sync()

    def exchange(
        self,
        sender: str,
        amount0_out: int,
        amount1_out: int,
        recipient: str,
        data: bytes = b"",
    ) -> None:
        """Pay out the requested output against input already delivered.

        Raises:
            PoolError: On zero or two-sided output, insufficient liquidity,
                missing input, a failed payout or a broken invariant
        """
        self.exchange_calls += 1
        if amount0_out < 0 or amount1_out < 0:
            raise PoolError("Negative output amount")
        if amount0_out == 0 and amount1_out == 0:
            raise PoolError("Insufficient output amount")
        if amount0_out > 0 and amount1_out > 0:
            raise PoolError("Only single-sided output is supported")

        reserve0, reserve1 = self._reserve0, self._reserve1
        if amount0_out >= reserve0 or amount1_out >= reserve1:
            raise PoolError("Insufficient liquidity")

        if amount0_out:
            token_in, token_out, amount_out = self._token1, self._token0, amount0_out
        else:
            token_in, token_out, amount_out = self._token0, self._token1, amount1_out

        if not token_out.transfer(self.address, normalize_address(recipient), amount_out):
            raise PoolError(f"{token_out.symbol} output transfer failed")

        balance0 = self._token0.balance_of(self.address)
        balance1 = self._token1.balance_of(self.address)
        amount0_in = max(balance0 - (reserve0 - amount0_out), 0)
        amount1_in = max(balance1 - (reserve1 - amount1_out), 0)
        if amount0_in == 0 and amount1_in == 0:
            raise PoolError("Insufficient input amount")

        fee_part = self.fee_denominator - self.fee_numerator
        adjusted0 = balance0 * self.fee_denominator - amount0_in * fee_part
        adjusted1 = balance1 * self.fee_denominator - amount1_in * fee_part
        if adjusted0 * adjusted1 < reserve0 * reserve1 * self.fee_denominator**2:
            raise PoolError("K")

        self._reserve0, self._reserve1 = balance0, balance1
        logger.debug(
            "pool_exchange",
            pool=self.address[-8:],
            token_in=token_in.symbol,
            amount_in=amount0_in or amount1_in,
            token_out=token_out.symbol,
            amount_out=amount_out,
            data_len=len(data),
        )

    def _sync(self) -> None:
        self._reserve0 = self._token0.balance_of(self.address)
        self._reserve1 = self._token1.balance_of(self.address)

    def take_snapshot(self) -> dict[str, Any]:
        return {"reserve0": self._reserve0, "reserve1": self._reserve1}

    def restore_snapshot(self, snapshot: dict[str, Any]) -> None:
        self._reserve0 = snapshot["reserve0"]
        self._reserve1 = snapshot["reserve1"]
