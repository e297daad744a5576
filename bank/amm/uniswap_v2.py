"""UniswapV2-style quote math.

UniswapV2 uses the constant product formula: x * y = k
With a 0.3% fee on input amounts. The engine must reproduce the pool's
own accounting to the unit, so rounding is integer floor in the pool's
favour.
"""

from __future__ import annotations

from typing import ClassVar

from eth_abi import encode  # type: ignore[attr-defined]

from bank.amm.base import SwapPool, SwapQuote
from bank.constants import SWAP_FEE_DENOMINATOR, SWAP_FEE_NUMERATOR
from bank.errors import InsufficientBalance
from bank.models.types import is_valid_address, normalize_address
from bank.safe_int import S


class UniswapV2:
    """UniswapV2 quote math and exchange encoding.

    Formula: amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)
    """

    # swap(uint256,uint256,address,bytes) on UniswapV2Pair
    EXCHANGE_SELECTOR: ClassVar[str] = "0x022c0d9f"

    def __init__(
        self,
        fee_numerator: int = SWAP_FEE_NUMERATOR,
        fee_denominator: int = SWAP_FEE_DENOMINATOR,
    ) -> None:
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, floored

        Raises:
            InsufficientBalance: If the input or either reserve is zero
        """
        if amount_in <= 0:
            raise InsufficientBalance(f"Insufficient input amount: {amount_in}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientBalance(
                f"Insufficient liquidity: reserves ({reserve_in}, {reserve_out})"
            )

        amount_in_with_fee = S(amount_in) * S(self.fee_numerator)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(self.fee_denominator) + amount_in_with_fee

        return (numerator // denominator).value

    def get_reserves(self, pool: SwapPool, token_in: str) -> tuple[int, int]:
        """Read the pool and order its reserves as (reserve_in, reserve_out).

        Pools store reserves by canonical pair order, so the mapping is
        re-derived from token0 on every call.
        """
        reserve0, reserve1 = pool.reserves()
        if normalize_address(token_in) == normalize_address(pool.token0_address()):
            return reserve0, reserve1
        if normalize_address(token_in) == normalize_address(pool.token1_address()):
            return reserve1, reserve0
        raise ValueError(f"Token {token_in} not in pool {pool.address}")

    def get_token_out(self, pool: SwapPool, token_in: str) -> str:
        """Get the output token for a given input token."""
        token0 = normalize_address(pool.token0_address())
        return (
            normalize_address(pool.token1_address())
            if normalize_address(token_in) == token0
            else token0
        )

    def quote(self, pool: SwapPool, token_in: str, amount_in: int) -> SwapQuote:
        """Quote a swap (exact input) against the pool's current reserves."""
        reserve_in, reserve_out = self.get_reserves(pool, token_in)
        expected_out = self.get_amount_out(amount_in, reserve_in, reserve_out)
        return SwapQuote(
            pool_address=normalize_address(pool.address),
            token_in=normalize_address(token_in),
            token_out=self.get_token_out(pool, token_in),
            amount_in=amount_in,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            expected_out=expected_out,
        )

    def output_amounts(self, pool: SwapPool, token_in: str, amount_out: int) -> tuple[int, int]:
        """Split an output amount into (amount0_out, amount1_out) for exchange()."""
        if normalize_address(token_in) == normalize_address(pool.token0_address()):
            return 0, amount_out
        return amount_out, 0

    def encode_exchange(
        self,
        amount0_out: int,
        amount1_out: int,
        recipient: str,
        data: bytes = b"",
    ) -> str:
        """Encode an exchange as UniswapV2Pair.swap calldata.

        Raises:
            ValueError: If recipient is not a valid address
        """
        if not is_valid_address(recipient):
            raise ValueError(f"Invalid recipient address: {recipient}")

        encoded_args = encode(
            ["uint256", "uint256", "address", "bytes"],
            [amount0_out, amount1_out, bytes.fromhex(recipient[2:]), data],
        )
        return self.EXCHANGE_SELECTOR + encoded_args.hex()


# Singleton instance
uniswap_v2 = UniswapV2()


__all__ = [
    "UniswapV2",
    "uniswap_v2",
]
