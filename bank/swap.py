"""Single-hop conversion of a deposited asset into the reserve asset.

The executor quotes against fresh reserves and rejects a doomed swap
before any input leaves custody. It then delivers the input to the pool,
prices the request on what the pool actually received (so tokens that
charge a transfer fee are swapped for their net amount) and finally
measures what arrived back in custody. That measured delta, not the
quote, is the authoritative result.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from bank.amm.base import SwapPool, SwapQuote, SwapResult
from bank.amm.uniswap_v2 import UniswapV2, uniswap_v2
from bank.chain.safe_transfer import SafeToken
from bank.errors import InsufficientSwapOutput, PairDoesNotExist, SwapFailed
from bank.models.types import normalize_address
from bank.pools.registry import PoolRegistry
from bank.safe_int import S

logger = structlog.get_logger()


class SwapExecutor:
    """Orchestrates one exchange into the reserve asset.

    Args:
        registry: Pool lookup by token pair
        reserve_token: The settlement asset every swap converts into
        custody: Address that holds swap inputs and receives outputs
        amm: Quote math (defaults to the 997/1000 UniswapV2 formula)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        reserve_token: SafeToken,
        custody: str,
        amm: UniswapV2 | None = None,
    ) -> None:
        self._registry = registry
        self._reserve = reserve_token
        self._custody = normalize_address(custody)
        self._amm = amm or uniswap_v2

    def resolve_pool(self, token_in: str) -> SwapPool:
        """Find the pool pairing token_in with the reserve asset.

        Raises:
            PairDoesNotExist: If no pool is registered for the pair
        """
        pool = self._registry.get_pool(token_in, self._reserve.address)
        if pool is None:
            raise PairDoesNotExist(
                f"No pool for {normalize_address(token_in)}/{self._reserve.address}"
            )
        return pool

    def quote(self, token_in: str, amount_in: int) -> SwapQuote:
        """Quote token_in -> reserve asset against current reserves (read-only)."""
        return self._amm.quote(self.resolve_pool(token_in), token_in, amount_in)

    def execute(self, token_in: SafeToken, amount_in: int, amount_out_min: int) -> SwapResult:
        """Swap amount_in of token_in held in custody into the reserve asset.

        The input is delivered to the pool before the exchange call, and the
        requested output is priced on what the pool actually received. A
        token that takes a fee in transit is therefore swapped for its net
        amount instead of tripping the pool's invariant check.

        Raises:
            PairDoesNotExist: If no pool exists for the pair
            InsufficientSwapOutput: If the quote (gross or net of transfer
                fees) or the measured output is below amount_out_min, or the
                quote rounds down to nothing
            TransferFailed: If the input cannot be delivered to the pool
            SwapFailed: If the pool rejects the exchange
        """
        pool = self.resolve_pool(token_in.address)
        quote = self._amm.quote(pool, token_in.address, amount_in)

        # Fail before any input leaves custody or the venue is called
        self._check_quote(quote, token_in, amount_out_min)

        pool_held_before = token_in.balance_of(pool.address)
        token_in.safe_transfer(self._custody, pool.address, amount_in)
        received = (S(token_in.balance_of(pool.address)) - S(pool_held_before)).value
        if received != amount_in:
            quote = self._net_quote(quote, received)
            self._check_quote(quote, token_in, amount_out_min)

        amount0_out, amount1_out = self._amm.output_amounts(
            pool, token_in.address, quote.expected_out
        )
        calldata = self._amm.encode_exchange(amount0_out, amount1_out, self._custody)

        balance_before = self._reserve.balance_of(self._custody)
        try:
            pool.exchange(self._custody, amount0_out, amount1_out, self._custody, b"")
        except Exception as err:
            logger.warning(
                "swap_failed",
                pool=quote.pool_address[-8:],
                token_in=token_in.symbol,
                amount_in=quote.amount_in,
                error=str(err),
            )
            raise SwapFailed(f"Exchange on {quote.pool_address} failed") from err
        balance_after = self._reserve.balance_of(self._custody)

        amount_out = (S(balance_after) - S(balance_before)).value
        if amount_out < amount_out_min:
            logger.warning(
                "swap_output_below_minimum",
                pool=quote.pool_address[-8:],
                expected_out=quote.expected_out,
                amount_out=amount_out,
                amount_out_min=amount_out_min,
            )
            raise InsufficientSwapOutput(amount_out, amount_out_min)

        logger.info(
            "swap_executed",
            pool=quote.pool_address[-8:],
            token_in=token_in.symbol,
            amount_in=quote.amount_in,
            expected_out=quote.expected_out,
            amount_out=amount_out,
        )
        return SwapResult(quote=quote, amount_out=amount_out, calldata=calldata)

    def _net_quote(self, quote: SwapQuote, received: int) -> SwapQuote:
        """Re-price a quote on the amount the pool actually received."""
        logger.info(
            "swap_input_taxed",
            pool=quote.pool_address[-8:],
            amount_sent=quote.amount_in,
            amount_received=received,
        )
        expected_out = (
            self._amm.get_amount_out(received, quote.reserve_in, quote.reserve_out)
            if received > 0
            else 0
        )
        return replace(quote, amount_in=received, expected_out=expected_out)

    def _check_quote(self, quote: SwapQuote, token_in: SafeToken, amount_out_min: int) -> None:
        if quote.expected_out > 0 and quote.expected_out >= amount_out_min:
            return
        logger.warning(
            "swap_quote_below_minimum",
            pool=quote.pool_address[-8:],
            token_in=token_in.symbol,
            amount_in=quote.amount_in,
            expected_out=quote.expected_out,
            amount_out_min=amount_out_min,
        )
        # A zero quote is rejected even without a floor: the pool pays nothing
        raise InsufficientSwapOutput(quote.expected_out, max(amount_out_min, 1))
