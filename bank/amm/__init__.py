"""Swap venue interfaces and constant-product quote math."""

from bank.amm.base import SwapPool, SwapQuote, SwapResult
from bank.amm.uniswap_v2 import UniswapV2, uniswap_v2

__all__ = [
    "SwapPool",
    "SwapQuote",
    "SwapResult",
    "UniswapV2",
    "uniswap_v2",
]
