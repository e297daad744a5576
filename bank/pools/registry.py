"""Pool registry for resolving the swap venue pair for a token.

Lookups are order independent: (token_a, token_b) and (token_b, token_a)
resolve to the same pool.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from bank.amm.base import SwapPool
from bank.models.types import normalize_address

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of constant-product pools keyed by token pair."""

    def __init__(self, pools: list[SwapPool] | None = None) -> None:
        self._pools: dict[frozenset[str], SwapPool] = {}
        if pools:
            for pool in pools:
                self.add_pool(pool)

    def add_pool(self, pool: SwapPool) -> None:
        """Add a pool to the registry.

        Args:
            pool: The pool to add. If a pool for this token pair already exists,
                  it will be replaced.
        """
        token0_norm = normalize_address(pool.token0_address())
        token1_norm = normalize_address(pool.token1_address())
        if token0_norm == token1_norm:
            raise ValueError(f"Pool {pool.address} pairs a token with itself")
        pair_key = frozenset([token0_norm, token1_norm])
        if pair_key in self._pools:
            logger.debug(
                "pool_replaced",
                pool=pool.address[-8:],
                token0=token0_norm[-8:],
                token1=token1_norm[-8:],
            )
        self._pools[pair_key] = pool

    def get_pool(self, token_a: str, token_b: str) -> SwapPool | None:
        """Get the pool for a token pair (order independent).

        Returns:
            The pool if registered, None otherwise
        """
        pair_key = frozenset([normalize_address(token_a), normalize_address(token_b)])
        return self._pools.get(pair_key)

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[SwapPool]:
        return iter(self._pools.values())
