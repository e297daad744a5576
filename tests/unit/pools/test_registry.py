"""Tests for PoolRegistry."""

import pytest

from bank.chain.pool import ConstantProductPool
from bank.chain.token import FungibleToken
from bank.pools import PoolRegistry
from tests.helpers import DAI, UNI

USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
POOL_A = "0xae461ca67b15dc8dc81ce7615e0320da1a9ab8d5"
POOL_B = "0xd3d2e2692501a5c9ca623199d38826e513033a17"


@pytest.fixture
def tokens():
    return FungibleToken(DAI, "DAI"), FungibleToken(USDC, "USDC", 6), FungibleToken(UNI, "UNI")


class TestPoolRegistry:
    def test_lookup_order_independent(self, tokens):
        dai, usdc, _ = tokens
        pool = ConstantProductPool(POOL_A, dai, usdc)
        registry = PoolRegistry([pool])

        assert registry.get_pool(DAI, USDC) is pool
        assert registry.get_pool(USDC, DAI) is pool
        assert registry.get_pool(USDC.upper().replace("0X", "0x"), DAI) is pool

    def test_missing_pair(self, tokens):
        dai, usdc, _ = tokens
        registry = PoolRegistry([ConstantProductPool(POOL_A, dai, usdc)])
        assert registry.get_pool(UNI, USDC) is None

    def test_replace_existing_pair(self, tokens):
        dai, usdc, _ = tokens
        registry = PoolRegistry()
        registry.add_pool(ConstantProductPool(POOL_A, dai, usdc))
        replacement = ConstantProductPool(POOL_B, usdc, dai)
        registry.add_pool(replacement)

        assert len(registry) == 1
        assert registry.get_pool(DAI, USDC) is replacement

    def test_iterates_pools(self, tokens):
        dai, usdc, uni = tokens
        pools = [ConstantProductPool(POOL_A, dai, usdc), ConstantProductPool(POOL_B, uni, usdc)]
        registry = PoolRegistry(pools)
        assert len(registry) == 2
        assert set(registry) == set(pools)
