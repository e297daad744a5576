"""Local deployment of the bank and its collaborators.

Builds a Chain with a reserve token (USDC-like), wrapped native token,
a seeded WETH/USDC constant-product pool and a static price feed, then
wires a Bank on top. Used by the API server and by tests.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from bank.chain.host import Chain
from bank.chain.oracle_feed import StaticPriceFeed
from bank.chain.pool import ConstantProductPool
from bank.chain.token import FungibleToken, WrappedNative
from bank.config import BankConfig
from bank.constants import ACCOUNTING_DECIMALS, NATIVE_UNIT, PRICE_UNIT
from bank.engine import Bank
from bank.pools.registry import PoolRegistry
from bank.units import native_to_usd

logger = structlog.get_logger()

# Mainnet addresses reused as local contract addresses (lowercase)
RESERVE_TOKEN_ADDRESS = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"  # USDC
WRAPPED_NATIVE_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"  # WETH
WETH_USDC_POOL_ADDRESS = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"  # UniswapV2 USDC/WETH
PRICE_FEED_ADDRESS = "0x5f4ec3df9cbd43714fe2740f5e3616155c5b8419"  # ETH/USD aggregator
LIQUIDITY_PROVIDER = "0x00000000000000000000000000000000000011b0"

DEFAULT_NATIVE_PRICE = 2000 * PRICE_UNIT
DEFAULT_POOL_NATIVE_LIQUIDITY = 1000 * NATIVE_UNIT


@dataclass
class LocalDeployment:
    """Handles to everything deployed by deploy_local()."""

    chain: Chain
    bank: Bank
    reserve_token: FungibleToken
    wrapped_native: WrappedNative
    pool: ConstantProductPool
    price_feed: StaticPriceFeed
    registry: PoolRegistry


def deploy_local(
    config: BankConfig | None = None,
    *,
    native_price: int = DEFAULT_NATIVE_PRICE,
    pool_native_liquidity: int = DEFAULT_POOL_NATIVE_LIQUIDITY,
    timestamp: int | None = None,
) -> LocalDeployment:
    """Deploy a bank on a fresh local chain.

    The pool is seeded at the oracle price, so quotes and oracle estimates
    agree up to fee and price impact.

    Args:
        config: Bank limits (defaults to BankConfig())
        native_price: Oracle price for one native unit (8 decimals)
        pool_native_liquidity: Native-side pool reserve in wei
        timestamp: Initial chain time (defaults to wall clock)
    """
    chain = Chain(timestamp)
    reserve = chain.deploy(FungibleToken(RESERVE_TOKEN_ADDRESS, "USDC", ACCOUNTING_DECIMALS))
    wrapped = chain.deploy(WrappedNative(WRAPPED_NATIVE_ADDRESS, chain.native))
    feed = chain.deploy(StaticPriceFeed(PRICE_FEED_ADDRESS, native_price, chain.now()))
    pool = chain.deploy(ConstantProductPool(WETH_USDC_POOL_ADDRESS, reserve, wrapped))

    if pool_native_liquidity > 0:
        reserve_liquidity = native_to_usd(pool_native_liquidity, native_price)
        chain.native.mint(LIQUIDITY_PROVIDER, pool_native_liquidity)
        wrapped.deposit(LIQUIDITY_PROVIDER, pool_native_liquidity)
        reserve.mint(LIQUIDITY_PROVIDER, reserve_liquidity)
        amounts = {reserve.address: reserve_liquidity, wrapped.address: pool_native_liquidity}
        pool.add_liquidity(
            LIQUIDITY_PROVIDER,
            amounts[pool.token0_address()],
            amounts[pool.token1_address()],
        )

    registry = PoolRegistry([pool])
    bank = Bank(chain, reserve, wrapped, feed, registry, config=config or BankConfig())

    logger.info(
        "local_deployment_ready",
        bank=bank.address,
        reserve_token=reserve.address,
        pool=pool.address,
        global_cap=bank.config.global_cap,
    )
    return LocalDeployment(
        chain=chain,
        bank=bank,
        reserve_token=reserve,
        wrapped_native=wrapped,
        pool=pool,
        price_feed=feed,
        registry=registry,
    )


_default_deployment: LocalDeployment | None = None


def get_default_deployment() -> LocalDeployment:
    """Lazily create the process-wide deployment, configured from BANK_* env vars."""
    global _default_deployment
    if _default_deployment is None:
        _default_deployment = deploy_local(BankConfig.from_env())
    return _default_deployment
