"""Pytest configuration and fixtures."""

import pytest

from bank.bootstrap import LocalDeployment, deploy_local
from bank.chain.pool import ConstantProductPool
from bank.chain.token import FungibleToken
from bank.config import BankConfig
from bank.engine import Bank
from tests.helpers import CAP, ETH_PRICE, GENESIS_TIME, WITHDRAW_LIMIT, deploy_token_with_pool

TEST_CONFIG = BankConfig(
    global_cap=CAP,
    per_tx_withdraw_limit=WITHDRAW_LIMIT,
    oracle_staleness_window=3600,
)


@pytest.fixture
def config() -> BankConfig:
    """Bank limits used across tests: 10,000.00 cap, 100.00 withdrawal limit."""
    return TEST_CONFIG


@pytest.fixture
def deployment(config: BankConfig) -> LocalDeployment:
    """Fresh chain with USDC, WETH, a 1000 ETH / 2,000,000 USDC pool and a $2000 feed."""
    return deploy_local(config, native_price=ETH_PRICE, timestamp=GENESIS_TIME)


@pytest.fixture
def bank(deployment: LocalDeployment) -> Bank:
    return deployment.bank


@pytest.fixture
def dai_pool(deployment: LocalDeployment) -> tuple[FungibleToken, ConstantProductPool]:
    """DAI plus a 1:1 DAI/USDC pool with 1,000,000 of each side."""
    return deploy_token_with_pool(deployment)
