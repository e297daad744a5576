"""Test helpers module for shared test utilities.

- constants: Accounts, token addresses and limits
- factories: Funding helpers, token/pool deployment and state capture
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAP,
    CAROL,
    DAI,
    DAI_USDC_POOL,
    ETH_PRICE,
    GENESIS_TIME,
    NATIVE_UNIT,
    PRICE_UNIT,
    UNI,
    USD_UNIT,
    WITHDRAW_LIMIT,
)
from tests.helpers.factories import (
    FeeOnTransferToken,
    deploy_token_with_pool,
    fund_native,
    fund_reserve,
    fund_token,
    state_of,
)

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "DAI",
    "DAI_USDC_POOL",
    "UNI",
    "GENESIS_TIME",
    "CAP",
    "WITHDRAW_LIMIT",
    "ETH_PRICE",
    "NATIVE_UNIT",
    "PRICE_UNIT",
    "USD_UNIT",
    # Factories
    "FeeOnTransferToken",
    "deploy_token_with_pool",
    "fund_native",
    "fund_reserve",
    "fund_token",
    "state_of",
]
