"""Randomized operation sequences checking ledger conservation and atomicity."""

import random

import pytest

from bank.errors import BankError
from tests.helpers import (
    ALICE,
    BOB,
    CAP,
    CAROL,
    DAI,
    NATIVE_UNIT,
    USD_UNIT,
    fund_native,
    fund_reserve,
    fund_token,
    state_of,
)

ACCOUNTS = [ALICE, BOB, CAROL]
ONE_DAI = 10**18


def random_operation(rng, bank, dai):
    account = rng.choice(ACCOUNTS)
    kind = rng.choice(["reserve", "native", "token", "withdraw"])
    if kind == "reserve":
        return lambda: bank.deposit_reserve_asset(account, rng.randint(0, 3000) * USD_UNIT)
    if kind == "native":
        value = rng.randint(0, 300) * NATIVE_UNIT // 100
        min_out = rng.choice([0, 0, value * 2100 // 10**12])
        return lambda: bank.deposit_native_and_swap(account, value, min_out)
    if kind == "token":
        amount = rng.randint(0, 3000) * ONE_DAI
        min_out = rng.choice([0, 0, amount // 10**12])
        return lambda: bank.deposit_token_and_swap(account, dai.address, amount, min_out)
    return lambda: bank.withdraw(account, rng.randint(0, 150) * USD_UNIT)


@pytest.mark.parametrize("seed", range(8))
def test_random_sequences_preserve_invariants(deployment, bank, dai_pool, seed):
    rng = random.Random(seed)
    dai, _ = dai_pool
    for account in ACCOUNTS:
        fund_reserve(deployment, account, 50_000 * USD_UNIT)
        fund_native(deployment, account, 50 * NATIVE_UNIT)
        fund_token(deployment, dai, account, 50_000 * ONE_DAI)

    for _ in range(60):
        operation = random_operation(rng, bank, dai)
        before = state_of(deployment, dai)
        try:
            operation()
        except BankError:
            assert state_of(deployment, dai) == before
        balances = [balance for _, balance in bank.ledger.accounts()]
        assert bank.total_deposits == sum(balances)
        assert bank.total_deposits <= CAP
        assert deployment.reserve_token.balance_of(bank.address) == bank.total_deposits
