"""End-to-end withdrawal flows."""

import pytest

from bank.errors import InsufficientBalance, TransferFailed, WithdrawalLimitExceeded, ZeroAmount
from tests.helpers import ALICE, BOB, USD_UNIT, WITHDRAW_LIMIT, fund_reserve, state_of


@pytest.fixture
def funded(deployment, bank):
    """ALICE holds 500.00 in the bank."""
    fund_reserve(deployment, ALICE, 500 * USD_UNIT)
    bank.deposit_reserve_asset(ALICE, 500 * USD_UNIT)
    return deployment


class TestWithdraw:
    def test_pays_out_reserve_asset(self, funded, bank):
        receipt = bank.withdraw(ALICE, 100 * USD_UNIT)

        assert receipt.balance == 400 * USD_UNIT
        assert receipt.total == 400 * USD_UNIT
        assert bank.balance_of(ALICE) == 400 * USD_UNIT
        assert funded.reserve_token.balance_of(ALICE) == 100 * USD_UNIT
        assert funded.reserve_token.balance_of(bank.address) == 400 * USD_UNIT
        assert bank.stats().withdrawal_count == 1

    def test_exactly_at_limit(self, funded, bank):
        assert bank.withdraw(ALICE, WITHDRAW_LIMIT).amount == WITHDRAW_LIMIT

    def test_over_limit(self, funded, bank):
        before = state_of(funded)

        with pytest.raises(WithdrawalLimitExceeded) as exc_info:
            bank.withdraw(ALICE, 150 * USD_UNIT)

        assert exc_info.value.limit == WITHDRAW_LIMIT
        assert state_of(funded) == before

    def test_over_balance_reported_before_limit(self, funded, bank):
        with pytest.raises(InsufficientBalance):
            bank.withdraw(ALICE, 600 * USD_UNIT)

    def test_unknown_account(self, funded, bank):
        with pytest.raises(InsufficientBalance):
            bank.withdraw(BOB, 1)

    def test_zero_amount(self, funded, bank):
        with pytest.raises(ZeroAmount):
            bank.withdraw(ALICE, 0)

    def test_drain_in_steps(self, funded, bank):
        for _ in range(5):
            bank.withdraw(ALICE, 100 * USD_UNIT)
        assert bank.balance_of(ALICE) == 0
        assert bank.total_deposits == 0
        with pytest.raises(InsufficientBalance):
            bank.withdraw(ALICE, 1)

    def test_failed_transfer_restores_ledger(self, funded, bank, monkeypatch):
        monkeypatch.setattr(funded.reserve_token, "transfer", lambda *args: False)
        before = state_of(funded)

        with pytest.raises(TransferFailed) as exc_info:
            bank.withdraw(ALICE, 50 * USD_UNIT)

        assert isinstance(exc_info.value.__cause__, TransferFailed)
        assert ALICE in str(exc_info.value)
        assert bank.balance_of(ALICE) == 500 * USD_UNIT
        assert bank.total_deposits == 500 * USD_UNIT
        assert bank.stats().withdrawal_count == 0
        assert state_of(funded) == before

    def test_reverting_transfer_restores_ledger(self, funded, bank, monkeypatch):
        def revert(*args):
            raise RuntimeError("paused")

        monkeypatch.setattr(funded.reserve_token, "transfer", revert)

        with pytest.raises(TransferFailed):
            bank.withdraw(ALICE, 50 * USD_UNIT)
        assert bank.balance_of(ALICE) == 500 * USD_UNIT
