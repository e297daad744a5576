"""Tests for the ledger and the global cap guard."""

import pytest

from bank.cap import CapCheck, CapGuard
from bank.errors import GlobalLimitExceeded, InsufficientBalance
from bank.ledger import Ledger
from bank.safe_int import Uint256Overflow
from tests.helpers import ALICE, BOB, CAP, USD_UNIT


@pytest.fixture
def ledger():
    return Ledger()


class TestLedger:
    def test_empty(self, ledger):
        assert ledger.total == 0
        assert ledger.balance_of(ALICE) == 0
        assert list(ledger.accounts()) == []

    def test_credit_updates_balance_and_total(self, ledger):
        assert ledger.credit(ALICE, 100) == 100
        assert ledger.credit(BOB, 50) == 50
        assert ledger.credit(ALICE, 25) == 125
        assert ledger.total == 175

    def test_addresses_are_case_insensitive(self, ledger):
        ledger.credit(BOB.upper().replace("0X", "0x"), 10)
        assert ledger.balance_of(BOB) == 10

    def test_debit(self, ledger):
        ledger.credit(ALICE, 100)
        assert ledger.debit(ALICE, 40) == 60
        assert ledger.total == 60

    def test_debit_more_than_balance(self, ledger):
        ledger.credit(ALICE, 100)
        ledger.credit(BOB, 1000)
        with pytest.raises(InsufficientBalance):
            ledger.debit(ALICE, 101)
        assert ledger.balance_of(ALICE) == 100
        assert ledger.total == 1100

    def test_drained_account_keeps_entry(self, ledger):
        ledger.credit(ALICE, 100)
        ledger.debit(ALICE, 100)
        assert list(ledger.accounts()) == [(ALICE, 0)]

    def test_negative_credit_rejected(self, ledger):
        with pytest.raises(Uint256Overflow):
            ledger.credit(ALICE, -1)

    def test_counters(self, ledger):
        ledger.record_deposit()
        ledger.record_deposit()
        ledger.record_withdrawal()
        assert (ledger.deposit_count, ledger.withdrawal_count) == (2, 1)

    def test_snapshot_restore(self, ledger):
        ledger.credit(ALICE, 100)
        snapshot = ledger.take_snapshot()
        ledger.credit(BOB, 5)
        ledger.record_deposit()
        ledger.restore_snapshot(snapshot)
        assert ledger.total == 100
        assert ledger.balance_of(BOB) == 0
        assert ledger.deposit_count == 0

    def test_snapshot_is_a_copy(self, ledger):
        ledger.credit(ALICE, 100)
        snapshot = ledger.take_snapshot()
        ledger.credit(ALICE, 1)
        assert snapshot["balances"][ALICE] == 100


class TestCapGuard:
    @pytest.fixture
    def guard(self, ledger):
        return CapGuard(ledger, CAP)

    def test_up_to_cap_allowed(self, guard, ledger):
        ledger.credit(ALICE, 4000 * USD_UNIT)
        guard.pre_check(6000 * USD_UNIT)
        guard.post_check(6000 * USD_UNIT)

    def test_one_unit_over_cap(self, guard, ledger):
        ledger.credit(ALICE, 4000 * USD_UNIT)
        with pytest.raises(GlobalLimitExceeded) as exc_info:
            guard.post_check(6000 * USD_UNIT + 1)
        err = exc_info.value
        assert (err.total, err.amount, err.cap) == (4000 * USD_UNIT, 6000 * USD_UNIT + 1, CAP)

    def test_pre_check_on_estimate(self, guard):
        with pytest.raises(GlobalLimitExceeded):
            guard.pre_check(12_000 * USD_UNIT)

    def test_headroom(self, guard, ledger):
        assert guard.headroom == CAP
        ledger.credit(ALICE, 2500 * USD_UNIT)
        assert guard.headroom == 7500 * USD_UNIT

    def test_headroom_never_negative(self, ledger):
        ledger.credit(ALICE, 200)
        assert CapGuard(ledger, 100).headroom == 0

    def test_cap_check_values(self):
        assert CapCheck.PRE.value == "pre"
        assert CapCheck.POST == "post"
