"""Integration tests for the bank API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from bank import __version__
from bank.api.endpoints import get_bank
from bank.api.main import app, status_for
from bank.errors import (
    GlobalLimitExceeded,
    InsufficientSwapOutput,
    InvalidToken,
    PairDoesNotExist,
    StalePrice,
    TransferFailed,
    WithdrawalLimitExceeded,
)
from tests.helpers import (
    ALICE,
    CAP,
    DAI,
    NATIVE_UNIT,
    USD_UNIT,
    WITHDRAW_LIMIT,
    fund_native,
    fund_reserve,
    fund_token,
)


@pytest.fixture
def client(deployment) -> Iterator[TestClient]:
    """Test client bound to the per-test deployment."""
    app.dependency_overrides[get_bank] = lambda: deployment.bank
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestReadEndpoints:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}

    def test_stats(self, client):
        response = client.get("/stats")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == "0"
        assert data["globalCap"] == str(CAP)
        assert data["headroom"] == str(CAP)
        assert data["perTxWithdrawLimit"] == str(WITHDRAW_LIMIT)
        assert data["depositCount"] == 0

    def test_balance(self, client):
        response = client.get(f"/accounts/{ALICE}")
        assert response.status_code == 200
        assert response.json() == {"account": ALICE, "balance": "0", "formatted": "0.000000"}

    def test_balance_bad_address(self, client):
        assert client.get("/accounts/0x1234").status_code == 422


class TestDepositEndpoints:
    def test_reserve_deposit(self, client, deployment):
        fund_reserve(deployment, ALICE, 500 * USD_UNIT)

        response = client.post(
            "/deposits/reserve", json={"account": ALICE, "amount": str(500 * USD_UNIT)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["credited"] == str(500 * USD_UNIT)
        assert data["capCheck"] == ["pre"]
        assert data["pool"] is None
        balance = client.get(f"/accounts/{ALICE}").json()
        assert balance["balance"] == str(500 * USD_UNIT)
        assert balance["formatted"] == "500.000000"

    def test_native_deposit(self, client, deployment):
        fund_native(deployment, ALICE, NATIVE_UNIT)

        response = client.post(
            "/deposits/native", json={"account": ALICE, "value": str(NATIVE_UNIT)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["amountIn"] == str(NATIVE_UNIT)
        assert data["capCheck"] == ["pre", "post"]
        assert data["pool"] == deployment.pool.address
        assert data["calldata"].startswith("0x022c0d9f")

    def test_native_over_cap(self, client, deployment):
        fund_native(deployment, ALICE, 6 * NATIVE_UNIT)

        response = client.post(
            "/deposits/native", json={"account": ALICE, "value": str(6 * NATIVE_UNIT)}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "global_limit_exceeded"

    def test_token_deposit_slippage(self, client, deployment, dai_pool):
        dai, _ = dai_pool
        fund_token(deployment, dai, ALICE, 50 * 10**18)

        response = client.post(
            "/deposits/token",
            json={
                "account": ALICE,
                "token": DAI,
                "amount": str(50 * 10**18),
                "minOut": str(60 * USD_UNIT),
            },
        )

        assert response.status_code == 409
        assert response.json()["error"] == "insufficient_swap_output"

    def test_native_sentinel_as_token(self, client):
        response = client.post(
            "/deposits/token",
            json={"account": ALICE, "token": "0x" + "0" * 40, "amount": "1"},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_token"

    def test_zero_amount(self, client):
        response = client.post("/deposits/reserve", json={"account": ALICE, "amount": "0"})
        assert response.status_code == 422
        assert response.json()["error"] == "zero_amount"

    def test_negative_amount_rejected_by_schema(self, client):
        response = client.post("/deposits/reserve", json={"account": ALICE, "amount": "-5"})
        assert response.status_code == 422


class TestWithdrawEndpoint:
    def test_withdraw(self, client, deployment):
        fund_reserve(deployment, ALICE, 500 * USD_UNIT)
        deployment.bank.deposit_reserve_asset(ALICE, 500 * USD_UNIT)

        response = client.post(
            "/withdrawals", json={"account": ALICE, "amount": str(100 * USD_UNIT)}
        )

        assert response.status_code == 200
        assert response.json()["balance"] == str(400 * USD_UNIT)

    def test_over_limit(self, client, deployment):
        fund_reserve(deployment, ALICE, 500 * USD_UNIT)
        deployment.bank.deposit_reserve_asset(ALICE, 500 * USD_UNIT)

        response = client.post(
            "/withdrawals", json={"account": ALICE, "amount": str(150 * USD_UNIT)}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "withdrawal_limit_exceeded"


class TestUnexpectedErrors:
    def test_internal_error_body(self, deployment, monkeypatch):
        def crash(*args):
            raise RuntimeError("boom")

        monkeypatch.setattr(deployment.bank, "stats", crash)
        app.dependency_overrides[get_bank] = lambda: deployment.bank
        try:
            client = TestClient(app, raise_server_exceptions=False)
            response = client.get("/stats")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error"] == "internal_error"


class TestStatusMapping:
    @pytest.mark.parametrize(
        "error,status",
        [
            (InvalidToken(), 422),
            (GlobalLimitExceeded(0, 2, 1), 409),
            (WithdrawalLimitExceeded(2, 1), 409),
            (InsufficientSwapOutput(1, 2), 409),
            (StalePrice(), 502),
            (PairDoesNotExist(), 502),
            (TransferFailed(), 502),
        ],
    )
    def test_status_for(self, error, status):
        assert status_for(error) == status
