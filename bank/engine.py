"""Deposit-swap-accounting engine.

The Bank is the entry point for every operation. Each public operation
runs inside one ``Chain.atomic()`` block: it either commits as a whole or
is discarded as a whole, so a failure leaves balances, the bank total and
every external token balance exactly as they were.

Pipelines:
- Reserve deposit: validate, cap check, credit, then pull funds.
- Native deposit: validate, receive value, price via oracle and cap
  pre-check, wrap, swap, cap post-check, credit.
- Token deposit: validate, pull funds, swap what was received, cap
  post-check, credit.
- Withdraw: validate, debit, then transfer out (restoring the ledger and
  failing loudly if the transfer fails).
"""

from __future__ import annotations

import structlog

from bank.amm.base import SwapResult
from bank.amm.uniswap_v2 import UniswapV2
from bank.cap import CapCheck, CapGuard
from bank.chain.host import Chain
from bank.chain.safe_transfer import SafeToken
from bank.chain.token import FungibleToken, WrappedNative
from bank.config import DEFAULT_BANK_CONFIG, BankConfig
from bank.constants import BANK_ADDRESS, NATIVE_ASSET
from bank.errors import (
    InsufficientBalance,
    InvalidAccount,
    InvalidToken,
    TransferFailed,
    ValidationError,
    WithdrawalLimitExceeded,
    ZeroAmount,
)
from bank.ledger import Ledger
from bank.models.receipts import BankStats, DepositReceipt, WithdrawReceipt
from bank.models.types import is_valid_address, normalize_address
from bank.oracle import OracleAdapter, PriceSource
from bank.pools.registry import PoolRegistry
from bank.swap import SwapExecutor

logger = structlog.get_logger()


class Bank:
    """Custodial ledger settling exclusively in the reserve asset.

    Args:
        chain: Host providing atomic operations, the clock and contracts
        reserve_token: Settlement asset (6 decimals)
        wrapped_native: Wrapper used to route native value through pools
        price_source: Native asset price feed (8 decimals)
        registry: Pools pairing deposit assets with the reserve asset
        address: Custody address of the bank
        config: Limits; defaults to DEFAULT_BANK_CONFIG
        amm: Quote math; defaults to UniswapV2 with the config's fee
    """

    def __init__(
        self,
        chain: Chain,
        reserve_token: FungibleToken,
        wrapped_native: WrappedNative,
        price_source: PriceSource,
        registry: PoolRegistry,
        *,
        address: str = BANK_ADDRESS,
        config: BankConfig = DEFAULT_BANK_CONFIG,
        amm: UniswapV2 | None = None,
    ) -> None:
        self.address = normalize_address(address, validate=True)
        self.config = config
        self._chain = chain
        self._reserve = SafeToken(reserve_token)
        self._wrapped_native = wrapped_native
        self._wrapped = SafeToken(wrapped_native)

        self.ledger = chain.register(Ledger())
        self.cap = CapGuard(self.ledger, config.global_cap)
        self.oracle = OracleAdapter(price_source, config.oracle_staleness_window, chain.now)
        self.swaps = SwapExecutor(
            registry,
            self._reserve,
            self.address,
            amm or UniswapV2(config.fee_numerator, config.fee_denominator),
        )

    @property
    def reserve_asset(self) -> str:
        return self._reserve.address

    @property
    def total_deposits(self) -> int:
        """Bank total in accounting units."""
        return self.ledger.total

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    # --- Deposits ---

    def deposit_reserve_asset(self, caller: str, amount: int) -> DepositReceipt:
        """Deposit the reserve asset directly (caller must have approved the bank).

        Raises:
            ZeroAmount: If amount is zero
            GlobalLimitExceeded: If the deposit would exceed the cap
            TransferFailed: If the funds cannot be pulled from caller
        """
        caller = _require_account(caller)
        with self._chain.atomic():
            _require_amount(amount)
            return self._deposit_reserve(caller, amount)

    def deposit_native_and_swap(self, caller: str, value: int, min_out: int) -> DepositReceipt:
        """Deposit native value, converting it to the reserve asset.

        The deposit is priced with the oracle and checked against the cap
        before the venue is touched; the measured swap output is checked
        again before crediting.

        Raises:
            ZeroAmount: If value is zero
            TransferFailed: If caller lacks the native value
            OracleCompromised, StalePrice: If the oracle cannot be trusted
            GlobalLimitExceeded: If the estimate or the swap output exceeds the cap
            PairDoesNotExist, InsufficientSwapOutput, SwapFailed: On swap failures
        """
        caller = _require_account(caller)
        with self._chain.atomic():
            _require_amount(value)
            _require_min_out(min_out)
            self._chain.native.transfer(caller, self.address, value)

            estimate = self.oracle.native_to_usd(value)
            self.cap.pre_check(estimate)

            self._wrapped_native.deposit(self.address, value)
            result = self.swaps.execute(self._wrapped, value, min_out)
            self.cap.post_check(result.amount_out)

            return self._credit_swap(
                caller, NATIVE_ASSET, value, result, (CapCheck.PRE, CapCheck.POST)
            )

    def deposit_token_and_swap(
        self, caller: str, token: str, amount: int, min_out: int
    ) -> DepositReceipt:
        """Deposit a fungible token, converting it to the reserve asset.

        The token has no independent price, so the cap is verified on the
        measured swap output; a rejection reverts the transfer-in and the
        swap together. Depositing the reserve asset itself skips the swap.

        Raises:
            ZeroAmount: If amount (or the amount actually received) is zero
            InvalidToken: If token is malformed, the native sentinel or not a token
            TransferFailed: If the funds cannot be pulled from caller
            GlobalLimitExceeded: If the swap output exceeds the cap
            PairDoesNotExist, InsufficientSwapOutput, SwapFailed: On swap failures
        """
        caller = _require_account(caller)
        with self._chain.atomic():
            _require_amount(amount)
            _require_min_out(min_out)
            contract = self._resolve_token(token)
            if contract.address == self._reserve.address:
                return self._deposit_reserve(caller, amount)

            token_in = SafeToken(contract)
            held_before = token_in.balance_of(self.address)
            token_in.safe_transfer_from(self.address, caller, self.address, amount)
            received = token_in.balance_of(self.address) - held_before
            if received <= 0:
                raise ZeroAmount(f"No {contract.symbol} received for transfer of {amount}")

            result = self.swaps.execute(token_in, received, min_out)
            self.cap.post_check(result.amount_out)

            return self._credit_swap(caller, contract.address, received, result, (CapCheck.POST,))

    # --- Withdrawals ---

    def withdraw(self, caller: str, amount: int) -> WithdrawReceipt:
        """Withdraw reserve asset from the caller's balance.

        Raises:
            ZeroAmount: If amount is zero
            InsufficientBalance: If the caller's balance is below amount
            WithdrawalLimitExceeded: If amount exceeds the per-transaction limit
            TransferFailed: If the outbound transfer fails (ledger restored)
        """
        caller = _require_account(caller)
        with self._chain.atomic():
            _require_amount(amount)
            balance = self.ledger.balance_of(caller)
            if balance < amount:
                logger.warning(
                    "withdrawal_rejected", account=caller, balance=balance, amount=amount
                )
                raise InsufficientBalance(f"Balance {balance} < requested {amount}")
            if amount > self.config.per_tx_withdraw_limit:
                logger.warning(
                    "withdrawal_rejected",
                    account=caller,
                    amount=amount,
                    limit=self.config.per_tx_withdraw_limit,
                )
                raise WithdrawalLimitExceeded(amount, self.config.per_tx_withdraw_limit)

            new_balance = self.ledger.debit(caller, amount)
            try:
                self._reserve.safe_transfer(self.address, caller, amount)
            except TransferFailed as err:
                self.ledger.credit(caller, amount)
                logger.warning(
                    "withdrawal_transfer_failed", account=caller, amount=amount, error=str(err)
                )
                raise TransferFailed(f"Withdrawal of {amount} to {caller} failed: {err}") from err
            self.ledger.record_withdrawal()

            logger.info(
                "withdrawal_settled",
                account=caller,
                amount=amount,
                balance=new_balance,
                total=self.ledger.total,
            )
            return WithdrawReceipt(
                account=caller, amount=amount, balance=new_balance, total=self.ledger.total
            )

    # --- Read-only ---

    def preview_token_deposit(self, token: str, amount: int) -> int:
        """Expected reserve-asset credit for a token deposit at current reserves."""
        _require_amount(amount)
        contract = self._resolve_token(token)
        if contract.address == self._reserve.address:
            return amount
        return self.swaps.quote(contract.address, amount).expected_out

    def preview_native_deposit(self, value: int) -> int:
        """Expected reserve-asset credit for a native deposit at current reserves."""
        _require_amount(value)
        return self.swaps.quote(self._wrapped.address, value).expected_out

    def stats(self) -> BankStats:
        return BankStats(
            total=self.ledger.total,
            global_cap=self.cap.global_cap,
            headroom=self.cap.headroom,
            per_tx_withdraw_limit=self.config.per_tx_withdraw_limit,
            deposit_count=self.ledger.deposit_count,
            withdrawal_count=self.ledger.withdrawal_count,
        )

    # --- Internals ---

    def _deposit_reserve(self, caller: str, amount: int) -> DepositReceipt:
        self.cap.pre_check(amount)
        balance = self.ledger.credit(caller, amount)
        self.ledger.record_deposit()
        # Ledger first, then pull: the reserve asset's transfer is well-behaved
        self._reserve.safe_transfer_from(self.address, caller, self.address, amount)

        logger.info(
            "deposit_credited",
            account=caller,
            asset=self._reserve.symbol,
            credited=amount,
            balance=balance,
            total=self.ledger.total,
        )
        return DepositReceipt(
            account=caller,
            asset=self._reserve.address,
            amount_in=amount,
            credited=amount,
            balance=balance,
            total=self.ledger.total,
            cap_check=(CapCheck.PRE,),
        )

    def _credit_swap(
        self,
        caller: str,
        asset: str,
        amount_in: int,
        result: SwapResult,
        cap_check: tuple[CapCheck, ...],
    ) -> DepositReceipt:
        balance = self.ledger.credit(caller, result.amount_out)
        self.ledger.record_deposit()
        logger.info(
            "deposit_credited",
            account=caller,
            asset=asset,
            amount_in=amount_in,
            credited=result.amount_out,
            balance=balance,
            total=self.ledger.total,
        )
        return DepositReceipt(
            account=caller,
            asset=asset,
            amount_in=amount_in,
            credited=result.amount_out,
            balance=balance,
            total=self.ledger.total,
            cap_check=cap_check,
            swap=result,
        )

    def _resolve_token(self, token: str) -> FungibleToken:
        if not isinstance(token, str) or not is_valid_address(normalize_address(token)):
            raise InvalidToken(f"Malformed token address: {token!r}")
        address = normalize_address(token)
        if address == NATIVE_ASSET:
            raise InvalidToken("Native value must be deposited with deposit_native_and_swap")
        contract = self._chain.get_contract(address)
        if not isinstance(contract, FungibleToken):
            raise InvalidToken(f"No fungible token at {address}")
        return contract


def _require_account(account: str) -> str:
    if not isinstance(account, str) or not is_valid_address(normalize_address(account)):
        raise InvalidAccount(f"Malformed account address: {account!r}")
    return normalize_address(account)


def _require_amount(amount: int) -> None:
    if amount == 0:
        raise ZeroAmount()
    if amount < 0:
        raise ValidationError(f"Amount cannot be negative: {amount}")


def _require_min_out(min_out: int) -> None:
    if min_out < 0:
        raise ValidationError(f"Minimum output cannot be negative: {min_out}")
