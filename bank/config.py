"""Configuration for the swap bank."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from bank.constants import (
    GLOBAL_CAP,
    ORACLE_STALENESS_WINDOW,
    PER_TX_WITHDRAW_LIMIT,
    SWAP_FEE_DENOMINATOR,
    SWAP_FEE_NUMERATOR,
)


@dataclass(frozen=True)
class BankConfig:
    """Centralized limits and parameters for a bank instance.

    Values are fixed for the lifetime of the bank; there is no runtime
    governance over them.

    Attributes:
        global_cap: Maximum bank total in accounting units (6 decimals)
        per_tx_withdraw_limit: Maximum single withdrawal in accounting units
        oracle_staleness_window: Maximum oracle answer age in seconds
        fee_numerator: Swap fee numerator (997 for 0.3%)
        fee_denominator: Swap fee denominator (1000)
    """

    global_cap: int = GLOBAL_CAP
    per_tx_withdraw_limit: int = PER_TX_WITHDRAW_LIMIT
    oracle_staleness_window: int = ORACLE_STALENESS_WINDOW

    fee_numerator: int = SWAP_FEE_NUMERATOR
    fee_denominator: int = SWAP_FEE_DENOMINATOR

    def __post_init__(self) -> None:
        if self.global_cap <= 0:
            raise ValueError(f"global_cap must be positive: {self.global_cap}")
        if self.per_tx_withdraw_limit <= 0:
            raise ValueError(
                f"per_tx_withdraw_limit must be positive: {self.per_tx_withdraw_limit}"
            )
        if self.oracle_staleness_window < 0:
            raise ValueError(
                f"oracle_staleness_window cannot be negative: {self.oracle_staleness_window}"
            )
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"Invalid fee fraction: {self.fee_numerator}/{self.fee_denominator}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BankConfig:
        """Build a config from BANK_* environment variables.

        - BANK_GLOBAL_CAP: global cap in accounting units
        - BANK_WITHDRAW_LIMIT: per-transaction withdrawal limit in accounting units
        - BANK_ORACLE_STALENESS: oracle staleness window in seconds

        Unset variables fall back to the module defaults.

        Raises:
            ValueError: If a variable is not an integer or fails validation
        """
        env = os.environ if environ is None else environ
        return cls(
            global_cap=_int_from_env(env, "BANK_GLOBAL_CAP", GLOBAL_CAP),
            per_tx_withdraw_limit=_int_from_env(env, "BANK_WITHDRAW_LIMIT", PER_TX_WITHDRAW_LIMIT),
            oracle_staleness_window=_int_from_env(
                env, "BANK_ORACLE_STALENESS", ORACLE_STALENESS_WINDOW
            ),
        )


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from err


# Default configuration instance
DEFAULT_BANK_CONFIG = BankConfig()
