"""Swap bank - custodial deposit, swap and accounting engine."""

from bank.config import DEFAULT_BANK_CONFIG, BankConfig
from bank.engine import Bank

__version__ = "0.1.0"
__all__ = ["Bank", "BankConfig", "DEFAULT_BANK_CONFIG", "__version__"]
