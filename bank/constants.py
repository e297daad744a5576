"""Protocol constants for the swap bank.

Centralizes decimal scales, default limits and well-known addresses.
"""

from bank.models.types import is_valid_address

# Decimal scales
# Reserve asset (USDC-like) and all persisted ledger values
ACCOUNTING_DECIMALS = 6
# Native value asset amounts (wei)
NATIVE_DECIMALS = 18
# Oracle prices (Chainlink-style answer)
ORACLE_DECIMALS = 8

# One whole reserve-asset unit in accounting units
USD_UNIT = 10**ACCOUNTING_DECIMALS
# One whole native-asset unit in wei
NATIVE_UNIT = 10**NATIVE_DECIMALS
# One unit of oracle price
PRICE_UNIT = 10**ORACLE_DECIMALS

# wei (18) * price (8) -> accounting units (6): divide by 10**20
NATIVE_TO_USD_SCALE = 10 ** (NATIVE_DECIMALS + ORACLE_DECIMALS - ACCOUNTING_DECIMALS)

# Default limits (accounting units)
GLOBAL_CAP = 10_000 * USD_UNIT
PER_TX_WITHDRAW_LIMIT = 100 * USD_UNIT

# Oracle answers older than this (seconds) are rejected
ORACLE_STALENESS_WINDOW = 3600

# Constant-product venue fee: 0.3% taken from the input amount
SWAP_FEE_NUMERATOR = 997
SWAP_FEE_DENOMINATOR = 1000


def _validate_address(name: str, address: str) -> str:
    """Validate and return an address, failing at import time on typos."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Sentinel standing for the native value asset in token slots
NATIVE_ASSET = _validate_address("NATIVE_ASSET", "0x" + "00" * 20)

# Default custody address of the bank on the local chain
BANK_ADDRESS = _validate_address("BANK", "0x000000000000000000000000000000000000ba4c")
