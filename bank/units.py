"""Fixed-point conversions between the bank's decimal scales.

Native amounts carry 18 decimals, oracle prices 8 and ledger values 6.
All conversions are integer-only and round down (floor), so a converted
value never overstates what was deposited.
"""

from __future__ import annotations

from decimal import Decimal

from bank.constants import ACCOUNTING_DECIMALS, NATIVE_TO_USD_SCALE
from bank.safe_int import S


def native_to_usd(value: int, price: int) -> int:
    """Value a native-asset amount in accounting units.

    Args:
        value: Native amount in wei (18 decimals)
        price: Oracle price of one native unit (8 decimals)

    Returns:
        USD value with 6 decimals, floored
    """
    return (S(value) * S(price) // S(NATIVE_TO_USD_SCALE)).to_uint256()


def rescale(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Move an amount between decimal scales, flooring when scaling down."""
    if from_decimals < 0 or to_decimals < 0:
        raise ValueError(f"Decimals cannot be negative: {from_decimals}, {to_decimals}")
    if to_decimals >= from_decimals:
        return (S(amount) * S(10 ** (to_decimals - from_decimals))).value
    return (S(amount) // S(10 ** (from_decimals - to_decimals))).value


def to_display(amount: int, decimals: int = ACCOUNTING_DECIMALS) -> Decimal:
    """Render an integer amount as an exact Decimal in whole units.

    Used for the human-readable amounts in API responses; never fed back
    into accounting.
    """
    return Decimal(amount).scaleb(-decimals)


__all__ = ["native_to_usd", "rescale", "to_display"]
