"""Checked integer arithmetic for ledger and token amounts.

Every amount the bank stores is an unsigned integer in the smallest unit
of its asset. Wrapping intermediate values in SafeInt turns the
arithmetic mistakes that would corrupt a ledger into exceptions:
- a subtraction that goes below zero raises Underflow
- a division by zero raises DivisionByZero
- a value outside uint256 raises Uint256Overflow on conversion

Usage pattern:
    from bank.safe_int import S

    def usd_value(value: int, price: int, scale: int) -> int:
        return (S(value) * S(price) // S(scale)).to_uint256()
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""


class DivisionByZero(SafeIntError):
    """Division by zero."""


class Underflow(SafeIntError):
    """Subtraction would produce a negative amount."""


class Uint256Overflow(SafeIntError):
    """Value is negative or exceeds uint256 maximum."""


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


class SafeInt:
    """Integer amount with checked arithmetic.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, SafeInt)):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = _raw(value)

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"S({self._value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Raises Underflow if other is larger than self."""
        result = self._value - _raw(other)
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {_raw(other)}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division. Raises DivisionByZero on a zero divisor."""
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // divisor)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def to_uint256(self) -> int:
        """Return the plain int, checking it fits a uint256.

        Raises:
            Uint256Overflow: If value is negative or exceeds 2^256-1
        """
        if not 0 <= self._value <= UINT256_MAX:
            raise Uint256Overflow(f"Not a uint256 amount: {self._value}")
        return self._value


S = SafeInt
