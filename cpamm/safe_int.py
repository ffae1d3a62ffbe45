"""Checked integer wrapper for reserve and share arithmetic.

Every operation is checked, the way a 256-bit virtual machine would check it:
- Results above 2**256 - 1 raise Overflow
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero

Usage pattern:
    from cpamm.safe_int import S

    def quote(a: int, b: int, c: int) -> int:
        return (S(a) * S(b) // S(c)).value

Reserves have a tighter ceiling, enforced with ``to_reserve()``.
"""

from __future__ import annotations

import math

from cpamm.constants import MAX_RESERVE, UINT256_MAX
from cpamm.errors import DivisionByZero, Overflow, Underflow


class SafeInt:
    """Non-negative integer bounded by 2**256 - 1 with checked arithmetic.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = _check(value)

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return SafeInt(self._value - other_val)

    def __rsub__(self, other: int) -> SafeInt:
        if self._value > other:
            raise Underflow(f"Underflow: {other} - {self._value}")
        return SafeInt(other - self._value)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, rounding down.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # --- Named operations ---

    def isqrt(self) -> SafeInt:
        """Integer square root, rounding down."""
        return SafeInt(math.isqrt(self._value))

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def to_reserve(self) -> int:
        """Convert to int, validating the 112-bit reserve bound.

        Raises:
            Overflow: If value exceeds MAX_RESERVE
        """
        if self._value > MAX_RESERVE:
            raise Overflow(f"Reserve exceeds 112-bit max: {self._value}")
        return self._value


def _check(value: int) -> int:
    if value < 0:
        raise Underflow(f"Negative value: {value}")
    if value > UINT256_MAX:
        raise Overflow(f"Value exceeds uint256 max: {value}")
    return value


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
