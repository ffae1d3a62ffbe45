"""Tests for SafeInt checked arithmetic."""

import pytest

from cpamm.constants import MAX_RESERVE, UINT256_MAX
from cpamm.errors import DivisionByZero, Overflow, SecurityError, Underflow
from cpamm.safe_int import S, SafeInt


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        assert SafeInt(SafeInt(42)).value == 42

    def test_negative_raises_underflow(self):
        """Values are non-negative by construction."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_above_uint256_raises_overflow(self):
        with pytest.raises(Overflow):
            SafeInt(UINT256_MAX + 1)

    def test_uint256_max_is_allowed(self):
        assert SafeInt(UINT256_MAX).value == UINT256_MAX

    def test_invalid_types_rejected(self):
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_mul(self):
        assert (S(3) + S(4)).value == 7
        assert (S(3) * 4).value == 12
        assert (5 + S(1)).value == 6
        assert (2 * S(21)).value == 42

    def test_mul_overflow(self):
        """Products above 2**256 - 1 fail instead of wrapping."""
        with pytest.raises(Overflow):
            S(2**200) * S(2**100)

    def test_add_overflow(self):
        with pytest.raises(Overflow):
            S(UINT256_MAX) + 1

    def test_sub_underflow(self):
        with pytest.raises(Underflow):
            S(5) - S(6)
        with pytest.raises(Underflow):
            5 - S(6)

    def test_sub_to_zero(self):
        assert (S(5) - 5).value == 0

    def test_floordiv_rounds_down(self):
        assert (S(7) // S(2)).value == 3

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(7) // S(0)

    def test_comparisons_with_int(self):
        assert S(3) < 4
        assert S(3) <= 3
        assert S(5) > S(4)
        assert S(5) >= 5
        assert S(5) == 5
        assert bool(S(0)) is False


class TestSafeIntNamedOperations:
    """Tests for isqrt, min and reserve bounds."""

    def test_isqrt_rounds_down(self):
        assert S(99).isqrt().value == 9
        assert S(100).isqrt().value == 10
        assert S(10**10).isqrt().value == 10**5

    def test_min(self):
        assert S(3).min(S(2)).value == 2
        assert S(3).min(7).value == 3

    def test_to_reserve_within_bound(self):
        assert S(MAX_RESERVE).to_reserve() == MAX_RESERVE

    def test_to_reserve_above_bound(self):
        with pytest.raises(Overflow):
            S(MAX_RESERVE + 1).to_reserve()

    def test_arithmetic_errors_are_security_errors(self):
        """Overflow-family errors are logged as security events by pools."""
        assert issubclass(Overflow, SecurityError)
        assert issubclass(Underflow, Overflow)
        assert issubclass(DivisionByZero, ArithmeticError)
