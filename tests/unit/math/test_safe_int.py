"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from cpamm.errors import DivisionByZero, PoolError
from cpamm.safe_int import S, SafeInt, SafeIntError, Underflow


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_large(self):
        """SafeInt holds values beyond 256 bits."""
        assert SafeInt(10**100).value == 10**100

    def test_from_invalid_type_raises(self):
        """SafeInt rejects floats, strings and bools."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt

    def test_zero_constructor(self):
        assert SafeInt.zero().value == 0


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_sub(self):
        assert (S(10) - S(4)).value == 6
        assert (S(10) - S(10)).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(3) - S(4)

    def test_mul(self):
        assert (S(6) * S(7)).value == 42
        assert (3 * S(7)).value == 21

    def test_floordiv_rounds_down(self):
        assert (S(7) // S(2)).value == 3
        assert (S(1) // S(2)).value == 0

    def test_floordiv_by_zero_raises(self):
        """Division by zero raises the pool's DivisionByZero."""
        with pytest.raises(DivisionByZero):
            S(7) // S(0)

    def test_ceiling_div(self):
        assert S(7).ceiling_div(2).value == 4
        assert S(8).ceiling_div(2).value == 4
        assert S(0).ceiling_div(5).value == 0

    def test_ceiling_div_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(7).ceiling_div(0)


class TestSafeIntComparisons:
    """Tests for comparison and conversion."""

    def test_comparisons(self):
        assert S(1) < S(2)
        assert S(2) <= 2
        assert S(3) > 2
        assert S(3) >= S(3)
        assert S(5) == 5
        assert S(5) == S(5)
        assert S(5) != S(6)

    def test_bool_and_int(self):
        assert not S(0)
        assert S(1)
        assert int(S(9)) == 9


class TestErrorHierarchy:
    """SafeInt errors are arithmetic errors; division by zero is also a pool error."""

    def test_underflow_is_arithmetic_error(self):
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(Underflow, ArithmeticError)

    def test_division_by_zero_is_pool_error(self):
        assert issubclass(DivisionByZero, PoolError)
        assert issubclass(DivisionByZero, ArithmeticError)
