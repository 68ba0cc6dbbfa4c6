"""
Test suite for numeric module

Factorials must be exact for any size of input.
"""

import math

import pytest

from teller.exceptions import InvalidInputError
from teller.numeric import (
    SMALL_FACTORIAL_LIMIT, factorial, integer_to_string, is_large_factorial
)


class TestFactorial:
    """Test factorial computation"""

    def test_known_values(self):
        """Test small known factorials"""
        assert factorial(0) == 1
        assert factorial(1) == 1
        assert factorial(5) == 120
        assert factorial(13) == 6227020800
        assert factorial(20) == 2432902008176640000

    def test_recurrence(self):
        """Test n! == n * (n-1)! across the fast-path boundary"""
        for n in range(1, 40):
            assert factorial(n) == n * factorial(n - 1)

    def test_large_value_is_exact(self):
        """Test large factorials match math.factorial"""
        assert factorial(100) == math.factorial(100)
        assert factorial(500) == math.factorial(500)

    def test_negative_rejected(self):
        """Test negative input fails"""
        with pytest.raises(InvalidInputError, match="negative"):
            factorial(-1)

    @pytest.mark.parametrize("value", [2.5, "5", None, True])
    def test_non_integer_rejected(self, value):
        """Test non-integer input fails"""
        with pytest.raises(InvalidInputError):
            factorial(value)

    def test_invalid_input_is_value_error(self):
        """Test InvalidInputError can be caught as ValueError"""
        with pytest.raises(ValueError):
            factorial(-5)


class TestFactorialDisplay:
    """Test display helpers"""

    def test_large_threshold(self):
        """Test the same-line/next-line switch point"""
        assert SMALL_FACTORIAL_LIMIT == 13
        assert not is_large_factorial(13)
        assert is_large_factorial(14)

    def test_integer_to_string_small(self):
        """Test ordinary integers render normally"""
        assert integer_to_string(120) == "120"

    def test_integer_to_string_huge(self):
        """Test integers beyond the interpreter's str() digit limit still render"""
        value = factorial(2000)
        text = integer_to_string(value)
        assert len(text) == 5736
        assert text.startswith("3316275092")
