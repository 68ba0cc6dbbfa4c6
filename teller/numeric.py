"""
Numeric Core

Exact factorials. Python integers are arbitrary precision, so the only
concern here is validating the input.
"""

import math
import sys

from .exceptions import InvalidInputError
from .logging_config import get_logger


# 13! = 6227020800 is the largest factorial that fits in a signed 32-bit int
SMALL_FACTORIAL_LIMIT = 13

logger = get_logger("teller.numeric")


def is_large_factorial(n: int) -> bool:
    """True when n! no longer fits the small fast path and is shown on its own line"""
    return n > SMALL_FACTORIAL_LIMIT


def factorial(n: int) -> int:
    """
    Compute n! exactly
    
    Args:
        n: Non-negative integer
        
    Returns:
        Product of 1..n (1 for n == 0)
        
    Raises:
        InvalidInputError: If n is negative or not an integer
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidInputError("Please enter a valid integer.")
    if n < 0:
        raise InvalidInputError("Factorial is not defined for negative numbers.")
    
    if not is_large_factorial(n):
        result = 1
        for i in range(2, n + 1):
            result *= i
    else:
        result = math.prod(range(2, n + 1))
    
    logger.debug("Computed factorial of %d (%d bits)", n, result.bit_length())
    return result


def integer_to_string(value: int) -> str:
    """Render an integer of any size in base 10"""
    # Interpreters with a str() digit limit refuse large factorials otherwise
    get_limit = getattr(sys, "get_int_max_str_digits", None)
    if get_limit is None or get_limit() == 0:
        return str(value)
    
    limit = get_limit()
    sys.set_int_max_str_digits(0)
    try:
        return str(value)
    finally:
        sys.set_int_max_str_digits(limit)
