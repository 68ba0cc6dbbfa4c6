"""
Teller

A small console banking desk and factorial calculator. Monetary values use
Decimal with two-decimal rounding; factorials use arbitrary-precision integers.
"""

__version__ = "1.0.0"
