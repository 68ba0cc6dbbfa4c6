"""
Currency Support Module

Decimal rounding, parsing and display for monetary values.
NEVER uses float for monetary values: floats are converted through their
shortest string representation before any arithmetic.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from dataclasses import dataclass
from enum import Enum
from typing import Union
import re


AmountLike = Union[Decimal, int, float, str]


class Currency(Enum):
    """ISO 4217 currency codes with precision and display symbol"""
    INR = ("INR", 2, "₹")  # Indian Rupee
    USD = ("USD", 2, "$")  # US Dollar
    EUR = ("EUR", 2, "€")  # Euro
    GBP = ("GBP", 2, "£")  # British Pound
    
    def __init__(self, code: str, precision: int, symbol: str):
        self.code = code
        self.precision = precision
        self.symbol = symbol
    
    @classmethod
    def from_code(cls, code: str) -> 'Currency':
        """Look up a currency by its ISO code"""
        try:
            return cls[code.strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported currency code '{code}'")


CENT = Decimal('0.01')

# Currency symbols, whitespace and thousands separators; anything else must parse
IGNORED_CHARACTERS = re.compile(
    '[' + re.escape(''.join(currency.symbol for currency in Currency)) + r'\s,]'
)


def to_decimal(value: AmountLike) -> Decimal:
    """
    Convert a number to Decimal without float representation drift
    
    Raises:
        ValueError: If the value is not numeric or not finite
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to Decimal")
    else:
        raise ValueError("Amount must be a number")
    
    if not result.is_finite():
        raise ValueError("Amount must be finite")
    return result


def round_amount(value: AmountLike, precision: int = 2) -> Decimal:
    """
    Round a monetary amount half-up to `precision` decimal places

    Raises:
        ValueError: If the value is not a number or has too many digits to
            hold at that precision
    """
    amount = to_decimal(value)
    try:
        return amount.quantize(Decimal('0.1') ** precision, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount {amount} is too large")


def decimal_from_string(value: str) -> Decimal:
    """
    Convert user-typed text to Decimal, tolerating currency symbols and
    thousands separators ("₹1,25,000.50" -> Decimal('125000.50'))
    
    Raises:
        ValueError: If the text holds no valid number
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")
    
    clean_value = IGNORED_CHARACTERS.sub('', value)
    if not clean_value:
        raise ValueError(f"Cannot convert '{value}' to Decimal")
    return to_decimal(clean_value)


@dataclass(frozen=True)
class Money:
    """
    Immutable money representation rounded to its currency precision
    """
    amount: Decimal
    currency: Currency = Currency.INR
    
    def __post_init__(self):
        object.__setattr__(self, 'amount', round_amount(self.amount, self.currency.precision))
    
    def __add__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency.code} and {other.currency.code}")
        return Money(self.amount + other.amount, self.currency)
    
    def __sub__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract {other.currency.code} from {self.currency.code}")
        return Money(self.amount - other.amount, self.currency)
    
    def __lt__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount < other.amount
    
    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')
    
    def to_string(self) -> str:
        """Format for display, e.g. ₹1,250.00"""
        return f"{self.currency.symbol}{self.amount:,.{self.currency.precision}f}"
    
    def __str__(self) -> str:
        return self.to_string()
