"""Errors raised by the teller core"""

from typing import Optional


class TellerError(Exception):
    """Base class for all teller errors"""


class ValidationError(TellerError, ValueError):
    """Malformed or out-of-range input; the caller should ask again"""
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidInputError(TellerError, ValueError):
    """Factorial requested for a negative or non-integer value"""


class AccountNotOpenError(TellerError):
    """Ledger operation attempted before an account was opened"""
    
    def __init__(self, message: str = "Please open an account first!"):
        super().__init__(message)
