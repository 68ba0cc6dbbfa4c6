"""
Account Ledger Module

A single in-memory savings account: holder validation, account-number
issuing, and the deposit/withdraw operations that keep the balance within
0 and the configured maximum.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Optional, Set
from enum import Enum
import random
import re

from .config import get_config
from .currency import Currency, Money, AmountLike, round_amount
from .exceptions import ValidationError, AccountNotOpenError
from .logging_config import get_logger, log_action


SAVING_ACCOUNT = "Saving Account"

NAME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z ]+$')
MOBILE_PATTERN = re.compile(r'^[6-9][0-9]{9}$')
ADDRESS_PATTERN = re.compile(r'^[a-zA-Z0-9\s,.\-]+$')

logger = get_logger("teller.accounts")


class LedgerState(Enum):
    """Ledger lifecycle states"""
    UNOPENED = "unopened"  # No account yet
    OPENED = "opened"      # Account open, balance tracked


@dataclass(frozen=True)
class AccountHolder:
    """Validated personal details of the account owner"""
    name: str
    mobile_number: str
    address: str


@dataclass
class Account:
    """
    Savings account with a two-decimal, never negative balance
    """
    account_number: int
    holder: AccountHolder
    balance: Decimal = Decimal('0.00')
    account_type: str = SAVING_ACCOUNT

    def __post_init__(self):
        self.balance = round_amount(self.balance)
        if self.balance < Decimal('0'):
            raise ValueError("Account balance cannot be negative")
        if self.balance > Decimal(get_config().max_balance):
            raise ValueError("Account balance exceeds the maximum balance limit")

    @property
    def currency(self) -> Currency:
        """Currency the balance is displayed in"""
        return Currency.from_code(get_config().currency)

    def balance_money(self) -> Money:
        """Balance as Money for display"""
        return Money(self.balance, self.currency)


class AccountNumberRegistry:
    """
    Issues unique 6-digit account numbers for the lifetime of the process
    """

    MIN_NUMBER = 100000
    MAX_NUMBER = 999999

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()
        self._issued: Set[int] = set()

    def issue(self) -> int:
        """
        Draw a random account number not issued before

        Raises:
            RuntimeError: If every 6-digit number has been issued
        """
        if len(self._issued) >= self.MAX_NUMBER - self.MIN_NUMBER + 1:
            raise RuntimeError("No account numbers left to issue")

        while True:
            number = self._rng.randint(self.MIN_NUMBER, self.MAX_NUMBER)
            if number not in self._issued:
                self._issued.add(number)
                return number

    def __contains__(self, number: int) -> bool:
        return number in self._issued

    def __len__(self) -> int:
        return len(self._issued)


def _validate_name(name: Optional[str]) -> str:
    cfg = get_config()
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name cannot be empty!", field="name")
    if len(name) < cfg.min_name_length:
        raise ValidationError(f"Name must be at least {cfg.min_name_length} characters!", field="name")
    if len(name) > cfg.max_name_length:
        raise ValidationError(f"Name must not exceed {cfg.max_name_length} characters!", field="name")
    if not NAME_PATTERN.match(name):
        raise ValidationError(
            "Invalid name! Only letters and spaces allowed, must start with a letter.",
            field="name"
        )
    return name


def _validate_mobile_number(mobile_number: Optional[str]) -> str:
    cfg = get_config()
    mobile_number = (mobile_number or "").strip()
    if not mobile_number:
        raise ValidationError("Mobile number cannot be empty!", field="mobile_number")
    if len(mobile_number) != cfg.mobile_number_length:
        raise ValidationError(
            f"Mobile number must be exactly {cfg.mobile_number_length} digits!",
            field="mobile_number"
        )
    if not MOBILE_PATTERN.match(mobile_number):
        raise ValidationError(
            "Invalid mobile number! Must be 10 digits starting with 6-9.",
            field="mobile_number"
        )
    return mobile_number


def _validate_address(address: Optional[str]) -> str:
    cfg = get_config()
    address = (address or "").strip()
    if not address:
        raise ValidationError("Address cannot be empty!", field="address")
    if len(address) < cfg.min_address_length:
        raise ValidationError(
            f"Address must be at least {cfg.min_address_length} characters!", field="address"
        )
    if len(address) > cfg.max_address_length:
        raise ValidationError(
            f"Address must not exceed {cfg.max_address_length} characters!", field="address"
        )
    if not ADDRESS_PATTERN.match(address):
        raise ValidationError(
            "Invalid address! Only letters, numbers, spaces, commas, dots, and hyphens allowed.",
            field="address"
        )
    return address


# Per-field validators, also used by the shell to re-prompt one field at a time
FIELD_VALIDATORS = {
    "name": _validate_name,
    "mobile_number": _validate_mobile_number,
    "address": _validate_address,
}


def validate_holder(name: str, mobile_number: str, address: str) -> AccountHolder:
    """
    Validate and trim account holder details

    Raises:
        ValidationError: Naming the first violated rule and the offending field
    """
    return AccountHolder(
        name=_validate_name(name),
        mobile_number=_validate_mobile_number(mobile_number),
        address=_validate_address(address),
    )


def open_account(
    name: str,
    mobile_number: str,
    address: str,
    registry: AccountNumberRegistry
) -> Account:
    """
    Open a zero-balance savings account

    Args:
        name: Holder's full name
        mobile_number: 10-digit mobile number starting with 6-9
        address: Postal address
        registry: Issued-number registry shared by all accounts of this run

    Returns:
        New Account with a unique account number

    Raises:
        ValidationError: If any holder detail is invalid
    """
    holder = validate_holder(name, mobile_number, address)
    account = Account(account_number=registry.issue(), holder=holder)

    log_action(
        logger, "info", "Account opened",
        account_number=account.account_number, action="open_account",
        resource=f"account:{account.account_number}",
        extra={"account_type": account.account_type}
    )
    return account


def _format(amount: Decimal, account: Account) -> str:
    return Money(amount, account.currency).to_string()


def deposit_rejection(account: Account, amount: Decimal) -> Optional[str]:
    """Reason a rounded deposit amount would be refused, or None if it is acceptable"""
    cfg = get_config()
    min_deposit = Decimal(cfg.min_deposit)
    max_deposit = Decimal(cfg.max_deposit)
    max_balance = Decimal(cfg.max_balance)

    if amount <= Decimal('0'):
        return "Deposit amount must be positive!"
    if amount < min_deposit:
        return f"Minimum deposit amount is {_format(min_deposit, account)}"
    if amount > max_deposit:
        return f"Maximum single deposit limit is {_format(max_deposit, account)}"
    if account.balance + amount > max_balance:
        return f"Transaction would exceed maximum balance limit of {_format(max_balance, account)}"
    return None


def withdrawal_rejection(account: Account, amount: Decimal) -> Optional[str]:
    """Reason a rounded withdrawal amount would be refused, or None if it is acceptable"""
    min_withdrawal = Decimal(get_config().min_withdrawal)

    if amount <= Decimal('0'):
        return "Withdrawal amount must be positive!"
    if amount < min_withdrawal:
        return f"Minimum withdrawal amount is {_format(min_withdrawal, account)}"
    if amount > account.balance:
        return f"Insufficient funds! Available balance: {_format(account.balance, account)}"
    return None


def _apply(account: Account, amount: AmountLike, action: str) -> Optional[str]:
    """Round, validate and apply a balance change; returns the rejection reason"""
    try:
        rounded = round_amount(amount)
    except ValueError as e:
        reason = f"Invalid amount: {e}"
    else:
        if action == "deposit":
            reason = deposit_rejection(account, rounded)
        else:
            reason = withdrawal_rejection(account, rounded)

    if reason:
        log_action(
            logger, "warning", f"{action.capitalize()} rejected: {reason}",
            account_number=account.account_number, action=action,
            resource=f"account:{account.account_number}",
            extra={"amount": str(amount), "balance": str(account.balance)}
        )
        return reason

    if action == "deposit":
        account.balance += rounded
    else:
        account.balance -= rounded

    log_action(
        logger, "info", f"{action.capitalize()} applied",
        account_number=account.account_number, action=action,
        resource=f"account:{account.account_number}",
        extra={"amount": str(rounded), "balance": str(account.balance)}
    )
    return None


def deposit(account: Account, amount: AmountLike) -> bool:
    """
    Credit the account

    The amount is rounded half-up to 2 decimals first. Refused when it is not
    positive, below the minimum deposit, above the maximum single deposit, or
    would push the balance over the maximum balance.

    Returns:
        True if applied, False if refused (balance unchanged)
    """
    return _apply(account, amount, "deposit") is None


def withdraw(account: Account, amount: AmountLike) -> bool:
    """
    Debit the account

    The amount is rounded half-up to 2 decimals first. Refused when it is not
    positive, below the minimum withdrawal, or larger than the balance.

    Returns:
        True if applied, False if refused (balance unchanged)
    """
    return _apply(account, amount, "withdraw") is None


def get_balance(account: Account) -> Decimal:
    """Current balance"""
    return account.balance


class Ledger:
    """
    Session holding the number registry and the one open account
    """

    def __init__(self, registry: Optional[AccountNumberRegistry] = None):
        self.registry = registry if registry is not None else AccountNumberRegistry()
        self._account: Optional[Account] = None
        self.last_rejection: Optional[str] = None

    @property
    def state(self) -> LedgerState:
        """Current lifecycle state"""
        return LedgerState.OPENED if self._account else LedgerState.UNOPENED

    @property
    def account(self) -> Account:
        """The open account"""
        if self._account is None:
            raise AccountNotOpenError()
        return self._account

    def open_account(self, name: str, mobile_number: str, address: str) -> Account:
        """Open a new account, replacing any current one"""
        self._account = open_account(name, mobile_number, address, self.registry)
        self.last_rejection = None
        return self._account

    def deposit(self, amount: AmountLike) -> bool:
        """Deposit into the open account; the refusal reason is kept in last_rejection"""
        self.last_rejection = _apply(self.account, amount, "deposit")
        return self.last_rejection is None

    def withdraw(self, amount: AmountLike) -> bool:
        """Withdraw from the open account; the refusal reason is kept in last_rejection"""
        self.last_rejection = _apply(self.account, amount, "withdraw")
        return self.last_rejection is None

    def get_balance(self) -> Decimal:
        """Balance of the open account"""
        return get_balance(self.account)
