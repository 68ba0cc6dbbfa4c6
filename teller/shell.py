"""Interactive shell: click entry points over the teller core.

Commands:
  factorial  read an integer and print its factorial
  bank       menu loop over a single savings account and the loan calculator

The shell only prompts, re-prompts and formats; every rule lives in the core.
"""

from decimal import Decimal
from typing import Callable, Optional

import click
from rich.console import Console
from rich.table import Table
from rich import box

from . import __version__
from .accounts import FIELD_VALIDATORS, Ledger, LedgerState
from .config import get_config
from .currency import Currency, Money, decimal_from_string, round_amount
from .exceptions import InvalidInputError, TellerError, ValidationError
from .loans import LoanQuote, LoanType, amortization_schedule, quote_loan, validate_loan_request
from .logging_config import get_logger, setup_logging
from .numeric import factorial, integer_to_string, is_large_factorial

console = Console()
logger = get_logger("teller.shell")


def _currency() -> Currency:
    return Currency.from_code(get_config().currency)


def _fmt_money(value: Decimal) -> str:
    return Money(value, _currency()).to_string()


class AmountType(click.ParamType):
    """Monetary amount typed by the user, rounded to 2 decimals and range-checked"""

    name = "amount"

    def __init__(self, minimum: Decimal, maximum: Decimal):
        self.minimum = minimum
        self.maximum = maximum

    def convert(self, value, param, ctx):
        try:
            if not isinstance(value, Decimal):
                value = decimal_from_string(str(value))
            amount = round_amount(value)
        except ValueError:
            self.fail("Invalid input! Please enter a valid number.", param, ctx)
        if amount < self.minimum or amount > self.maximum:
            self.fail(
                f"Please enter amount between {_fmt_money(self.minimum)} and {_fmt_money(self.maximum)}",
                param, ctx
            )
        return amount


def _field_proc(validator: Callable[[str], str]) -> Callable[[str], str]:
    """Adapt a holder-field validator to click's re-prompting value_proc"""
    def convert(value: str) -> str:
        try:
            return validator(value)
        except ValidationError as e:
            raise click.BadParameter(str(e))
    return convert


@click.group()
@click.version_option(__version__, prog_name="teller")
def cli():
    """Teller: console banking desk and factorial calculator."""
    cfg = get_config()
    setup_logging(cfg.log_level, "teller", cfg.log_format, cfg.log_file)


@cli.command("factorial")
@click.argument("n", type=int, required=False)
def factorial_command(n: Optional[int]):
    """Print the factorial of N (prompted when omitted)."""
    if n is None:
        n = click.prompt("Enter a positive integer", type=int)

    try:
        value = factorial(n)
    except InvalidInputError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)

    if is_large_factorial(n):
        click.echo(f"Factorial of {n} is:\n{integer_to_string(value)}")
    else:
        click.echo(f"Factorial of {n} is: {value}")


@cli.command("bank")
def bank_command():
    """Run the interactive banking menu."""
    BankingShell(Ledger()).run()


class BankingShell:
    """
    Menu loop over one Ledger session
    """

    MENU = (
        "Open Account",
        "Deposit Money",
        "Withdraw Money",
        "Check Balance",
        "Loan Enquiry",
        "Exit",
    )

    def __init__(self, ledger: Ledger):
        self.ledger = ledger
        self._actions = {
            1: self.open_account,
            2: self.deposit,
            3: self.withdraw,
            4: self.check_balance,
            5: self.loan_enquiry,
        }

    def run(self) -> None:
        console.print("[bold]WELCOME TO SECURE BANKING SYSTEM[/bold]")
        while True:
            console.print("\n--------------- MAIN MENU -----------------")
            for number, label in enumerate(self.MENU, start=1):
                console.print(f"{number}. {label}")

            try:
                choice = click.prompt(
                    f"Enter your choice (1-{len(self.MENU)})",
                    type=click.IntRange(1, len(self.MENU)),
                )
                if choice == len(self.MENU):
                    break
                self._actions[choice]()
            except TellerError as e:
                click.echo(f"An error occurred: {e}", err=True)
            except click.Abort:
                # End of input or Ctrl+C
                click.echo()
                break
            except Exception as e:
                logger.exception("Unexpected error in banking menu")
                click.echo(f"An error occurred: {e}", err=True)

        console.print("Thank you for banking with us! Visit again!")

    def _require_account(self) -> bool:
        if self.ledger.state is LedgerState.UNOPENED:
            console.print("\nPlease open an account first!")
            return False
        return True

    def open_account(self) -> None:
        console.print("\n--------------ACCOUNT OPENING -------------")
        name = click.prompt("Enter Your Full Name", value_proc=_field_proc(FIELD_VALIDATORS["name"]))
        mobile_number = click.prompt(
            "Enter Your Mobile Number (10 digits, starting with 6-9)",
            value_proc=_field_proc(FIELD_VALIDATORS["mobile_number"]),
        )
        address = click.prompt("Enter Your Address", value_proc=_field_proc(FIELD_VALIDATORS["address"]))

        account = self.ledger.open_account(name, mobile_number, address)

        table = Table(title="Account Opened", box=box.SIMPLE, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Account Holder", account.holder.name)
        table.add_row("Account Number", str(account.account_number))
        table.add_row("Account Type", account.account_type)
        table.add_row("Mobile Number", account.holder.mobile_number)
        table.add_row("Address", account.holder.address)
        console.print(table)

    def deposit(self) -> None:
        if not self._require_account():
            return
        cfg = get_config()
        amount = click.prompt(
            "Enter amount to deposit",
            type=AmountType(Decimal(cfg.min_deposit), Decimal(cfg.max_deposit)),
        )
        if self.ledger.deposit(amount):
            console.print(f"{_fmt_money(amount)} deposited successfully!")
            console.print(f"New Balance: {_fmt_money(self.ledger.get_balance())}")
        else:
            console.print(self.ledger.last_rejection, markup=False)

    def withdraw(self) -> None:
        if not self._require_account():
            return
        balance = self.ledger.get_balance()
        min_withdrawal = Decimal(get_config().min_withdrawal)
        # Nothing in [min_withdrawal, balance] to re-prompt for
        if balance <= Decimal('0') or balance < min_withdrawal:
            console.print("Insufficient balance for withdrawal!")
            return

        amount = click.prompt(
            "Enter amount to withdraw",
            type=AmountType(min_withdrawal, balance),
        )
        if self.ledger.withdraw(amount):
            console.print(f"{_fmt_money(amount)} withdrawn successfully!")
            console.print(f"Remaining Balance: {_fmt_money(self.ledger.get_balance())}")
        else:
            console.print(self.ledger.last_rejection, markup=False)

    def check_balance(self) -> None:
        if not self._require_account():
            return
        console.print(f"Account Number: {self.ledger.account.account_number}")
        console.print(f"Current Balance: {_fmt_money(self.ledger.get_balance())}")

    def loan_enquiry(self) -> None:
        cfg = get_config()
        console.print("\n-------------LOAN CALCULATOR --------------")
        principal = click.prompt(
            "Enter loan amount",
            type=AmountType(Decimal(cfg.min_loan_amount), Decimal(cfg.max_loan_amount)),
        )
        tenure_years = click.prompt(
            "Enter time period (in years)",
            type=click.IntRange(cfg.min_tenure_years, cfg.max_tenure_years),
        )

        console.print("\nSelect Loan Type:")
        loan_types = list(LoanType)
        for number, loan_type in enumerate(loan_types, start=1):
            console.print(f"{number}. {loan_type.label} ({loan_type.annual_rate_percent}% interest)")
        choice = click.prompt(
            f"Enter choice (1-{len(loan_types)})",
            type=click.IntRange(1, len(loan_types)),
        )

        validate_loan_request(principal, tenure_years)
        quote = quote_loan(principal, tenure_years, loan_type=loan_types[choice - 1])
        render_quote(quote)

        if click.confirm("Show amortization schedule?", default=False):
            render_schedule(quote)


def render_quote(quote: LoanQuote) -> None:
    """Print the loan details table"""
    table = Table(title="LOAN DETAILS", box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    if quote.loan_type:
        table.add_row("Loan Type", quote.loan_type.label)
    table.add_row("Loan Amount", _fmt_money(quote.principal))
    table.add_row("Interest Rate", f"{quote.annual_rate_percent:.2f}% p.a.")
    table.add_row("Tenure", f"{quote.tenure_years} years ({quote.total_installments} months)")
    table.add_row("Monthly EMI", _fmt_money(quote.monthly_emi))
    table.add_row("Total Interest", _fmt_money(quote.total_interest))
    table.add_row("Total Amount Payable", _fmt_money(quote.total_payable))
    console.print(table)


def render_schedule(quote: LoanQuote) -> None:
    """Print the month-by-month amortization schedule"""
    table = Table(title="Amortization Schedule", box=box.MINIMAL_HEAVY_HEAD)
    for column in ("Month", "Installment", "Principal", "Interest", "Balance"):
        table.add_column(column, justify="right")

    for entry in amortization_schedule(quote):
        table.add_row(
            str(entry.installment_number),
            _fmt_money(entry.payment),
            _fmt_money(entry.principal),
            _fmt_money(entry.interest),
            _fmt_money(entry.remaining_balance),
        )
    console.print(table)
