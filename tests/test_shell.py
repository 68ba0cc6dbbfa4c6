"""
Test suite for the interactive shell

Drives the click commands with scripted input through CliRunner.
"""

from decimal import Decimal

import pytest
from click.testing import CliRunner

from teller.accounts import AccountNumberRegistry
from teller.currency import Money, round_amount
from teller.loans import LoanType, calculate_emi
from teller.shell import cli


OPEN_ACCOUNT = "1\nAsha Verma\n9876543210\n12 MG Road, Pune\n"
EXIT = "6\n"


@pytest.fixture
def runner():
    return CliRunner()


def run_bank(runner, keystrokes):
    return runner.invoke(cli, ["bank"], input=keystrokes)


class TestFactorialCommand:
    """Test the factorial command"""

    def test_small_value_same_line(self, runner):
        """Test n <= 13 prints on one line"""
        result = runner.invoke(cli, ["factorial", "5"])
        assert result.exit_code == 0
        assert "Factorial of 5 is: 120" in result.output

    def test_large_value_next_line(self, runner):
        """Test n > 13 prints the value on its own line"""
        result = runner.invoke(cli, ["factorial", "20"])
        assert result.exit_code == 0
        assert "Factorial of 20 is:\n2432902008176640000" in result.output

    def test_prompt_when_missing(self, runner):
        """Test the integer is prompted for and non-integers re-prompted"""
        result = runner.invoke(cli, ["factorial"], input="abc\n7\n")
        assert result.exit_code == 0
        assert "Enter a positive integer" in result.output
        assert "Factorial of 7 is: 5040" in result.output

    def test_negative(self, runner):
        """Test negative input exits with an error"""
        result = runner.invoke(cli, ["factorial", "--", "-3"])
        assert result.exit_code == 1
        assert "Factorial is not defined for negative numbers." in result.output

    def test_version(self, runner):
        """Test --version"""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output


class TestBankCommand:
    """Test the banking menu"""

    def test_requires_open_account(self, runner):
        """Test deposit, withdraw and balance need an account"""
        result = run_bank(runner, "2\n3\n4\n" + EXIT)
        assert result.exit_code == 0
        assert result.output.count("Please open an account first!") == 3
        assert "Thank you for banking with us!" in result.output

    def test_open_deposit_balance(self, runner):
        """Test the happy path through opening, deposit and balance"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n1500\n4\n" + EXIT)
        assert result.exit_code == 0
        assert "Account Opened" in result.output
        assert "Saving Account" in result.output
        assert "₹1,500.00 deposited successfully!" in result.output
        assert "Current Balance: ₹1,500.00" in result.output

    def test_invalid_holder_field_reprompted(self, runner):
        """Test a bad field is asked again with the violated rule"""
        keystrokes = "1\nA\nAsha Verma\n12345\n9876543210\n12 MG Road, Pune\n" + EXIT
        result = run_bank(runner, keystrokes)
        assert result.exit_code == 0
        assert "Name must be at least 2 characters!" in result.output
        assert "Mobile number must be exactly 10 digits!" in result.output
        assert "Account Opened" in result.output

    def test_deposit_out_of_range_reprompted(self, runner):
        """Test deposits outside the limits are asked again"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n2000000\n0.5\n250.755\n4\n" + EXIT)
        assert "Please enter amount between ₹1.00 and ₹1,000,000.00" in result.output
        assert "Current Balance: ₹250.76" in result.output

    def test_withdraw_with_zero_balance(self, runner):
        """Test withdrawing from an empty account is refused up front"""
        result = run_bank(runner, OPEN_ACCOUNT + "3\n" + EXIT)
        assert "Insufficient balance for withdrawal!" in result.output

    def test_withdraw_limited_to_balance(self, runner):
        """Test the withdrawal prompt is capped at the balance"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n100\n3\n500\n50\n" + EXIT)
        assert "Please enter amount between ₹1.00 and ₹100.00" in result.output
        assert "₹50.00 withdrawn successfully!" in result.output
        assert "Remaining Balance: ₹50.00" in result.output

    def test_withdraw_with_balance_below_minimum(self, runner):
        """Test a balance under the minimum withdrawal is refused without prompting"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n1.50\n3\n1\n3\n4\n" + EXIT)
        assert result.exit_code == 0
        assert "Remaining Balance: ₹0.50" in result.output
        assert "Insufficient balance for withdrawal!" in result.output
        assert "Current Balance: ₹0.50" in result.output

    def test_deposit_with_too_many_digits_reprompted(self, runner):
        """Test an amount too large to round is asked again"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n" + "9" * 30 + "\n100\n4\n" + EXIT)
        assert result.exit_code == 0
        assert "Invalid input! Please enter a valid number." in result.output
        assert "Current Balance: ₹100.00" in result.output
        assert "Thank you for banking with us!" in result.output

    def test_deposit_text_is_not_collapsed_to_digits(self, runner):
        """Test letters inside an amount make it invalid"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n12abc34\n1e3\n4\n" + EXIT)
        assert "Invalid input! Please enter a valid number." in result.output
        assert "₹1,000.00 deposited successfully!" in result.output
        assert "₹1,234.00" not in result.output
        assert "₹13.00" not in result.output

    def test_unexpected_error_keeps_menu_running(self, runner, monkeypatch):
        """Test an unexpected failure is reported and the menu continues"""
        def exhausted(self):
            raise RuntimeError("No account numbers left to issue")

        monkeypatch.setattr(AccountNumberRegistry, "issue", exhausted)
        result = run_bank(runner, OPEN_ACCOUNT + "4\n" + EXIT)
        assert result.exit_code == 0
        assert "An error occurred: No account numbers left to issue" in result.output
        assert "Please open an account first!" in result.output
        assert "Thank you for banking with us!" in result.output

    def test_max_balance_refusal_shown(self, runner, configure):
        """Test a ledger refusal reason is displayed"""
        configure(max_balance="1000.00")
        result = run_bank(runner, OPEN_ACCOUNT + "2\n800\n2\n300\n4\n" + EXIT)
        assert "Transaction would exceed maximum balance limit of ₹1,000.00" in result.output
        assert "Current Balance: ₹800.00" in result.output

    def test_loan_enquiry(self, runner):
        """Test a home loan quote with amortization schedule"""
        result = run_bank(runner, "5\n100000\n1\n1\ny\n" + EXIT)
        emi = Money(round_amount(calculate_emi(100000, 1, LoanType.HOME.annual_rate_percent)))

        assert result.exit_code == 0
        assert "LOAN DETAILS" in result.output
        assert "Home Loan" in result.output
        assert emi.to_string() in result.output
        assert "Amortization Schedule" in result.output

    def test_loan_amount_out_of_range(self, runner):
        """Test loan amounts outside the configured range are asked again"""
        result = run_bank(runner, "5\n500\n100000\n40\n2\n2\nn\n" + EXIT)
        assert "Please enter amount between ₹10,000.00 and ₹50,000,000.00" in result.output
        assert "Gold Loan" in result.output
        assert "Amortization Schedule" not in result.output

    def test_invalid_menu_choice(self, runner):
        """Test out-of-range menu choices are asked again"""
        result = run_bank(runner, "9\n" + EXIT)
        assert result.exit_code == 0
        assert "Thank you for banking with us!" in result.output

    def test_end_of_input(self, runner):
        """Test running out of input ends the session cleanly"""
        result = run_bank(runner, OPEN_ACCOUNT + "2\n")
        assert result.exit_code == 0
        assert "Thank you for banking with us!" in result.output
