"""
Loan Calculator Module

Equated monthly installment (EMI) computation, loan quotes with the derived
totals, and equal-installment amortization schedules.
"""

from decimal import Decimal, DecimalException, localcontext
from dataclasses import dataclass
from typing import List, Optional
from enum import Enum

from .config import get_config
from .currency import AmountLike, round_amount, to_decimal
from .exceptions import ValidationError
from .logging_config import get_logger, log_action


MONTHS_PER_YEAR = 12

logger = get_logger("teller.loans")


class LoanType(Enum):
    """Supported loan categories"""
    HOME = ("home", "Home Loan")
    GOLD = ("gold", "Gold Loan")

    def __init__(self, key: str, label: str):
        self.key = key
        self.label = label

    @property
    def annual_rate_percent(self) -> Decimal:
        """Fixed annual interest rate, in percent, from configuration"""
        cfg = get_config()
        rate = cfg.home_loan_rate if self is LoanType.HOME else cfg.gold_loan_rate
        return Decimal(rate)


@dataclass(frozen=True)
class LoanQuote:
    """EMI and repayment totals for one loan enquiry"""
    principal: Decimal
    tenure_years: Decimal
    annual_rate_percent: Decimal
    monthly_emi: Decimal                # Unrounded
    loan_type: Optional[LoanType] = None

    @property
    def total_installments(self) -> int:
        """Number of monthly installments"""
        return int(self.tenure_years * MONTHS_PER_YEAR)

    @property
    def total_payable(self) -> Decimal:
        """EMI times number of installments"""
        return self.monthly_emi * self.tenure_years * MONTHS_PER_YEAR

    @property
    def total_interest(self) -> Decimal:
        """Total payable less the principal"""
        return self.total_payable - self.principal


@dataclass(frozen=True)
class AmortizationEntry:
    """Single installment in an amortization schedule"""
    installment_number: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining_balance: Decimal

    def __post_init__(self):
        # Payment must equal principal + interest
        if abs(self.principal + self.interest - self.payment) > Decimal('0.01'):
            raise ValueError(f"Payment {self.payment} does not equal "
                             f"principal {self.principal} + interest {self.interest}")


def _as_decimal(value: AmountLike, field: str, label: str) -> Decimal:
    try:
        return to_decimal(value)
    except ValueError:
        raise ValidationError(f"{label} must be a number", field=field)


def calculate_emi(
    principal: AmountLike,
    tenure_years: AmountLike,
    annual_rate_percent: AmountLike
) -> Decimal:
    """
    Calculate the equated monthly installment

    Standard formula: P * r * (1+r)^N / ((1+r)^N - 1), where r is the monthly
    rate (annual percent / 1200) and N the number of monthly installments.
    A zero rate divides the principal evenly over the installments.

    Args:
        principal: Loan amount, must be positive
        tenure_years: Repayment duration in years, must be positive
        annual_rate_percent: Annual interest rate in percent, must not be negative

    Returns:
        Unrounded monthly installment

    Raises:
        ValidationError: On invalid inputs or when the computation overflows
    """
    principal = _as_decimal(principal, "principal", "Principal amount")
    tenure = _as_decimal(tenure_years, "tenure_years", "Tenure")
    rate = _as_decimal(annual_rate_percent, "annual_rate_percent", "Interest rate")

    if principal <= Decimal('0'):
        raise ValidationError("Principal amount must be positive", field="principal")
    if tenure <= Decimal('0'):
        raise ValidationError("Tenure must be positive", field="tenure_years")
    if rate < Decimal('0'):
        raise ValidationError("Interest rate cannot be negative", field="annual_rate_percent")

    total_installments = tenure * MONTHS_PER_YEAR

    with localcontext() as ctx:
        ctx.prec = 28
        try:
            if rate == Decimal('0'):
                return principal / total_installments

            monthly_rate = rate / Decimal(MONTHS_PER_YEAR * 100)
            factor = (Decimal('1') + monthly_rate) ** total_installments
            if not factor.is_finite():
                raise ValidationError("Interest calculation resulted in invalid value")

            emi = principal * monthly_rate * factor / (factor - Decimal('1'))
        except DecimalException:
            log_action(
                logger, "warning", "EMI calculation failed",
                action="calculate_emi",
                extra={"principal": str(principal), "tenure_years": str(tenure),
                       "annual_rate_percent": str(rate)}
            )
            raise ValidationError("Interest calculation resulted in invalid value")

    if not emi.is_finite():
        raise ValidationError("EMI calculation resulted in invalid value")
    return emi


def quote_loan(
    principal: AmountLike,
    tenure_years: AmountLike,
    annual_rate_percent: Optional[AmountLike] = None,
    loan_type: Optional[LoanType] = None
) -> LoanQuote:
    """
    Build a loan quote from an explicit rate or a loan category's fixed rate

    Raises:
        ValidationError: If neither a rate nor a loan type is given, or on
            invalid EMI inputs
    """
    if annual_rate_percent is None:
        if loan_type is None:
            raise ValidationError("Either an interest rate or a loan type is required",
                                  field="annual_rate_percent")
        annual_rate_percent = loan_type.annual_rate_percent

    emi = calculate_emi(principal, tenure_years, annual_rate_percent)
    quote = LoanQuote(
        principal=to_decimal(principal),
        tenure_years=to_decimal(tenure_years),
        annual_rate_percent=to_decimal(annual_rate_percent),
        monthly_emi=emi,
        loan_type=loan_type,
    )

    log_action(
        logger, "info", "Loan quoted", action="quote_loan",
        extra={
            "loan_type": loan_type.key if loan_type else None,
            "principal": str(quote.principal),
            "tenure_years": str(quote.tenure_years),
            "annual_rate_percent": str(quote.annual_rate_percent),
            "monthly_emi": str(emi),
        }
    )
    return quote


def validate_loan_request(principal: AmountLike, tenure_years: AmountLike) -> None:
    """
    Check a loan enquiry against the configured amount and tenure ranges

    Raises:
        ValidationError: If the principal or tenure is out of range
    """
    cfg = get_config()
    principal = _as_decimal(principal, "principal", "Loan amount")
    tenure = _as_decimal(tenure_years, "tenure_years", "Tenure")
    min_amount = Decimal(cfg.min_loan_amount)
    max_amount = Decimal(cfg.max_loan_amount)

    if principal < min_amount or principal > max_amount:
        raise ValidationError(
            f"Loan amount must be between {min_amount:,.2f} and {max_amount:,.2f}",
            field="principal"
        )
    if tenure != tenure.to_integral_value():
        raise ValidationError("Tenure must be a whole number of years", field="tenure_years")
    if tenure < cfg.min_tenure_years or tenure > cfg.max_tenure_years:
        raise ValidationError(
            f"Tenure must be between {cfg.min_tenure_years} and {cfg.max_tenure_years} years",
            field="tenure_years"
        )


def amortization_schedule(quote: LoanQuote) -> List[AmortizationEntry]:
    """
    Generate the equal-installment schedule for a quote

    Interest accrues monthly on the remaining balance. The final installment
    settles exactly what is left so the principal column sums to the loan amount.
    """
    schedule = []
    monthly_rate = quote.annual_rate_percent / Decimal(MONTHS_PER_YEAR * 100)
    payment = round_amount(quote.monthly_emi)
    remaining_balance = round_amount(quote.principal)
    total_installments = quote.total_installments

    for number in range(1, total_installments + 1):
        interest = round_amount(remaining_balance * monthly_rate)
        principal = payment - interest

        if number == total_installments or principal > remaining_balance:
            principal = remaining_balance
            installment = principal + interest
            remaining_balance = Decimal('0.00')
        else:
            installment = payment
            remaining_balance = remaining_balance - principal

        schedule.append(AmortizationEntry(
            installment_number=number,
            payment=installment,
            principal=principal,
            interest=interest,
            remaining_balance=remaining_balance,
        ))

        if remaining_balance == Decimal('0'):
            break

    return schedule
