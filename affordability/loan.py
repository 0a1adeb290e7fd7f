"""Loan repayment, interest and amortization calculations.

Amounts are integer cents; rates are annual percentages (6.5 means 6.5% p.a.).
Intermediate values stay in Decimal and are rounded once, when published.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from affordability.money import HUNDRED, ONE, round_cents, round_to, to_decimal

Frequency = Literal["weekly", "monthly", "quarterly", "annually"]
LoanType = Literal["principal-and-interest", "interest-only"]

PERIODS_PER_YEAR: dict[str, int] = {
    "weekly": 52,
    "monthly": 12,
    "quarterly": 4,
    "annually": 1,
}


@dataclass(frozen=True)
class LoanRepayment:
    repayment: int
    principal_portion: int
    interest_portion: int
    frequency: str


@dataclass(frozen=True)
class AmortizationEntry:
    period: int
    payment: int
    principal: int
    interest: int
    balance: int


@dataclass(frozen=True)
class ExtraPaymentImpact:
    original_interest: int
    new_interest: int
    interest_saved: int
    months_saved: int


@dataclass(frozen=True)
class OffsetResult:
    effective_balance: int
    effective_rate: float  # percent
    monthly_savings: int


def _check_frequency(frequency: str) -> int:
    try:
        return PERIODS_PER_YEAR[frequency]
    except KeyError:
        raise ValueError(
            f"Unknown frequency '{frequency}'. Supported: {list(PERIODS_PER_YEAR)}"
        ) from None


def monthly_rate(annual_rate: float) -> Decimal:
    """Monthly rate as a fraction, e.g. 6.0 -> 0.005."""
    return to_decimal(annual_rate) / HUNDRED / 12


def _monthly_pi_payment(loan: int, annual_rate: float, term_months: int) -> Decimal:
    """Unrounded monthly P&I payment: M = P·r·(1+r)^n / ((1+r)^n − 1)."""
    principal = Decimal(loan)
    if to_decimal(annual_rate) == 0:
        return principal / term_months
    r = monthly_rate(annual_rate)
    growth = (ONE + r) ** term_months
    return principal * (r * growth) / (growth - ONE)


def interest_only_repayment(
    loan: int, annual_rate: float, frequency: Frequency = "monthly"
) -> int:
    """Interest-only repayment per period."""
    periods = _check_frequency(frequency)
    annual_interest = Decimal(loan) * to_decimal(annual_rate) / HUNDRED
    return round_cents(annual_interest / periods)


def principal_and_interest_repayment(
    loan: int,
    annual_rate: float,
    term_months: int,
    frequency: Frequency = "monthly",
) -> int:
    """Principal and interest repayment per period.

    The payment is always derived monthly and then scaled to the requested
    frequency (weekly = monthly × 12 / 52), rather than re-amortized at the
    target frequency. At a zero rate the straight-line ``P / n`` is returned
    for every frequency.
    """
    periods = _check_frequency(frequency)
    if term_months <= 0:
        return 0
    if to_decimal(annual_rate) == 0:
        return round_cents(Decimal(loan) / term_months)
    monthly = _monthly_pi_payment(loan, annual_rate, term_months)
    return round_cents(monthly * 12 / periods)


def calculate_repayment(
    loan: int,
    annual_rate: float,
    term_months: int,
    loan_type: LoanType = "principal-and-interest",
    frequency: Frequency = "monthly",
) -> LoanRepayment:
    """Repayment with the first period's principal/interest split."""
    interest = interest_only_repayment(loan, annual_rate, frequency)
    if loan_type == "interest-only":
        return LoanRepayment(interest, 0, interest, frequency)
    if loan_type != "principal-and-interest":
        raise ValueError(f"Unknown loan type '{loan_type}'")

    total = principal_and_interest_repayment(loan, annual_rate, term_months, frequency)
    return LoanRepayment(total, total - interest, interest, frequency)


def total_interest(
    loan: int,
    annual_rate: float,
    term_months: int,
    interest_only_months: int = 0,
) -> int:
    """Total interest over the life of the loan, including any IO period."""
    io_interest = interest_only_repayment(loan, annual_rate) * interest_only_months

    pi_months = term_months - interest_only_months
    if pi_months <= 0:
        return io_interest

    payment = principal_and_interest_repayment(loan, annual_rate, pi_months)
    return io_interest + payment * pi_months - loan


def amortization_schedule(
    loan: int,
    annual_rate: float,
    term_months: int,
    interest_only_months: int = 0,
) -> list[AmortizationEntry]:
    """One entry per month; the balance never goes below zero."""
    schedule = []
    balance = loan
    r = monthly_rate(annual_rate)

    for period in range(1, min(interest_only_months, term_months) + 1):
        interest = round_cents(balance * r)
        schedule.append(AmortizationEntry(period, interest, 0, interest, balance))

    pi_months = term_months - interest_only_months
    if pi_months <= 0:
        return schedule

    payment = principal_and_interest_repayment(balance, annual_rate, pi_months)
    for i in range(1, pi_months + 1):
        interest = round_cents(balance * r)
        principal = max(0, min(payment - interest, balance))
        balance -= principal
        schedule.append(
            AmortizationEntry(
                period=interest_only_months + i,
                payment=principal + interest,
                principal=principal,
                interest=interest,
                balance=balance,
            )
        )

    return schedule


def balance_after_months(
    loan: int,
    annual_rate: float,
    term_months: int,
    months_elapsed: int,
    interest_only_months: int = 0,
) -> int:
    """Remaining balance after ``months_elapsed`` scheduled repayments."""
    if months_elapsed <= interest_only_months:
        return loan

    pi_elapsed = months_elapsed - interest_only_months
    pi_total = term_months - interest_only_months
    if pi_total <= 0:
        return loan

    principal = Decimal(loan)
    if to_decimal(annual_rate) == 0:
        remaining = principal - principal / pi_total * pi_elapsed
        return max(0, round_cents(remaining))

    r = monthly_rate(annual_rate)
    payment = Decimal(principal_and_interest_repayment(loan, annual_rate, pi_total))
    # B = P(1+r)^k − M((1+r)^k − 1) / r
    factor = (ONE + r) ** pi_elapsed
    remaining = principal * factor - payment * (factor - ONE) / r
    return max(0, round_cents(remaining))


def extra_payment_impact(
    loan: int,
    annual_rate: float,
    term_months: int,
    extra_monthly: int,
) -> ExtraPaymentImpact:
    """Interest and time saved by paying ``extra_monthly`` on top of the scheduled payment."""
    original = total_interest(loan, annual_rate, term_months)
    no_benefit = ExtraPaymentImpact(original, original, 0, 0)

    if extra_monthly <= 0 or loan <= 0 or term_months <= 0:
        return no_benefit

    base_payment = principal_and_interest_repayment(loan, annual_rate, term_months)
    new_payment = Decimal(base_payment + extra_monthly)
    if new_payment <= 0:
        return no_benefit

    if to_decimal(annual_rate) == 0:
        new_term = math.ceil(Decimal(loan) / new_payment)
        return ExtraPaymentImpact(original, 0, original, max(0, term_months - new_term))

    # n = −ln(1 − P·r / M) / ln(1 + r)
    r = monthly_rate(annual_rate)
    inner = ONE - Decimal(loan) * r / new_payment
    if inner <= 0:
        return no_benefit

    new_term = min(term_months, math.ceil(-inner.ln() / (ONE + r).ln()))
    new_interest = total_interest(loan, annual_rate, new_term)
    return ExtraPaymentImpact(
        original_interest=original,
        new_interest=new_interest,
        interest_saved=original - new_interest,
        months_saved=term_months - new_term,
    )


def effective_rate_with_offset(
    loan: int, offset_balance: int, nominal_rate: float
) -> OffsetResult:
    """Effective rate and monthly saving from an offset account."""
    effective_balance = max(0, loan - offset_balance)
    if loan > 0:
        effective_rate = Decimal(effective_balance) / Decimal(loan) * to_decimal(nominal_rate)
    else:
        effective_rate = Decimal(0)

    saving = interest_only_repayment(loan, nominal_rate) - interest_only_repayment(
        effective_balance, nominal_rate
    )
    return OffsetResult(effective_balance, round_to(effective_rate, 2), saving)
