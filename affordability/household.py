"""Household expenditure and net income estimators used in serviceability."""

from decimal import Decimal

from affordability.money import HUNDRED, cents_to_dollars, round_cents
from affordability.tables import hecs_for, hem_for, tax_year_for
from affordability.tax import bracket_tax


def estimate_net_income(gross_annual: int, financial_year: str | None = None) -> int:
    """Annual take-home pay in cents.

    Bracketed income tax plus a flat Medicare levy once income is above the
    single low-income threshold (no shade-in).
    """
    dollars = cents_to_dollars(gross_annual)
    config = tax_year_for(financial_year)

    tax = bracket_tax(config.brackets, dollars)
    if dollars > config.medicare.single_threshold:
        tax += dollars * config.medicare.rate

    return round_cents((dollars - tax) * HUNDRED)


def household_expenditure_measure(
    gross_annual: int,
    has_partner: bool,
    dependents: int,
    financial_year: str | None = None,
) -> int:
    """Monthly HEM benchmark in cents for a household profile.

    Uses the placeholder HEM table in :mod:`affordability.tables`.
    """
    dollars = cents_to_dollars(gross_annual)
    brackets = hem_for(financial_year)
    bracket = next(
        (b for b in brackets if b.income_min <= dollars < b.income_max),
        brackets[-1],
    )
    base = bracket.couple if has_partner else bracket.single
    return round_cents((base + max(0, dependents) * bracket.per_dependent) * HUNDRED)


def hecs_annual_repayment(gross_annual: int, financial_year: str | None = None) -> Decimal:
    """Compulsory HECS/HELP repayment for the year, in dollars (unrounded).

    Marginal bands: nil up to the minimum threshold, 15c per $1 above it,
    a fixed base plus 17c per $1 above the second threshold, and 10% of
    total income above the third.
    """
    hecs = hecs_for(financial_year)
    dollars = cents_to_dollars(gross_annual)

    if dollars <= hecs.minimum:
        return Decimal(0)
    if dollars <= hecs.tier2:
        return (dollars - hecs.minimum) * hecs.tier1_rate
    if dollars <= hecs.tier3:
        return hecs.tier2_base + (dollars - hecs.tier2) * hecs.tier2_rate
    return dollars * hecs.top_rate


def hecs_monthly_repayment(gross_annual: int, financial_year: str | None = None) -> int:
    """Monthly HECS/HELP repayment in cents (annual amount / 12)."""
    return round_cents(hecs_annual_repayment(gross_annual, financial_year) / 12 * HUNDRED)
