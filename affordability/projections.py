"""Year-by-year projections for an investment property.

Each year, in order:
  - Capital growth is applied to the property value
  - Rent grows, then a vacancy allowance is taken off
  - Operating expenses grow with inflation, depreciation declines
  - The loan follows its schedule (interest-only first, then P&I); an offset
    balance reduces the interest cost but not the scheduled balance
  - Cashflow before tax, the tax effect at the marginal rate, and equity

Property value can fall below the loan balance (custom negative growth), so
equity and the equity ratio may be negative.
"""

from dataclasses import dataclass, replace
from decimal import Decimal

import structlog

from affordability.loan import (
    balance_after_months,
    interest_only_repayment,
    principal_and_interest_repayment,
)
from affordability.money import HUNDRED, ONE, percent_of, round_cents, round_to, to_decimal
from affordability.params import ProjectionInputs
from affordability.yields import WEEKS_PER_YEAR, income_after_vacancy

logger = structlog.get_logger()

CAPITAL_GROWTH_RATES = {"conservative": 3.5, "moderate": 5.5, "optimistic": 8.0}
RENT_GROWTH_RATES = {"conservative": 2.0, "moderate": 3.5, "optimistic": 5.0}
EXPENSE_GROWTH_RATE = 2.5
DEPRECIATION_DECLINE_RATE = 5.0
DEFAULT_HORIZON_YEARS = 20
SEARCH_HORIZON_YEARS = 30


@dataclass(frozen=True)
class ProjectionYear:
    """State at the end of a projected year. Money in cents."""

    year: int

    property_value: int
    cumulative_growth_percent: float  # vs purchase price, 1 dp

    loan_balance: int
    principal_paid: int
    interest_paid: int  # after any offset saving
    effective_balance: int  # opening balance less offset

    equity: int
    equity_ratio: float  # percent of value, 1 dp
    lvr: float  # percent, 1 dp

    weekly_rent: int
    annual_gross_rent: int
    annual_net_rent: int  # after vacancy
    annual_expenses: int
    depreciation: int

    cashflow_before_tax: int
    taxable_income: int
    tax_benefit: int  # positive = refund, negative = extra tax
    cashflow_after_tax: int

    @property
    def is_negative_equity(self) -> bool:
        return self.equity < 0


@dataclass(frozen=True)
class ProjectionSummary:
    scenario: str
    capital_growth_rate: float
    rent_growth_rate: float
    years: list[ProjectionYear]
    total_principal_paid: int
    total_interest_paid: int
    total_cashflow_before_tax: int
    total_cashflow_after_tax: int
    total_tax_benefit: int
    total_equity_built: int  # capital growth plus principal repaid
    average_annual_return: float  # percent of purchase price, 2 dp

    def at_year(self, year: int) -> ProjectionYear | None:
        """Row for ``year``, or the last row when the horizon is shorter."""
        for row in self.years:
            if row.year == year:
                return row
        return self.years[-1] if self.years else None

    @property
    def negative_equity_years(self) -> list[int]:
        return [row.year for row in self.years if row.is_negative_equity]


@dataclass(frozen=True)
class EquityPosition:
    property_value: int
    loan_balance: int
    equity: int
    equity_ratio: float


def growth_rates(inputs: ProjectionInputs) -> tuple[float, float]:
    """(capital, rent) growth in percent p.a. for the chosen scenario."""
    if inputs.growth_scenario == "custom":
        return inputs.capital_growth_rate or 0.0, inputs.rent_growth_rate or 0.0
    return (
        CAPITAL_GROWTH_RATES[inputs.growth_scenario],
        RENT_GROWTH_RATES[inputs.growth_scenario],
    )


def _grow(value: int, rate: float) -> int:
    return round_cents(Decimal(value) * (ONE + to_decimal(rate) / HUNDRED))


def _ratio(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round_to(Decimal(part) / Decimal(whole) * HUNDRED, 1)


def project(inputs: ProjectionInputs, years: int = DEFAULT_HORIZON_YEARS) -> ProjectionSummary:
    """Project the property ``years`` years ahead."""
    if years < 0:
        raise ValueError(f"years must be >= 0, got {years}")

    capital_rate, rent_rate = growth_rates(inputs)
    rate = inputs.interest_rate
    loan = inputs.loan_balance
    term_months = inputs.loan_term_years * 12
    io_months = inputs.interest_only_years * 12
    io_payment = interest_only_repayment(loan, rate)
    pi_payment = principal_and_interest_repayment(loan, rate, term_months - io_months)

    value = inputs.current_value
    weekly_rent = inputs.weekly_rent
    expenses = inputs.annual_expenses
    depreciation = inputs.annual_depreciation
    balance = loan

    rows = []
    for year in range(1, years + 1):
        start, end = (year - 1) * 12, year * 12

        value = _grow(value, capital_rate)
        weekly_rent = _grow(weekly_rent, rent_rate)
        gross_rent = weekly_rent * WEEKS_PER_YEAR
        net_rent = income_after_vacancy(gross_rent, inputs.vacancy_percent)
        expenses = _grow(expenses, EXPENSE_GROWTH_RATE)
        depreciation = max(0, _grow(depreciation, -DEPRECIATION_DECLINE_RATE))

        # --- Loan ---
        opening = balance
        if end < term_months:
            balance = balance_after_months(loan, rate, term_months, end, io_months)
        elif term_months > 0:
            balance = 0  # the final repayment clears any rounding residue
        io_count = max(0, min(end, io_months) - start)
        pi_count = max(0, min(end, term_months) - max(start, io_months))
        paid = io_count * io_payment + pi_count * pi_payment
        principal = opening - balance
        interest = max(0, paid - principal)

        offset = min(inputs.offset_balance, opening)
        offset_saving = round_cents(percent_of(offset, rate) * (io_count + pi_count) / 12)
        interest = max(0, interest - offset_saving)

        # --- Cashflow and tax ---
        before_tax = net_rent - expenses - interest
        taxable = before_tax - depreciation
        tax_benefit = -round_cents(percent_of(taxable, inputs.marginal_tax_rate))

        equity = value - balance
        rows.append(
            ProjectionYear(
                year=year,
                property_value=value,
                cumulative_growth_percent=_ratio(value - inputs.purchase_price, inputs.purchase_price),
                loan_balance=balance,
                principal_paid=principal,
                interest_paid=interest,
                effective_balance=max(0, opening - inputs.offset_balance),
                equity=equity,
                equity_ratio=_ratio(equity, value),
                lvr=_ratio(balance, value),
                weekly_rent=weekly_rent,
                annual_gross_rent=gross_rent,
                annual_net_rent=net_rent,
                annual_expenses=expenses,
                depreciation=depreciation,
                cashflow_before_tax=before_tax,
                taxable_income=taxable,
                tax_benefit=tax_benefit,
                cashflow_after_tax=before_tax + tax_benefit,
            )
        )

    total_principal = sum(r.principal_paid for r in rows)
    total_after_tax = sum(r.cashflow_after_tax for r in rows)
    equity_built = value - inputs.current_value + total_principal
    average_return = 0.0
    if years > 0 and inputs.purchase_price > 0:
        average_return = round_to(
            Decimal(equity_built + total_after_tax) / years / Decimal(inputs.purchase_price) * HUNDRED, 2
        )

    summary = ProjectionSummary(
        scenario=inputs.growth_scenario,
        capital_growth_rate=capital_rate,
        rent_growth_rate=rent_rate,
        years=rows,
        total_principal_paid=total_principal,
        total_interest_paid=sum(r.interest_paid for r in rows),
        total_cashflow_before_tax=sum(r.cashflow_before_tax for r in rows),
        total_cashflow_after_tax=total_after_tax,
        total_tax_benefit=sum(r.tax_benefit for r in rows if r.tax_benefit > 0),
        total_equity_built=equity_built,
        average_annual_return=average_return,
    )
    logger.debug(
        "projection_generated",
        scenario=summary.scenario,
        years=years,
        negative_equity_years=len(summary.negative_equity_years),
    )
    return summary


def project_all_scenarios(
    inputs: ProjectionInputs, years: int = DEFAULT_HORIZON_YEARS
) -> dict[str, ProjectionSummary]:
    """Conservative, moderate and optimistic runs of the same property."""
    return {
        scenario: project(replace(inputs, growth_scenario=scenario), years)
        for scenario in CAPITAL_GROWTH_RATES
    }


def equity_at_year(inputs: ProjectionInputs, year: int) -> EquityPosition:
    """Projected equity at the end of ``year``; year 0 is today."""
    if year < 1:
        equity = inputs.current_value - inputs.loan_balance
        return EquityPosition(
            inputs.current_value, inputs.loan_balance, equity, _ratio(equity, inputs.current_value)
        )
    row = project(inputs, year).years[-1]
    return EquityPosition(row.property_value, row.loan_balance, row.equity, row.equity_ratio)


def positive_gearing_year(inputs: ProjectionInputs, horizon: int = SEARCH_HORIZON_YEARS) -> int | None:
    """First year pre-tax cashflow turns positive, or None within ``horizon``."""
    for row in project(inputs, horizon).years:
        if row.cashflow_before_tax > 0:
            return row.year
    return None


def break_even_year(inputs: ProjectionInputs, horizon: int = SEARCH_HORIZON_YEARS) -> int | None:
    """First year equity gain plus cumulative after-tax cashflow beats the deposit.

    The initial investment is the purchase price less the loan.
    """
    initial_investment = inputs.purchase_price - inputs.loan_balance
    cumulative = 0
    for row in project(inputs, horizon).years:
        cumulative += row.cashflow_after_tax
        if row.equity - initial_investment + cumulative > 0:
            return row.year
    return None
