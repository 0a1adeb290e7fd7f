"""Rental yield metrics for investment properties.

Amounts are cents; yields are percentages rounded half-up to 2 dp.
"""

from dataclasses import dataclass
from decimal import Decimal

from affordability.money import HUNDRED, percent_of, round_cents, round_to, to_decimal

WEEKS_PER_YEAR = 52

# (minimum gross yield %, category, description), highest first
YIELD_CATEGORIES = (
    (Decimal(7), "excellent", "High yield - excellent income potential"),
    (Decimal("5.5"), "good", "Good yield - solid income potential"),
    (Decimal(4), "fair", "Fair yield - moderate income, may rely on capital growth"),
    (Decimal(0), "poor", "Low yield - likely relying heavily on capital growth"),
)


@dataclass(frozen=True)
class YieldResult:
    gross_yield: float
    net_yield: float
    cash_on_cash_return: float
    cap_rate: float
    annual_rent: int
    net_operating_income: int
    cashflow_after_financing: int


@dataclass(frozen=True)
class YieldAssessment:
    category: str
    description: str


def _percent(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return 0.0
    return round_to(Decimal(numerator) / Decimal(denominator) * HUNDRED, 2)


def gross_yield(annual_rent: int, property_value: int) -> float:
    return _percent(annual_rent, property_value)


def net_yield(annual_rent: int, annual_expenses: int, property_value: int) -> float:
    """Rent less operating expenses (not financing) over value."""
    return _percent(annual_rent - annual_expenses, property_value)


def cash_on_cash_return(annual_cashflow: int, cash_invested: int) -> float:
    """Cashflow after financing over the cash put in (deposit plus costs)."""
    return _percent(annual_cashflow, cash_invested)


def cap_rate(net_operating_income: int, property_value: int) -> float:
    return _percent(net_operating_income, property_value)


def property_yields(
    purchase_price: int,
    annual_rent: int,
    annual_expenses: int,
    cash_invested: int,
    annual_debt_service: int = 0,
) -> YieldResult:
    """All yield metrics for one property."""
    noi = annual_rent - annual_expenses
    cashflow = noi - annual_debt_service
    return YieldResult(
        gross_yield=gross_yield(annual_rent, purchase_price),
        net_yield=net_yield(annual_rent, annual_expenses, purchase_price),
        cash_on_cash_return=cash_on_cash_return(cashflow, cash_invested),
        cap_rate=cap_rate(noi, purchase_price),
        annual_rent=annual_rent,
        net_operating_income=noi,
        cashflow_after_financing=cashflow,
    )


def yield_from_weekly_rent(weekly_rent: int, property_value: int) -> float:
    return gross_yield(weekly_rent * WEEKS_PER_YEAR, property_value)


def required_weekly_rent(property_value: int, target_yield: float) -> int:
    """Weekly rent needed to reach ``target_yield`` gross."""
    return round_cents(percent_of(property_value, target_yield) / WEEKS_PER_YEAR)


def value_from_yield(weekly_rent: int, gross_yield_percent: float) -> int:
    """Property value implied by a weekly rent at a gross yield."""
    rate = to_decimal(gross_yield_percent)
    if rate == 0:
        return 0
    return round_cents(Decimal(weekly_rent * WEEKS_PER_YEAR) / rate * HUNDRED)


def assess_yield(gross_yield_percent: float) -> YieldAssessment:
    rate = to_decimal(gross_yield_percent)
    for minimum, category, description in YIELD_CATEGORIES:
        if rate >= minimum:
            return YieldAssessment(category, description)
    return YieldAssessment(*YIELD_CATEGORIES[-1][1:])


def income_after_vacancy(annual_rent: int, vacancy_percent: float) -> int:
    """Annual rent less the vacancy allowance (allowance rounded to the cent)."""
    return annual_rent - round_cents(percent_of(annual_rent, vacancy_percent))
