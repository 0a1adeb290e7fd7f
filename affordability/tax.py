"""Australian tax calculations: income tax, Medicare levy, MLS, CGT."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from affordability.money import (
    HUNDRED,
    add_months,
    cents_to_dollars,
    months_between,
    percent_of,
    round_cents,
    round_to,
    to_decimal,
)
from affordability.tables import INF, RateBand, TaxBracket, TaxYear, tax_year_for

TaxpayerType = Literal["single", "family"]


@dataclass(frozen=True)
class TaxCalculation:
    taxable_income: int
    income_tax: int
    medicare_levy: int
    total_tax: int
    effective_rate: float  # percent
    marginal_rate: float  # percent, excluding Medicare levy


# ---------------------------------------------------------------------------
# Income tax
# ---------------------------------------------------------------------------


def find_bracket(brackets: tuple[TaxBracket, ...], dollars: Decimal) -> TaxBracket:
    """The single bracket with ``min < dollars <= max`` (zero falls in the first)."""
    for bracket in brackets:
        if dollars <= bracket.max:
            return bracket
    return brackets[-1]


def bracket_tax(brackets: tuple[TaxBracket, ...], dollars: Decimal) -> Decimal:
    """Marginal tax using the bracket's cumulative base: base + (income − min) × rate."""
    if dollars <= 0:
        return Decimal(0)
    bracket = find_bracket(brackets, dollars)
    return bracket.base_tax + (dollars - bracket.min) * bracket.rate


def medicare_levy_threshold(
    config: TaxYear, taxpayer_type: TaxpayerType = "single", dependent_children: int = 0
) -> Decimal:
    levy = config.medicare
    if taxpayer_type == "family":
        return levy.family_threshold + max(0, dependent_children) * levy.family_per_dependent_child
    return levy.single_threshold


def medicare_levy(
    dollars: Decimal,
    config: TaxYear,
    taxpayer_type: TaxpayerType = "single",
    dependent_children: int = 0,
) -> Decimal:
    """Medicare levy with the low-income shade-in.

    Nil at or below the threshold; above it the lesser of the full levy and
    the shade-in rate applied to income over the threshold.
    """
    threshold = medicare_levy_threshold(config, taxpayer_type, dependent_children)
    if dollars <= threshold:
        return Decimal(0)
    full = dollars * config.medicare.rate
    shaded = (dollars - threshold) * config.medicare.shade_in_rate
    return min(full, shaded)


def income_tax(
    taxable_income: int,
    financial_year: str | None = None,
    taxpayer_type: TaxpayerType = "single",
    dependent_children: int = 0,
) -> TaxCalculation:
    """Income tax and Medicare levy for a taxable income in cents."""
    taxable_income = max(0, taxable_income)
    dollars = cents_to_dollars(taxable_income)
    config = tax_year_for(financial_year)

    tax = bracket_tax(config.brackets, dollars)
    levy = medicare_levy(dollars, config, taxpayer_type, dependent_children)
    total = tax + levy
    effective = total / dollars * HUNDRED if dollars > 0 else Decimal(0)

    return TaxCalculation(
        taxable_income=taxable_income,
        income_tax=round_cents(tax * HUNDRED),
        medicare_levy=round_cents(levy * HUNDRED),
        total_tax=round_cents(total * HUNDRED),
        effective_rate=round_to(effective, 1),
        marginal_rate=float(find_bracket(config.brackets, dollars).rate * HUNDRED),
    )


def marginal_rate(taxable_income: int, financial_year: str | None = None) -> float:
    """Marginal income tax rate in percent (Medicare levy not included)."""
    config = tax_year_for(financial_year)
    dollars = cents_to_dollars(max(0, taxable_income))
    return float(find_bracket(config.brackets, dollars).rate * HUNDRED)


# ---------------------------------------------------------------------------
# Medicare levy surcharge
# ---------------------------------------------------------------------------


def mls_thresholds(
    financial_year: str | None = None,
    taxpayer_type: TaxpayerType = "single",
    dependent_children: int = 0,
) -> tuple[RateBand, ...]:
    """MLS tiers; family tiers rise by a fixed amount per child after the first."""
    mls = tax_year_for(financial_year).mls
    if taxpayer_type == "single":
        return mls.single

    uplift = max(0, dependent_children - 1) * mls.family_per_dependent_child_after_first
    base, tier1, tier2 = (t + uplift for t in mls.family_base_thresholds)
    return (
        RateBand(Decimal(0), base, Decimal(0)),
        RateBand(base, tier1, Decimal(1)),
        RateBand(tier1, tier2, Decimal("1.25")),
        RateBand(tier2, INF, Decimal("1.5")),
    )


def medicare_levy_surcharge(
    income: int,
    financial_year: str | None = None,
    taxpayer_type: TaxpayerType = "single",
    dependent_children: int = 0,
) -> int:
    """MLS payable (cents) for someone without private hospital cover."""
    income = max(0, income)
    dollars = cents_to_dollars(income)
    rate = Decimal(0)
    for band in mls_thresholds(financial_year, taxpayer_type, dependent_children):
        if dollars <= band.max:
            rate = band.rate
            break
    return round_cents(percent_of(income, rate))


# ---------------------------------------------------------------------------
# Capital gains tax
# ---------------------------------------------------------------------------

CGT_DISCOUNT_PERCENT = 50
CGT_DISCOUNT_HOLDING_MONTHS = 12


@dataclass(frozen=True)
class CGTResult:
    cost_basis: int
    sale_proceeds: int  # after fees
    gross_capital_gain: int  # negative for a loss
    holding_period_days: int
    holding_period_months: int
    is_eligible_for_discount: bool
    discount_percent: int
    discount_amount: int
    net_capital_gain: int
    is_capital_loss: bool
    estimated_tax: int | None = None
    effective_tax_rate: float | None = None


def cgt_discount_date(purchase_date: date) -> date:
    """First sale date on which the 50% discount applies (12 calendar months on)."""
    return add_months(purchase_date, CGT_DISCOUNT_HOLDING_MONTHS)


def investment_cgt(
    sale_proceeds: int,
    sale_date: date,
    cost_basis: int,
    purchase_date: date,
    fees: int = 0,
    marginal_tax_rate: float | None = None,
) -> CGTResult:
    """Capital gain on a sale, with the 12-month discount.

    Eligibility counts whole calendar months rather than 365 days, so a
    1 January purchase sold the following 1 January qualifies and a sale on
    31 December does not.
    """
    holding_days = max(0, (sale_date - purchase_date).days)
    holding_months = months_between(purchase_date, sale_date)
    eligible = holding_months >= CGT_DISCOUNT_HOLDING_MONTHS
    discount_percent = CGT_DISCOUNT_PERCENT if eligible else 0

    net_proceeds = sale_proceeds - fees
    gross_gain = net_proceeds - cost_basis
    is_loss = gross_gain < 0

    discount = 0
    if not is_loss and eligible:
        discount = round_cents(percent_of(gross_gain, discount_percent))
    net_gain = gross_gain - discount

    estimated_tax = None
    effective_rate = None
    if marginal_tax_rate is not None and net_gain > 0:
        estimated_tax = round_cents(percent_of(net_gain, marginal_tax_rate))
        effective_rate = round_to(Decimal(estimated_tax) / Decimal(gross_gain) * HUNDRED, 1)

    return CGTResult(
        cost_basis=cost_basis,
        sale_proceeds=net_proceeds,
        gross_capital_gain=gross_gain,
        holding_period_days=holding_days,
        holding_period_months=holding_months,
        is_eligible_for_discount=eligible,
        discount_percent=discount_percent,
        discount_amount=discount,
        net_capital_gain=net_gain,
        is_capital_loss=is_loss,
        estimated_tax=estimated_tax,
        effective_tax_rate=effective_rate,
    )


def days_until_cgt_discount(purchase_date: date, today: date) -> int:
    """Days remaining until a holding becomes discount-eligible (0 once it is)."""
    return max(0, (cgt_discount_date(purchase_date) - today).days)


def proportional_cost_basis(total_cost_basis: int, total_units: float, units_sold: float) -> int:
    """Average-cost basis for a partial sale; 0 when no units are held."""
    if total_units <= 0:
        return 0
    return round_cents(
        Decimal(total_cost_basis) * to_decimal(units_sold) / to_decimal(total_units)
    )
