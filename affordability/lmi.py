"""Lenders Mortgage Insurance (LMI) estimation.

Premiums are a percentage of the loan amount, not the property value: a base
rate from the LVR band, scaled by a loan-size multiplier. Rates are
approximate; actual premiums vary by insurer and lender.
"""

from dataclasses import dataclass
from decimal import Decimal

from affordability.money import HUNDRED, percent_of, round_cents, round_to
from affordability.tables import LMITables, lmi_for

LMI_FREE_LVR = Decimal(80)
DEPOSIT_SCENARIOS = (5, 10, 15, 20, 25, 30)

# Professions some lenders waive LMI for, up to 90% LVR
WAIVER_PROFESSIONS = frozenset({
    "doctor",
    "dentist",
    "medical-specialist",
    "lawyer",
    "accountant-ca",
    "accountant-cpa",
    "actuary",
    "engineer",
    "veterinarian",
})
WAIVER_MAX_LVR = Decimal(90)


@dataclass(frozen=True)
class LMIResult:
    lmi_amount: int
    lvr: float  # percent, 2 dp
    requires_lmi: bool
    lmi_rate: float  # percent of the loan, 2 dp


@dataclass(frozen=True)
class LMIScenario:
    deposit_percent: int
    deposit: int
    loan_amount: int
    lmi: int
    total_required: int  # deposit + LMI


@dataclass(frozen=True)
class LMIWaiver:
    eligible: bool
    reason: str | None = None


def lvr(loan_amount: int, property_value: int) -> Decimal:
    """Loan-to-value ratio in percent (0 when the property value is 0)."""
    if property_value == 0:
        return Decimal(0)
    return Decimal(loan_amount) / Decimal(property_value) * HUNDRED


def _band_rate(tables: LMITables, ratio: Decimal) -> Decimal:
    for band in tables.bands:
        if band.min_lvr < ratio <= band.max_lvr:
            return band.rate
    if ratio > tables.bands[-1].max_lvr:
        return tables.bands[-1].rate
    return Decimal(0)


def _size_multiplier(tables: LMITables, loan_amount: int) -> Decimal:
    for tier in tables.size_tiers:
        if loan_amount >= tier.threshold:
            return tier.multiplier
    return Decimal(1)


def calculate_lmi(
    property_value: int, loan_amount: int, financial_year: str | None = None
) -> LMIResult:
    """Estimate the LMI premium.

    Parameters
    ----------
    property_value : int
        Property value in cents.
    loan_amount : int
        Loan amount in cents.

    Returns
    -------
    LMIResult
        Premium in cents with the LVR and effective rate. No LMI at or
        below 80% LVR; above 97% the top band applies.
    """
    ratio = lvr(loan_amount, property_value)
    if ratio <= LMI_FREE_LVR:
        return LMIResult(0, round_to(ratio, 2), False, 0.0)

    tables = lmi_for(financial_year)
    rate = _band_rate(tables, ratio) * _size_multiplier(tables, loan_amount)
    return LMIResult(
        lmi_amount=round_cents(percent_of(loan_amount, rate)),
        lvr=round_to(ratio, 2),
        requires_lmi=True,
        lmi_rate=round_to(rate, 2),
    )


def max_loan_without_lmi(property_value: int) -> int:
    """Largest loan at 80% LVR, in cents."""
    return round_cents(percent_of(property_value, LMI_FREE_LVR))


def min_deposit_without_lmi(purchase_price: int) -> int:
    """Smallest deposit (20%) that avoids LMI, in cents."""
    return round_cents(percent_of(purchase_price, HUNDRED - LMI_FREE_LVR))


def deposit_percent(deposit: int, purchase_price: int) -> float:
    if purchase_price == 0:
        return 0.0
    return float(Decimal(deposit) / Decimal(purchase_price) * HUNDRED)


def lmi_scenarios(purchase_price: int) -> list[LMIScenario]:
    """LMI cost at 5% to 30% deposits."""
    scenarios = []
    for percent in DEPOSIT_SCENARIOS:
        deposit = round_cents(percent_of(purchase_price, percent))
        loan = purchase_price - deposit
        premium = calculate_lmi(purchase_price, loan).lmi_amount
        scenarios.append(LMIScenario(percent, deposit, loan, premium, deposit + premium))
    return scenarios


def lmi_waiver_eligibility(lvr_percent: float, profession: str | None = None) -> LMIWaiver:
    """Whether LMI is avoided outright or may be waived for a profession."""
    ratio = Decimal(str(lvr_percent))
    if ratio <= LMI_FREE_LVR:
        return LMIWaiver(True, "LVR is 80% or below - no LMI required")
    if profession and profession.lower() in WAIVER_PROFESSIONS and ratio <= WAIVER_MAX_LVR:
        return LMIWaiver(True, f"Professional LMI waiver may be available for {profession}")
    return LMIWaiver(False)
