"""Australian state stamp duty (transfer duty) and government charges.

Duty is worked out in whole dollars the way the state revenue offices
publish it, then converted back to cents.

Concessions:
  - First home buyers (owner-occupiers only): full exemption up to a state
    threshold, linearly tapered concession up to a second threshold.
  - QLD: first home buyers of new homes or vacant land are exempt with no
    value cap.
  - VIC: off-the-plan concession for all buyers, including investors. The
    construction share of the price is excluded from the dutiable value.
    When a first home buyer also qualifies, the better of the two applies;
    they never stack.
"""

from dataclasses import dataclass
from decimal import Decimal

from affordability.money import HUNDRED, cents_to_dollars, round_half_up, to_decimal
from affordability.tables import (
    STATES,
    FHBThreshold,
    NTDutyFormula,
    StampDutyBracket,
    StateDuty,
    stamp_duty_for,
)


@dataclass(frozen=True)
class StampDutyOptions:
    is_first_home_buyer: bool = False
    is_investment: bool = True
    is_new_home: bool = False  # QLD uncapped FHB exemption
    is_vacant_land: bool = False  # QLD uncapped FHB exemption
    is_off_plan: bool = False  # VIC off-the-plan concession
    construction_value_percent: float | None = None  # None = state default (40%)


@dataclass(frozen=True)
class StampDutyResult:
    stamp_duty: int
    transfer_fee: int
    mortgage_registration: int
    total_government_charges: int
    is_first_home_buyer_exempt: bool
    concession_applied: int


@dataclass(frozen=True)
class FHBEligibility:
    eligible: bool
    full_exemption: bool
    partial_concession: bool
    estimated_savings: int
    note: str | None = None


@dataclass(frozen=True)
class OffPlanEligibility:
    eligible: bool
    estimated_savings: int
    construction_percent: float
    note: str


# ---------------------------------------------------------------------------
# Duty formulas (dollars in, whole dollars out)
# ---------------------------------------------------------------------------


def bracket_duty(price: Decimal, brackets: tuple[StampDutyBracket, ...]) -> int:
    """Duty from the bracket containing ``price``: base + (price − previous threshold) × rate."""
    previous = Decimal(0)
    for bracket in brackets:
        if price <= bracket.threshold:
            return round_half_up(bracket.base + (price - previous) * bracket.rate)
        previous = bracket.threshold
    last = brackets[-1]
    return round_half_up(last.base + (price - previous) * last.rate)


def nt_duty(price: Decimal, formula: NTDutyFormula) -> int:
    """Northern Territory duty: quadratic in V = price / 1000 below the threshold."""
    if price <= formula.threshold:
        v = price / 1000
        return round_half_up(formula.quadratic * v * v + formula.linear * v)
    for upper, rate in formula.flat_rates:
        if price <= upper:
            return round_half_up(price * rate)
    return round_half_up(price * formula.flat_rates[-1][1])


def _standard_duty(price: Decimal, table: StateDuty) -> int:
    if table.formula is not None:
        return nt_duty(price, table.formula)
    return bracket_duty(price, table.brackets)


def fhb_concession(price: Decimal, standard_duty: int, thresholds: FHBThreshold) -> int:
    """First home buyer concession in dollars for an established home."""
    if price <= thresholds.full_exemption:
        return standard_duty
    if price <= thresholds.partial_exemption:
        span = thresholds.partial_exemption - thresholds.full_exemption
        taper = (price - thresholds.full_exemption) / span
        return round_half_up(standard_duty * (1 - taper))
    return 0


def vic_off_plan_concession(
    price: Decimal,
    standard_duty: int,
    brackets: tuple[StampDutyBracket, ...],
    construction_percent: Decimal,
) -> int:
    """Duty saved by excluding the construction share from the dutiable value."""
    dutiable = price * (1 - construction_percent / HUNDRED)
    return max(0, standard_duty - bracket_duty(dutiable, brackets))


def _state_table(state: str, financial_year: str | None) -> tuple[str, StateDuty]:
    code = state.upper()
    tables = stamp_duty_for(financial_year).states
    if code not in tables:
        raise ValueError(f"Unknown state '{state}'. Supported: {list(STATES)}")
    return code, tables[code]


# ---------------------------------------------------------------------------
# Public calculators
# ---------------------------------------------------------------------------


def stamp_duty(
    purchase_price: int,
    state: str,
    options: StampDutyOptions | None = None,
    financial_year: str | None = None,
) -> StampDutyResult:
    """Stamp duty plus transfer and mortgage registration fees, all in cents."""
    options = options or StampDutyOptions()
    code, table = _state_table(state, financial_year)
    price = cents_to_dollars(purchase_price)

    original = _standard_duty(price, table)
    duty = original
    concession = 0
    exempt = False

    if options.is_first_home_buyer and not options.is_investment:
        if code == "QLD" and (options.is_new_home or options.is_vacant_land):
            concession = original
        else:
            concession = fhb_concession(price, original, table.fhb)
        exempt = concession == original
        duty = original - concession

    if code == "VIC" and options.is_off_plan:
        percent = options.construction_value_percent
        if percent is None:
            percent = stamp_duty_for(financial_year).vic_off_plan_default_construction_percent
        off_plan = vic_off_plan_concession(price, original, table.brackets, to_decimal(percent))
        # both measured against the original duty; the lower final duty wins
        if concession > 0:
            if original - off_plan < duty:
                concession = off_plan
                duty = original - off_plan
        else:
            concession = off_plan
            duty = original - off_plan

    duty = max(0, duty)
    duty_cents = duty * 100
    return StampDutyResult(
        stamp_duty=duty_cents,
        transfer_fee=table.transfer_fee,
        mortgage_registration=table.mortgage_registration,
        total_government_charges=duty_cents + table.transfer_fee + table.mortgage_registration,
        is_first_home_buyer_exempt=exempt,
        concession_applied=concession * 100,
    )


def estimate_stamp_duty(purchase_price: int, state: str) -> int:
    """Standard (investor, no concession) duty in cents."""
    return stamp_duty(purchase_price, state).stamp_duty


def stamp_duty_breakdown(
    purchase_price: int, state: str, is_first_home_buyer: bool = False
) -> list[tuple[str, int]]:
    """(label, cents) lines for display; a concession shows as a negative line."""
    result = stamp_duty(
        purchase_price,
        state,
        StampDutyOptions(is_first_home_buyer=is_first_home_buyer, is_investment=not is_first_home_buyer),
    )
    lines = [
        ("Stamp Duty", result.stamp_duty),
        ("Transfer Fee", result.transfer_fee),
        ("Mortgage Registration", result.mortgage_registration),
    ]
    if result.concession_applied > 0:
        lines.append(("FHB Concession (applied)", -result.concession_applied))
    return lines


def fhb_eligibility(
    purchase_price: int,
    state: str,
    is_new_home: bool = False,
    is_vacant_land: bool = False,
) -> FHBEligibility:
    """Whether a first home buyer concession applies, and what it saves."""
    code, table = _state_table(state, None)
    price = cents_to_dollars(purchase_price)

    standard = stamp_duty(
        purchase_price,
        code,
        StampDutyOptions(is_investment=False, is_new_home=is_new_home, is_vacant_land=is_vacant_land),
    )
    fhb = stamp_duty(
        purchase_price,
        code,
        StampDutyOptions(
            is_first_home_buyer=True,
            is_investment=False,
            is_new_home=is_new_home,
            is_vacant_land=is_vacant_land,
        ),
    )
    savings = standard.stamp_duty - fhb.stamp_duty

    if code == "QLD" and (is_new_home or is_vacant_land):
        kind = "new homes" if is_new_home else "vacant land"
        return FHBEligibility(
            eligible=True,
            full_exemption=True,
            partial_concession=False,
            estimated_savings=savings,
            note=f"QLD: full exemption for {kind} (no value cap)",
        )

    return FHBEligibility(
        eligible=price <= table.fhb.partial_exemption,
        full_exemption=price <= table.fhb.full_exemption,
        partial_concession=table.fhb.full_exemption < price <= table.fhb.partial_exemption,
        estimated_savings=savings,
    )


def vic_off_plan_eligibility(
    purchase_price: int, construction_percent: float | None = None
) -> OffPlanEligibility:
    """Savings from the VIC off-the-plan concession (open to investors too)."""
    if construction_percent is None:
        construction_percent = float(stamp_duty_for().vic_off_plan_default_construction_percent)

    standard = stamp_duty(purchase_price, "VIC", StampDutyOptions())
    off_plan = stamp_duty(
        purchase_price,
        "VIC",
        StampDutyOptions(is_off_plan=True, construction_value_percent=construction_percent),
    )
    return OffPlanEligibility(
        eligible=True,
        estimated_savings=standard.stamp_duty - off_plan.stamp_duty,
        construction_percent=construction_percent,
        note=f"VIC off-the-plan concession: {construction_percent:g}% construction value excluded.",
    )
