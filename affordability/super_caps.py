"""Superannuation contribution caps, carry-forward and bring-forward rules."""

from dataclasses import dataclass, field

from affordability.fy import FinancialYear, resolve_financial_year
from affordability.tables import SUPER_CAP_YEARS, SuperCapConfig, super_caps_for

CARRY_FORWARD_BALANCE_LIMIT = 500_000 * 100
CARRY_FORWARD_YEARS = 5
BRING_FORWARD_MAX_AGE = 75


@dataclass(frozen=True)
class CarryForwardResult:
    eligible: bool
    available: int
    assessed_years: list[str] = field(default_factory=list)
    unused_by_year: dict[str, int] = field(default_factory=dict)
    reason: str | None = None


@dataclass(frozen=True)
class BringForwardResult:
    eligible: bool
    available_cap: int
    years_available: int  # 0-3
    reason: str | None = None


def super_cap_config(financial_year: str | None = None) -> SuperCapConfig:
    return super_caps_for(financial_year)


def concessional_cap(financial_year: str | None = None) -> int:
    return super_caps_for(financial_year).concessional_cap


def non_concessional_cap(financial_year: str | None = None) -> int:
    return super_caps_for(financial_year).non_concessional_cap


def carry_forward_concessional(
    financial_year: str,
    contributions_by_fy: dict[str, int],
    total_super_balance: int | None = None,
) -> CarryForwardResult:
    """Unused concessional cap from the five prior financial years.

    Only years with a tabulated cap are assessed. Unavailable when the total
    super balance at the prior 30 June is $500,000 or more.
    """
    if total_super_balance is not None and total_super_balance >= CARRY_FORWARD_BALANCE_LIMIT:
        return CarryForwardResult(
            eligible=False,
            available=0,
            reason="Total super balance is above $500,000 at prior 30 June.",
        )

    fy = FinancialYear.parse(resolve_financial_year(SUPER_CAP_YEARS, financial_year))
    assessed = []
    unused_by_year = {}
    for i in range(1, CARRY_FORWARD_YEARS + 1):
        prior = fy.offset(-i).value
        if prior not in SUPER_CAP_YEARS:
            continue
        assessed.append(prior)
        used = max(0, contributions_by_fy.get(prior, 0))
        unused_by_year[prior] = max(0, concessional_cap(prior) - used)

    return CarryForwardResult(
        eligible=True,
        available=sum(unused_by_year.values()),
        assessed_years=assessed,
        unused_by_year=unused_by_year,
    )


def bring_forward_cap(
    financial_year: str,
    total_super_balance: int | None = None,
    age: int | None = None,
) -> BringForwardResult:
    """Non-concessional cap available under the bring-forward rule.

    Three years' cap below (TBC − 2 × annual cap), two years' below
    (TBC − annual cap), one year's below the transfer balance cap itself.
    """
    config = super_caps_for(financial_year)
    annual = config.non_concessional_cap
    tbc = config.transfer_balance_cap

    if age is not None and age >= BRING_FORWARD_MAX_AGE:
        return BringForwardResult(False, 0, 0, "Bring-forward is generally unavailable from age 75.")

    if total_super_balance is None:
        return BringForwardResult(
            True,
            annual,
            1,
            "Total super balance not provided; using annual non-concessional cap only.",
        )

    if total_super_balance >= tbc:
        return BringForwardResult(
            False, 0, 0, "Total super balance is at or above the transfer balance cap."
        )
    if total_super_balance >= tbc - annual:
        return BringForwardResult(True, annual, 1)
    if total_super_balance >= tbc - annual * 2:
        return BringForwardResult(True, annual * 2, 2)
    return BringForwardResult(True, annual * 3, 3)
