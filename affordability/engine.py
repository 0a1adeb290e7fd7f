"""APRA-style serviceability assessment.

Pipeline for one set of inputs:
  - Household income: combined gross, estimated net after tax and levy
  - Living expenses: declared (annual / 12) or the HEM benchmark
  - Existing commitments: credit cards at 3% of limit, HECS on income,
    everything else at its declared repayment
  - Max borrowing: binary search for the largest loan whose repayment at
    the assessment rate (product rate + buffer) fits what is left
  - Ratios: DSR, LSR and DTI mapped to green / amber / red

Everything is computed at the assessment rate, never the product rate.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

import structlog

from affordability.household import (
    estimate_net_income,
    hecs_monthly_repayment,
    household_expenditure_measure,
)
from affordability.lmi import calculate_lmi
from affordability.loan import interest_only_repayment, principal_and_interest_repayment
from affordability.money import (
    HUNDRED,
    percent_of,
    quantize_to,
    round_cents,
    round_half_up,
    round_to,
    to_decimal,
)
from affordability.params import (
    APRA_BUFFER_DEFAULT,
    AffordabilityInputs,
    BorrowerProfile,
    ExistingDebt,
)
from affordability.stamp_duty import StampDutyOptions, stamp_duty

logger = structlog.get_logger()

Status = Literal["green", "amber", "red"]

DSR_GREEN_MAX = Decimal(35)
DSR_AMBER_MAX = Decimal(50)
LSR_GREEN_MAX = Decimal(28)
LSR_AMBER_MAX = Decimal(35)
DTI_GREEN_MAX = Decimal("5.0")
DTI_AMBER_MAX = Decimal("6.0")
DTI_APRA_LIMIT = Decimal("6.0")  # restricted lending from February 2026

CREDIT_CARD_MONTHLY_PERCENT = 3
SEARCH_PRECISION = 10_000  # $100
STRESS_RATE_INCREASES = (1, 2, 3)
STRESS_AMBER_FLOOR = -50_000  # up to $500/month short


@dataclass(frozen=True)
class HouseholdCashflow:
    """Monthly figures the loan has to fit into, in cents."""

    total_gross_annual: int
    monthly_gross: int
    monthly_net: int
    monthly_living: int
    monthly_debts: int

    @property
    def available(self) -> int:
        return self.monthly_net - self.monthly_living - self.monthly_debts


@dataclass(frozen=True)
class AffordabilityResults:
    max_borrowing_amount: int
    assessment_rate: float
    debt_service_ratio: float  # percent, 1 dp
    loan_service_ratio: float  # percent, 1 dp
    dsr_status: Status
    lsr_status: Status
    debt_to_income_ratio: float  # times income, 1 dp
    dti_status: Status
    dti_warning: str | None
    monthly_gross_income: int
    monthly_net_income: int
    monthly_living_expenses: int
    monthly_existing_debt_payments: int
    available_for_housing: int
    proposed_loan_amount: int
    proposed_repayment: int
    surplus: int
    total_proposed_debt: int
    rental_coverage_ratio: float | None
    overall_status: Status
    status_description: str


@dataclass(frozen=True)
class StressTestScenario:
    rate_increase: float
    new_rate: float
    new_repayment: int
    monthly_cashflow: int
    status: Status


@dataclass(frozen=True)
class RiskMetrics:
    max_vacancy_before_negative: float  # percent, 1 dp
    sensitivity_per_percent: int  # monthly cents per 1% rate rise
    buffer_months: int
    break_even_rate: float  # percent, 2 dp


@dataclass(frozen=True)
class UpfrontCosts:
    deposit: int
    loan_amount: int
    stamp_duty: int
    transfer_fee: int
    mortgage_registration: int
    lmi: int

    @property
    def government_charges(self) -> int:
        return self.stamp_duty + self.transfer_fee + self.mortgage_registration

    @property
    def total_cash_required(self) -> int:
        """Deposit plus charges and LMI, assuming LMI is paid up front."""
        return self.deposit + self.government_charges + self.lmi


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


def monthly_living_expenses(borrower: BorrowerProfile, financial_year: str | None = None) -> int:
    """Declared annual expenses / 12, or the HEM benchmark."""
    if borrower.living_expenses_type == "declared" and borrower.declared_living_expenses is not None:
        return round_cents(Decimal(borrower.declared_living_expenses) / 12)
    return household_expenditure_measure(
        borrower.total_gross_annual,
        borrower.has_partner,
        borrower.number_of_dependents,
        financial_year,
    )


def monthly_debt_payments(
    debts: list[ExistingDebt], gross_annual: int, financial_year: str | None = None
) -> int:
    """Monthly commitments the lender assesses for existing debts."""
    total = 0
    for debt in debts:
        if debt.type == "credit-card":
            limit = debt.credit_limit or debt.current_balance
            total += round_cents(percent_of(limit, CREDIT_CARD_MONTHLY_PERCENT))
        elif debt.type == "hecs-help":
            total += hecs_monthly_repayment(gross_annual, financial_year)
        else:
            total += debt.monthly_repayment or 0
    return total


def existing_debt_balance(debts: list[ExistingDebt]) -> int:
    """Balances counted towards DTI; credit cards count their full limit."""
    total = 0
    for debt in debts:
        if debt.type == "credit-card":
            total += debt.credit_limit or debt.current_balance
        else:
            total += debt.current_balance
    return total


def household_cashflow(inputs: AffordabilityInputs) -> HouseholdCashflow:
    gross = inputs.total_gross_annual
    fy = inputs.financial_year
    return HouseholdCashflow(
        total_gross_annual=gross,
        monthly_gross=round_cents(Decimal(gross) / 12),
        monthly_net=round_cents(Decimal(estimate_net_income(gross, fy)) / 12),
        monthly_living=monthly_living_expenses(inputs.borrower, fy),
        monthly_debts=monthly_debt_payments(inputs.existing_debts, gross, fy),
    )


def ratio_status(ratio: Decimal | float, green_max: Decimal, amber_max: Decimal) -> Status:
    ratio = to_decimal(ratio)
    if ratio <= green_max:
        return "green"
    if ratio <= amber_max:
        return "amber"
    return "red"


def dti_status(dti: Decimal | float) -> Status:
    return ratio_status(dti, DTI_GREEN_MAX, DTI_AMBER_MAX)


def dti_warning(dti: Decimal | float) -> str | None:
    dti = to_decimal(dti)
    if dti > DTI_APRA_LIMIT:
        return (
            f"DTI ratio of {dti:.1f}x exceeds APRA's 6x threshold. From February 2026, "
            "banks must limit high-DTI lending. Loan approval may be more difficult."
        )
    if dti > DTI_GREEN_MAX:
        return (
            f"DTI ratio of {dti:.1f}x is elevated. Consider increasing deposit or "
            "reducing debt to improve approval chances."
        )
    return None


def _repayment(loan: int, annual_rate: float, term_months: int, is_interest_only: bool) -> int:
    if is_interest_only:
        return interest_only_repayment(loan, annual_rate, "monthly")
    return principal_and_interest_repayment(loan, annual_rate, term_months, "monthly")


def _rate_plus(rate: float, increase: float) -> float:
    return float(to_decimal(rate) + to_decimal(increase))


# ---------------------------------------------------------------------------
# Assessment
# ---------------------------------------------------------------------------


def _search_max_loan(available: int, inputs: AffordabilityInputs) -> int:
    """Largest loan (to within $100) whose assessed repayment fits ``available``."""
    if available <= 0:
        return 0

    rate = inputs.assessment_rate
    low = 0
    high = available * 12 * inputs.loan_term_years * 100
    iterations = 0
    while high - low > SEARCH_PRECISION:
        mid = round_half_up(Decimal(low + high) / 2)
        if _repayment(mid, rate, inputs.term_months, inputs.is_interest_only) <= available:
            low = mid
        else:
            high = mid
        iterations += 1

    logger.debug("max_borrowing_search", available=available, assessment_rate=rate, iterations=iterations, result=low)
    return low


def calculate_max_borrowing(inputs: AffordabilityInputs) -> int:
    """Maximum loan in cents the household can service at the assessment rate."""
    return _search_max_loan(household_cashflow(inputs).available, inputs)


def _status_description(overall: Status, dti: Status) -> str:
    if overall == "green":
        return "Strong affordability position. Loan is well within serviceability limits."
    if overall == "amber":
        if dti == "amber":
            return (
                "Moderate affordability. DTI ratio is elevated - consider a larger "
                "deposit or paying down existing debt."
            )
        return "Moderate affordability. Consider reducing loan amount or clearing existing debts."
    if dti == "red":
        return (
            "DTI exceeds APRA's 6x threshold. From Feb 2026, high-DTI loans face "
            "lending restrictions. Reduce loan or increase income."
        )
    return "Loan may not be serviceable. Reduce loan amount, clear debts, or increase income."


def calculate_affordability(inputs: AffordabilityInputs) -> AffordabilityResults:
    """Full serviceability assessment for ``inputs``."""
    cashflow = household_cashflow(inputs)
    available = cashflow.available
    max_borrowing = _search_max_loan(available, inputs)
    rate = inputs.assessment_rate

    proposed_loan = max_borrowing
    if inputs.purchase_price is not None:
        proposed_loan = max(0, min(inputs.purchase_price - inputs.deposit, max_borrowing))

    repayment = _repayment(proposed_loan, rate, inputs.term_months, inputs.is_interest_only)
    surplus = available - repayment

    if cashflow.monthly_gross > 0:
        gross = Decimal(cashflow.monthly_gross)
        dsr = Decimal(cashflow.monthly_debts + repayment) / gross * HUNDRED
        lsr = Decimal(repayment) / gross * HUNDRED
    else:
        dsr = lsr = Decimal(0)
    dsr_state = ratio_status(dsr, DSR_GREEN_MAX, DSR_AMBER_MAX)
    lsr_state = ratio_status(lsr, LSR_GREEN_MAX, LSR_AMBER_MAX)

    total_debt = proposed_loan + existing_debt_balance(inputs.existing_debts)
    dti = Decimal(0)
    if cashflow.total_gross_annual > 0:
        dti = quantize_to(Decimal(total_debt) / Decimal(cashflow.total_gross_annual), 1)
    dti_state = dti_status(dti)

    rental_coverage = None
    if inputs.expected_weekly_rent:
        annual_rent = Decimal(inputs.expected_weekly_rent) * 52
        annual_interest = round_cents(percent_of(proposed_loan, rate))
        if annual_interest > 0:
            rental_coverage = round_to(annual_rent / annual_interest, 2)

    statuses = (dsr_state, lsr_state, dti_state)
    if "red" in statuses or surplus < 0:
        overall: Status = "red"
    elif "amber" in statuses:
        overall = "amber"
    else:
        overall = "green"

    logger.debug(
        "affordability_assessed",
        max_borrowing=max_borrowing,
        proposed_loan=proposed_loan,
        surplus=surplus,
        overall_status=overall,
    )

    return AffordabilityResults(
        max_borrowing_amount=max_borrowing,
        assessment_rate=rate,
        debt_service_ratio=round_to(dsr, 1),
        loan_service_ratio=round_to(lsr, 1),
        dsr_status=dsr_state,
        lsr_status=lsr_state,
        debt_to_income_ratio=float(dti),
        dti_status=dti_state,
        dti_warning=dti_warning(dti),
        monthly_gross_income=cashflow.monthly_gross,
        monthly_net_income=cashflow.monthly_net,
        monthly_living_expenses=cashflow.monthly_living,
        monthly_existing_debt_payments=cashflow.monthly_debts,
        available_for_housing=available,
        proposed_loan_amount=proposed_loan,
        proposed_repayment=repayment,
        surplus=surplus,
        total_proposed_debt=total_debt,
        rental_coverage_ratio=rental_coverage,
        overall_status=overall,
        status_description=_status_description(overall, dti_state),
    )


# ---------------------------------------------------------------------------
# Stress tests and investment risk
# ---------------------------------------------------------------------------


def generate_stress_tests(
    loan_amount: int,
    base_rate: float,
    loan_term_years: int,
    available_for_housing: int,
    is_interest_only: bool = False,
    rate_increases: tuple[float, ...] = STRESS_RATE_INCREASES,
) -> list[StressTestScenario]:
    """Repayment and cashflow after each rate rise (percentage points)."""
    scenarios = []
    for increase in rate_increases:
        new_rate = _rate_plus(base_rate, increase)
        repayment = _repayment(loan_amount, new_rate, loan_term_years * 12, is_interest_only)
        cashflow = available_for_housing - repayment
        if cashflow >= 0:
            status: Status = "green"
        elif cashflow >= STRESS_AMBER_FLOOR:
            status = "amber"
        else:
            status = "red"
        scenarios.append(StressTestScenario(increase, new_rate, repayment, cashflow, status))
    return scenarios


def calculate_risk_metrics(
    loan_amount: int,
    interest_rate: float,
    weekly_rent: int,
    monthly_expenses: int,
    available_for_housing: int,
) -> RiskMetrics:
    """Investment property resilience, assuming interest-only cost of debt.

    - max vacancy: share of annual rent that can be lost before rent no
      longer covers expenses plus interest
    - sensitivity: monthly cost of each 1% rate rise
    - buffer months: whole months ``available_for_housing`` covers outgoings
    - break-even rate: rate at which net rent equals interest
    """
    loan = Decimal(loan_amount)
    annual_rent = Decimal(weekly_rent) * 52
    annual_expenses = Decimal(monthly_expenses) * 12
    annual_interest = round_cents(percent_of(loan_amount, interest_rate))

    max_vacancy = Decimal(0)
    if annual_rent > 0:
        break_even_rent = annual_expenses + annual_interest
        if break_even_rent < annual_rent:
            max_vacancy = (annual_rent - break_even_rent) / annual_rent * HUNDRED

    one_percent_annual = round_cents(loan / HUNDRED)
    sensitivity = round_cents(Decimal(one_percent_annual) / 12)

    monthly_interest = round_cents(Decimal(annual_interest) / 12)
    outgoings = monthly_expenses + monthly_interest
    buffer_months = 0
    if available_for_housing > 0 and outgoings > 0:
        buffer_months = available_for_housing // outgoings

    break_even = 0.0
    if loan > 0:
        break_even = round_to((annual_rent - annual_expenses) / loan * HUNDRED, 2)

    return RiskMetrics(
        max_vacancy_before_negative=round_to(max_vacancy, 1),
        sensitivity_per_percent=sensitivity,
        buffer_months=buffer_months,
        break_even_rate=break_even,
    )


def upfront_costs(
    purchase_price: int,
    deposit: int,
    state: str,
    options: StampDutyOptions | None = None,
    financial_year: str | None = None,
) -> UpfrontCosts:
    """Cash needed to settle: deposit, government charges and LMI."""
    loan = max(0, purchase_price - deposit)
    duty = stamp_duty(purchase_price, state, options, financial_year)
    lmi = calculate_lmi(purchase_price, loan, financial_year)
    return UpfrontCosts(
        deposit=deposit,
        loan_amount=loan,
        stamp_duty=duty.stamp_duty,
        transfer_fee=duty.transfer_fee,
        mortgage_registration=duty.mortgage_registration,
        lmi=lmi.lmi_amount,
    )


def default_inputs() -> AffordabilityInputs:
    """$100k single income, HEM expenses, no debts, 6.5% over 30 years."""
    return AffordabilityInputs(
        borrower=BorrowerProfile(gross_annual_income=10_000_000),
        existing_debts=[],
        interest_rate=6.5,
        apra_buffer=APRA_BUFFER_DEFAULT,
        loan_term_years=30,
        is_interest_only=False,
    )
