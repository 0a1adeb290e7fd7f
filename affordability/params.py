"""Inputs for a serviceability assessment.

All money is integer cents; rates are percentages (6.5 means 6.5% p.a.).
"""

from dataclasses import dataclass, field
from typing import Literal

from affordability.money import percent_of, round_cents, to_decimal

APRA_BUFFER_DEFAULT = 3.0  # percentage points over the product rate
DEFAULT_DEPOSIT_PERCENT = 20.0

LivingExpensesType = Literal["declared", "hem"]
DebtType = Literal[
    "credit-card", "personal-loan", "car-loan", "hecs-help", "other-mortgage", "other"
]
DEBT_TYPES: tuple[str, ...] = (
    "credit-card",
    "personal-loan",
    "car-loan",
    "hecs-help",
    "other-mortgage",
    "other",
)


@dataclass
class BorrowerProfile:
    """Household applying for the loan."""

    gross_annual_income: int = 10_000_000  # $100,000
    partner_gross_income: int | None = None
    number_of_dependents: int = 0
    living_expenses_type: LivingExpensesType = "hem"
    declared_living_expenses: int | None = None  # annual

    def __post_init__(self):
        if self.number_of_dependents < 0:
            raise ValueError(f"number_of_dependents must be >= 0, got {self.number_of_dependents}")
        if self.living_expenses_type not in ("declared", "hem"):
            raise ValueError(
                f"Unknown living expenses type '{self.living_expenses_type}'. "
                "Supported: ['declared', 'hem']"
            )
        if self.living_expenses_type == "declared":
            if self.declared_living_expenses is None or self.declared_living_expenses < 0:
                raise ValueError(
                    "declared_living_expenses must be a non-negative amount "
                    "when living_expenses_type is 'declared'"
                )

    @property
    def has_partner(self) -> bool:
        return bool(self.partner_gross_income)

    @property
    def total_gross_annual(self) -> int:
        return self.gross_annual_income + (self.partner_gross_income or 0)


@dataclass
class ExistingDebt:
    """A liability the lender will assess alongside the new loan.

    Credit cards are assessed on their limit (or balance) and HECS on income,
    so ``monthly_repayment`` only counts for the other types.
    """

    type: DebtType
    current_balance: int = 0
    credit_limit: int | None = None
    monthly_repayment: int | None = None
    interest_rate: float | None = None

    def __post_init__(self):
        if self.type not in DEBT_TYPES:
            raise ValueError(f"Unknown debt type '{self.type}'. Supported: {list(DEBT_TYPES)}")


@dataclass
class AffordabilityInputs:
    """Complete assessment inputs."""

    borrower: BorrowerProfile = field(default_factory=BorrowerProfile)
    existing_debts: list[ExistingDebt] = field(default_factory=list)
    purchase_price: int | None = None
    deposit_amount: int | None = None  # wins over deposit_percent
    deposit_percent: float | None = None
    interest_rate: float = 6.5
    apra_buffer: float = APRA_BUFFER_DEFAULT
    loan_term_years: int = 30
    is_interest_only: bool = False
    expected_weekly_rent: int | None = None
    financial_year: str | None = None  # None = current financial year

    @property
    def total_gross_annual(self) -> int:
        return self.borrower.total_gross_annual

    @property
    def assessment_rate(self) -> float:
        """Product rate plus the serviceability buffer."""
        return float(to_decimal(self.interest_rate) + to_decimal(self.apra_buffer))

    @property
    def term_months(self) -> int:
        return self.loan_term_years * 12

    @property
    def deposit(self) -> int | None:
        """Deposit in cents, or None when there is no purchase price."""
        if self.purchase_price is None:
            return None
        if self.deposit_amount is not None:
            return self.deposit_amount
        percent = self.deposit_percent if self.deposit_percent is not None else DEFAULT_DEPOSIT_PERCENT
        return round_cents(percent_of(self.purchase_price, percent))


GrowthScenario = Literal["conservative", "moderate", "optimistic", "custom"]


@dataclass
class ProjectionInputs:
    """An investment property held from today, projected year by year.

    ``loan_term_years`` and ``interest_only_years`` are what remains on the
    loan now. Custom growth rates may be negative.
    """

    current_value: int
    purchase_price: int
    loan_balance: int
    interest_rate: float = 6.5
    loan_term_years: int = 30
    interest_only_years: int = 0
    weekly_rent: int = 0
    vacancy_percent: float = 2.0
    annual_expenses: int = 0  # operating costs, excluding interest
    offset_balance: int = 0
    growth_scenario: GrowthScenario = "moderate"
    capital_growth_rate: float | None = None  # used when growth_scenario is "custom"
    rent_growth_rate: float | None = None
    marginal_tax_rate: float = 32.0
    annual_depreciation: int = 0  # first-year estimate

    def __post_init__(self):
        if self.growth_scenario not in ("conservative", "moderate", "optimistic", "custom"):
            raise ValueError(
                f"Unknown growth scenario '{self.growth_scenario}'. "
                "Supported: ['conservative', 'moderate', 'optimistic', 'custom']"
            )
        if self.interest_only_years < 0 or self.loan_term_years < 0:
            raise ValueError("loan_term_years and interest_only_years must be >= 0")
        if self.interest_only_years > self.loan_term_years:
            raise ValueError(
                f"interest_only_years ({self.interest_only_years}) cannot exceed "
                f"loan_term_years ({self.loan_term_years})"
            )
