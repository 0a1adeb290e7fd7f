"""Output formatting for assessment results."""

import csv
import io
from dataclasses import asdict

from affordability.engine import AffordabilityResults, RiskMetrics, StressTestScenario, UpfrontCosts
from affordability.lmi import LMIScenario
from affordability.loan import AmortizationEntry
from affordability.money import cents_to_dollars
from affordability.params import AffordabilityInputs
from affordability.projections import ProjectionSummary
from affordability.stamp_duty import StampDutyResult
from affordability.yields import YieldAssessment

STATUS_LABELS = {"green": "GREEN", "amber": "AMBER", "red": "RED"}


def fmt(cents: int) -> str:
    """Format a cents amount as whole dollars."""
    value = cents_to_dollars(cents)
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value >= 1_000_000:
        return f"{sign}${value / 1_000_000:,.2f}M"
    return f"{sign}${value:,.0f}"


def fmt_exact(cents: int) -> str:
    """Format a cents amount with cents shown."""
    value = cents_to_dollars(cents)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def summary_header(inputs: AffordabilityInputs) -> str:
    """Key inputs for the top of a report."""
    borrower = inputs.borrower
    lines = [
        "Australian Affordability Assessment",
        "=" * 70,
        "",
        f"  Gross income:    {fmt(borrower.gross_annual_income)}",
    ]
    if borrower.partner_gross_income:
        lines.append(f"  Partner income:  {fmt(borrower.partner_gross_income)}")
    lines.append(f"  Dependents:      {borrower.number_of_dependents}")
    if borrower.living_expenses_type == "declared":
        lines.append(f"  Living costs:    {fmt(borrower.declared_living_expenses)}/yr (declared)")
    else:
        lines.append("  Living costs:    HEM benchmark")
    for debt in inputs.existing_debts:
        amount = debt.credit_limit or debt.current_balance
        lines.append(f"  Existing debt:   {debt.type} {fmt(amount)}")
    if inputs.purchase_price is not None:
        lines.append(f"  Purchase price:  {fmt(inputs.purchase_price)}")
        lines.append(f"  Deposit:         {fmt(inputs.deposit)}")
    loan_kind = "interest-only" if inputs.is_interest_only else "P&I"
    lines.append(
        f"  Interest rate:   {inputs.interest_rate:.2f}% p.a. + {inputs.apra_buffer:.2f}% buffer "
        f"({inputs.loan_term_years}yr {loan_kind})"
    )
    if inputs.financial_year:
        lines.append(f"  Financial year:  {inputs.financial_year}")
    lines.append("")
    return "\n".join(lines)


def results_summary(results: AffordabilityResults) -> str:
    """Income breakdown, ratios and overall status."""
    r = results
    lines = [
        f"  Monthly gross income:     {fmt_exact(r.monthly_gross_income):>14}",
        f"  Monthly net income:       {fmt_exact(r.monthly_net_income):>14}",
        f"  Living expenses:          {fmt_exact(r.monthly_living_expenses):>14}",
        f"  Existing debt payments:   {fmt_exact(r.monthly_existing_debt_payments):>14}",
        f"  Available for housing:    {fmt_exact(r.available_for_housing):>14}",
        "",
        f"  Assessment rate:          {r.assessment_rate:.2f}%",
        f"  Maximum borrowing:        {fmt(r.max_borrowing_amount):>14}",
        f"  Proposed loan:            {fmt(r.proposed_loan_amount):>14}",
        f"  Repayment (assessed):     {fmt_exact(r.proposed_repayment):>14}",
        f"  Monthly surplus:          {fmt_exact(r.surplus):>14}",
        "",
        f"{'Ratio':>8} | {'Value':>8} | {'Status':>6}",
        "-" * 28,
        f"{'DSR':>8} | {r.debt_service_ratio:>7.1f}% | {STATUS_LABELS[r.dsr_status]:>6}",
        f"{'LSR':>8} | {r.loan_service_ratio:>7.1f}% | {STATUS_LABELS[r.lsr_status]:>6}",
        f"{'DTI':>8} | {r.debt_to_income_ratio:>7.1f}x | {STATUS_LABELS[r.dti_status]:>6}",
    ]
    if r.rental_coverage_ratio is not None:
        lines.append(f"{'Rent cov':>8} | {r.rental_coverage_ratio:>7.2f}x |")
    lines.append("")
    lines.append(f"Overall: {STATUS_LABELS[r.overall_status]} - {r.status_description}")
    if r.dti_warning:
        lines.append(f"Warning: {r.dti_warning}")
    return "\n".join(lines)


def stress_table(scenarios: list[StressTestScenario]) -> str:
    header = f"{'Rise':>6} | {'Rate':>7} | {'Repayment':>12} | {'Cashflow':>12} | {'Status':>6}"
    lines = ["Stress tests:", header, "-" * len(header)]
    for s in scenarios:
        lines.append(
            f"{s.rate_increase:>+5g}% | {s.new_rate:>6.2f}% | {fmt_exact(s.new_repayment):>12} | "
            f"{fmt_exact(s.monthly_cashflow):>12} | {STATUS_LABELS[s.status]:>6}"
        )
    return "\n".join(lines)


def risk_summary(metrics: RiskMetrics) -> str:
    return "\n".join([
        "Investment risk:",
        f"  Max vacancy before negative: {metrics.max_vacancy_before_negative:.1f}%",
        f"  Cost per 1% rate rise:       {fmt_exact(metrics.sensitivity_per_percent)}/month",
        f"  Buffer:                      {metrics.buffer_months} months",
        f"  Break-even rate:             {metrics.break_even_rate:.2f}%",
    ])


def upfront_summary(costs: UpfrontCosts) -> str:
    return "\n".join([
        "Upfront costs:",
        f"  Deposit:                {fmt(costs.deposit):>12}",
        f"  Stamp duty:             {fmt(costs.stamp_duty):>12}",
        f"  Transfer fee:           {fmt_exact(costs.transfer_fee):>12}",
        f"  Mortgage registration:  {fmt_exact(costs.mortgage_registration):>12}",
        f"  LMI:                    {fmt(costs.lmi):>12}",
        f"  Total cash required:    {fmt(costs.total_cash_required):>12}",
    ])


def stamp_duty_summary(state: str, purchase_price: int, result: StampDutyResult) -> str:
    lines = [
        f"Stamp duty: {fmt(purchase_price)} in {state.upper()}",
        f"  Stamp duty:             {fmt_exact(result.stamp_duty):>14}",
        f"  Transfer fee:           {fmt_exact(result.transfer_fee):>14}",
        f"  Mortgage registration:  {fmt_exact(result.mortgage_registration):>14}",
        f"  Total charges:          {fmt_exact(result.total_government_charges):>14}",
    ]
    if result.concession_applied:
        lines.append(f"  Concession applied:     {fmt_exact(result.concession_applied):>14}")
    if result.is_first_home_buyer_exempt:
        lines.append("  First home buyer: fully exempt")
    return "\n".join(lines)


def lmi_table(purchase_price: int, scenarios: list[LMIScenario]) -> str:
    header = f"{'Deposit':>8} | {'Deposit $':>12} | {'Loan':>12} | {'LMI':>10} | {'Cash needed':>12}"
    lines = [f"LMI by deposit: {fmt(purchase_price)}", header, "-" * len(header)]
    for s in scenarios:
        lines.append(
            f"{s.deposit_percent:>7}% | {fmt(s.deposit):>12} | {fmt(s.loan_amount):>12} | "
            f"{fmt(s.lmi):>10} | {fmt(s.total_required):>12}"
        )
    return "\n".join(lines)


def schedule_table(entries: list[AmortizationEntry], every: int = 12) -> str:
    """Amortization schedule, one row every ``every`` periods plus the last."""
    if every < 1:
        raise ValueError(f"every must be at least 1, got {every}")
    header = f"{'Month':>5} | {'Payment':>12} | {'Principal':>12} | {'Interest':>12} | {'Balance':>14}"
    lines = [header, "-" * len(header)]
    for e in entries:
        if e.period % every == 0 or e.period == len(entries):
            lines.append(
                f"{e.period:>5} | {fmt_exact(e.payment):>12} | {fmt_exact(e.principal):>12} | "
                f"{fmt_exact(e.interest):>12} | {fmt_exact(e.balance):>14}"
            )
    return "\n".join(lines)


def schedule_to_csv(entries: list[AmortizationEntry]) -> str:
    """Export an amortization schedule to a CSV string (amounts in dollars)."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["period", "payment", "principal", "interest", "balance"])
    for e in entries:
        writer.writerow([
            e.period,
            f"{cents_to_dollars(e.payment):.2f}",
            f"{cents_to_dollars(e.principal):.2f}",
            f"{cents_to_dollars(e.interest):.2f}",
            f"{cents_to_dollars(e.balance):.2f}",
        ])
    return output.getvalue()


def projection_table(summary: ProjectionSummary, every: int = 1) -> str:
    """Projected value, loan and cashflow, one row every ``every`` years plus the last."""
    if every < 1:
        raise ValueError(f"every must be at least 1, got {every}")
    header = (
        f"{'Year':>4} | {'Value':>10} | {'Loan':>10} | {'Equity':>10} | {'Eq %':>6} | "
        f"{'Rent/wk':>8} | {'Pre-tax':>9} | {'After tax':>9}"
    )
    lines = [
        f"Projection ({summary.scenario}: {summary.capital_growth_rate:g}% capital, "
        f"{summary.rent_growth_rate:g}% rent growth)",
        header,
        "-" * len(header),
    ]
    for row in summary.years:
        if row.year % every == 0 or row.year == len(summary.years):
            marker = " *" if row.is_negative_equity else ""
            lines.append(
                f"{row.year:>4} | {fmt(row.property_value):>10} | {fmt(row.loan_balance):>10} | "
                f"{fmt(row.equity):>10} | {row.equity_ratio:>5.1f}% | {fmt(row.weekly_rent):>8} | "
                f"{fmt(row.cashflow_before_tax):>9} | {fmt(row.cashflow_after_tax):>9}{marker}"
            )
    lines.append("")
    lines.append(f"  Equity built:          {fmt(summary.total_equity_built)}")
    lines.append(f"  Interest paid:         {fmt(summary.total_interest_paid)}")
    lines.append(f"  After-tax cashflow:    {fmt(summary.total_cashflow_after_tax)}")
    lines.append(f"  Average annual return: {summary.average_annual_return:.2f}%")
    if summary.negative_equity_years:
        years = ", ".join(str(y) for y in summary.negative_equity_years)
        lines.append(f"  * Negative equity in year(s): {years}")
    return "\n".join(lines)


def yield_summary(gross_yield: float, assessment: YieldAssessment) -> str:
    return f"  Gross yield:           {gross_yield:.2f}% ({assessment.category}: {assessment.description})"


def to_dict(obj) -> dict:
    """Dataclass result to a JSON-ready dict (money stays in cents)."""
    return asdict(obj)


def full_report(
    inputs: AffordabilityInputs,
    results: AffordabilityResults,
    stress: list[StressTestScenario],
    risk: RiskMetrics | None = None,
    upfront: UpfrontCosts | None = None,
) -> str:
    """Generate a complete assessment report."""
    parts = [
        summary_header(inputs),
        results_summary(results),
        "",
        stress_table(stress),
    ]
    if upfront is not None:
        parts.extend(["", upfront_summary(upfront)])
    if risk is not None:
        parts.extend(["", risk_summary(risk)])
    return "\n".join(parts)
