"""CLI entry point for the affordability engine."""

import argparse
import json
import logging
import sys

import structlog
import yaml

from affordability.config import is_money_path, load_config, params_to_dict
from affordability.engine import (
    calculate_affordability,
    calculate_risk_metrics,
    default_inputs,
    generate_stress_tests,
    upfront_costs,
)
from affordability.lmi import calculate_lmi, lmi_scenarios
from affordability.loan import amortization_schedule, calculate_repayment
from affordability.money import dollars_to_cents
from affordability.output import (
    fmt,
    fmt_exact,
    full_report,
    lmi_table,
    projection_table,
    schedule_table,
    schedule_to_csv,
    stamp_duty_summary,
    to_dict,
    yield_summary,
)
from affordability.params import ProjectionInputs
from affordability.projections import (
    SEARCH_HORIZON_YEARS,
    break_even_year,
    positive_gearing_year,
    project,
)
from affordability.sensitivity import format_sweep, frange, sweep
from affordability.stamp_duty import StampDutyOptions, fhb_eligibility, stamp_duty
from affordability.super_caps import bring_forward_cap, super_cap_config
from affordability.tables import STATES
from affordability.yields import assess_yield, yield_from_weekly_rent


def configure_logging(verbose: bool) -> None:
    """Log to stderr so report/JSON/CSV output on stdout stays clean."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_inputs(path: str | None):
    return load_config(path) if path else default_inputs()


def cmd_assess(args: argparse.Namespace) -> None:
    """Run a serviceability assessment from a config file."""
    inputs = _load_inputs(args.config)
    if args.buffer is not None:
        inputs.apra_buffer = args.buffer
    if args.fy:
        inputs.financial_year = args.fy

    results = calculate_affordability(inputs)
    stress = generate_stress_tests(
        results.proposed_loan_amount,
        inputs.interest_rate,
        inputs.loan_term_years,
        results.available_for_housing,
        inputs.is_interest_only,
    )

    risk = None
    if inputs.expected_weekly_rent:
        risk = calculate_risk_metrics(
            results.proposed_loan_amount,
            inputs.interest_rate,
            inputs.expected_weekly_rent,
            dollars_to_cents(args.property_expenses),
            results.available_for_housing,
        )

    upfront = None
    if args.state and inputs.purchase_price is not None:
        options = StampDutyOptions(is_first_home_buyer=args.fhb, is_investment=not args.fhb)
        upfront = upfront_costs(
            inputs.purchase_price, inputs.deposit, args.state, options, inputs.financial_year
        )

    if args.json:
        payload = {
            "results": to_dict(results),
            "stress_tests": [to_dict(s) for s in stress],
            "risk_metrics": to_dict(risk) if risk else None,
            "upfront_costs": to_dict(upfront) if upfront else None,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(full_report(inputs, results, stress, risk, upfront))


def cmd_sensitivity(args: argparse.Namespace) -> None:
    """Run sensitivity analysis on an input."""
    inputs = _load_inputs(args.config)

    parts = args.range.split(",")
    if len(parts) != 3:
        print("Error: --range must be start,stop,step (e.g., 5.5,7.5,0.25)", file=sys.stderr)
        sys.exit(1)

    start, stop, step = float(parts[0]), float(parts[1]), float(parts[2])
    values = frange(start, stop, step)

    is_money = is_money_path(args.param)
    if is_money:
        values = [dollars_to_cents(v) for v in values]

    results = sweep(inputs, args.param, values)
    print(format_sweep(args.param, results, is_money=is_money))


def cmd_stamp_duty(args: argparse.Namespace) -> None:
    """Stamp duty and government charges for a purchase."""
    price = dollars_to_cents(args.price)
    options = StampDutyOptions(
        is_first_home_buyer=args.fhb,
        is_investment=args.investment or not args.fhb,
        is_new_home=args.new_home,
        is_vacant_land=args.vacant_land,
        is_off_plan=args.off_plan,
        construction_value_percent=args.construction_pct,
    )
    result = stamp_duty(price, args.state, options, args.fy)
    print(stamp_duty_summary(args.state, price, result))
    if args.fhb:
        eligibility = fhb_eligibility(price, args.state, args.new_home, args.vacant_land)
        print(f"  FHB eligible: {'yes' if eligibility.eligible else 'no'}")
        if eligibility.note:
            print(f"  {eligibility.note}")


def cmd_lmi(args: argparse.Namespace) -> None:
    """LMI for one loan, or across deposit sizes."""
    price = dollars_to_cents(args.price)
    if args.loan is not None:
        result = calculate_lmi(price, dollars_to_cents(args.loan), args.fy)
        print(f"LVR: {result.lvr:.2f}%")
        if result.requires_lmi:
            print(f"LMI: {fmt(result.lmi_amount)} ({result.lmi_rate:.2f}% of loan)")
        else:
            print("LMI: not required")
    else:
        print(lmi_table(price, lmi_scenarios(price)))


def cmd_schedule(args: argparse.Namespace) -> None:
    """Amortization schedule for a loan."""
    loan = dollars_to_cents(args.loan)
    months = args.years * 12
    entries = amortization_schedule(loan, args.rate, months, args.io_months)
    if args.csv:
        print(schedule_to_csv(entries), end="")
        return
    repayment = calculate_repayment(loan, args.rate, months - args.io_months)
    print(f"Loan {fmt(loan)} at {args.rate:.2f}% over {args.years} years")
    print(f"Monthly repayment (P&I): {fmt_exact(repayment.repayment)}")
    print(schedule_table(entries, every=args.every))


def _year_or_never(year: int | None) -> str:
    return f"year {year}" if year is not None else f"not within {SEARCH_HORIZON_YEARS} years"


def cmd_project(args: argparse.Namespace) -> None:
    """Year-by-year projection for an investment property."""
    value = dollars_to_cents(args.value)
    inputs = ProjectionInputs(
        current_value=value,
        purchase_price=dollars_to_cents(args.price) if args.price is not None else value,
        loan_balance=dollars_to_cents(args.loan),
        interest_rate=args.rate,
        loan_term_years=args.term,
        interest_only_years=args.io_years,
        weekly_rent=dollars_to_cents(args.rent),
        vacancy_percent=args.vacancy,
        annual_expenses=dollars_to_cents(args.expenses),
        offset_balance=dollars_to_cents(args.offset),
        growth_scenario=args.scenario,
        capital_growth_rate=args.growth,
        rent_growth_rate=args.rent_growth,
        marginal_tax_rate=args.tax_rate,
        annual_depreciation=dollars_to_cents(args.depreciation),
    )
    summary = project(inputs, args.horizon)
    gearing = positive_gearing_year(inputs)
    break_even = break_even_year(inputs)
    if args.json:
        payload = to_dict(summary)
        payload["positive_gearing_year"] = gearing
        payload["break_even_year"] = break_even
        print(json.dumps(payload, indent=2))
        return

    print(projection_table(summary, every=args.every))
    if inputs.weekly_rent:
        rent_yield = yield_from_weekly_rent(inputs.weekly_rent, value)
        print(yield_summary(rent_yield, assess_yield(rent_yield)))
    print(f"  Positive gearing:      {_year_or_never(gearing)}")
    print(f"  Break-even:            {_year_or_never(break_even)}")


def cmd_super_caps(args: argparse.Namespace) -> None:
    """Contribution caps for a financial year."""
    config = super_cap_config(args.fy)
    print(f"Superannuation caps {config.financial_year}")
    print(f"  Concessional cap:       {fmt(config.concessional_cap)}")
    print(f"  Non-concessional cap:   {fmt(config.non_concessional_cap)}")
    print(f"  Transfer balance cap:   {fmt(config.transfer_balance_cap)}")
    print(f"  Super guarantee rate:   {config.super_guarantee_rate:g}%")
    if args.balance is not None:
        bf = bring_forward_cap(config.financial_year, dollars_to_cents(args.balance), args.age)
        print(f"  Bring-forward:          {fmt(bf.available_cap)} ({bf.years_available} years)")
        if bf.reason:
            print(f"  {bf.reason}")


def cmd_defaults(args: argparse.Namespace) -> None:
    """Print default inputs as YAML (or JSON)."""
    d = params_to_dict(default_inputs())
    if args.json:
        print(json.dumps(d, indent=2))
    else:
        print(yaml.dump(d, default_flow_style=False, sort_keys=False))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Australian property affordability and serviceability calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  affordability assess                          # Assess the default scenario
  affordability assess config.yaml --state NSW  # Include upfront costs
  affordability assess config.yaml --json       # Machine-readable output
  affordability sensitivity --param interest_rate --range 5.5,7.5,0.25
  affordability sensitivity --param borrower.gross_annual_income --range 80000,160000,20000
  affordability stamp-duty 750000 --state VIC --fhb
  affordability lmi 600000                      # LMI across deposit sizes
  affordability schedule 500000 --rate 6.2 --years 30
  affordability project 650000 --loan 520000 --rent 550 --io-years 5
  affordability super-caps --fy 2024-25
  affordability defaults                        # Print default config
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")

    subparsers = parser.add_subparsers(dest="command")

    # assess
    assess_parser = subparsers.add_parser("assess", help="Serviceability assessment")
    assess_parser.add_argument("config", nargs="?", help="YAML/JSON config file")
    assess_parser.add_argument("--buffer", type=float, help="Override the APRA buffer (percentage points)")
    assess_parser.add_argument("--fy", help="Financial year for tax tables (e.g. 2025-26)")
    assess_parser.add_argument("--state", type=str.upper, choices=STATES, help="State for stamp duty")
    assess_parser.add_argument("--fhb", action="store_true", help="First home buyer (owner-occupier)")
    assess_parser.add_argument(
        "--property-expenses", type=float, default=0.0, help="Monthly property expenses ($) for risk metrics"
    )
    assess_parser.add_argument("--json", action="store_true", help="Output as JSON (amounts in cents)")

    # sensitivity
    sens_parser = subparsers.add_parser("sensitivity", help="Input sensitivity analysis")
    sens_parser.add_argument("--config", help="Base config file")
    sens_parser.add_argument("--param", required=True, help="Input path (e.g., interest_rate)")
    sens_parser.add_argument("--range", required=True, help="start,stop,step (money in dollars)")

    # stamp-duty
    duty_parser = subparsers.add_parser("stamp-duty", help="Stamp duty and government charges")
    duty_parser.add_argument("price", type=float, help="Purchase price ($)")
    duty_parser.add_argument("--state", type=str.upper, choices=STATES, required=True)
    duty_parser.add_argument("--fhb", action="store_true", help="First home buyer")
    duty_parser.add_argument("--investment", action="store_true", help="Investment purchase")
    duty_parser.add_argument("--new-home", action="store_true")
    duty_parser.add_argument("--vacant-land", action="store_true")
    duty_parser.add_argument("--off-plan", action="store_true", help="VIC off-the-plan")
    duty_parser.add_argument("--construction-pct", type=float, help="Construction share of price (%%)")
    duty_parser.add_argument("--fy", help="Financial year")

    # lmi
    lmi_parser = subparsers.add_parser("lmi", help="Lenders mortgage insurance")
    lmi_parser.add_argument("price", type=float, help="Property value ($)")
    lmi_parser.add_argument("--loan", type=float, help="Loan amount ($); omit for deposit scenarios")
    lmi_parser.add_argument("--fy", help="Financial year")

    # schedule
    sched_parser = subparsers.add_parser("schedule", help="Loan amortization schedule")
    sched_parser.add_argument("loan", type=float, help="Loan amount ($)")
    sched_parser.add_argument("--rate", type=float, required=True, help="Interest rate (%% p.a.)")
    sched_parser.add_argument("--years", type=int, default=30)
    sched_parser.add_argument("--io-months", type=int, default=0, help="Interest-only months")
    sched_parser.add_argument("--every", type=int, default=12, help="Show every Nth month")
    sched_parser.add_argument("--csv", action="store_true", help="Full schedule as CSV")

    # project
    proj_parser = subparsers.add_parser("project", help="Investment property projection")
    proj_parser.add_argument("value", type=float, help="Current property value ($)")
    proj_parser.add_argument("--loan", type=float, required=True, help="Loan balance ($)")
    proj_parser.add_argument("--price", type=float, help="Purchase price ($); defaults to value")
    proj_parser.add_argument("--rate", type=float, default=6.5, help="Interest rate (%% p.a.)")
    proj_parser.add_argument("--term", type=int, default=30, help="Remaining loan term (years)")
    proj_parser.add_argument("--io-years", type=int, default=0, help="Interest-only years")
    proj_parser.add_argument("--rent", type=float, default=0.0, help="Weekly rent ($)")
    proj_parser.add_argument("--vacancy", type=float, default=2.0, help="Vacancy allowance (%%)")
    proj_parser.add_argument("--expenses", type=float, default=0.0, help="Annual expenses ($)")
    proj_parser.add_argument("--offset", type=float, default=0.0, help="Offset balance ($)")
    proj_parser.add_argument(
        "--scenario", choices=["conservative", "moderate", "optimistic", "custom"], default="moderate"
    )
    proj_parser.add_argument("--growth", type=float, help="Custom capital growth (%% p.a.)")
    proj_parser.add_argument("--rent-growth", type=float, help="Custom rent growth (%% p.a.)")
    proj_parser.add_argument("--tax-rate", type=float, default=32.0, help="Marginal tax rate (%%)")
    proj_parser.add_argument("--depreciation", type=float, default=0.0, help="Year-one depreciation ($)")
    proj_parser.add_argument("--horizon", type=int, default=20, help="Years to project")
    proj_parser.add_argument("--every", type=int, default=1, help="Show every Nth year")
    proj_parser.add_argument("--json", action="store_true", help="Output as JSON (amounts in cents)")

    # super-caps
    super_parser = subparsers.add_parser("super-caps", help="Superannuation contribution caps")
    super_parser.add_argument("--fy", help="Financial year")
    super_parser.add_argument("--balance", type=float, help="Total super balance ($) for bring-forward")
    super_parser.add_argument("--age", type=int, help="Age at the start of the financial year")

    # defaults
    defaults_parser = subparsers.add_parser("defaults", help="Print default inputs")
    defaults_parser.add_argument("--json", action="store_true")

    args = parser.parse_args()
    configure_logging(args.verbose)

    commands = {
        "assess": cmd_assess,
        "sensitivity": cmd_sensitivity,
        "stamp-duty": cmd_stamp_duty,
        "lmi": cmd_lmi,
        "schedule": cmd_schedule,
        "project": cmd_project,
        "super-caps": cmd_super_caps,
        "defaults": cmd_defaults,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
