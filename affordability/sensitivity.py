"""Sensitivity analysis: sweep one input, see how borrowing capacity changes."""

from copy import deepcopy
from dataclasses import dataclass, fields

from affordability.engine import calculate_affordability
from affordability.output import fmt
from affordability.params import AffordabilityInputs

INTEGER_FIELD_TYPES = (int, int | None)


@dataclass
class SweepResult:
    param_value: float
    max_borrowing: int
    proposed_repayment: int
    surplus: int
    debt_service_ratio: float
    overall_status: str


def _set_nested_attr(obj: object, path: str, value: float) -> None:
    """Set a nested attribute like 'borrower.gross_annual_income' on a dataclass.

    Integer fields (cents, counts, years) keep their type, so 2.0 dependents
    is stored as 2.
    """
    parts = path.split(".")
    for part in parts[:-1]:
        obj = getattr(obj, part)
    if not hasattr(obj, parts[-1]):
        raise ValueError(f"Unknown parameter '{path}'")
    declared = {f.name: f.type for f in fields(obj)}.get(parts[-1])
    if declared in INTEGER_FIELD_TYPES:
        if value != int(value):
            raise ValueError(f"'{path}' takes whole numbers, got {value}")
        value = int(value)
    setattr(obj, parts[-1], value)


def sweep(
    params: AffordabilityInputs,
    param_path: str,
    values: list[float],
) -> list[SweepResult]:
    """Assess once per value of ``param_path``; ``params`` is left untouched."""
    results = []
    for val in values:
        p = deepcopy(params)
        _set_nested_attr(p, param_path, val)
        r = calculate_affordability(p)
        results.append(SweepResult(
            param_value=val,
            max_borrowing=r.max_borrowing_amount,
            proposed_repayment=r.proposed_repayment,
            surplus=r.surplus,
            debt_service_ratio=r.debt_service_ratio,
            overall_status=r.overall_status,
        ))
    return results


def format_sweep(
    param_path: str,
    results: list[SweepResult],
    is_money: bool = False,
) -> str:
    """Format sweep results as a table."""
    label = param_path.split(".")[-1]
    header = (
        f"{'':>2} {label:>20} | {'Max borrowing':>14} | {'Repayment':>10} | "
        f"{'Surplus':>10} | {'DSR':>6} | {'Status':>6}"
    )
    sep = "-" * len(header)
    lines = [
        f"Sensitivity: {param_path}",
        header,
        sep,
    ]

    for r in results:
        if is_money:
            val_str = fmt(int(r.param_value))
        else:
            val_str = f"{r.param_value:g}"
        lines.append(
            f"{'':>2} {val_str:>20} | {fmt(r.max_borrowing):>14} | "
            f"{fmt(r.proposed_repayment):>10} | {fmt(r.surplus):>10} | "
            f"{r.debt_service_ratio:>5.1f}% | {r.overall_status:>6}"
        )

    return "\n".join(lines)


def frange(start: float, stop: float, step: float) -> list[float]:
    """Generate a list of floats from start to stop (inclusive) by step."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    values = []
    val = start
    while val <= stop + step / 2:  # tolerance for floating point
        values.append(round(val, 6))
        val += step
    return values
