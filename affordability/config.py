"""YAML/JSON scenario loading.

Config files are written in dollars for readability; every money field is
converted to integer cents on load and back to dollars on dump.
"""

import json
from dataclasses import asdict, fields
from pathlib import Path

import structlog
import yaml

from affordability.money import cents_to_dollars, dollars_to_cents
from affordability.params import AffordabilityInputs, BorrowerProfile, ExistingDebt

logger = structlog.get_logger()

BORROWER_MONEY_FIELDS = frozenset({
    "gross_annual_income",
    "partner_gross_income",
    "declared_living_expenses",
})
DEBT_MONEY_FIELDS = frozenset({"current_balance", "credit_limit", "monthly_repayment"})
INPUT_MONEY_FIELDS = frozenset({"purchase_price", "deposit_amount", "expected_weekly_rent"})


class ConfigError(ValueError):
    """A scenario file that cannot be turned into inputs."""


def load_config(path: str | Path) -> AffordabilityInputs:
    """Load assessment inputs from a YAML or JSON file."""
    path = Path(path)
    text = path.read_text()

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif path.suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigError(f"Unsupported config format '{path.suffix}' (use .yaml, .yml or .json)")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    inputs = dict_to_params(data or {})
    logger.info("config_loaded", path=str(path), financial_year=inputs.financial_year)
    return inputs


def _to_cents(data: dict, money_fields: frozenset[str]) -> dict:
    return {
        k: dollars_to_cents(v) if k in money_fields and v is not None else v
        for k, v in data.items()
    }


def _known(cls, data: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def dict_to_params(data: dict) -> AffordabilityInputs:
    """Convert a nested dict (dollars) to AffordabilityInputs (cents)."""
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    borrower_data = data.get("borrower") or {}
    debts_data = data.get("existing_debts") or []
    if not isinstance(borrower_data, dict):
        raise ConfigError("'borrower' must be a mapping")
    if not isinstance(debts_data, list):
        raise ConfigError("'existing_debts' must be a list")

    borrower = BorrowerProfile(**_known(BorrowerProfile, _to_cents(borrower_data, BORROWER_MONEY_FIELDS)))

    debts = []
    for entry in debts_data:
        if not isinstance(entry, dict) or "type" not in entry:
            raise ConfigError(f"Each existing debt needs a 'type', got {entry!r}")
        debts.append(ExistingDebt(**_known(ExistingDebt, _to_cents(entry, DEBT_MONEY_FIELDS))))

    top = _known(AffordabilityInputs, _to_cents(data, INPUT_MONEY_FIELDS))
    top.pop("borrower", None)
    top.pop("existing_debts", None)
    if top.get("financial_year") is not None:
        top["financial_year"] = str(top["financial_year"])

    return AffordabilityInputs(borrower=borrower, existing_debts=debts, **top)


def _to_dollars(data: dict, money_fields: frozenset[str]) -> dict:
    out = {}
    for k, v in data.items():
        if k in money_fields and v is not None:
            dollars = cents_to_dollars(v)
            out[k] = int(dollars) if dollars == dollars.to_integral_value() else float(dollars)
        else:
            out[k] = v
    return out


def params_to_dict(params: AffordabilityInputs) -> dict:
    """Convert AffordabilityInputs to a serialisable dict in dollars."""
    d = _to_dollars(asdict(params), INPUT_MONEY_FIELDS)
    d["borrower"] = _to_dollars(d["borrower"], BORROWER_MONEY_FIELDS)
    d["existing_debts"] = [_to_dollars(debt, DEBT_MONEY_FIELDS) for debt in d["existing_debts"]]
    return d


def is_money_path(param_path: str) -> bool:
    """Whether a dotted input path (as used by sensitivity sweeps) holds cents."""
    parts = param_path.split(".")
    if len(parts) == 1:
        return parts[0] in INPUT_MONEY_FIELDS
    if parts[0] == "borrower" and len(parts) == 2:
        return parts[1] in BORROWER_MONEY_FIELDS
    return False
