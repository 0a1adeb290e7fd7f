"""Australian financial year (1 July - 30 June) value object and table resolution."""

import re
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Iterable

import structlog

logger = structlog.get_logger()

_FY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class FinancialYear:
    """A financial year such as ``2025-26``."""

    start_year: int

    @classmethod
    def parse(cls, value: str) -> "FinancialYear":
        match = _FY_PATTERN.match(value)
        if not match:
            raise ValueError(
                f'Invalid financial year format: "{value}". Expected "YYYY-YY" (e.g. "2024-25")'
            )
        start_year = int(match.group(1))
        expected = (start_year + 1) % 100
        if int(match.group(2)) != expected:
            raise ValueError(
                f'Invalid financial year: "{value}". Years must be consecutive '
                f'(expected "{start_year}-{expected:02d}")'
            )
        return cls(start_year)

    @classmethod
    def try_parse(cls, value: str) -> "FinancialYear | None":
        try:
            return cls.parse(value)
        except ValueError:
            return None

    @classmethod
    def from_date(cls, d: date) -> "FinancialYear":
        return cls(d.year if d.month >= 7 else d.year - 1)

    @classmethod
    def current(cls) -> "FinancialYear":
        return cls.from_date(date.today())

    @classmethod
    def from_start_year(cls, start_year: int) -> "FinancialYear":
        return cls(start_year)

    @property
    def end_year(self) -> int:
        return self.start_year + 1

    @property
    def start_date(self) -> date:
        return date(self.start_year, 7, 1)

    @property
    def end_date(self) -> date:
        return date(self.end_year, 6, 30)

    @property
    def value(self) -> str:
        return f"{self.start_year}-{self.end_year % 100:02d}"

    def contains(self, d: date) -> bool:
        """Inclusive on both 1 July and 30 June."""
        return self.start_date <= d <= self.end_date

    def offset(self, years: int) -> "FinancialYear":
        return FinancialYear(self.start_year + years)

    def __str__(self) -> str:
        return self.value


@lru_cache(maxsize=None)
def _log_fallback(requested: str, resolved: str, reason: str) -> None:
    """Debug-log a fallback, once per (requested, resolved) pair."""
    logger.debug("financial_year_fallback", requested=requested, resolved=resolved, reason=reason)


def resolve_financial_year(known: Iterable[str], financial_year: str | None = None) -> str:
    """Pick the tabulated year to use for ``financial_year``.

    Exact match wins. Otherwise the latest tabulated year starting on or
    before the requested one is used, falling back to the oldest table when
    the request predates them all. Omitted or unparseable requests are
    treated as the current financial year.
    """
    years = sorted(known)
    if not years:
        raise ValueError("No financial years tabulated")

    target = financial_year if financial_year is not None else FinancialYear.current().value
    if target in years:
        return target

    parsed = FinancialYear.try_parse(target)
    if parsed is None:
        current = FinancialYear.current().value
        resolved = current if current in years else years[-1]
        _log_fallback(target, resolved, "unparseable")
        return resolved

    resolved = years[0]
    for fy in years:
        if FinancialYear.parse(fy).start_year <= parsed.start_year:
            resolved = fy
    _log_fallback(target, resolved, "not tabulated")
    return resolved
