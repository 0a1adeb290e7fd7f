"""Money and calendar helpers.

Every public amount in this package is an integer number of cents. Anything
that needs fractional precision goes through ``Decimal`` and is rounded
half-up back to a whole cent at the point it is published.
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

ONE = Decimal(1)
HUNDRED = Decimal(100)


def to_decimal(value: int | float | str | Decimal) -> Decimal:
    """Convert to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_half_up(value: Decimal | int | float) -> int:
    """Round half-up to a whole number."""
    return int(to_decimal(value).quantize(ONE, rounding=ROUND_HALF_UP))


def round_cents(value: Decimal | int | float) -> int:
    """Publish a cents amount: half-up to a whole cent."""
    return round_half_up(value)


def quantize_to(value: Decimal | int | float, places: int) -> Decimal:
    """Round half-up to ``places`` decimals, staying in Decimal."""
    return to_decimal(value).quantize(ONE.scaleb(-places), rounding=ROUND_HALF_UP)


def round_to(value: Decimal | int | float, places: int) -> float:
    """Round half-up to ``places`` decimals, for published ratios."""
    return float(quantize_to(value, places))


def cents_to_dollars(cents: int) -> Decimal:
    return Decimal(cents) / HUNDRED


def dollars_to_cents(dollars: int | float | str | Decimal) -> int:
    return round_cents(to_decimal(dollars) * HUNDRED)


def percent_of(cents: int, percent: int | float | Decimal) -> Decimal:
    """``cents × percent / 100`` as an unrounded Decimal."""
    return Decimal(cents) * to_decimal(percent) / HUNDRED


# ---------------------------------------------------------------------------
# Calendar arithmetic (local calendar fields only, no timezones)
# ---------------------------------------------------------------------------


def add_months(d: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the month end."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end`` (never negative)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(0, months)
