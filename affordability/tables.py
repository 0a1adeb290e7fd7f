"""Regulatory tables, keyed by financial year.

Values are code-level constants built once at import and never mutated.
Bracket thresholds are in whole dollars (the way the regulators publish
them); fees and caps that are quoted to the cent are stored in cents.

Every ``*_for`` accessor resolves the requested year through
:func:`affordability.fy.resolve_financial_year`, so a year that has no table
of its own uses the latest table that started on or before it.
"""

from decimal import Decimal as D
from types import MappingProxyType
from typing import Mapping, NamedTuple

from affordability.fy import resolve_financial_year

INF = D("Infinity")


# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------


class TaxBracket(NamedTuple):
    """Marginal income tax bracket. ``base_tax`` is the tax owed at ``min``."""

    min: D
    max: D
    rate: D  # fraction, 0.30 = 30c per $1
    base_tax: D


class MedicareLevy(NamedTuple):
    rate: D  # fraction
    single_threshold: D
    family_threshold: D
    family_per_dependent_child: D
    shade_in_rate: D  # fraction of income above the threshold


class RateBand(NamedTuple):
    min: D
    max: D
    rate: D  # percent


class MLSSettings(NamedTuple):
    single: tuple[RateBand, ...]
    family_base_thresholds: tuple[D, D, D]
    family_per_dependent_child_after_first: D


class TaxYear(NamedTuple):
    brackets: tuple[TaxBracket, ...]
    medicare: MedicareLevy
    mls: MLSSettings


class HecsThresholds(NamedTuple):
    """HECS/HELP marginal repayment system (2025-26 onwards)."""

    minimum: D
    tier2: D
    tier3: D
    tier1_rate: D  # on income between minimum and tier2
    tier2_rate: D  # on income between tier2 and tier3
    top_rate: D  # on total income above tier3

    @property
    def tier2_base(self) -> D:
        return (self.tier2 - self.minimum) * self.tier1_rate


class StampDutyBracket(NamedTuple):
    """``threshold`` is the bracket's upper bound; ``base`` is duty owed at the previous threshold."""

    threshold: D
    rate: D
    base: D


class NTDutyFormula(NamedTuple):
    """Northern Territory: D = a·V² + b·V with V = value / 1000, up to ``threshold``."""

    threshold: D
    quadratic: D
    linear: D
    flat_rates: tuple[tuple[D, D], ...]  # (upper bound, rate on the whole value)


class FHBThreshold(NamedTuple):
    full_exemption: D
    partial_exemption: D


class StateDuty(NamedTuple):
    brackets: tuple[StampDutyBracket, ...]
    fhb: FHBThreshold
    transfer_fee: int  # cents
    mortgage_registration: int  # cents
    formula: NTDutyFormula | None = None


class StampDutyTables(NamedTuple):
    states: Mapping[str, StateDuty]
    vic_off_plan_default_construction_percent: D


class LMIBand(NamedTuple):
    min_lvr: D
    max_lvr: D
    rate: D  # percent of the loan amount


class LoanSizeTier(NamedTuple):
    threshold: int  # cents, inclusive lower bound
    multiplier: D


class LMITables(NamedTuple):
    bands: tuple[LMIBand, ...]
    size_tiers: tuple[LoanSizeTier, ...]  # largest threshold first


class HEMBracket(NamedTuple):
    """Monthly dollars by gross household income range ``[income_min, income_max)``."""

    income_min: D
    income_max: D
    single: D
    couple: D
    per_dependent: D


class SuperCapConfig(NamedTuple):
    financial_year: str
    concessional_cap: int  # cents
    non_concessional_cap: int  # cents
    transfer_balance_cap: int  # cents
    super_guarantee_rate: float  # percent


# ---------------------------------------------------------------------------
# Income tax, Medicare levy, Medicare levy surcharge
# ---------------------------------------------------------------------------

# Stage 3 resident rates, 2024-25 and 2025-26
_BRACKETS_2024 = (
    TaxBracket(D(0), D(18_200), D("0"), D(0)),
    TaxBracket(D(18_200), D(45_000), D("0.16"), D(0)),
    TaxBracket(D(45_000), D(135_000), D("0.30"), D(4_288)),
    TaxBracket(D(135_000), D(190_000), D("0.37"), D(31_288)),
    TaxBracket(D(190_000), INF, D("0.45"), D(51_638)),
)

# Legislated cuts from 1 July 2026
_BRACKETS_2026 = (
    TaxBracket(D(0), D(18_200), D("0"), D(0)),
    TaxBracket(D(18_200), D(45_000), D("0.15"), D(0)),
    TaxBracket(D(45_000), D(135_000), D("0.29"), D(4_020)),
    TaxBracket(D(135_000), D(190_000), D("0.37"), D(30_120)),
    TaxBracket(D(190_000), INF, D("0.45"), D(50_470)),
)

# 2025-26 and 2026-27 thresholds are not yet published; latest known values carry forward.
_MEDICARE = MedicareLevy(
    rate=D("0.02"),
    single_threshold=D(27_222),
    family_threshold=D(45_907),
    family_per_dependent_child=D(4_216),
    shade_in_rate=D("0.10"),
)

_MLS_SINGLE_2024 = (
    RateBand(D(0), D(93_000), D(0)),
    RateBand(D(93_000), D(108_000), D(1)),
    RateBand(D(108_000), D(144_000), D("1.25")),
    RateBand(D(144_000), INF, D("1.5")),
)

_MLS_SINGLE_2025 = (
    RateBand(D(0), D(101_000), D(0)),
    RateBand(D(101_000), D(118_000), D(1)),
    RateBand(D(118_000), D(158_000), D("1.25")),
    RateBand(D(158_000), INF, D("1.5")),
)

TAX_YEARS: Mapping[str, TaxYear] = MappingProxyType({
    "2024-25": TaxYear(
        brackets=_BRACKETS_2024,
        medicare=_MEDICARE,
        mls=MLSSettings(_MLS_SINGLE_2024, (D(186_000), D(216_000), D(288_000)), D(1_500)),
    ),
    "2025-26": TaxYear(
        brackets=_BRACKETS_2024,
        medicare=_MEDICARE,
        mls=MLSSettings(_MLS_SINGLE_2025, (D(202_000), D(236_000), D(316_000)), D(1_500)),
    ),
    "2026-27": TaxYear(
        brackets=_BRACKETS_2026,
        medicare=_MEDICARE,
        mls=MLSSettings(_MLS_SINGLE_2025, (D(202_000), D(236_000), D(316_000)), D(1_500)),
    ),
})


# ---------------------------------------------------------------------------
# HECS/HELP
# ---------------------------------------------------------------------------

HECS_YEARS: Mapping[str, HecsThresholds] = MappingProxyType({
    "2025-26": HecsThresholds(
        minimum=D(67_000),
        tier2=D(125_000),
        tier3=D(179_285),
        tier1_rate=D("0.15"),
        tier2_rate=D("0.17"),
        top_rate=D("0.10"),
    ),
})


# ---------------------------------------------------------------------------
# Stamp duty (transfer duty) by state
# ---------------------------------------------------------------------------


def _brackets(*rows: tuple[int | float, str, int]) -> tuple[StampDutyBracket, ...]:
    return tuple(StampDutyBracket(D(t), D(r), D(b)) for t, r, b in rows)


_STATES_2025 = {
    "NSW": StateDuty(
        brackets=_brackets(
            (16_000, "0.0125", 0),
            (35_000, "0.015", 200),
            (93_000, "0.0175", 485),
            (351_000, "0.035", 1_500),
            (1_168_000, "0.045", 10_530),
            (3_505_000, "0.055", 47_295),
            (float("inf"), "0.07", 175_830),
        ),
        fhb=FHBThreshold(D(800_000), D(1_000_000)),
        transfer_fee=14_700,
        mortgage_registration=15_460,
    ),
    "VIC": StateDuty(
        brackets=_brackets(
            (25_000, "0.014", 0),
            (130_000, "0.024", 350),
            (960_000, "0.06", 2_870),
            (2_000_000, "0.055", 52_670),
            (float("inf"), "0.065", 109_870),
        ),
        fhb=FHBThreshold(D(600_000), D(750_000)),
        transfer_fee=15_200,
        mortgage_registration=12_370,
    ),
    "QLD": StateDuty(
        brackets=_brackets(
            (5_000, "0", 0),
            (75_000, "0.015", 0),
            (540_000, "0.035", 1_050),
            (1_000_000, "0.045", 17_325),
            (float("inf"), "0.0575", 38_025),
        ),
        # established homes; new homes and vacant land are uncapped
        fhb=FHBThreshold(D(700_000), D(800_000)),
        transfer_fee=19_500,
        mortgage_registration=19_500,
    ),
    "SA": StateDuty(
        brackets=_brackets(
            (12_000, "0.01", 0),
            (30_000, "0.02", 120),
            (50_000, "0.03", 480),
            (100_000, "0.035", 1_080),
            (200_000, "0.04", 2_830),
            (250_000, "0.0425", 6_830),
            (300_000, "0.0475", 8_955),
            (500_000, "0.05", 11_330),
            (float("inf"), "0.055", 21_330),
        ),
        fhb=FHBThreshold(D(650_000), D(650_000)),
        transfer_fee=18_900,
        mortgage_registration=18_900,
    ),
    "WA": StateDuty(
        brackets=_brackets(
            (120_000, "0.019", 0),
            (150_000, "0.0285", 2_280),
            (360_000, "0.038", 3_135),
            (725_000, "0.0475", 11_115),
            (float("inf"), "0.0515", 28_453),
        ),
        fhb=FHBThreshold(D(430_000), D(530_000)),
        transfer_fee=20_000,
        mortgage_registration=18_100,
    ),
    "TAS": StateDuty(
        brackets=_brackets(
            (3_000, "0", 50),  # $50 minimum
            (25_000, "0.0175", 50),
            (75_000, "0.0225", 435),
            (200_000, "0.035", 1_560),
            (375_000, "0.04", 5_935),
            (725_000, "0.0425", 12_935),
            (float("inf"), "0.045", 27_810),
        ),
        fhb=FHBThreshold(D(750_000), D(750_000)),
        transfer_fee=22_500,
        mortgage_registration=14_200,
    ),
    "NT": StateDuty(
        brackets=(),
        fhb=FHBThreshold(D(650_000), D(650_000)),
        transfer_fee=16_800,
        mortgage_registration=16_800,
        formula=NTDutyFormula(
            threshold=D(525_000),
            quadratic=D("0.06571441"),
            linear=D(15),
            flat_rates=((D(3_000_000), D("0.0495")), (INF, D("0.0595"))),
        ),
    ),
    "ACT": StateDuty(
        brackets=_brackets(
            (200_000, "0.012", 0),
            (300_000, "0.022", 2_400),
            (500_000, "0.034", 4_600),
            (750_000, "0.042", 11_400),
            (1_000_000, "0.0505", 21_900),
            (1_455_000, "0.057", 34_525),
            (float("inf"), "0.068", 60_460),
        ),
        fhb=FHBThreshold(D(1_000_000), D(1_000_000)),
        transfer_fee=34_200,
        mortgage_registration=16_800,
    ),
}

STAMP_DUTY_YEARS: Mapping[str, StampDutyTables] = MappingProxyType({
    "2025-26": StampDutyTables(
        states=MappingProxyType(_STATES_2025),
        vic_off_plan_default_construction_percent=D(40),
    ),
})

STATES = tuple(_STATES_2025)


# ---------------------------------------------------------------------------
# Lenders mortgage insurance
# ---------------------------------------------------------------------------

LMI_YEARS: Mapping[str, LMITables] = MappingProxyType({
    "2025-26": LMITables(
        bands=(
            LMIBand(D(0), D(80), D(0)),
            LMIBand(D(80), D(85), D("0.52")),
            LMIBand(D(85), D(88), D("1.1")),
            LMIBand(D(88), D(90), D("1.85")),
            LMIBand(D(90), D(92), D("2.45")),
            LMIBand(D(92), D(95), D("3.1")),
            LMIBand(D(95), D(97), D("3.75")),
        ),
        size_tiers=(
            LoanSizeTier(100_000_000, D("1.35")),  # $1M+
            LoanSizeTier(75_000_000, D("1.2")),
            LoanSizeTier(50_000_000, D("1.1")),
            LoanSizeTier(0, D("1.0")),
        ),
    ),
})


# ---------------------------------------------------------------------------
# Household Expenditure Measure
# ---------------------------------------------------------------------------

# PLACEHOLDER. The real HEM is licensed Melbourne Institute data and varies by
# lender; these are conservative approximations scaled by income, not the
# published benchmark.
HEM_YEARS: Mapping[str, tuple[HEMBracket, ...]] = MappingProxyType({
    "2025-26": (
        HEMBracket(D(0), D(40_000), D(1_650), D(2_400), D(450)),
        HEMBracket(D(40_000), D(60_000), D(1_850), D(2_700), D(500)),
        HEMBracket(D(60_000), D(80_000), D(2_100), D(3_000), D(550)),
        HEMBracket(D(80_000), D(100_000), D(2_400), D(3_400), D(600)),
        HEMBracket(D(100_000), D(130_000), D(2_750), D(3_900), D(650)),
        HEMBracket(D(130_000), D(170_000), D(3_200), D(4_500), D(700)),
        HEMBracket(D(170_000), D(220_000), D(3_700), D(5_200), D(750)),
        HEMBracket(D(220_000), INF, D(4_300), D(6_000), D(800)),
    ),
})


# ---------------------------------------------------------------------------
# Superannuation caps
# ---------------------------------------------------------------------------


def _caps(fy: str, concessional: int, non_concessional: int, tbc: int, sg: float) -> SuperCapConfig:
    return SuperCapConfig(fy, concessional * 100, non_concessional * 100, tbc * 100, sg)


SUPER_CAP_YEARS: Mapping[str, SuperCapConfig] = MappingProxyType({
    c.financial_year: c
    for c in (
        _caps("2018-19", 25_000, 100_000, 1_600_000, 9.5),
        _caps("2019-20", 25_000, 100_000, 1_600_000, 9.5),
        _caps("2020-21", 25_000, 100_000, 1_600_000, 9.5),
        _caps("2021-22", 27_500, 110_000, 1_700_000, 10.0),
        _caps("2022-23", 27_500, 110_000, 1_700_000, 10.5),
        _caps("2023-24", 27_500, 110_000, 1_900_000, 11.0),
        _caps("2024-25", 30_000, 120_000, 1_900_000, 11.5),
        _caps("2025-26", 30_000, 120_000, 2_000_000, 12.0),
        _caps("2026-27", 30_000, 120_000, 2_000_000, 12.0),
    )
})


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def tax_year_for(financial_year: str | None = None) -> TaxYear:
    return TAX_YEARS[resolve_financial_year(TAX_YEARS, financial_year)]


def hecs_for(financial_year: str | None = None) -> HecsThresholds:
    return HECS_YEARS[resolve_financial_year(HECS_YEARS, financial_year)]


def stamp_duty_for(financial_year: str | None = None) -> StampDutyTables:
    return STAMP_DUTY_YEARS[resolve_financial_year(STAMP_DUTY_YEARS, financial_year)]


def lmi_for(financial_year: str | None = None) -> LMITables:
    return LMI_YEARS[resolve_financial_year(LMI_YEARS, financial_year)]


def hem_for(financial_year: str | None = None) -> tuple[HEMBracket, ...]:
    return HEM_YEARS[resolve_financial_year(HEM_YEARS, financial_year)]


def super_caps_for(financial_year: str | None = None) -> SuperCapConfig:
    return SUPER_CAP_YEARS[resolve_financial_year(SUPER_CAP_YEARS, financial_year)]
