"""Tests for financial years and the regulatory tables."""

from datetime import date

import pytest
from structlog.testing import capture_logs

from affordability.fy import FinancialYear, resolve_financial_year
from affordability.tables import (
    HEM_YEARS,
    INF,
    LMI_YEARS,
    STAMP_DUTY_YEARS,
    SUPER_CAP_YEARS,
    TAX_YEARS,
    stamp_duty_for,
    tax_year_for,
)


class TestFinancialYear:
    def test_parse(self):
        fy = FinancialYear.parse("2024-25")
        assert fy.start_year == 2024
        assert fy.end_year == 2025
        assert str(fy) == "2024-25"

    @pytest.mark.parametrize("value", ["2024-26", "24-25", "2024/25", ""])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            FinancialYear.parse(value)

    def test_try_parse(self):
        assert FinancialYear.try_parse("nonsense") is None
        assert FinancialYear.try_parse("2025-26") == FinancialYear(2025)

    def test_from_date_boundary(self):
        assert FinancialYear.from_date(date(2025, 6, 30)).value == "2024-25"
        assert FinancialYear.from_date(date(2025, 7, 1)).value == "2025-26"

    def test_contains_inclusive(self):
        fy = FinancialYear(2024)
        assert fy.contains(date(2024, 7, 1))
        assert fy.contains(date(2025, 6, 30))
        assert not fy.contains(date(2025, 7, 1))

    def test_offset_and_order(self):
        fy = FinancialYear(2025)
        assert fy.offset(-1).value == "2024-25"
        assert fy.offset(-1) < fy

    def test_century_rollover(self):
        assert FinancialYear.parse("2099-00").end_year == 2100

    def test_from_start_year(self):
        fy = FinancialYear.from_start_year(2024)
        assert str(fy) == "2024-25"
        assert fy.start_date == date(2024, 7, 1)
        assert fy.end_date == date(2025, 6, 30)


class TestResolveFinancialYear:
    KNOWN = ["2024-25", "2026-27"]

    def test_exact(self):
        assert resolve_financial_year(self.KNOWN, "2026-27") == "2026-27"

    def test_gap_year_uses_closest_prior(self):
        assert resolve_financial_year(self.KNOWN, "2025-26") == "2024-25"

    def test_future_uses_latest(self):
        assert resolve_financial_year(self.KNOWN, "2031-32") == "2026-27"

    def test_past_uses_oldest(self):
        assert resolve_financial_year(self.KNOWN, "2001-02") == "2024-25"

    def test_unparseable_uses_latest_when_current_not_tabulated(self):
        assert resolve_financial_year(["1990-91", "1991-92"], "garbage") == "1991-92"

    def test_fallback_is_logged(self):
        with capture_logs() as logs:
            resolve_financial_year(self.KNOWN, "2025-26")
        assert logs[0]["event"] == "financial_year_fallback"
        assert logs[0]["resolved"] == "2024-25"
        assert logs[0]["log_level"] == "debug"

    def test_fallback_logged_once_per_pair(self):
        with capture_logs() as logs:
            for _ in range(3):
                resolve_financial_year(self.KNOWN, "2025-26")
            resolve_financial_year(self.KNOWN, "2030-31")
        assert [log["requested"] for log in logs] == ["2025-26", "2030-31"]

    def test_empty_table(self):
        with pytest.raises(ValueError):
            resolve_financial_year([], "2025-26")

    def test_accessor_falls_back(self):
        assert tax_year_for("2030-31") is TAX_YEARS["2026-27"]
        assert stamp_duty_for("2019-20") is STAMP_DUTY_YEARS["2025-26"]


class TestTableShape:
    def test_tax_brackets_contiguous(self):
        for config in TAX_YEARS.values():
            brackets = config.brackets
            assert brackets[0].min == 0
            assert brackets[-1].max == INF
            for lower, upper in zip(brackets, brackets[1:]):
                assert lower.max == upper.min

    def test_tax_base_is_cumulative(self):
        for config in TAX_YEARS.values():
            for lower, upper in zip(config.brackets, config.brackets[1:]):
                assert upper.base_tax == lower.base_tax + (lower.max - lower.min) * lower.rate

    def test_stamp_duty_bases_chain(self):
        for tables in STAMP_DUTY_YEARS.values():
            for state, duty in tables.states.items():
                if duty.formula is not None:
                    continue
                previous = 0
                for lower, upper in zip(duty.brackets, duty.brackets[1:]):
                    expected = lower.base + (lower.threshold - previous) * lower.rate
                    assert abs(upper.base - expected) <= 1, state
                    previous = lower.threshold
                assert duty.brackets[-1].threshold == INF

    def test_hem_brackets_contiguous(self):
        for brackets in HEM_YEARS.values():
            assert brackets[0].income_min == 0
            assert brackets[-1].income_max == INF
            for lower, upper in zip(brackets, brackets[1:]):
                assert lower.income_max == upper.income_min

    def test_lmi_bands_contiguous(self):
        for tables in LMI_YEARS.values():
            for lower, upper in zip(tables.bands, tables.bands[1:]):
                assert lower.max_lvr == upper.min_lvr
            thresholds = [t.threshold for t in tables.size_tiers]
            assert thresholds == sorted(thresholds, reverse=True)
            assert thresholds[-1] == 0

    def test_super_caps_have_no_gaps(self):
        years = sorted(FinancialYear.parse(fy).start_year for fy in SUPER_CAP_YEARS)
        assert years == list(range(years[0], years[-1] + 1))

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            TAX_YEARS["2099-00"] = TAX_YEARS["2025-26"]
