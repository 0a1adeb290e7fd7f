"""Tests for superannuation contribution caps."""

from affordability.super_caps import (
    bring_forward_cap,
    carry_forward_concessional,
    concessional_cap,
    non_concessional_cap,
    super_cap_config,
)


class TestCaps:
    def test_concessional(self):
        assert concessional_cap("2024-25") == 3_000_000
        assert concessional_cap("2020-21") == 2_500_000

    def test_non_concessional(self):
        assert non_concessional_cap("2021-22") == 11_000_000

    def test_config(self):
        config = super_cap_config("2025-26")
        assert config.transfer_balance_cap == 200_000_000
        assert config.super_guarantee_rate == 12.0

    def test_future_year_uses_latest(self):
        assert super_cap_config("2030-31").financial_year == "2026-27"

    def test_past_year_uses_oldest(self):
        assert super_cap_config("2010-11").financial_year == "2018-19"


class TestCarryForward:
    def test_five_prior_years(self):
        result = carry_forward_concessional("2025-26", {"2024-25": 2_000_000}, total_super_balance=40_000_000)
        assert result.eligible
        assert result.assessed_years == ["2024-25", "2023-24", "2022-23", "2021-22", "2020-21"]
        assert result.unused_by_year["2024-25"] == 1_000_000
        assert result.available == 1_000_000 + 2_750_000 * 3 + 2_500_000

    def test_only_tabulated_years(self):
        result = carry_forward_concessional("2019-20", {})
        assert result.assessed_years == ["2018-19"]
        assert result.available == 2_500_000

    def test_over_contribution_is_not_negative(self):
        result = carry_forward_concessional("2019-20", {"2018-19": 9_000_000})
        assert result.available == 0

    def test_balance_too_high(self):
        result = carry_forward_concessional("2025-26", {}, total_super_balance=50_000_000)
        assert not result.eligible
        assert result.available == 0
        assert result.reason


class TestBringForward:
    def test_three_years(self):
        result = bring_forward_cap("2025-26", total_super_balance=170_000_000)
        assert result.years_available == 3
        assert result.available_cap == 36_000_000

    def test_two_years(self):
        result = bring_forward_cap("2025-26", total_super_balance=180_000_000)
        assert result.years_available == 2
        assert result.available_cap == 24_000_000

    def test_one_year(self):
        result = bring_forward_cap("2025-26", total_super_balance=190_000_000)
        assert result.years_available == 1
        assert result.available_cap == 12_000_000

    def test_at_transfer_balance_cap(self):
        result = bring_forward_cap("2025-26", total_super_balance=200_000_000)
        assert not result.eligible
        assert result.available_cap == 0

    def test_age_limit(self):
        assert not bring_forward_cap("2025-26", total_super_balance=0, age=75).eligible

    def test_balance_unknown(self):
        result = bring_forward_cap("2025-26")
        assert result.eligible
        assert result.years_available == 1
        assert result.reason
