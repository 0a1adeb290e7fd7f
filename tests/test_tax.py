"""Tests for income tax, Medicare levy, MLS and CGT."""

from datetime import date

import pytest
from affordability.tax import (
    cgt_discount_date,
    days_until_cgt_discount,
    income_tax,
    investment_cgt,
    marginal_rate,
    medicare_levy_surcharge,
    proportional_cost_basis,
)

FY = "2025-26"


class TestIncomeTax:
    def test_below_tax_free_threshold(self):
        result = income_tax(1_820_000, FY)
        assert result.income_tax == 0
        assert result.medicare_levy == 0

    def test_common_salary(self):
        # $4,288 + 30% of $55,000, plus 2% levy
        result = income_tax(10_000_000, FY)
        assert result.income_tax == 2_078_800
        assert result.medicare_levy == 200_000
        assert result.total_tax == 2_278_800
        assert result.effective_rate == pytest.approx(22.8)
        assert result.marginal_rate == pytest.approx(30.0)

    def test_medicare_shade_in(self):
        # 10% of the $2,778 above the $27,222 threshold, less than the full 2%
        result = income_tax(3_000_000, FY)
        assert result.income_tax == 188_800
        assert result.medicare_levy == 27_780

    def test_family_threshold(self):
        single = income_tax(4_500_000, FY)
        family = income_tax(4_500_000, FY, taxpayer_type="family", dependent_children=1)
        assert family.medicare_levy == 0
        assert single.medicare_levy == 90_000

    def test_zero_income(self):
        result = income_tax(0, FY)
        assert result.total_tax == 0
        assert result.effective_rate == 0.0

    def test_2026_rates(self):
        # $4,020 + 29% of $55,000
        assert income_tax(10_000_000, "2026-27").income_tax == 1_997_000

    def test_later_year_uses_latest_table(self):
        assert income_tax(10_000_000, "2030-31").income_tax == 1_997_000

    def test_earlier_year_uses_oldest_table(self):
        assert income_tax(10_000_000, "2019-20").income_tax == 2_078_800


class TestMarginalRate:
    def test_below_threshold(self):
        assert marginal_rate(1_000_000, FY) == 0.0

    def test_common_salary(self):
        assert marginal_rate(10_000_000, FY) == pytest.approx(30.0)

    def test_high_income(self):
        assert marginal_rate(25_000_000, FY) == pytest.approx(45.0)


class TestMedicareLevySurcharge:
    def test_below_base_tier(self):
        assert medicare_levy_surcharge(10_000_000, FY) == 0

    def test_tier_one(self):
        assert medicare_levy_surcharge(11_000_000, FY) == 110_000

    def test_top_tier(self):
        assert medicare_levy_surcharge(20_000_000, FY) == 300_000

    def test_family_uplift_per_child_after_first(self):
        # base $202k + 2 × $1,500
        assert medicare_levy_surcharge(20_400_000, FY, "family", dependent_children=3) == 0
        assert medicare_levy_surcharge(21_000_000, FY, "family", dependent_children=3) == 210_000


class TestCGT:
    def test_discount_date(self):
        assert cgt_discount_date(date(2024, 1, 31)) == date(2025, 1, 31)
        assert cgt_discount_date(date(2024, 2, 29)) == date(2025, 2, 28)

    def test_exactly_twelve_months_is_eligible(self):
        result = investment_cgt(60_000_000, date(2025, 1, 1), 50_000_000, date(2024, 1, 1))
        assert result.is_eligible_for_discount
        assert result.holding_period_months == 12

    def test_one_day_short_is_not_eligible(self):
        result = investment_cgt(60_000_000, date(2024, 12, 31), 50_000_000, date(2024, 1, 1))
        assert not result.is_eligible_for_discount
        assert result.discount_amount == 0

    def test_discounted_gain_and_tax(self):
        result = investment_cgt(
            60_000_000, date(2025, 6, 1), 50_000_000, date(2023, 6, 1),
            fees=1_000_000, marginal_tax_rate=30,
        )
        assert result.sale_proceeds == 59_000_000
        assert result.gross_capital_gain == 9_000_000
        assert result.discount_amount == 4_500_000
        assert result.net_capital_gain == 4_500_000
        assert result.estimated_tax == 1_350_000
        assert result.effective_tax_rate == pytest.approx(15.0)

    def test_capital_loss(self):
        result = investment_cgt(
            40_000_000, date(2025, 6, 1), 50_000_000, date(2023, 6, 1), marginal_tax_rate=30
        )
        assert result.is_capital_loss
        assert result.discount_amount == 0
        assert result.net_capital_gain == -10_000_000
        assert result.estimated_tax is None

    def test_days_until_discount(self):
        assert days_until_cgt_discount(date(2024, 1, 1), date(2024, 12, 1)) == 31
        assert days_until_cgt_discount(date(2024, 1, 1), date(2025, 3, 1)) == 0

    def test_proportional_cost_basis(self):
        assert proportional_cost_basis(10_000, 3, 1) == 3_333
        assert proportional_cost_basis(10_000, 0, 1) == 0
