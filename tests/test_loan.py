"""Tests for loan repayment and amortization."""

from decimal import Decimal

import pytest
from affordability.loan import (
    amortization_schedule,
    balance_after_months,
    calculate_repayment,
    effective_rate_with_offset,
    extra_payment_impact,
    interest_only_repayment,
    monthly_rate,
    principal_and_interest_repayment,
    total_interest,
)


class TestMonthlyRate:
    def test_six_percent(self):
        assert monthly_rate(6.0) == Decimal("0.005")

    def test_float_noise_free(self):
        assert monthly_rate(6.5) * 1200 == Decimal("6.5")


class TestInterestOnly:
    def test_monthly(self):
        # $500k at 6% = $30k a year
        assert interest_only_repayment(50_000_000, 6.0) == 250_000

    def test_weekly_rounds_half_up(self):
        assert interest_only_repayment(50_000_000, 6.0, "weekly") == 57_692

    def test_unknown_frequency(self):
        with pytest.raises(ValueError):
            interest_only_repayment(50_000_000, 6.0, "fortnightly")


class TestPrincipalAndInterest:
    def test_known_value(self):
        # $500k at 6% over 30 years = $2,997.75
        assert principal_and_interest_repayment(50_000_000, 6.0, 360) == 299_775

    def test_zero_rate_is_straight_line(self):
        assert principal_and_interest_repayment(1_200_000, 0, 12) == 100_000

    def test_zero_rate_ignores_frequency(self):
        # straight-line P / n, same figure whatever the frequency
        assert principal_and_interest_repayment(1_200_000, 0, 12, "weekly") == 100_000
        assert principal_and_interest_repayment(1_200_000, 0, 12, "annually") == 100_000

    def test_weekly_scaled_from_monthly(self):
        monthly = principal_and_interest_repayment(50_000_000, 6.0, 360)
        weekly = principal_and_interest_repayment(50_000_000, 6.0, 360, "weekly")
        assert abs(weekly - monthly * 12 / 52) <= 1

    def test_non_positive_term(self):
        assert principal_and_interest_repayment(50_000_000, 6.0, 0) == 0

    def test_increasing_in_loan_amount(self):
        payments = [principal_and_interest_repayment(loan, 9.5, 360) for loan in range(10_000_000, 60_000_000, 5_000_000)]
        assert payments == sorted(payments)
        assert len(set(payments)) == len(payments)


class TestCalculateRepayment:
    def test_interest_only_has_no_principal(self):
        r = calculate_repayment(50_000_000, 6.0, 360, "interest-only")
        assert r.principal_portion == 0
        assert r.repayment == r.interest_portion == 250_000

    def test_first_period_split(self):
        r = calculate_repayment(50_000_000, 6.0, 360)
        assert r.interest_portion == 250_000
        assert r.principal_portion == 49_775

    def test_unknown_loan_type(self):
        with pytest.raises(ValueError):
            calculate_repayment(50_000_000, 6.0, 360, "balloon")


class TestTotalInterest:
    def test_zero_rate(self):
        assert total_interest(1_200_000, 0, 12) == 0

    def test_known_value(self):
        assert total_interest(50_000_000, 6.0, 360) == 299_775 * 360 - 50_000_000

    def test_interest_only_period_adds_interest(self):
        base = total_interest(50_000_000, 6.0, 360)
        with_io = total_interest(50_000_000, 6.0, 360, interest_only_months=60)
        assert with_io > base

    def test_all_interest_only(self):
        assert total_interest(50_000_000, 6.0, 12, interest_only_months=12) == 250_000 * 12


class TestAmortizationSchedule:
    def test_zero_rate_pays_off_exactly(self):
        schedule = amortization_schedule(1_200_000, 0, 12)
        assert len(schedule) == 12
        assert all(e.principal == 100_000 for e in schedule)
        assert schedule[-1].balance == 0

    def test_payment_is_principal_plus_interest(self):
        for e in amortization_schedule(50_000_000, 6.0, 360):
            assert e.payment == e.principal + e.interest

    def test_balance_never_negative_or_increasing(self):
        schedule = amortization_schedule(50_000_000, 6.0, 360)
        balances = [e.balance for e in schedule]
        assert min(balances) >= 0
        assert balances == sorted(balances, reverse=True)

    def test_interest_only_period(self):
        schedule = amortization_schedule(1_200_000, 6.0, 24, interest_only_months=12)
        assert len(schedule) == 24
        for e in schedule[:12]:
            assert e.principal == 0
            assert e.interest == 6_000
            assert e.balance == 1_200_000
        assert schedule[12].principal > 0


class TestBalanceAfterMonths:
    def test_zero_rate_straight_line(self):
        assert balance_after_months(1_200_000, 0, 12, 6) == 600_000

    def test_during_interest_only(self):
        assert balance_after_months(50_000_000, 6.0, 360, 24, interest_only_months=60) == 50_000_000

    def test_matches_schedule(self):
        schedule = amortization_schedule(50_000_000, 6.0, 360)
        closed_form = balance_after_months(50_000_000, 6.0, 360, 12)
        assert abs(closed_form - schedule[11].balance) <= 10


class TestExtraPaymentImpact:
    def test_no_extra_matches_baseline(self):
        impact = extra_payment_impact(50_000_000, 6.0, 360, 0)
        baseline = total_interest(50_000_000, 6.0, 360)
        assert impact.original_interest == impact.new_interest == baseline
        assert impact.interest_saved == 0
        assert impact.months_saved == 0

    def test_zero_rate(self):
        impact = extra_payment_impact(1_200_000, 0, 12, 100_000)
        assert impact.new_interest == 0
        assert impact.months_saved == 6

    def test_extra_saves_interest_and_time(self):
        impact = extra_payment_impact(50_000_000, 6.0, 360, 50_000)
        assert impact.interest_saved > 0
        assert impact.new_interest < impact.original_interest
        assert 0 < impact.months_saved < 360


class TestOffset:
    def test_partial_offset(self):
        r = effective_rate_with_offset(50_000_000, 10_000_000, 6.0)
        assert r.effective_balance == 40_000_000
        assert r.effective_rate == pytest.approx(4.8)
        assert r.monthly_savings == 50_000

    def test_offset_exceeds_loan(self):
        r = effective_rate_with_offset(10_000_000, 20_000_000, 6.0)
        assert r.effective_balance == 0
        assert r.effective_rate == 0.0

    def test_zero_loan(self):
        assert effective_rate_with_offset(0, 0, 6.0).effective_rate == 0.0
