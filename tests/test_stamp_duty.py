"""Tests for stamp duty and government charges."""

import pytest
from affordability.stamp_duty import (
    StampDutyOptions,
    estimate_stamp_duty,
    fhb_eligibility,
    stamp_duty,
    stamp_duty_breakdown,
    vic_off_plan_eligibility,
)

FHB = StampDutyOptions(is_first_home_buyer=True, is_investment=False)


def dollars(amount: int) -> int:
    return amount * 100


class TestNSWStampDuty:
    def test_first_bracket(self):
        assert estimate_stamp_duty(dollars(16_000), "NSW") == dollars(200)

    def test_brackets_chain_from_base(self):
        assert estimate_stamp_duty(dollars(35_000), "NSW") == dollars(485)

    def test_800k_non_fhb(self):
        assert estimate_stamp_duty(dollars(800_000), "NSW") == dollars(30_735)

    def test_government_charges(self):
        result = stamp_duty(dollars(16_000), "NSW")
        assert result.transfer_fee == 14_700
        assert result.mortgage_registration == 15_460
        assert result.total_government_charges == 20_000 + 14_700 + 15_460

    def test_fhb_exempt(self):
        result = stamp_duty(dollars(800_000), "NSW", FHB)
        assert result.stamp_duty == 0
        assert result.is_first_home_buyer_exempt
        assert result.concession_applied == dollars(30_735)

    def test_fhb_concessional(self):
        # halfway through the taper keeps half the duty
        result = stamp_duty(dollars(900_000), "NSW", FHB)
        assert result.stamp_duty == dollars(17_617)
        assert result.concession_applied == dollars(17_618)
        assert not result.is_first_home_buyer_exempt

    def test_fhb_above_concession(self):
        result = stamp_duty(dollars(1_100_000), "NSW", FHB)
        assert result.stamp_duty == dollars(44_235)
        assert result.concession_applied == 0

    def test_investor_fhb_gets_no_concession(self):
        result = stamp_duty(dollars(800_000), "NSW", StampDutyOptions(is_first_home_buyer=True))
        assert result.stamp_duty == dollars(30_735)


class TestVICStampDuty:
    def test_standard(self):
        assert estimate_stamp_duty(dollars(500_000), "VIC") == dollars(25_070)

    def test_off_plan_for_investors(self):
        result = stamp_duty(dollars(500_000), "VIC", StampDutyOptions(is_off_plan=True))
        assert result.stamp_duty == dollars(13_070)
        assert result.concession_applied == dollars(12_000)

    def test_fhb_exemption_beats_off_plan(self):
        options = StampDutyOptions(is_first_home_buyer=True, is_investment=False, is_off_plan=True)
        result = stamp_duty(dollars(500_000), "VIC", options)
        assert result.stamp_duty == 0
        assert result.concession_applied == dollars(25_070)

    def test_off_plan_beats_partial_fhb(self):
        options = StampDutyOptions(is_first_home_buyer=True, is_investment=False, is_off_plan=True)
        result = stamp_duty(dollars(700_000), "VIC", options)
        # FHB alone would leave $24,713; off-the-plan leaves $20,270
        assert stamp_duty(dollars(700_000), "VIC", FHB).stamp_duty == dollars(24_713)
        assert result.stamp_duty == dollars(20_270)
        assert result.concession_applied == dollars(16_800)

    def test_custom_construction_share(self):
        options = StampDutyOptions(is_off_plan=True, construction_value_percent=0)
        assert stamp_duty(dollars(500_000), "VIC", options).stamp_duty == dollars(25_070)

    def test_off_plan_ignored_outside_vic(self):
        result = stamp_duty(dollars(800_000), "NSW", StampDutyOptions(is_off_plan=True))
        assert result.stamp_duty == dollars(30_735)


class TestQLDStampDuty:
    def test_non_fhb(self):
        assert estimate_stamp_duty(dollars(900_000), "QLD") == dollars(33_525)

    def test_fhb_new_home_uncapped(self):
        options = StampDutyOptions(is_first_home_buyer=True, is_investment=False, is_new_home=True)
        result = stamp_duty(dollars(900_000), "QLD", options)
        assert result.stamp_duty == 0
        assert result.is_first_home_buyer_exempt

    def test_fhb_established_above_threshold(self):
        assert stamp_duty(dollars(900_000), "QLD", FHB).stamp_duty == dollars(33_525)


class TestNTStampDuty:
    def test_formula_below_threshold(self):
        # 0.06571441 × 500² + 15 × 500
        assert estimate_stamp_duty(dollars(500_000), "NT") == dollars(23_929)

    def test_flat_rate_above_threshold(self):
        assert estimate_stamp_duty(dollars(600_000), "NT") == dollars(29_700)


class TestDispatcher:
    def test_unknown_state(self):
        with pytest.raises(ValueError):
            stamp_duty(dollars(500_000), "XX")

    def test_case_insensitive(self):
        assert estimate_stamp_duty(dollars(500_000), "vic") == estimate_stamp_duty(dollars(500_000), "VIC")

    @pytest.mark.parametrize("state", ["NSW", "VIC", "QLD", "SA", "WA", "TAS", "NT", "ACT"])
    def test_every_state_non_negative_and_increasing(self, state):
        low = estimate_stamp_duty(dollars(400_000), state)
        high = estimate_stamp_duty(dollars(800_000), state)
        assert 0 < low < high


class TestHelpers:
    def test_breakdown_shows_concession(self):
        lines = dict(stamp_duty_breakdown(dollars(900_000), "NSW", is_first_home_buyer=True))
        assert lines["Stamp Duty"] == dollars(17_617)
        assert lines["FHB Concession (applied)"] == -dollars(17_618)

    def test_breakdown_without_concession(self):
        labels = [label for label, _ in stamp_duty_breakdown(dollars(900_000), "NSW")]
        assert labels == ["Stamp Duty", "Transfer Fee", "Mortgage Registration"]

    def test_fhb_eligibility_partial(self):
        result = fhb_eligibility(dollars(900_000), "NSW")
        assert result.eligible
        assert result.partial_concession
        assert not result.full_exemption
        assert result.estimated_savings == dollars(17_618)

    def test_fhb_eligibility_qld_new_home(self):
        result = fhb_eligibility(dollars(1_500_000), "QLD", is_new_home=True)
        assert result.full_exemption
        assert "new homes" in result.note

    def test_vic_off_plan_eligibility(self):
        result = vic_off_plan_eligibility(dollars(500_000))
        assert result.eligible
        assert result.construction_percent == 40.0
        assert result.estimated_savings == dollars(12_000)
