"""Tests for the command line interface."""

import json
import sys
from pathlib import Path

import pytest
from affordability.cli import main

CONFIGS = Path(__file__).parent.parent / "configs"


def run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["affordability", *argv])
    main()


class TestAssess:
    def test_default_json(self, monkeypatch, capsys):
        run(monkeypatch, "assess", "--fy", "2025-26", "--json")
        payload = json.loads(capsys.readouterr().out)
        assert payload["results"]["monthly_net_income"] == 643_433
        assert len(payload["stress_tests"]) == 3
        assert payload["upfront_costs"] is None

    def test_config_with_upfront_costs(self, monkeypatch, capsys):
        run(monkeypatch, "assess", str(CONFIGS / "first_home_buyer.yaml"), "--state", "nsw", "--fhb")
        out = capsys.readouterr().out
        assert "Partner income:  $70,000" in out
        assert "Upfront costs:" in out

    def test_investor_risk_metrics(self, monkeypatch, capsys):
        run(monkeypatch, "assess", str(CONFIGS / "investor.yaml"), "--property-expenses", "400")
        assert "Investment risk:" in capsys.readouterr().out

    def test_bad_config(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "scenario.txt"
        path.write_text("x")
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "assess", str(path))
        assert exc.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestSensitivity:
    def test_rate_sweep(self, monkeypatch, capsys):
        run(monkeypatch, "sensitivity", "--param", "interest_rate", "--range", "5,7,1")
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Sensitivity: interest_rate"
        assert len(lines) == 6

    def test_bad_range(self, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "sensitivity", "--param", "interest_rate", "--range", "5,7")
        assert exc.value.code == 1


class TestCalculators:
    def test_stamp_duty(self, monkeypatch, capsys):
        run(monkeypatch, "stamp-duty", "800000", "--state", "nsw", "--fy", "2025-26")
        assert "$30,735.00" in capsys.readouterr().out

    def test_stamp_duty_fhb(self, monkeypatch, capsys):
        run(monkeypatch, "stamp-duty", "800000", "--state", "NSW", "--fhb", "--fy", "2025-26")
        out = capsys.readouterr().out
        assert "fully exempt" in out
        assert "FHB eligible: yes" in out

    def test_lmi_scenarios(self, monkeypatch, capsys):
        run(monkeypatch, "lmi", "600000")
        assert "LMI by deposit: $600,000" in capsys.readouterr().out

    def test_lmi_not_required(self, monkeypatch, capsys):
        run(monkeypatch, "lmi", "500000", "--loan", "400000")
        out = capsys.readouterr().out
        assert "LVR: 80.00%" in out
        assert "LMI: not required" in out

    def test_schedule_csv(self, monkeypatch, capsys):
        run(monkeypatch, "schedule", "120000", "--rate", "6", "--years", "1", "--csv")
        assert len(capsys.readouterr().out.splitlines()) == 13

    def test_schedule_every_zero(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "schedule", "120000", "--rate", "6", "--years", "1", "--every", "0")
        assert exc.value.code == 1
        assert "every must be at least 1" in capsys.readouterr().err

    def test_schedule_table(self, monkeypatch, capsys):
        run(monkeypatch, "schedule", "500000", "--rate", "6.2")
        assert "Monthly repayment (P&I):" in capsys.readouterr().out

    def test_project_json(self, monkeypatch, capsys):
        run(
            monkeypatch, "project", "600000", "--loan", "480000", "--rate", "6", "--rent", "500",
            "--io-years", "5", "--json",
        )
        payload = json.loads(capsys.readouterr().out)
        assert len(payload["years"]) == 20
        assert payload["years"][0]["loan_balance"] == 48_000_000
        assert payload["years"][0]["interest_paid"] == 2_880_000
        assert payload["break_even_year"] == 1

    def test_project_negative_equity(self, monkeypatch, capsys):
        run(
            monkeypatch, "project", "500000", "--loan", "475000", "--scenario", "custom",
            "--growth", "-10", "--io-years", "5", "--horizon", "3", "--rent", "400", "--expenses", "25000",
        )
        out = capsys.readouterr().out
        assert "* Negative equity in year(s): 1, 2, 3" in out
        assert "Gross yield:           4.16%" in out
        assert "Positive gearing:      not within 30 years" in out

    def test_project_bad_interest_only(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "project", "500000", "--loan", "400000", "--term", "5", "--io-years", "10")
        assert exc.value.code == 1
        assert "cannot exceed" in capsys.readouterr().err

    def test_super_caps(self, monkeypatch, capsys):
        run(monkeypatch, "super-caps", "--fy", "2024-25", "--balance", "1700000")
        out = capsys.readouterr().out
        assert "Concessional cap:       $30,000" in out
        assert "Bring-forward:" in out

    def test_defaults_json(self, monkeypatch, capsys):
        run(monkeypatch, "defaults", "--json")
        d = json.loads(capsys.readouterr().out)
        assert d["borrower"]["gross_annual_income"] == 100000

    def test_no_command_prints_help(self, monkeypatch, capsys):
        run(monkeypatch)
        assert "usage:" in capsys.readouterr().out
