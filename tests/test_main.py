import csv
import json

import pytest
from click.testing import CliRunner

from vehicle_loan.config import RATES_FILE_ENV
from vehicle_loan.main import cli

LOAN = ["-p", "65m", "-d", "15m", "-t", "60", "-R", "10m"]


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv(RATES_FILE_ENV, raising=False)
    return CliRunner()


class TestScheduleCommand:
    def test_prints_summary_and_table(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN])
        assert result.exit_code == 0, result.output
        assert "Amount financed    : Gs. 50.000.000" in result.output
        assert "BancoUENO" in result.output
        assert "Month\tOpening" in result.output

    def test_default_loan(self, runner):
        result = runner.invoke(cli, ["summary"])
        assert result.exit_code == 0, result.output
        assert "Gs. 50.000.000" in result.output

    def test_long_schedule_is_truncated(self, runner):
        result = runner.invoke(cli, ["schedule", "-t", "240", "-R", "0"])
        assert result.exit_code == 0, result.output
        assert "showing first 120 rows" in result.output

    def test_custom_rate_overrides_bank(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN, "-r", "9.5"])
        assert result.exit_code == 0, result.output
        assert "custom" in result.output
        assert "9.50%" in result.output

    def test_nothing_to_finance(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "10m", "-d", "12m"])
        assert result.exit_code == 0, result.output
        assert "Nothing to finance." in result.output
        assert "Month\t" not in result.output

    def test_unknown_bank(self, runner):
        result = runner.invoke(cli, ["schedule", "-b", "BancoX"])
        assert result.exit_code == 2
        assert "Unknown bank" in result.output

    def test_negative_amount(self, runner):
        result = runner.invoke(cli, ["schedule", "-R", "-5"])
        assert result.exit_code == 2
        assert "must not be negative" in result.output

    @pytest.mark.parametrize("command, value", [("schedule", "nan"), ("summary", "inf"), ("schedule", "Infinity")])
    def test_non_finite_amount(self, runner, command, value):
        result = runner.invoke(cli, [command, "-p", value])
        assert result.exit_code == 2
        assert "Invalid numeric value" in result.output

    @pytest.mark.parametrize("term", ["0", "-12", "601", "100000000"])
    def test_term_out_of_range(self, runner, term):
        result = runner.invoke(cli, ["schedule", "-t", term])
        assert result.exit_code == 2
        assert "1<=x<=600" in result.output

    def test_longest_term_accepted(self, runner):
        result = runner.invoke(cli, ["summary", "-t", "600"])
        assert result.exit_code == 0, result.output

    def test_non_finite_rate(self, runner):
        result = runner.invoke(cli, ["summary", "-r", "nan"])
        assert result.exit_code == 2
        assert "Invalid rate" in result.output

    def test_json_export(self, runner, tmp_path):
        out = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["summary"]["bank"] == "BancoUENO"
        assert data["summary"]["principal_financed"] == 50_000_000
        assert len(data["schedule"]) == 60
        assert data["schedule"][11]["reinforcement"] == 10_000_000

    def test_csv_export(self, runner, tmp_path):
        out = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(out)])
        assert result.exit_code == 0, result.output
        with out.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "Month"
        assert len(rows) == 61

    def test_unsupported_export(self, runner, tmp_path):
        result = runner.invoke(cli, ["schedule", "--output", str(tmp_path / "x.txt")])
        assert result.exit_code == 2


class TestSummaryCommand:
    def test_json_export(self, runner, tmp_path):
        out = tmp_path / "summary.json"
        result = runner.invoke(cli, ["summary", *LOAN, "-b", "BancoITAU", "--output", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))["summary"]
        assert data["bank"] == "BancoITAU"
        assert data["annual_rate"] == pytest.approx(0.125)
        assert data["final_payment"] < data["initial_payment"]

    def test_rejects_csv(self, runner, tmp_path):
        result = runner.invoke(cli, ["summary", "--output", str(tmp_path / "s.csv")])
        assert result.exit_code == 2


class TestBanksAndCompare:
    def test_banks(self, runner):
        result = runner.invoke(cli, ["banks"])
        assert result.exit_code == 0, result.output
        for bank in ("BancoUENO", "BancoITAU", "BancoCONTINENTAL", "BancoATLAS", "BancoFAMILIAR"):
            assert bank in result.output

    def test_rates_file(self, runner, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"BancoSOLO": 0.2}), encoding="utf-8")
        result = runner.invoke(cli, ["banks", "--rates-file", str(path)])
        assert result.exit_code == 0, result.output
        assert "BancoSOLO" in result.output
        assert "BancoUENO" not in result.output

    def test_bad_rates_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["banks", "--rates-file", str(tmp_path / "missing.json")])
        assert result.exit_code == 2

    def test_compare_orders_by_interest(self, runner):
        result = runner.invoke(cli, ["compare", *LOAN])
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line.startswith("Banco")]
        assert [line.split()[0] for line in lines] == [
            "BancoUENO",
            "BancoITAU",
            "BancoCONTINENTAL",
            "BancoATLAS",
            "BancoFAMILIAR",
        ]

    def test_verbose_flag(self, runner):
        result = runner.invoke(cli, ["-v", "summary", *LOAN])
        assert result.exit_code == 0, result.output
