"""
Tests for the debt-calc command line.
"""

import csv
import json

import pytest
from click.testing import CliRunner

from debt_calc.main import cli, parse_amount, parse_debt_strings


@pytest.fixture
def runner():
    return CliRunner()


class TestParsing:
    """Option parsing helpers."""

    def test_amount_suffixes(self):
        assert parse_amount("5k") == 5000
        assert parse_amount("1.5m") == 1_500_000
        assert parse_amount("12,500") == 12500

    def test_debt_strings(self):
        debts = parse_debt_strings(("Visa:5k:19.99:100", "Car:8000:6%:250"))

        assert [d.name for d in debts] == ["Visa", "Car"]
        assert [d.id for d in debts] == ["1", "2"]
        assert debts[0].balance == 5000
        assert str(debts[1].apr) == "6"

    def test_bad_debt_string(self, runner):
        result = runner.invoke(cli, ["payoff", "--debt", "Visa:5000", "--budget", "200"])

        assert result.exit_code == 2
        assert "NAME:BALANCE:APR:MIN" in result.output


class TestPayoffCommands:
    """payoff and compare."""

    def test_payoff_prints_summary(self, runner):
        result = runner.invoke(
            cli,
            ["payoff", "-d", "Card:5000:20:100", "--budget", "200", "--strategy", "avalanche"],
        )

        assert result.exit_code == 0, result.output
        assert "Months to debt free" in result.output
        assert "1. Card (month" in result.output
        assert "Monthly principal  : 116.67" in result.output

    def test_payoff_reports_shortfall(self, runner):
        result = runner.invoke(cli, ["payoff", "-d", "Card:1000:0:100", "--budget", "0"])

        assert result.exit_code == 0, result.output
        assert "Budget below minimums" in result.output

    def test_payoff_json_export(self, runner, tmp_path):
        output = tmp_path / "payoff.json"

        result = runner.invoke(
            cli,
            ["payoff", "-d", "A:1000:18:25", "-d", "B:3000:24:90", "-b", "400", "--output", str(output)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["strategy"] == "avalanche"
        assert data["chart_data"][0]["balances"] == {"A": 1000.0, "B": 3000.0}
        assert [e["name"] for e in data["payoff_order"]] == ["B", "A"]

    def test_payoff_csv_export(self, runner, tmp_path):
        output = tmp_path / "payoff.csv"

        result = runner.invoke(
            cli, ["payoff", "-d", "A:1000:18:25", "-b", "400", "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        rows = list(csv.reader(output.open()))
        assert rows[0] == ["Month", "Total_Balance", "A"]
        assert rows[1][0] == "0"

    def test_unsupported_output(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["payoff", "-d", "A:1000:18:25", "-b", "400", "--output", str(tmp_path / "x.txt")]
        )

        assert result.exit_code == 2

    def test_compare(self, runner):
        result = runner.invoke(
            cli,
            ["compare", "-d", "Big:5000:25:100", "-d", "Small:800:10:25", "-b", "500"],
        )

        assert result.exit_code == 0, result.output
        assert "avalanche saves" in result.output


class TestRestructureCommands:
    """transfer and loan."""

    def test_transfer_defaults_to_required_payment(self, runner):
        result = runner.invoke(
            cli,
            [
                "transfer",
                "--total-debt", "6000",
                "--current-apr", "22",
                "--transfer-amount", "6000",
                "--intro-months", "15",
                "--post-intro-apr", "24",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Payment used       : 412.00" in result.output
        assert "Paid in intro      : Yes" in result.output

    def test_transfer_without_intro_needs_payment(self, runner):
        result = runner.invoke(
            cli,
            [
                "transfer",
                "--total-debt", "6000",
                "--current-apr", "22",
                "--transfer-amount", "6000",
                "--intro-months", "0",
                "--post-intro-apr", "24",
            ],
        )

        assert result.exit_code == 2

    def test_loan(self, runner):
        result = runner.invoke(cli, ["loan", "--total-debt", "10k", "-r", "12", "-t", "36"])

        assert result.exit_code == 0, result.output
        assert "Monthly payment    : 332.14" in result.output

    def test_loan_zero_term(self, runner):
        result = runner.invoke(cli, ["loan", "--total-debt", "10k", "-r", "12", "-t", "0"])

        assert result.exit_code == 2
        assert "Loan term" in result.output


class TestTakeHomeCommand:
    """take-home."""

    def test_take_home_with_expenses(self, runner):
        result = runner.invoke(
            cli,
            ["take-home", "-s", "120k", "--state-rate", "5", "--expenses", "5000"],
        )

        assert result.exit_code == 0, result.output
        assert "State tax          : 500.00" in result.output
        assert "Available for debts" in result.output

    def test_take_home_json(self, runner, tmp_path):
        output = tmp_path / "tax.json"

        result = runner.invoke(
            cli, ["take-home", "-s", "120000", "--state-rate", "5", "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text())["state_tax"] == pytest.approx(500.0)
