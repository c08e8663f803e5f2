"""Command‑line interface for the debt calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can simulate a snowball or avalanche payoff, compare the
two strategies, try a balance transfer or a consolidation loan, and estimate
the take-home pay that funds the plan. Results can be printed to the
terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple

import click

from .data_models import Debt, LoanParams, PayoffResult, TaxParams, TransferParams
from .engine import compare_strategies, simulate_payoff, summarize_debts
from .errors import InvalidInput
from .formatter import (
    print_balance_table,
    print_comparison,
    print_debt_summary,
    print_payoff_summary,
    print_restructure_schedule,
    print_restructure_summary,
    print_tax_result,
)
from .restructure import simulate_restructure, solve_required_transfer_payment
from .tax import available_budget, estimate_take_home
from .utils import decimal_from_str, to_jsonable

MAX_ROWS = 120


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("5000") and shorthand with ``k``/``m`` suffixes
    (e.g., "5k" meaning 5_000). Returns a Decimal.
    """
    value = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        return decimal_from_str(value) * factor
    except InvalidInput:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string such as "19.99" or "19.99%"."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        return decimal_from_str(value)
    except InvalidInput:
        raise click.BadParameter(f"Invalid percentage: {value}")


def _amount_callback(ctx, param, value):
    return None if value is None else parse_amount(value)


def _percent_callback(ctx, param, value):
    return None if value is None else parse_percent(value)


def parse_debt_strings(values: Tuple[str, ...]) -> List[Debt]:
    debts: List[Debt] = []
    for index, item in enumerate(values, start=1):
        parts = item.split(":")
        if len(parts) != 4:
            raise click.BadParameter(
                f"Debt must be in NAME:BALANCE:APR:MIN format; got {item}"
            )
        name, balance, apr, minimum = parts
        if not name.strip():
            raise click.BadParameter(f"Debt name must not be empty; got {item}")
        debts.append(
            Debt(
                id=str(index),
                name=name.strip(),
                balance=parse_amount(balance),
                apr=parse_percent(apr),
                min_payment=parse_amount(minimum),
            )
        )
    return debts


def export_to_json(path: Path, result) -> None:
    """Export any result dataclass to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(to_jsonable(result), f, indent=2)


def export_payoff_csv(path: Path, result: PayoffResult) -> None:
    """Export the month-by-month balances to a CSV file."""
    names = list(result.chart_data[0].balances) if result.chart_data else []
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Month", "Total_Balance"] + names)
        for point in result.chart_data:
            writer.writerow(
                [point.month, float(point.total_balance)]
                + [float(point.balances.get(name, Decimal("0"))) for name in names]
            )


def export_restructure_csv(path: Path, result) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Month", "Balance", "Interest", "Principal", "Intro"])
        for row in result.monthly_data:
            writer.writerow(
                [
                    row.month,
                    float(row.balance),
                    float(row.interest_paid),
                    float(row.principal_paid),
                    "" if row.is_intro_period is None else row.is_intro_period,
                ]
            )


def _write_output(output: str, result, csv_writer) -> None:
    path = Path(output)
    if path.suffix.lower() == ".json":
        export_to_json(path, result)
    elif path.suffix.lower() == ".csv":
        csv_writer(path, result)
    else:
        raise click.BadParameter("Unsupported output format; use .json or .csv")
    click.echo(f"Results exported to {path}")


def _print_truncated(rows, printer) -> None:
    # Limit schedule length printed to avoid flooding the terminal
    if len(rows) > MAX_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_ROWS} rows.")
        printer(rows[:MAX_ROWS])
    else:
        printer(rows)


def _debt_options(func):
    func = click.option(
        "--strategy",
        type=click.Choice(["snowball", "avalanche"]),
        default="avalanche",
        help="Where money above the minimums goes first",
    )(func)
    func = click.option(
        "--budget", "-b", required=True, callback=_amount_callback, help="Total monthly budget"
    )(func)
    func = click.option(
        "--debt",
        "-d",
        "debt",
        multiple=True,
        required=True,
        help="Debt in NAME:BALANCE:APR:MIN format (repeatable)",
    )(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log simulation details to stderr")
def cli(verbose: bool) -> None:
    """A command‑line debt payoff and restructuring calculator."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@_debt_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def payoff(debt: Tuple[str, ...], budget: Decimal, strategy: str, output: Optional[str]) -> None:
    """Simulate paying off all debts under one monthly budget."""
    debts = parse_debt_strings(debt)
    try:
        result = simulate_payoff(debts, budget, strategy)
    except InvalidInput as exc:
        raise click.BadParameter(str(exc))
    if output:
        _write_output(output, result, export_payoff_csv)
        return
    print_debt_summary(summarize_debts(debts, budget))
    print_payoff_summary(result)
    _print_truncated(result.chart_data, print_balance_table)


@cli.command()
@_debt_options
def compare(debt: Tuple[str, ...], budget: Decimal, strategy: str) -> None:
    """Compare the chosen strategy against the other one."""
    debts = parse_debt_strings(debt)
    try:
        comparison = compare_strategies(debts, budget, strategy)
    except InvalidInput as exc:
        raise click.BadParameter(str(exc))
    print_comparison(comparison)


@cli.command()
@click.option("--total-debt", required=True, callback=_amount_callback, help="Total debt to restructure")
@click.option("--current-apr", required=True, callback=_percent_callback, help="APR of the existing debt")
@click.option("--transfer-amount", required=True, callback=_amount_callback, help="Credit limit of the transfer card")
@click.option("--fee", "fee", default="3", callback=_percent_callback, help="Transfer fee (percent)")
@click.option("--intro-months", required=True, type=int, help="Length of the promotional period")
@click.option("--intro-apr", default="0", callback=_percent_callback, help="Promotional APR")
@click.option("--post-intro-apr", required=True, callback=_percent_callback, help="APR after the promotion")
@click.option(
    "--payment",
    "payment",
    callback=_amount_callback,
    help="Monthly payment. Defaults to the payment that clears the debt within the promotion.",
)
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def transfer(
    total_debt: Decimal,
    current_apr: Decimal,
    transfer_amount: Decimal,
    fee: Decimal,
    intro_months: int,
    intro_apr: Decimal,
    post_intro_apr: Decimal,
    payment: Optional[Decimal],
    output: Optional[str],
) -> None:
    """Simulate moving the debt to a balance-transfer card."""
    params = TransferParams(
        total_debt=total_debt,
        current_apr=current_apr,
        monthly_payment=payment if payment is not None else Decimal("0"),
        transfer_amount=transfer_amount,
        transfer_fee_percent=fee,
        intro_duration_months=intro_months,
        intro_apr=intro_apr,
        post_intro_apr=post_intro_apr,
    )
    try:
        required = solve_required_transfer_payment(params) if intro_months > 0 else None
        if payment is None:
            if required is None:
                raise InvalidInput("--payment is required when there is no intro period")
            params.monthly_payment = required
        result = simulate_restructure(params)
    except InvalidInput as exc:
        raise click.BadParameter(str(exc))
    if output:
        _write_output(output, result, export_restructure_csv)
        return
    if required is not None:
        click.echo(f"Payment to clear within {intro_months} months: {required:.2f}")
    click.echo(f"Payment used       : {params.monthly_payment:.2f}")
    print_restructure_summary(result)
    _print_truncated(result.monthly_data, print_restructure_schedule)


@cli.command()
@click.option("--total-debt", required=True, callback=_amount_callback, help="Total debt to consolidate")
@click.option("--rate", "-r", required=True, callback=_percent_callback, help="Loan APR (percent)")
@click.option("--term", "-t", required=True, type=int, help="Loan term in months")
@click.option("--origination-fee", default="0", callback=_percent_callback, help="Origination fee (percent)")
@click.option("--current-apr", default="0", callback=_percent_callback, help="APR of the existing debt")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def loan(
    total_debt: Decimal,
    rate: Decimal,
    term: int,
    origination_fee: Decimal,
    current_apr: Decimal,
    output: Optional[str],
) -> None:
    """Simulate replacing the debt with a consolidation loan."""
    params = LoanParams(
        total_debt=total_debt,
        current_apr=current_apr,
        monthly_payment=Decimal("0"),
        loan_rate=rate,
        loan_term_months=term,
        origination_fee_percent=origination_fee,
    )
    try:
        result = simulate_restructure(params)
    except InvalidInput as exc:
        raise click.BadParameter(str(exc))
    if output:
        _write_output(output, result, export_restructure_csv)
        return
    print_restructure_summary(result)
    _print_truncated(result.monthly_data, print_restructure_schedule)


@cli.command("take-home")
@click.option("--salary", "-s", required=True, callback=_amount_callback, help="Annual gross salary")
@click.option("--filing-status", type=click.Choice(["single", "married"]), default="single")
@click.option("--401k", "contribution", default="0", callback=_percent_callback, help="401(k) contribution (percent of salary)")
@click.option("--state", type=click.Choice(["OR", "Other"]), default="Other")
@click.option("--state-rate", default="0", callback=_percent_callback, help="Flat state tax rate when --state Other")
@click.option("--portland-metro", is_flag=True, help="Apply the Metro SHS surtax (Oregon)")
@click.option("--multnomah", is_flag=True, help="Apply the Multnomah County PFA surtax (Oregon)")
@click.option("--expenses", callback=_amount_callback, help="Monthly living expenses")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def take_home(
    salary: Decimal,
    filing_status: str,
    contribution: Decimal,
    state: str,
    state_rate: Decimal,
    portland_metro: bool,
    multnomah: bool,
    expenses: Optional[Decimal],
    output: Optional[str],
) -> None:
    """Estimate monthly take-home pay and the budget left for debts."""
    params = TaxParams(
        annual_salary=salary,
        filing_status=filing_status,
        contribution_401k_percent=contribution,
        state=state,
        custom_state_tax_rate=state_rate,
        is_portland_metro=portland_metro,
        is_multnomah_county=multnomah,
    )
    try:
        result = estimate_take_home(params)
    except InvalidInput as exc:
        raise click.BadParameter(str(exc))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Take-home export must use .json extension")
        export_to_json(path, result)
        click.echo(f"Results exported to {path}")
        return
    print_tax_result(result)
    if expenses is not None:
        click.echo(f"Available for debts: {available_budget(result, expenses):.2f}")


if __name__ == "__main__":
    cli()
