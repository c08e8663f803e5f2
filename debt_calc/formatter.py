"""Output helpers for the debt calculator.

This module provides simple functions to render payoff results, restructuring
schedules and take-home estimates in a tabular text format. Output goes
through ``click.echo`` so the command line can capture it in tests.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

import click

from .data_models import (
    ChartPoint,
    DebtSummary,
    PayoffResult,
    RestructureRow,
    SimulationResult,
    StrategyComparison,
    TaxResult,
)
from .engine import MAX_MONTHS


def _years_months(months: int) -> str:
    years, rest = divmod(months, 12)
    if years and rest:
        return f"{years}y {rest}m"
    if years:
        return f"{years}y"
    return f"{rest}m"


def print_debt_summary(summary: DebtSummary) -> None:
    """Print the portfolio totals shown before a simulation."""
    click.echo(f"Total balance      : {summary.total_balance:.2f}")
    click.echo(f"Total minimums     : {summary.total_min_payment:.2f}")
    click.echo(f"Monthly interest   : {summary.monthly_interest:.2f}")
    click.echo(f"Weighted APR       : {summary.weighted_apr:.2f}%")
    click.echo(f"Effective budget   : {summary.effective_budget:.2f}")
    click.echo(f"Monthly principal  : {summary.monthly_principal:.2f}")


def print_payoff_summary(result: PayoffResult) -> None:
    """Print the headline figures of a payoff simulation."""
    click.echo(f"Summary ({result.strategy.value})")
    click.echo("-" * 72)
    click.echo(f"Months to debt free: {result.months_to_free} ({_years_months(result.months_to_free)})")
    click.echo(f"Total interest     : {result.total_interest:.2f}")
    if result.budget_shortfall:
        click.echo(
            f"Budget below minimums in {result.shortfall_months} months; minimums were paid anyway"
        )
    if result.months_to_free >= MAX_MONTHS and result.chart_data[-1].total_balance > Decimal("0.01"):
        click.echo(f"Not paid off within {MAX_MONTHS} months")
    if result.payoff_order:
        click.echo("Payoff order:")
        for position, event in enumerate(result.payoff_order, start=1):
            click.echo(f"  {position}. {event.name} (month {event.month})")
    click.echo("-" * 72)


def print_balance_table(chart_data: Iterable[ChartPoint]) -> None:
    """Print per-debt balances, one row per month."""
    rows: List[ChartPoint] = list(chart_data)
    if not rows:
        return
    names = list(rows[0].balances)
    click.echo("\t".join(["Month", "Total"] + names))
    for point in rows:
        row = [str(point.month), f"{point.total_balance:.2f}"]
        row.extend(f"{point.balances.get(name, Decimal('0')):.2f}" for name in names)
        click.echo("\t".join(row))


def print_comparison(comparison: StrategyComparison) -> None:
    """Print the chosen strategy next to the alternative.

    A positive saving means the chosen strategy pays less interest.
    """
    chosen, other = comparison.chosen, comparison.alternative
    click.echo("Comparison")
    click.echo("=" * 72)
    click.echo(f"Effective budget   : {comparison.budget:.2f}")
    click.echo(
        f"{'Metric':20s} {chosen.strategy.value:>15s} {other.strategy.value:>15s} {'Difference':>15s}"
    )
    click.echo(
        f"{'months_to_free':20s} {chosen.months_to_free:15d} {other.months_to_free:15d} "
        f"{other.months_to_free - chosen.months_to_free:15d}"
    )
    click.echo(
        f"{'total_interest':20s} {chosen.total_interest:15.2f} {other.total_interest:15.2f} "
        f"{comparison.interest_saved:15.2f}"
    )
    if comparison.interest_saved > 0:
        click.echo(f"{chosen.strategy.value} saves {comparison.interest_saved:.2f} in interest")
    elif comparison.interest_saved < 0:
        click.echo(f"{chosen.strategy.value} costs {-comparison.interest_saved:.2f} more in interest")
    click.echo("=" * 72)


def print_restructure_summary(result: SimulationResult) -> None:
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Starting balance   : {result.initial_balance:.2f}")
    if result.monthly_payment is not None:
        click.echo(f"Monthly payment    : {result.monthly_payment:.2f}")
    click.echo(f"Months to payoff   : {result.months_to_payoff}")
    click.echo(f"Total interest     : {result.total_interest_paid:.2f}")
    click.echo(f"Total cost         : {result.total_cost:.2f}")
    if result.is_paid_in_intro is not None:
        click.echo(f"Paid in intro      : {'Yes' if result.is_paid_in_intro else 'No'}")
    click.echo("-" * 72)


def print_restructure_schedule(schedule: Iterable[RestructureRow]) -> None:
    """Print a restructuring schedule as a simple table."""
    rows = list(schedule)
    show_intro = any(row.is_intro_period is not None for row in rows)
    headers = ["Month", "Balance", "Interest", "Principal"]
    if show_intro:
        headers.append("Intro")
    click.echo("\t".join(headers))
    for row in rows:
        cells = [
            str(row.month),
            f"{row.balance:.2f}",
            f"{row.interest_paid:.2f}",
            f"{row.principal_paid:.2f}",
        ]
        if show_intro:
            cells.append("Yes" if row.is_intro_period else "No")
        click.echo("\t".join(cells))


def print_tax_result(result: TaxResult) -> None:
    click.echo("Monthly take-home")
    click.echo("-" * 72)
    click.echo(f"Gross              : {result.gross_monthly:.2f}")
    click.echo(f"401(k)             : {result.contribution_401k:.2f}")
    click.echo(f"Federal tax        : {result.federal_tax:.2f}")
    click.echo(f"FICA               : {result.fica_tax:.2f}")
    click.echo(f"State tax          : {result.state_tax:.2f}")
    if result.local_tax:
        click.echo(f"Local tax          : {result.local_tax:.2f}")
    click.echo(f"Net                : {result.net_monthly:.2f}")
    click.echo(f"Effective tax rate : {result.effective_tax_rate:.2f}%")
    click.echo("-" * 72)
