"""Core payoff engine for the debt calculator.

This module simulates paying down several debts at once under a single
monthly budget. Each month interest accrues, every debt receives its
(shrinking) minimum payment, and whatever is left of the budget is poured
into the debts in strategy order: lowest balance first for the snowball,
highest APR first for the avalanche. Results are returned as a
``PayoffResult`` holding the month-by-month balances and the order in which
the debts were cleared.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal, getcontext
from typing import Callable, Dict, Iterable, List, Union

from .data_models import (
    ChartPoint,
    Debt,
    DebtSummary,
    PayoffEvent,
    PayoffResult,
    Strategy,
    StrategyComparison,
)
from .errors import InvalidInput
from .utils import Number, monthly_rate, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

MAX_MONTHS = 600  # 50 years
PAID_OFF_EPSILON = Decimal("0.01")
MINIMUM_PAYMENT_FLOOR = Decimal("25")


@dataclass
class _WorkingDebt:
    """Mutable per-simulation copy of a ``Debt``."""

    id: str
    name: str
    balance: Decimal
    apr: Decimal
    min_payment_rate: Decimal


def _working_copies(debts: Iterable[Debt]) -> List[_WorkingDebt]:
    copies: List[_WorkingDebt] = []
    for debt in debts:
        balance = to_decimal(debt.balance)
        min_payment = to_decimal(debt.min_payment)
        if balance < 0:
            raise InvalidInput(f"Debt '{debt.name}' has a negative balance")
        if min_payment < 0:
            raise InvalidInput(f"Debt '{debt.name}' has a negative minimum payment")
        rate = min_payment / balance if balance > 0 else Decimal("0")
        copies.append(
            _WorkingDebt(
                id=debt.id,
                name=debt.name,
                balance=balance,
                apr=to_decimal(debt.apr),
                min_payment_rate=rate,
            )
        )
    return copies


def _snowball_order(debts: List[_WorkingDebt]) -> List[_WorkingDebt]:
    return sorted(debts, key=lambda d: d.balance)


def _avalanche_order(debts: List[_WorkingDebt]) -> List[_WorkingDebt]:
    # sorted() is stable, so ties keep the caller's order
    return sorted(debts, key=lambda d: -d.apr)


_ORDERINGS: Dict[Strategy, Callable[[List[_WorkingDebt]], List[_WorkingDebt]]] = {
    Strategy.SNOWBALL: _snowball_order,
    Strategy.AVALANCHE: _avalanche_order,
}


def _required_minimum(debt: _WorkingDebt) -> Decimal:
    """Return this month's minimum payment for a debt with a positive balance.

    The minimum follows the frozen payment rate, never drops below the floor,
    and never exceeds the balance.
    """
    minimum = debt.balance * debt.min_payment_rate
    if minimum < MINIMUM_PAYMENT_FLOOR:
        minimum = MINIMUM_PAYMENT_FLOOR
    if minimum > debt.balance:
        minimum = debt.balance
    return minimum


def _snapshot(month: int, debts: List[_WorkingDebt]) -> ChartPoint:
    total = sum((d.balance for d in debts), Decimal("0"))
    return ChartPoint(
        month=month,
        total_balance=max(Decimal("0"), total),
        balances={d.name: max(Decimal("0"), d.balance) for d in debts},
    )


def _coerce_strategy(strategy: Union[Strategy, str]) -> Strategy:
    try:
        return Strategy(strategy)
    except ValueError as exc:
        raise InvalidInput(f"Unknown strategy: {strategy}") from exc


def simulate_payoff(
    debts: Iterable[Debt],
    monthly_budget: Number,
    strategy: Union[Strategy, str],
) -> PayoffResult:
    """Simulate paying off ``debts`` month by month.

    Parameters
    ----------
    debts: Iterable[Debt]
        The debts to pay off. They are copied before the simulation starts;
        the caller's instances are never modified.
    monthly_budget: Number
        Total money available each month, minimums included. When it does
        not cover the required minimums the minimums are paid anyway and the
        month is counted in ``PayoffResult.shortfall_months``.
    strategy: Strategy
        ``snowball`` or ``avalanche``.

    Returns
    -------
    PayoffResult
        Total interest, months until every balance is at most one cent (capped
        at ``MAX_MONTHS``), one chart point per month starting at month 0,
        and the payoff order.
    """
    strategy = _coerce_strategy(strategy)
    budget = to_decimal(monthly_budget)
    if budget < 0:
        raise InvalidInput("Monthly budget must not be negative")
    order = _ORDERINGS[strategy]

    current = _working_copies(debts)
    logger.debug(
        "Simulating %s payoff for %d debts with budget %s", strategy.value, len(current), budget
    )

    total_interest = Decimal("0")
    month = 0
    shortfall_months = 0
    chart_data: List[ChartPoint] = [_snapshot(0, current)]
    payoff_order: List[PayoffEvent] = []
    paid_off_ids = set()

    while any(d.balance > PAID_OFF_EPSILON for d in current) and month < MAX_MONTHS:
        month += 1

        for debt in current:
            if debt.balance > 0:
                interest = debt.balance * monthly_rate(debt.apr)
                debt.balance += interest
                total_interest += interest

        required = [
            (debt, _required_minimum(debt)) for debt in current if debt.balance > 0
        ]
        total_required = sum((amount for _, amount in required), Decimal("0"))
        if budget < total_required:
            shortfall_months += 1
        money_available = max(budget, total_required) - total_required

        for debt, amount in required:
            debt.balance -= amount

        # Ranked once per month; payoffs in the same month are recorded in
        # this order too.
        ranking = order(current)
        if money_available > 0:
            remaining_money = money_available
            for debt in ranking:
                if remaining_money <= 0:
                    break
                if debt.balance <= PAID_OFF_EPSILON:
                    continue
                payment = min(debt.balance, remaining_money)
                debt.balance -= payment
                remaining_money -= payment

        for debt in ranking:
            if debt.balance <= PAID_OFF_EPSILON and debt.id not in paid_off_ids:
                debt.balance = Decimal("0")
                paid_off_ids.add(debt.id)
                payoff_order.append(PayoffEvent(name=debt.name, month=month))

        chart_data.append(_snapshot(month, current))

    if any(d.balance > PAID_OFF_EPSILON for d in current):
        logger.warning(
            "Payoff did not finish within %d months; %d debts still open",
            MAX_MONTHS,
            sum(1 for d in current if d.balance > PAID_OFF_EPSILON),
        )
    if shortfall_months:
        logger.info(
            "Budget %s was below the required minimums in %d months", budget, shortfall_months
        )

    return PayoffResult(
        strategy=strategy,
        total_interest=total_interest,
        months_to_free=month,
        chart_data=chart_data,
        payoff_order=payoff_order,
        shortfall_months=shortfall_months,
    )


def summarize_debts(debts: Iterable[Debt], monthly_budget: Number = 0) -> DebtSummary:
    """Return totals, monthly interest and balance-weighted APR for ``debts``.

    ``interest_only_budget`` is the monthly interest rounded up to a whole
    unit, the smallest budget that keeps the total balance from growing.
    ``monthly_principal`` is the part of the effective budget (``monthly_budget``
    raised to the total minimum payment) left over after that interest.
    """
    debts = list(debts)
    budget = to_decimal(monthly_budget)
    total_balance = sum((to_decimal(d.balance) for d in debts), Decimal("0"))
    total_min = sum((to_decimal(d.min_payment) for d in debts), Decimal("0"))
    monthly_interest = sum(
        (to_decimal(d.balance) * monthly_rate(to_decimal(d.apr)) for d in debts), Decimal("0")
    )
    effective_budget = max(budget, total_min)
    if total_balance == 0:
        weighted_apr = Decimal("0")
    else:
        weighted_apr = (
            sum((to_decimal(d.balance) * to_decimal(d.apr) for d in debts), Decimal("0"))
            / total_balance
        )
    return DebtSummary(
        total_balance=total_balance,
        total_min_payment=total_min,
        monthly_interest=monthly_interest,
        weighted_apr=weighted_apr,
        interest_only_budget=monthly_interest.to_integral_value(rounding=ROUND_CEILING),
        effective_budget=effective_budget,
        monthly_principal=max(Decimal("0"), effective_budget - monthly_interest),
    )


def compare_strategies(
    debts: Iterable[Debt],
    monthly_budget: Number,
    strategy: Union[Strategy, str] = Strategy.AVALANCHE,
) -> StrategyComparison:
    """Run ``strategy`` and the other strategy on the same inputs.

    The budget is raised to the sum of the entered minimum payments before
    either simulation runs, so both see the same effective budget.
    """
    debts = list(debts)
    strategy = _coerce_strategy(strategy)
    budget = to_decimal(monthly_budget)
    effective_budget = max(budget, summarize_debts(debts).total_min_payment)

    chosen = simulate_payoff(debts, effective_budget, strategy)
    alternative = simulate_payoff(debts, effective_budget, strategy.other)
    return StrategyComparison(
        budget=effective_budget,
        chosen=chosen,
        alternative=alternative,
        interest_saved=alternative.total_interest - chosen.total_interest,
    )
