"""Restructuring engine for the debt calculator.

Two ways of restructuring a pooled debt are modelled here:

* a balance transfer, where up to the card's limit moves to a promotional
  rate (plus a one-off fee) and anything above the limit stays at the
  current rate. The two balances are paid from one fixed monthly payment,
  highest rate first, until both are cleared;
* a consolidation loan, where the whole debt plus an origination fee becomes
  a fixed-term annuity loan.

``solve_required_transfer_payment`` answers the planning question for the
first option: how much has to be paid each month to be debt free before the
promotional period ends.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import List

from .data_models import (
    LoanParams,
    RestructureParams,
    RestructureRow,
    SimulationResult,
    TransferParams,
)
from .errors import InvalidInput
from .utils import calculate_annuity_payment, monthly_rate, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

MAX_MONTHS = 600
PAID_OFF_EPSILON = Decimal("0.01")


def _split_transfer(params: TransferParams):
    """Return ``(transfer_balance, remaining_balance)`` at month 0.

    The fee is charged on the transferred amount only.
    """
    total_debt = to_decimal(params.total_debt)
    transfer_limit = to_decimal(params.transfer_amount)
    if total_debt < 0:
        raise InvalidInput("Total debt must not be negative")
    if transfer_limit < 0:
        raise InvalidInput("Transfer amount must not be negative")
    fee = to_decimal(params.transfer_fee_percent)
    transferred = min(total_debt, transfer_limit)
    transfer_balance = transferred * (1 + fee / Decimal(100))
    remaining_balance = max(Decimal("0"), total_debt - transfer_limit)
    return transfer_balance, remaining_balance


def _simulate_transfer(params: TransferParams) -> SimulationResult:
    transfer_balance, remaining_balance = _split_transfer(params)
    intro_months = params.intro_duration_months
    intro_apr = to_decimal(params.intro_apr)
    post_intro_apr = to_decimal(params.post_intro_apr)
    current_apr = to_decimal(params.current_apr)
    payment = to_decimal(params.monthly_payment)
    if payment < 0:
        raise InvalidInput("Monthly payment must not be negative")

    initial_total = transfer_balance + remaining_balance
    logger.debug(
        "Simulating transfer: %s at promotional rate, %s left at %s%%",
        transfer_balance,
        remaining_balance,
        current_apr,
    )

    total_interest = Decimal("0")
    month = 0
    monthly_data: List[RestructureRow] = [
        RestructureRow(
            month=0,
            balance=initial_total,
            interest_paid=Decimal("0"),
            principal_paid=Decimal("0"),
            is_intro_period=True,
        )
    ]

    while (
        transfer_balance > PAID_OFF_EPSILON or remaining_balance > PAID_OFF_EPSILON
    ) and month < MAX_MONTHS:
        month += 1
        is_intro = month <= intro_months
        transfer_apr = intro_apr if is_intro else post_intro_apr

        transfer_interest = transfer_balance * monthly_rate(transfer_apr)
        transfer_balance += transfer_interest
        remaining_interest = remaining_balance * monthly_rate(current_apr)
        remaining_balance += remaining_interest
        interest_this_month = transfer_interest + remaining_interest
        total_interest += interest_this_month

        money_available = payment
        if current_apr >= transfer_apr:
            paid = min(remaining_balance, money_available)
            remaining_balance -= paid
            money_available -= paid
            paid = min(transfer_balance, money_available)
            transfer_balance -= paid
            money_available -= paid
        else:
            paid = min(transfer_balance, money_available)
            transfer_balance -= paid
            money_available -= paid
            paid = min(remaining_balance, money_available)
            remaining_balance -= paid
            money_available -= paid

        current_total = transfer_balance + remaining_balance
        previous_total = monthly_data[-1].balance
        actual_payment = (previous_total + interest_this_month) - current_total
        principal_paid = actual_payment - interest_this_month

        monthly_data.append(
            RestructureRow(
                month=month,
                balance=max(Decimal("0"), current_total),
                interest_paid=interest_this_month,
                principal_paid=max(Decimal("0"), principal_paid),
                is_intro_period=is_intro,
            )
        )

    if transfer_balance > PAID_OFF_EPSILON or remaining_balance > PAID_OFF_EPSILON:
        logger.warning("Balance transfer did not pay off within %d months", MAX_MONTHS)

    paid_in_intro = (
        month <= intro_months
        and transfer_balance <= PAID_OFF_EPSILON
        and remaining_balance <= PAID_OFF_EPSILON
    )
    return SimulationResult(
        months_to_payoff=month,
        total_interest_paid=total_interest,
        # Approximation: the interest is added to the starting balance.
        total_cost=initial_total + total_interest,
        initial_balance=initial_total,
        monthly_data=monthly_data,
        is_paid_in_intro=paid_in_intro,
    )


def _simulate_loan(params: LoanParams) -> SimulationResult:
    total_debt = to_decimal(params.total_debt)
    if total_debt < 0:
        raise InvalidInput("Total debt must not be negative")
    term = params.loan_term_months
    if term <= 0:
        raise InvalidInput("Loan term must be a positive number of months")

    fee = to_decimal(params.origination_fee_percent)
    principal = total_debt * (1 + fee / Decimal(100))
    rate = monthly_rate(to_decimal(params.loan_rate))
    payment = calculate_annuity_payment(principal, rate, term)
    logger.debug("Consolidation loan of %s over %d months: payment %s", principal, term, payment)

    balance = principal
    total_interest = Decimal("0")
    monthly_data: List[RestructureRow] = [
        RestructureRow(
            month=0,
            balance=balance,
            interest_paid=Decimal("0"),
            principal_paid=Decimal("0"),
        )
    ]
    for month in range(1, term + 1):
        interest = balance * rate
        principal_paid = payment - interest
        balance -= principal_paid
        total_interest += interest
        monthly_data.append(
            RestructureRow(
                month=month,
                balance=max(Decimal("0"), balance),
                interest_paid=interest,
                principal_paid=principal_paid,
            )
        )

    return SimulationResult(
        months_to_payoff=term,
        total_interest_paid=total_interest,
        total_cost=principal + total_interest,
        initial_balance=principal,
        monthly_data=monthly_data,
        monthly_payment=payment,
    )


def simulate_restructure(params: RestructureParams) -> SimulationResult:
    """Simulate a balance transfer or a consolidation loan.

    Parameters
    ----------
    params: TransferParams | LoanParams
        The variant decides which schedule is built.

    Returns
    -------
    SimulationResult
        The schedule starts with a month-0 row holding the starting balance.
        Transfer results set ``is_paid_in_intro``; loan results set
        ``monthly_payment``.
    """
    if isinstance(params, TransferParams):
        return _simulate_transfer(params)
    if isinstance(params, LoanParams):
        return _simulate_loan(params)
    raise InvalidInput(f"Unsupported restructuring parameters: {type(params).__name__}")


def solve_required_transfer_payment(params: TransferParams) -> Decimal:
    """Return the monthly payment that clears a transfer within the intro period.

    The transferred balance (fee included) is amortized at the intro APR and
    the portion left behind at the current APR, both over
    ``intro_duration_months``; the result is the sum of the two payments.
    The figure is advisory and is not written back into ``params``.
    """
    months = params.intro_duration_months
    if months <= 0:
        raise InvalidInput("Intro duration must be a positive number of months")
    transfer_balance, remaining_balance = _split_transfer(params)

    payment = calculate_annuity_payment(
        transfer_balance, monthly_rate(to_decimal(params.intro_apr)), months
    )
    if remaining_balance > 0:
        payment += calculate_annuity_payment(
            remaining_balance, monthly_rate(to_decimal(params.current_apr)), months
        )
    return payment
