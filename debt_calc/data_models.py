"""Data models for the debt calculator.

This module defines dataclasses representing the entities used by the three
engines: debts and payoff results for the snowball/avalanche simulator,
balance-transfer and consolidation-loan parameters for the restructuring
simulator, and salary/tax inputs and outputs for the take-home estimator.
Monetary values and rates are ``Decimal``; the engines never mutate an input
instance.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union


class Strategy(str, Enum):
    """Order in which money above the minimums is poured into debts."""

    SNOWBALL = "snowball"  # lowest current balance first
    AVALANCHE = "avalanche"  # highest APR first

    @property
    def other(self) -> "Strategy":
        return Strategy.AVALANCHE if self is Strategy.SNOWBALL else Strategy.SNOWBALL


@dataclass
class Debt:
    """A single debt as entered by the user.

    Attributes
    ----------
    id: str
        Opaque unique key.
    name: str
        Display label. Chart snapshots are keyed by this value.
    balance: Decimal
        Current outstanding balance.
    apr: Decimal
        Annual percentage rate in percent (``Decimal("19.99")``).
    min_payment: Decimal
        The minimum payment at the current balance. The ratio
        ``min_payment / balance`` is frozen at the start of a simulation and
        used to shrink the minimum as the balance declines.
    """

    id: str
    name: str
    balance: Decimal
    apr: Decimal
    min_payment: Decimal


@dataclass
class PayoffEvent:
    """The month in which a debt reached zero."""

    name: str
    month: int


@dataclass
class ChartPoint:
    """Balances at the end of one simulated month (month 0 is the start)."""

    month: int
    total_balance: Decimal
    balances: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class PayoffResult:
    """Outcome of a snowball/avalanche simulation.

    ``shortfall_months`` counts the months in which the requested budget did
    not cover the required minimums; the simulation still paid the minimums
    in those months.
    """

    strategy: Strategy
    total_interest: Decimal
    months_to_free: int
    chart_data: List[ChartPoint]
    payoff_order: List[PayoffEvent]
    shortfall_months: int = 0

    @property
    def budget_shortfall(self) -> bool:
        return self.shortfall_months > 0


@dataclass
class DebtSummary:
    """Aggregate figures for a list of debts before any simulation.

    ``effective_budget`` is the requested budget raised to the total minimum
    payment; ``monthly_principal`` is what that budget leaves after the
    first month's interest, never below zero.
    """

    total_balance: Decimal
    total_min_payment: Decimal
    monthly_interest: Decimal
    weighted_apr: Decimal
    interest_only_budget: Decimal
    effective_budget: Decimal = Decimal("0")
    monthly_principal: Decimal = Decimal("0")


@dataclass
class StrategyComparison:
    """The chosen strategy next to the alternative one.

    ``interest_saved`` is positive when ``chosen`` pays less interest than
    ``alternative``.
    """

    budget: Decimal
    chosen: PayoffResult
    alternative: PayoffResult
    interest_saved: Decimal


@dataclass
class TransferParams:
    """Move part of a debt to a promotional balance-transfer card.

    The portion of ``total_debt`` above ``transfer_amount`` (the card's
    credit limit) stays where it is at ``current_apr``.
    """

    total_debt: Decimal
    current_apr: Decimal
    monthly_payment: Decimal
    transfer_amount: Decimal
    transfer_fee_percent: Decimal
    intro_duration_months: int
    intro_apr: Decimal
    post_intro_apr: Decimal


@dataclass
class LoanParams:
    """Replace the whole debt with a fixed-term consolidation loan.

    ``current_apr`` and ``monthly_payment`` are kept so that both variants
    can be built from the same form; the loan schedule does not use them.
    """

    total_debt: Decimal
    current_apr: Decimal
    monthly_payment: Decimal
    loan_rate: Decimal
    loan_term_months: int
    origination_fee_percent: Decimal


RestructureParams = Union[TransferParams, LoanParams]


@dataclass
class RestructureRow:
    """One month of a restructuring schedule.

    ``is_intro_period`` is only set for balance-transfer schedules.
    """

    month: int
    balance: Decimal
    interest_paid: Decimal
    principal_paid: Decimal
    is_intro_period: Optional[bool] = None


@dataclass
class SimulationResult:
    """Outcome of a balance-transfer or consolidation-loan simulation."""

    months_to_payoff: int
    total_interest_paid: Decimal
    total_cost: Decimal
    initial_balance: Decimal
    monthly_data: List[RestructureRow]
    is_paid_in_intro: Optional[bool] = None  # transfer only
    monthly_payment: Optional[Decimal] = None  # loan only


@dataclass
class TaxParams:
    """Salary and elections for the take-home estimate.

    ``custom_state_tax_rate`` applies when ``state`` is ``"Other"``; the two
    local surtax toggles apply when ``state`` is ``"OR"``.
    """

    annual_salary: Decimal
    filing_status: str  # "single" or "married"
    contribution_401k_percent: Decimal = Decimal("0")
    state: str = "Other"  # "OR" or "Other"
    custom_state_tax_rate: Decimal = Decimal("0")
    is_portland_metro: bool = False
    is_multnomah_county: bool = False


@dataclass
class TaxResult:
    """Monthly take-home breakdown.

    Every field is a monthly amount except ``effective_tax_rate``, which is
    total annual tax as a percentage of annual gross salary.
    """

    gross_monthly: Decimal
    federal_tax: Decimal
    state_tax: Decimal
    local_tax: Decimal
    fica_tax: Decimal
    contribution_401k: Decimal
    net_monthly: Decimal
    effective_tax_rate: Decimal
