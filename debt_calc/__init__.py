"""Debt payoff, restructuring and take-home pay calculators."""

from .data_models import (
    Debt,
    LoanParams,
    PayoffResult,
    SimulationResult,
    Strategy,
    TaxParams,
    TaxResult,
    TransferParams,
)
from .engine import compare_strategies, simulate_payoff, summarize_debts
from .errors import InvalidInput
from .restructure import simulate_restructure, solve_required_transfer_payment
from .tax import available_budget, estimate_take_home

__version__ = "0.1.0"
__all__ = [
    "Debt",
    "LoanParams",
    "PayoffResult",
    "SimulationResult",
    "Strategy",
    "TaxParams",
    "TaxResult",
    "TransferParams",
    "InvalidInput",
    "simulate_payoff",
    "summarize_debts",
    "compare_strategies",
    "simulate_restructure",
    "solve_required_transfer_payment",
    "estimate_take_home",
    "available_budget",
]
