"""Take-home pay estimator.

Turns an annual salary and a handful of elections into a monthly net figure
that can be used as the budget of a payoff simulation. The tables are a
simplified approximation of 2025 federal rules, Oregon state tax, and the
Portland Metro and Multnomah County income surtaxes; states other than
Oregon are approximated by a flat user-supplied rate.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import List, Tuple

from .data_models import TaxParams, TaxResult
from .errors import InvalidInput
from .utils import Number, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

INFINITY = Decimal("Infinity")

Brackets = List[Tuple[Decimal, Decimal]]  # (upper limit, marginal rate)

FEDERAL_BRACKETS = {
    "single": [
        (Decimal("11925"), Decimal("0.10")),
        (Decimal("48475"), Decimal("0.12")),
        (Decimal("103350"), Decimal("0.22")),
        (Decimal("197300"), Decimal("0.24")),
        (Decimal("250525"), Decimal("0.32")),
        (Decimal("626350"), Decimal("0.35")),
        (INFINITY, Decimal("0.37")),
    ],
    "married": [
        (Decimal("23850"), Decimal("0.10")),
        (Decimal("96950"), Decimal("0.12")),
        (Decimal("206700"), Decimal("0.22")),
        (Decimal("394600"), Decimal("0.24")),
        (Decimal("501050"), Decimal("0.32")),
        (Decimal("751600"), Decimal("0.35")),
        (INFINITY, Decimal("0.37")),
    ],
}
FEDERAL_STANDARD_DEDUCTION = {"single": Decimal("15000"), "married": Decimal("30000")}

CONTRIBUTION_401K_CAP = Decimal("23500")

SS_WAGE_BASE = Decimal("176100")
SS_RATE = Decimal("0.062")
MEDICARE_RATE = Decimal("0.0145")
ADDITIONAL_MEDICARE_THRESHOLD = Decimal("200000")
ADDITIONAL_MEDICARE_RATE = Decimal("0.009")

OREGON_BRACKETS = {
    "single": [
        (Decimal("4050"), Decimal("0.0475")),
        (Decimal("10200"), Decimal("0.0675")),
        (Decimal("125000"), Decimal("0.0875")),
        (INFINITY, Decimal("0.099")),
    ],
    "married": [
        (Decimal("8100"), Decimal("0.0475")),
        (Decimal("20400"), Decimal("0.0675")),
        (Decimal("250000"), Decimal("0.0875")),
        (INFINITY, Decimal("0.099")),
    ],
}
OREGON_STANDARD_DEDUCTION = {"single": Decimal("2745"), "married": Decimal("5495")}
OREGON_FEDERAL_SUBTRACTION_CAP = Decimal("7800")

# Metro Supportive Housing Services tax
METRO_THRESHOLD = {"single": Decimal("125000"), "married": Decimal("200000")}
METRO_RATE = Decimal("0.01")

# Multnomah County Preschool for All tax; the second tier is added on top
MULTNOMAH_TIERS = {
    "single": [(Decimal("125000"), Decimal("0.015")), (Decimal("250000"), Decimal("0.015"))],
    "married": [(Decimal("200000"), Decimal("0.015")), (Decimal("400000"), Decimal("0.015"))],
}

FILING_STATUSES = ("single", "married")
STATES = ("OR", "Other")


def bracket_tax(taxable_income: Decimal, brackets: Brackets) -> Decimal:
    """Apply a progressive marginal table to ``taxable_income``."""
    tax = Decimal("0")
    previous_limit = Decimal("0")
    for limit, rate in brackets:
        if taxable_income <= previous_limit:
            break
        tax += (min(taxable_income, limit) - previous_limit) * rate
        previous_limit = limit
    return tax


def fica_tax(salary: Decimal) -> Decimal:
    """Employee Social Security plus Medicare (including the surtax)."""
    social_security = min(salary, SS_WAGE_BASE) * SS_RATE
    medicare = salary * MEDICARE_RATE
    if salary > ADDITIONAL_MEDICARE_THRESHOLD:
        medicare += (salary - ADDITIONAL_MEDICARE_THRESHOLD) * ADDITIONAL_MEDICARE_RATE
    return social_security + medicare


def oregon_tax(adjusted_income: Decimal, federal_tax: Decimal, filing_status: str) -> Decimal:
    # Oregon lets filers subtract part of their federal liability.
    subtraction = min(federal_tax, OREGON_FEDERAL_SUBTRACTION_CAP)
    taxable = max(
        Decimal("0"),
        adjusted_income - subtraction - OREGON_STANDARD_DEDUCTION[filing_status],
    )
    return bracket_tax(taxable, OREGON_BRACKETS[filing_status])


def local_tax(
    adjusted_income: Decimal,
    filing_status: str,
    portland_metro: bool,
    multnomah_county: bool,
) -> Decimal:
    """Portland Metro and Multnomah County surtaxes, each optional."""
    taxable = max(Decimal("0"), adjusted_income - OREGON_STANDARD_DEDUCTION[filing_status])
    tax = Decimal("0")
    if portland_metro:
        threshold = METRO_THRESHOLD[filing_status]
        if taxable > threshold:
            tax += (taxable - threshold) * METRO_RATE
    if multnomah_county:
        for threshold, rate in MULTNOMAH_TIERS[filing_status]:
            if taxable > threshold:
                tax += (taxable - threshold) * rate
    return tax


def estimate_take_home(params: TaxParams) -> TaxResult:
    """Estimate monthly take-home pay.

    Parameters
    ----------
    params: TaxParams
        Salary, filing status, 401(k) election and state/local options.

    Returns
    -------
    TaxResult
        Monthly gross, each tax, the 401(k) contribution and net pay, plus
        the effective tax rate as a percentage of annual gross. A salary of
        zero yields an all-zero result.
    """
    filing_status = params.filing_status
    if filing_status not in FILING_STATUSES:
        raise InvalidInput(f"Unknown filing status: {filing_status}")
    if params.state not in STATES:
        raise InvalidInput(f"Unknown state: {params.state}")
    salary = to_decimal(params.annual_salary)
    if salary < 0:
        raise InvalidInput("Annual salary must not be negative")

    contribution = min(
        salary * to_decimal(params.contribution_401k_percent) / Decimal(100),
        CONTRIBUTION_401K_CAP,
    )
    adjusted_income = salary - contribution

    federal_taxable = max(Decimal("0"), adjusted_income - FEDERAL_STANDARD_DEDUCTION[filing_status])
    federal = bracket_tax(federal_taxable, FEDERAL_BRACKETS[filing_status])
    fica = fica_tax(salary)

    if params.state == "OR":
        state = oregon_tax(adjusted_income, federal, filing_status)
        local = local_tax(
            adjusted_income,
            filing_status,
            params.is_portland_metro,
            params.is_multnomah_county,
        )
    else:
        state = adjusted_income * to_decimal(params.custom_state_tax_rate) / Decimal(100)
        local = Decimal("0")

    total_tax = federal + fica + state + local
    net = adjusted_income - total_tax
    effective_rate = total_tax / salary * Decimal(100) if salary > 0 else Decimal("0")
    logger.debug(
        "Estimated %s tax on salary %s (%s): effective rate %.2f%%",
        total_tax,
        salary,
        params.state,
        effective_rate,
    )

    twelve = Decimal(12)
    return TaxResult(
        gross_monthly=salary / twelve,
        federal_tax=federal / twelve,
        state_tax=state / twelve,
        local_tax=local / twelve,
        fica_tax=fica / twelve,
        contribution_401k=contribution / twelve,
        net_monthly=net / twelve,
        effective_tax_rate=effective_rate,
    )


def available_budget(result: TaxResult, monthly_expenses: Number) -> Decimal:
    """Money left each month after living expenses, never below zero.

    This is the figure handed to ``simulate_payoff`` as the monthly budget.
    """
    return max(Decimal("0"), result.net_monthly - to_decimal(monthly_expenses))
