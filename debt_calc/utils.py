"""Utility functions for the debt calculator.

This module provides helpers for turning user input into ``Decimal`` values,
the annuity-payment formula shared by the restructuring engine, and the
conversion of result dataclasses into JSON-friendly dictionaries.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from decimal import Decimal, InvalidOperation, getcontext
from enum import Enum
from typing import Any, Union

from .errors import InvalidInput

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[Decimal, int, float, str]


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace and handles
    both integer and float-like strings. It raises ``InvalidInput`` if
    conversion fails or the value is not finite.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise InvalidInput(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise InvalidInput(f"Invalid numeric value: {value}")
    return result


def to_decimal(value: Number) -> Decimal:
    """Coerce an int, float, string or Decimal into a ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid numeric value: {value}")
    return decimal_from_str(str(value))


def monthly_rate(apr: Decimal) -> Decimal:
    """Convert an annual percentage rate to a monthly periodic rate."""
    return apr / Decimal(100) / Decimal(12)


def calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the fixed monthly payment that amortizes ``principal``.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise InvalidInput("Term must be a positive number of months")
    if rate_per_month == 0:
        return principal / Decimal(term)
    factor = (1 + rate_per_month) ** term
    return principal * (rate_per_month * factor) / (factor - 1)


def to_jsonable(value: Any) -> Any:
    """Recursively convert result dataclasses into plain JSON types.

    ``Decimal`` becomes ``float``, enums become their value, dataclasses
    become dictionaries keyed by field name. Read-only properties such as
    ``PayoffResult.budget_shortfall`` are not included.
    """
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
