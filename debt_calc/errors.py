"""Exceptions raised by the debt calculator engines."""

from __future__ import annotations


class InvalidInput(ValueError):
    """Raised when an engine receives an input it cannot simulate.

    Out-of-range but meaningful inputs (a zero budget, a zero rate, a budget
    smaller than the accruing interest) are simulated rather than rejected;
    this error is reserved for values such as negative balances or a loan
    term of zero months, for which the arithmetic has no sensible reading.
    """
