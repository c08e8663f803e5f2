"""
Pytest fixtures for debt calculator tests.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from debt_calc.data_models import Debt, LoanParams, TransferParams


def assert_float_equal(actual, expected, tolerance=0.01):
    """Assert that two amounts are equal within a tolerance (default 1 cent)."""
    assert abs(float(actual) - float(expected)) <= tolerance, (
        f"Expected {expected}, got {actual} (tolerance {tolerance})"
    )


def make_debt(name, balance, apr, min_payment, debt_id=None):
    return Debt(
        id=debt_id or name,
        name=name,
        balance=Decimal(str(balance)),
        apr=Decimal(str(apr)),
        min_payment=Decimal(str(min_payment)),
    )


# =============================================================================
# DEBT FIXTURES
# =============================================================================

@pytest.fixture
def single_card():
    """One credit card at 20% APR."""
    return [make_debt("Card", 5000, 20, 100)]


@pytest.fixture
def mixed_debts():
    """A large high-APR card next to a small low-APR loan."""
    return [
        make_debt("Big", 5000, 25, 100),
        make_debt("Small", 800, 10, 25),
    ]


# =============================================================================
# RESTRUCTURE FIXTURES
# =============================================================================

@pytest.fixture
def full_transfer():
    """Whole debt fits on a 0% card for 15 months."""
    return TransferParams(
        total_debt=Decimal("6000"),
        current_apr=Decimal("22"),
        monthly_payment=Decimal("0"),
        transfer_amount=Decimal("6000"),
        transfer_fee_percent=Decimal("3"),
        intro_duration_months=15,
        intro_apr=Decimal("0"),
        post_intro_apr=Decimal("24"),
    )


@pytest.fixture
def split_transfer():
    """Only 6k of a 10k debt fits on the card; 4k stays at 24%."""
    return TransferParams(
        total_debt=Decimal("10000"),
        current_apr=Decimal("24"),
        monthly_payment=Decimal("0"),
        transfer_amount=Decimal("6000"),
        transfer_fee_percent=Decimal("0"),
        intro_duration_months=12,
        intro_apr=Decimal("0"),
        post_intro_apr=Decimal("20"),
    )


@pytest.fixture
def consolidation_loan():
    """10k over three years at 12%."""
    return LoanParams(
        total_debt=Decimal("10000"),
        current_apr=Decimal("22"),
        monthly_payment=Decimal("0"),
        loan_rate=Decimal("12"),
        loan_term_months=36,
        origination_fee_percent=Decimal("0"),
    )
