"""
Tests for the take-home pay estimator.
"""

from decimal import Decimal

import pytest

from conftest import assert_float_equal
from debt_calc.data_models import TaxParams
from debt_calc.errors import InvalidInput
from debt_calc.tax import (
    FEDERAL_BRACKETS,
    OREGON_BRACKETS,
    available_budget,
    bracket_tax,
    estimate_take_home,
    fica_tax,
)


def params(salary, **overrides):
    values = dict(annual_salary=Decimal(str(salary)), filing_status="single")
    values.update(overrides)
    return TaxParams(**values)


class TestBrackets:
    """Progressive marginal tables."""

    def test_single_federal(self):
        assert bracket_tax(Decimal("105000"), FEDERAL_BRACKETS["single"]) == Decimal("18047")

    def test_zero_income(self):
        assert bracket_tax(Decimal("0"), FEDERAL_BRACKETS["married"]) == 0

    def test_top_bracket_unbounded(self):
        below = bracket_tax(Decimal("1000000"), FEDERAL_BRACKETS["single"])
        above = bracket_tax(Decimal("1000100"), FEDERAL_BRACKETS["single"])

        assert above - below == Decimal("37")

    def test_tables_end_with_infinity(self):
        for table in list(FEDERAL_BRACKETS.values()) + list(OREGON_BRACKETS.values()):
            assert table[-1][0] == Decimal("Infinity")
            limits = [limit for limit, _ in table]
            assert limits == sorted(limits)


class TestFica:
    """Social Security and Medicare."""

    def test_below_wage_base(self):
        assert fica_tax(Decimal("120000")) == Decimal("9180")

    def test_above_wage_base_and_surtax(self):
        # 176100 * 6.2% + 250000 * 1.45% + 50000 * 0.9%
        assert fica_tax(Decimal("250000")) == Decimal("14993.2")


class TestTakeHome:
    """Full estimate."""

    def test_flat_state_rate(self):
        result = estimate_take_home(params(120000, state="Other", custom_state_tax_rate=Decimal("5")))

        assert result.state_tax == Decimal("500")
        assert result.local_tax == 0
        assert result.gross_monthly == Decimal("10000")

    def test_zero_salary(self):
        result = estimate_take_home(params(0, state="OR", is_multnomah_county=True))

        assert result.gross_monthly == 0
        assert result.federal_tax == 0
        assert result.state_tax == 0
        assert result.local_tax == 0
        assert result.fica_tax == 0
        assert result.net_monthly == 0
        assert result.effective_tax_rate == 0

    def test_401k_capped(self):
        result = estimate_take_home(params(200000, contribution_401k_percent=Decimal("20")))

        assert_float_equal(result.contribution_401k * 12, 23500, tolerance=1e-9)

    def test_401k_reduces_federal_tax(self):
        without = estimate_take_home(params(90000))
        with_401k = estimate_take_home(params(90000, contribution_401k_percent=Decimal("10")))

        assert with_401k.federal_tax < without.federal_tax
        assert with_401k.fica_tax == without.fica_tax

    def test_oregon_state_tax(self):
        result = estimate_take_home(params(100000, state="OR"))

        # Federal 13614 exceeds the 7800 subtraction cap
        assert_float_equal(result.state_tax * 12, 7542.3125, tolerance=1e-9)

    def test_oregon_local_surtaxes(self):
        result = estimate_take_home(
            params(300000, state="OR", is_portland_metro=True, is_multnomah_county=True)
        )

        # metro 1% over 125k, county 1.5% over 125k plus 1.5% over 250k
        assert_float_equal(result.local_tax * 12, 1722.55 + 2583.825 + 708.825, tolerance=1e-9)

    def test_multnomah_second_tier_is_additive(self):
        low = estimate_take_home(params(252745, state="OR", is_multnomah_county=True))
        high = estimate_take_home(params(252845, state="OR", is_multnomah_county=True))

        assert_float_equal((high.local_tax - low.local_tax) * 12, 3.0, tolerance=1e-9)

    def test_local_toggles_ignored_outside_oregon(self):
        result = estimate_take_home(
            params(300000, state="Other", is_portland_metro=True, is_multnomah_county=True)
        )

        assert result.local_tax == 0

    def test_married_pays_less_federal(self):
        single = estimate_take_home(params(150000))
        married = estimate_take_home(params(150000, filing_status="married"))

        assert married.federal_tax < single.federal_tax

    def test_net_is_gross_less_contribution_and_taxes(self):
        result = estimate_take_home(
            params(
                180000,
                contribution_401k_percent=Decimal("6"),
                state="OR",
                is_portland_metro=True,
            )
        )

        deductions = (
            result.contribution_401k
            + result.federal_tax
            + result.fica_tax
            + result.state_tax
            + result.local_tax
        )
        assert_float_equal(result.net_monthly, result.gross_monthly - deductions, tolerance=1e-9)

    def test_effective_rate_is_percentage_of_gross(self):
        result = estimate_take_home(params(120000, custom_state_tax_rate=Decimal("5")))

        total = result.federal_tax + result.fica_tax + result.state_tax + result.local_tax
        assert_float_equal(result.effective_tax_rate, total * 12 / 120000 * 100, tolerance=1e-9)

    def test_input_not_modified(self):
        tax_params = params(120000)

        estimate_take_home(tax_params)

        assert tax_params == params(120000)

    def test_unknown_filing_status(self):
        with pytest.raises(InvalidInput):
            estimate_take_home(params(50000, filing_status="head_of_household"))

    def test_unknown_state(self):
        with pytest.raises(InvalidInput):
            estimate_take_home(params(50000, state="WA"))


class TestAvailableBudget:
    """Net pay left for debts after expenses."""

    def test_expenses_subtracted(self):
        result = estimate_take_home(params(120000, custom_state_tax_rate=Decimal("5")))

        assert available_budget(result, 5000) == result.net_monthly - 5000

    def test_never_negative(self):
        result = estimate_take_home(params(30000))

        assert available_budget(result, 10000) == 0
