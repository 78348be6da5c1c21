"""
Tests for time value of money calculations and root finding.
"""

import logging

import pytest
from fincalc.calculations.tvm import (
    calculate_fv,
    calculate_fv_variable,
    calculate_pv,
    calculate_pmt,
    calculate_npv,
    calculate_npv_variable,
    calculate_irr,
    calculate_pi,
)
from fincalc.calculations.root_finding import bisection_method


class TestFutureValue:
    """Test FV calculations."""

    def test_calculate_fv_lump_sum(self):
        """1000 at 5% for 10 periods grows to 1000 * 1.05^10."""
        fv = calculate_fv(1000, 5, 10, 0, "end")
        assert fv == pytest.approx(1628.894627, abs=1e-6)
        assert round(fv, 2) == 1628.89

    def test_calculate_fv_zero_rate(self):
        """Zero rate degrades to simple addition of payments."""
        assert calculate_fv(1000, 0, 12, 50) == 1600

    def test_calculate_fv_annuity_due_exceeds_ordinary(self):
        """Payments at period start earn one extra period of interest."""
        ordinary = calculate_fv(0, 5, 10, 100, "end")
        due = calculate_fv(0, 5, 10, 100, "begin")
        assert due == pytest.approx(ordinary * 1.05)

    def test_calculate_fv_default_timing_is_end(self):
        """Timing defaults to end of period."""
        assert calculate_fv(0, 5, 10, 100) == calculate_fv(0, 5, 10, 100, "end")

    def test_calculate_fv_variable_matches_fixed(self):
        """Constant variable rates reproduce the fixed-rate result."""
        fixed = calculate_fv(1000, 5, 3, 100, "end")
        variable = calculate_fv_variable(1000, [5, 5, 5], 100, "end")
        assert variable == pytest.approx(fixed)

    def test_calculate_fv_variable_sequential(self):
        """Rates are applied one period at a time, in order."""
        expected = 1000.0
        for rate in [2, 3, 4]:
            expected = (expected + 10) * (1 + rate / 100)
        assert calculate_fv_variable(1000, [2, 3, 4], 10, "begin") == expected

    def test_calculate_fv_variable_no_rates(self):
        """Without rates the present value is returned unchanged."""
        assert calculate_fv_variable(1000, []) == 1000


class TestPresentValueAndPayment:
    """Test PV and PMT calculations."""

    @pytest.mark.parametrize("pv,rate,periods", [
        (1000, 5, 10),
        (2500.5, 0, 7),
        (-400, 12.5, 30),
        (1, 0.25, 360),
    ])
    def test_pv_inverts_fv(self, pv, rate, periods):
        """PV of the FV returns the original amount."""
        fv = calculate_fv(pv, rate, periods, 0, "end")
        assert calculate_pv(fv, rate, periods, 0, "end") == pytest.approx(pv, abs=1e-6)

    def test_calculate_pv_zero_rate(self):
        """Zero rate subtracts the payments."""
        assert calculate_pv(1600, 0, 12, 50) == 1000

    def test_calculate_pmt_zero_rate(self):
        """Zero rate repays the difference evenly."""
        assert calculate_pmt(1000, 0, 0, 10) == 100

    @pytest.mark.parametrize("timing", ["begin", "end"])
    def test_calculate_pmt_reaches_fv(self, timing):
        """Paying PMT every period reduces PV exactly to FV."""
        pmt = calculate_pmt(10000, 0, 1, 24, timing)
        fv = calculate_fv(10000, 1, 24, -pmt, timing)
        assert fv == pytest.approx(0, abs=1e-6)

    def test_calculate_pmt_loan(self):
        """Borrowing 100,000 over 360 months at 0.5% costs about 599.55."""
        pmt = calculate_pmt(100000, 0, 0.5, 360)
        assert pmt == pytest.approx(599.55, abs=0.01)


class TestNPV:
    """Test NPV and profitability index calculations."""

    def test_calculate_npv(self):
        """NPV discounts each flow by its index."""
        npv = calculate_npv([-1000, 300, 400, 500], 10)
        expected = -1000 + 300 / 1.1 + 400 / 1.1 ** 2 + 500 / 1.1 ** 3
        assert npv == pytest.approx(expected)
        assert round(npv, 2) == -21.04

    def test_calculate_npv_zero_rate(self):
        """Zero discount rate sums the flows."""
        assert calculate_npv([-100, 50, 60], 0) == 10

    def test_calculate_npv_variable(self):
        """Each flow is discounted by the running product of earlier rates."""
        npv = calculate_npv_variable([-1000, 500, 700], [10, 20])
        expected = -1000 + 500 / 1.1 + 700 / (1.1 * 1.2)
        assert npv == pytest.approx(expected)

    def test_calculate_npv_variable_matches_fixed(self):
        """Constant variable rates reproduce the fixed-rate NPV."""
        flows = [-1000, 300, 400, 500]
        assert calculate_npv_variable(flows, [10, 10, 10]) == pytest.approx(
            calculate_npv(flows, 10)
        )

    def test_calculate_pi(self):
        """PI is PV of future flows over the initial outlay."""
        pi = calculate_pi([-1000, 300, 400, 500], 10)
        expected = (300 / 1.1 + 400 / 1.1 ** 2 + 500 / 1.1 ** 3) / 1000
        assert pi == pytest.approx(expected)

    def test_calculate_pi_zero_outlay(self):
        """PI is undefined without an initial outlay."""
        assert calculate_pi([0, 100, 100], 10) is None


class TestIRR:
    """Test IRR calculation."""

    def test_calculate_irr_simple(self):
        """Investment of 100 returning 110 after one period is 10%."""
        irr = calculate_irr([-100, 110])
        assert irr == pytest.approx(10.0, abs=1e-4)

    def test_calculate_irr_zeroes_npv(self):
        """NPV at the IRR is zero."""
        flows = [-1000, 300, 400, 500]
        irr = calculate_irr(flows)
        assert irr is not None
        assert abs(calculate_npv(flows, irr)) < 1e-4

    def test_irr_negative_returns(self):
        """Losing money gives a negative IRR."""
        irr = calculate_irr([-100, 40, 40, 10])
        assert irr is not None
        assert irr < 0

    def test_irr_no_sign_change(self):
        """All-positive flows have no IRR."""
        assert calculate_irr([100, 100, 100]) is None

    def test_irr_stalled_derivative(self):
        """A single flow has a zero derivative and no IRR."""
        assert calculate_irr([-100]) is None

    def test_irr_leaves_rate_domain(self, caplog):
        """A Newton step below -100% gives up instead of dividing by zero."""
        # From 10% the first step lands near -11900%
        with caplog.at_level(logging.DEBUG, logger="fincalc.calculations.tvm"):
            assert calculate_irr([-100, 1]) is None
        assert "left the valid rate domain" in caplog.text

    def test_irr_iterations_exhausted(self, caplog):
        """Running out of steps before converging gives no IRR."""
        flows = [-1000, 300, 400, 500]
        with caplog.at_level(logging.DEBUG, logger="fincalc.calculations.tvm"):
            assert calculate_irr(flows, max_iterations=1) is None
        assert "did not converge in 1 iterations" in caplog.text
        assert calculate_irr(flows) is not None


class TestBisection:
    """Test the bisection root finder."""

    def test_bisection_square_root(self):
        """x^2 - 4 on [0, 3] converges to 2."""
        root = bisection_method(lambda x: x * x - 4, 0, 3)
        assert root == pytest.approx(2, abs=1e-6)

    def test_bisection_no_sign_change(self):
        """Same sign at both ends means no result."""
        assert bisection_method(lambda x: x + 5, 0, 1) is None

    def test_bisection_returns_midpoint_when_budget_exhausted(self):
        """Running out of iterations returns the last midpoint, not None."""
        root = bisection_method(lambda x: x - 0.3, 0, 1, tolerance=1e-12, max_iterations=3)
        assert root is not None
        assert 0.25 <= root <= 0.5

    def test_bisection_decreasing_function(self):
        """Works when f is positive at a and negative at b."""
        root = bisection_method(lambda x: 5 - x, 0, 10)
        assert root == pytest.approx(5, abs=1e-6)
