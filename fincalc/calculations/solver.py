"""
CMPD and CASH Solvers

Solve for any one unknown of the compound-interest equation, and for the
cash flow at a given period that produces a target NPV. Unknowns without a
closed form are found by bisection.
"""

from typing import List, Optional

from fincalc.calculations.root_finding import bisection_method
from fincalc.calculations.tvm import (
    END,
    calculate_fv,
    calculate_fv_variable,
    calculate_npv,
    calculate_npv_variable,
    calculate_pv,
)

SOLVER_TOLERANCE = 1e-6
SOLVER_MAX_ITERATIONS = 200

# Search brackets
RATE_BRACKET = (-99.0, 1000.0)  # percent
PERIODS_BRACKET = (0.1, 10000.0)
CASH_FLOW_BRACKET = (-1e10, 1e10)

FIXED = "fixed"
VARIABLE = "variable"


def solve_cmpd_fv(
    pv: float, rate: float, periods: float, pmt: float = 0, timing: str = END
) -> float:
    """Solve for FV in compound interest (fixed rate)."""
    return calculate_fv(pv, rate, periods, pmt, timing)


def solve_cmpd_fv_variable(
    pv: float, rates: List[float], pmt: float = 0, timing: str = END
) -> float:
    """Solve for FV in compound interest (variable rates)."""
    return calculate_fv_variable(pv, rates, pmt, timing)


def solve_cmpd_pv(
    fv: float, rate: float, periods: float, pmt: float = 0, timing: str = END
) -> float:
    """Solve for PV in compound interest."""
    return calculate_pv(fv, rate, periods, pmt, timing)


def solve_cmpd_rate(
    pv: float, fv: float, periods: float, pmt: float = 0, timing: str = END
) -> Optional[float]:
    """
    Solve for the periodic rate (percent) that takes pv to fv.

    Returns None when no sign change exists between -99% and 1000%.
    """

    def residual(rate: float) -> float:
        return calculate_fv(pv, rate, periods, pmt, timing) - fv

    low, high = RATE_BRACKET
    return bisection_method(
        residual, low, high, SOLVER_TOLERANCE, SOLVER_MAX_ITERATIONS
    )


def solve_cmpd_periods(
    pv: float, fv: float, rate: float, pmt: float = 0, timing: str = END
) -> Optional[float]:
    """
    Solve for the (possibly fractional) number of periods that takes pv to fv.

    Returns None when no sign change exists between 0.1 and 10000 periods.
    """

    def residual(periods: float) -> float:
        return calculate_fv(pv, rate, periods, pmt, timing) - fv

    low, high = PERIODS_BRACKET
    return bisection_method(
        residual, low, high, SOLVER_TOLERANCE, SOLVER_MAX_ITERATIONS
    )


def solve_dcf_cash_flow(
    cash_flows: List[float],
    solver_period: int,
    target_npv: float,
    discount_rate: float,
    rate_type: str = FIXED,
    variable_rates: Optional[List[float]] = None,
) -> Optional[float]:
    """
    Solve for the cash flow X at solver_period that makes NPV equal target_npv.

    Args:
        cash_flows: Cash flow series; the value at solver_period is ignored
        solver_period: Index of the unknown cash flow
        target_npv: Desired NPV
        discount_rate: Fixed discount rate as percentage
        rate_type: "fixed" or "variable"
        variable_rates: Per-period discount rates (used when rate_type is
            "variable")

    Returns:
        The cash flow X, or None if no solution is bracketed
    """

    def residual(x: float) -> float:
        trial = list(cash_flows)
        trial[solver_period] = x

        if rate_type == VARIABLE and variable_rates:
            npv = calculate_npv_variable(trial, variable_rates)
        else:
            npv = calculate_npv(trial, discount_rate)

        return npv - target_npv

    low, high = CASH_FLOW_BRACKET
    return bisection_method(
        residual, low, high, SOLVER_TOLERANCE, SOLVER_MAX_ITERATIONS
    )
