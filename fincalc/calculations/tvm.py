"""
Time Value of Money Calculations

Closed-form FV, PV, PMT, NPV, IRR and PI formulas for the CMPD and CASH
calculators. Rates are percentages (e.g., 5 for 5%) unless noted.
"""

import logging
import math
from typing import List, Optional

logger = logging.getLogger(__name__)

BEGIN = "begin"
END = "end"

MAX_ITERATIONS = 100
TOLERANCE = 1e-6
DERIVATIVE_FLOOR = 1e-10
DEFAULT_GUESS = 0.1


def _compound(r: float, n: float) -> float:
    """(1 + r) ** n, saturating to infinity instead of raising OverflowError."""
    try:
        return (1 + r) ** n
    except OverflowError:
        return math.inf


def _annuity_due_factor(r: float, timing: str) -> float:
    """Extra compounding period applied to payments made at period start."""
    return (1 + r) if timing == BEGIN else 1


def calculate_fv(
    pv: float,
    rate: float,
    periods: float,
    pmt: float = 0,
    timing: str = END,
) -> float:
    """
    Calculate Future Value with a fixed rate.

    Args:
        pv: Present value
        rate: Periodic rate as percentage (e.g., 5 for 5%)
        periods: Number of compounding periods
        pmt: Periodic payment
        timing: "begin" (annuity-due) or "end" (ordinary annuity)

    Returns:
        Future value
    """
    r = rate / 100
    n = periods

    if r == 0:
        return pv + pmt * n

    pv_factor = _compound(r, n)
    pmt_factor = ((_compound(r, n) - 1) / r) * _annuity_due_factor(r, timing)

    return pv * pv_factor + pmt * pmt_factor


def calculate_fv_variable(
    pv: float,
    rates: List[float],
    pmt: float = 0,
    timing: str = END,
) -> float:
    """
    Calculate Future Value with one rate per period.

    Compounds period by period in list order so the floating-point result
    matches applying each rate in turn.
    """
    fv = pv

    for rate in rates:
        r = rate / 100

        if timing == BEGIN:
            fv = (fv + pmt) * (1 + r)
        else:
            fv = fv * (1 + r) + pmt

    return fv


def calculate_pv(
    fv: float,
    rate: float,
    periods: float,
    pmt: float = 0,
    timing: str = END,
) -> float:
    """
    Calculate Present Value with a fixed rate.

    Algebraic inverse of calculate_fv.

    Args:
        fv: Future value
        rate: Periodic rate as percentage
        periods: Number of compounding periods
        pmt: Periodic payment
        timing: "begin" or "end"

    Returns:
        Present value
    """
    r = rate / 100
    n = periods

    if r == 0:
        return fv - pmt * n

    fv_factor = _compound(r, -n)
    pmt_factor = ((1 - _compound(r, -n)) / r) * _annuity_due_factor(r, timing)

    return fv * fv_factor - pmt * pmt_factor


def calculate_pmt(
    pv: float,
    fv: float,
    rate: float,
    periods: float,
    timing: str = END,
) -> float:
    """
    Calculate the periodic payment that pays pv down to fv.

    Solves the calculate_fv closed form directly, so no iteration is needed.
    The payment is returned with the opposite sign to the pmt argument of
    calculate_fv: calculate_fv(pv, rate, periods, -pmt, timing) == fv.
    """
    r = rate / 100
    n = periods

    if r == 0:
        return -(fv - pv) / n

    pv_factor = _compound(r, n)
    pmt_factor = ((_compound(r, n) - 1) / r) * _annuity_due_factor(r, timing)

    return -(fv - pv * pv_factor) / pmt_factor


def calculate_npv(cash_flows: List[float], rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Cash flows by period, index 0 undiscounted
        rate: Discount rate per period as percentage (e.g., 10 for 10%)

    Returns:
        NPV value
    """
    r = rate / 100
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf / _compound(r, period)
    return npv


def calculate_npv_variable(cash_flows: List[float], rates: List[float]) -> float:
    """
    Calculate NPV with a separate discount rate for every period.

    rates[j] discounts from period j+1 back to period j, so rates has one
    entry fewer than cash_flows. Discount factors are built up by repeated
    multiplication rather than a closed-form product.
    """
    if not cash_flows:
        return 0.0

    npv = cash_flows[0]

    for i in range(1, len(cash_flows)):
        discount_factor = 1.0
        for j in range(i):
            discount_factor *= 1 + rates[j] / 100
        npv += cash_flows[i] / discount_factor

    return npv


def _npv_and_derivative(cash_flows: List[float], rate: float):
    """NPV and dNPV/drate at a decimal rate (for Newton-Raphson)."""
    npv = 0.0
    dnpv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf / _compound(rate, period)
        dnpv -= (period * cf) / _compound(rate, period + 1)
    return npv, dnpv


def calculate_irr(
    cash_flows: List[float],
    guess: float = DEFAULT_GUESS,
    max_iterations: int = MAX_ITERATIONS,
) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson method.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess as a decimal rate (default 0.1 = 10%)
        max_iterations: Newton-Raphson step budget

    Returns:
        IRR as percentage (e.g., 15.0 for 15%), or None if the iteration
        stalls, leaves the valid rate domain or does not converge
    """
    rate = guess

    for _ in range(max_iterations):
        npv, dnpv = _npv_and_derivative(cash_flows, rate)

        if abs(npv) < TOLERANCE:
            return rate * 100

        if abs(dnpv) < DERIVATIVE_FLOOR:
            logger.debug(f"IRR stalled at rate {rate}: derivative too small")
            return None

        rate = rate - npv / dnpv

        if rate <= -1:
            logger.debug(f"IRR iterate {rate} left the valid rate domain")
            return None

    logger.debug(f"IRR did not converge in {max_iterations} iterations")
    return None


def calculate_pi(cash_flows: List[float], rate: float) -> Optional[float]:
    """
    Calculate Profitability Index.

    PV of cash flows 1..N divided by the magnitude of the initial outlay.
    Returns None when the initial outlay is zero.
    """
    if not cash_flows:
        return None

    initial_investment = abs(cash_flows[0])

    if initial_investment == 0:
        return None

    r = rate / 100
    pv_future = 0.0
    for period in range(1, len(cash_flows)):
        pv_future += cash_flows[period] / _compound(r, period)

    return pv_future / initial_investment
