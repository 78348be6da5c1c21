"""
Root Finding

Bracketed bisection used to invert formulas that have no closed-form
solution.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 100


def bisection_method(
    func: Callable[[float], float],
    a: float,
    b: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Optional[float]:
    """
    Find a root of func in [a, b] by repeated halving.

    Args:
        func: Single-argument real function
        a: Lower bracket endpoint
        b: Upper bracket endpoint
        tolerance: Stop when |f(c)| or the bracket width drops below this
        max_iterations: Iteration budget

    Returns:
        Approximate root, or None if f(a) and f(b) have the same sign.
        When the budget runs out the last midpoint is returned.
    """
    fa = func(a)
    fb = func(b)

    if fa * fb > 0:
        logger.debug(f"No root bracketed in [{a}, {b}]: f(a)={fa}, f(b)={fb}")
        return None

    for _ in range(max_iterations):
        c = (a + b) / 2
        fc = func(c)

        if abs(fc) < tolerance or abs(b - a) < tolerance:
            return c

        if fa * fc < 0:
            b = c
            fb = fc
        else:
            a = c
            fa = fc

    return (a + b) / 2
