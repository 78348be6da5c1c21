"""
Financial Calculation Engine

Time-value-of-money formulas, bisection root-finding, the CMPD/CASH
solvers built on them, and loan amortization schedules.
"""

from fincalc.calculations import tvm, root_finding, solver, amortization

__all__ = ["tvm", "root_finding", "solver", "amortization"]
