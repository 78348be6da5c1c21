"""
Financial calculator: time value of money, cash flow analysis and loan
amortization.
"""

__version__ = "0.1.0"
