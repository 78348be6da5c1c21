"""
Application services module.
"""

from fincalc.services.history import (
    CalculationHistory,
    HistoryEntry,
    get_history_service,
)

__all__ = ["CalculationHistory", "HistoryEntry", "get_history_service"]
