"""
Calculation history service.

Keeps the results of successful calculations for the lifetime of the
process. Nothing is written to disk.
"""

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fincalc.config import get_settings

logger = logging.getLogger(__name__)

TABS = ("cmpd", "cash", "amrt")


@dataclass(frozen=True)
class HistoryEntry:
    """A single recorded calculation."""

    id: str
    timestamp: datetime
    tab: str
    description: str
    result: str
    details: Dict[str, Any] = field(default_factory=dict)


class CalculationHistory:
    """Bounded, in-memory calculation history."""

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is None:
            max_entries = get_settings().history_max_entries
        self.max_entries = max_entries
        self._entries = deque(maxlen=max_entries)

    def record(
        self,
        tab: str,
        description: str,
        result: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> HistoryEntry:
        """
        Append a calculation to the history.

        Args:
            tab: Calculator the result came from ("cmpd", "cash" or "amrt")
            description: Human-readable description of the calculation
            result: Formatted headline result
            details: Inputs and secondary results

        Returns:
            The stored entry
        """
        if tab not in TABS:
            raise ValueError(f"Unknown calculator tab: {tab}")

        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            timestamp=datetime.now(timezone.utc),
            tab=tab,
            description=description,
            result=result,
            details=dict(details or {}),
        )
        self._entries.append(entry)
        logger.debug(f"Recorded {tab} calculation: {description} -> {result}")
        return entry

    def list(self, tab: Optional[str] = None) -> List[HistoryEntry]:
        """Return entries oldest first, optionally for a single tab."""
        if tab is None:
            return list(self._entries)
        return [entry for entry in self._entries if entry.tab == tab]

    def clear(self) -> int:
        """Remove all entries and return how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} history entries")
        return count

    def __len__(self) -> int:
        return len(self._entries)


# Singleton instance
_history_service: Optional[CalculationHistory] = None


def get_history_service() -> CalculationHistory:
    """Get the calculation history singleton."""
    global _history_service
    if _history_service is None:
        _history_service = CalculationHistory()
    return _history_service
