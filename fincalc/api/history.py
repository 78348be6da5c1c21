"""
Calculation history API endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fincalc.services.history import CalculationHistory, get_history_service

router = APIRouter()


class HistoryEntryResponse(BaseModel):
    """A recorded calculation."""

    id: str
    timestamp: datetime
    tab: str
    description: str
    result: str
    details: Dict[str, Any] = {}


class ClearHistoryResponse(BaseModel):
    cleared: int


@router.get("", response_model=List[HistoryEntryResponse])
async def list_history(
    tab: Optional[Literal["cmpd", "cash", "amrt"]] = None,
    history: CalculationHistory = Depends(get_history_service),
):
    """List recorded calculations, oldest first."""
    return [
        HistoryEntryResponse(
            id=entry.id,
            timestamp=entry.timestamp,
            tab=entry.tab,
            description=entry.description,
            result=entry.result,
            details=entry.details,
        )
        for entry in history.list(tab)
    ]


@router.delete("", response_model=ClearHistoryResponse)
async def clear_history(
    history: CalculationHistory = Depends(get_history_service),
):
    """Remove all recorded calculations."""
    return ClearHistoryResponse(cleared=history.clear())
