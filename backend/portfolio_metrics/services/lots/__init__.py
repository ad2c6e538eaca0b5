# backend/portfolio_metrics/services/lots/__init__.py
"""
Lots package (LotTracker).

Architecture:
    lots/
    ├── __init__.py   # This file - package exports
    ├── types.py      # Lot, GainRecord, UnrealizedMark, LotTrackingResult
    └── tracker.py    # LotTracker (FIFO) and mark_open_lots

Usage:
    from portfolio_metrics.services.lots import LotTracker, mark_open_lots

    result = LotTracker().process(transactions)
    marks = mark_open_lots(result.open_lots, current_price, as_of)
"""

from portfolio_metrics.services.lots.tracker import LotTracker, mark_open_lots
from portfolio_metrics.services.lots.types import (
    GainRecord,
    Lot,
    LotTrackingResult,
    UnrealizedMark,
)

__all__ = [
    "GainRecord",
    "Lot",
    "LotTracker",
    "LotTrackingResult",
    "UnrealizedMark",
    "mark_open_lots",
]
