"""
Domain records stored in the portfolio spreadsheet.

This module exports all records for easy imports:
    from tracker.models import Holding, IdealAllocation, MonthlyGrowthEntry, Snapshot
"""

from tracker.models.allocation import IdealAllocation
from tracker.models.growth import MonthlyGrowthEntry
from tracker.models.holding import Holding
from tracker.models.snapshot import Snapshot

__all__ = [
    "Holding",
    "IdealAllocation",
    "MonthlyGrowthEntry",
    "Snapshot",
]
