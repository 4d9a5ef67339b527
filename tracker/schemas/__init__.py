"""Pydantic schemas for request/response validation."""

from tracker.schemas.allocation import IdealAllocationResponse
from tracker.schemas.common import ErrorResponse, Number
from tracker.schemas.growth import MonthlyGrowthCreate, MonthlyGrowthResponse
from tracker.schemas.holding import HoldingCreate, HoldingResponse, HoldingUpdate
from tracker.schemas.snapshot import SnapshotResponse
from tracker.schemas.summary import SummaryResponse

__all__ = [
    "ErrorResponse",
    "Number",
    # Holdings
    "HoldingCreate",
    "HoldingUpdate",
    "HoldingResponse",
    # Allocation
    "IdealAllocationResponse",
    # Growth
    "MonthlyGrowthCreate",
    "MonthlyGrowthResponse",
    # Snapshots and summary
    "SnapshotResponse",
    "SummaryResponse",
]
