"""Pydantic schemas for snapshot endpoints."""

from pydantic import BaseModel

from tracker.schemas.common import Number


class SnapshotResponse(BaseModel):
    """One sector line of a snapshot."""

    date: str
    sector: str
    actual_pct: Number
    target_pct: Number
    variance: Number
    total_value: Number

    model_config = {"from_attributes": True}
