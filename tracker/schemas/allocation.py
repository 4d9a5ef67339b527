"""Pydantic schemas for ideal allocation endpoints."""

from pydantic import BaseModel

from tracker.schemas.common import Number


class IdealAllocationResponse(BaseModel):
    """Target allocation for one sector."""

    sector: str
    target_pct: Number

    model_config = {"from_attributes": True}
