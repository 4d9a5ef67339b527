"""Pydantic schemas for monthly growth endpoints."""

from pydantic import BaseModel, Field

from tracker.schemas.common import Number, NumberIn

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class MonthlyGrowthCreate(BaseModel):
    """Request schema for recording a month's P&L."""

    month: str = Field(..., pattern=MONTH_PATTERN, description="Month as YYYY-MM")
    account: str = Field(..., min_length=1, max_length=50, description="Account name")
    pnl: NumberIn = Field(..., description="Profit (positive) or loss (negative)")


class MonthlyGrowthResponse(BaseModel):
    """Response schema for a monthly growth entry."""

    month: str
    account: str
    pnl: Number

    model_config = {"from_attributes": True}
