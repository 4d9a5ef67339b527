"""Pydantic schemas for holding endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from tracker.schemas.common import MAX_AMOUNT, Number, NumberIn


class HoldingCreate(BaseModel):
    """Request schema for adding a holding."""

    symbol: str = Field(..., min_length=1, max_length=20, description="Ticker or fund code")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    sector: str = Field(..., min_length=1, max_length=50, description="Allocation sector")
    qty: NumberIn = Field(..., gt=0, le=MAX_AMOUNT, description="Units held")
    avg_price: NumberIn = Field(
        ..., gt=0, le=MAX_AMOUNT, description="Average purchase price per unit"
    )
    current_price: NumberIn = Field(..., gt=0, le=MAX_AMOUNT, description="Latest price per unit")
    rsi: NumberIn | None = Field(default=None, ge=0, le=100, description="Relative strength index")
    allocation_pct: NumberIn = Field(
        ..., ge=0, le=100, description="Declared share of the portfolio, in percent"
    )
    notes: str | None = Field(default=None, max_length=500, description="Free-form notes")


class HoldingUpdate(BaseModel):
    """Request schema for a partial update. Omitted or null fields are left as they are."""

    symbol: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    sector: str | None = Field(default=None, min_length=1, max_length=50)
    qty: NumberIn | None = Field(default=None, gt=0, le=MAX_AMOUNT)
    avg_price: NumberIn | None = Field(default=None, gt=0, le=MAX_AMOUNT)
    current_price: NumberIn | None = Field(default=None, gt=0, le=MAX_AMOUNT)
    rsi: NumberIn | None = Field(default=None, ge=0, le=100)
    allocation_pct: NumberIn | None = Field(default=None, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=500)

    def changes(self) -> dict:
        """Fields the client actually supplied a value for."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class HoldingResponse(BaseModel):
    """Response schema for a holding."""

    id: str
    symbol: str
    name: str
    sector: str
    qty: Number
    avg_price: Number
    current_price: Number
    value: Number
    rsi: Number | None
    allocation_pct: Number
    notes: str
    updated_at: datetime

    model_config = {"from_attributes": True}
