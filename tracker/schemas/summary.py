"""Pydantic schemas for the summary endpoint."""

from pydantic import BaseModel, Field

from tracker.schemas.common import Number
from tracker.schemas.growth import MonthlyGrowthResponse


class SummaryResponse(BaseModel):
    """Portfolio KPIs."""

    total_invested: Number = Field(..., description="Sum of qty * avg_price")
    current_net_worth: Number = Field(..., description="Sum of holding values")
    unrealized_gain_loss: Number = Field(..., description="Net worth minus invested")
    unrealized_pct: Number = Field(..., description="Gain/loss as percent of invested")
    allocation_variance: dict[str, Number] = Field(
        default_factory=dict, description="Actual minus target percent, per target sector"
    )
    monthly_trend: list[MonthlyGrowthResponse] = Field(
        default_factory=list, description="Latest 12 growth entries, oldest first"
    )
    ytd_growth: Number = Field(..., description="P&L booked in the current calendar year")

    model_config = {"from_attributes": True}
