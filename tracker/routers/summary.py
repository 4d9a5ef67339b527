"""Summary endpoint - requires authentication."""

from fastapi import APIRouter, Depends

from tracker.schemas.growth import MonthlyGrowthResponse
from tracker.schemas.summary import SummaryResponse
from tracker.services.summary import get_summary
from tracker.workbook import Workbook, get_workbook

router = APIRouter()


@router.get(
    "/summary",
    response_model=SummaryResponse,
    summary="Get portfolio summary",
)
async def get_portfolio_summary(
    book: Workbook = Depends(get_workbook),
) -> SummaryResponse:
    """Get the portfolio KPIs.

    **What the numbers mean:**
    - **total_invested**: What you paid for everything you hold
    - **current_net_worth**: What it is worth at current prices
    - **unrealized_gain_loss** / **unrealized_pct**: The difference, absolute and relative
    - **allocation_variance**: Actual minus target percent for each target sector
    - **monthly_trend**: The 12 latest monthly P&L entries, oldest first
    - **ytd_growth**: P&L booked this calendar year
    """
    summary = await get_summary(book)

    return SummaryResponse(
        total_invested=summary.total_invested,
        current_net_worth=summary.current_net_worth,
        unrealized_gain_loss=summary.unrealized_gain_loss,
        unrealized_pct=summary.unrealized_pct,
        allocation_variance=summary.allocation_variance,
        monthly_trend=[MonthlyGrowthResponse.model_validate(e) for e in summary.monthly_trend],
        ytd_growth=summary.ytd_growth,
    )
