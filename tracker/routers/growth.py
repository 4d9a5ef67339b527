"""Monthly growth endpoints - requires authentication."""

from fastapi import APIRouter, Depends, status

from tracker.schemas.growth import MonthlyGrowthCreate, MonthlyGrowthResponse
from tracker.services import growth as growth_service
from tracker.workbook import Workbook, get_workbook

router = APIRouter()


@router.get(
    "/monthly-growth",
    response_model=list[MonthlyGrowthResponse],
    summary="List monthly growth",
)
async def list_monthly_growth(
    book: Workbook = Depends(get_workbook),
) -> list[MonthlyGrowthResponse]:
    """Get all monthly P&L entries, oldest month first."""
    entries = await growth_service.list_monthly_growth(book)
    return [MonthlyGrowthResponse.model_validate(e) for e in entries]


@router.post(
    "/monthly-growth",
    response_model=MonthlyGrowthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record monthly growth",
)
async def add_monthly_growth(
    data: MonthlyGrowthCreate,
    book: Workbook = Depends(get_workbook),
) -> MonthlyGrowthResponse:
    """Append a P&L entry.

    - **month**: YYYY-MM
    - **account**: Account the P&L was booked in
    - **pnl**: Profit (positive) or loss (negative)
    """
    entry = await growth_service.add_monthly_growth(book, data)
    return MonthlyGrowthResponse.model_validate(entry)
