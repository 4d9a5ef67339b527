"""Ideal allocation endpoints - requires authentication."""

from fastapi import APIRouter, Depends

from tracker.schemas.allocation import IdealAllocationResponse
from tracker.services.allocation import list_ideal_allocation
from tracker.workbook import Workbook, get_workbook

router = APIRouter()


@router.get(
    "/ideal-allocation",
    response_model=list[IdealAllocationResponse],
    summary="Get target allocation",
)
async def get_ideal_allocation(
    book: Workbook = Depends(get_workbook),
) -> list[IdealAllocationResponse]:
    """Get the target percentage for each sector."""
    allocation = await list_ideal_allocation(book)
    return [IdealAllocationResponse.model_validate(a) for a in allocation]
